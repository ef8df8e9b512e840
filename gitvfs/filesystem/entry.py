"""
Tree Entry Module

Immutable values describing the named children of a git tree, plus the
synthetic entry that stands for the filesystem root.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import pygit2


class EntryKind(Enum):
    """What a tree entry points at."""
    LEAF = 'blob'
    SUBTREE = 'tree'
    OTHER = 'other'

    @classmethod
    def from_type_str(cls, type_str: str) -> 'EntryKind':
        """Map a pygit2 ``type_str`` ('blob', 'tree', 'commit', ...) to a kind."""
        for kind in cls:
            if kind.value == type_str:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class TreeEntry:
    """
    A named child of a tree.

    Attributes:
        name: Entry name, unique within its parent tree
        id: Content identifier (pygit2.Oid) of the target object
        kind: Declared kind of the target object
        filemode: Raw git filemode (e.g. ``0o100644``, ``0o040000``)
    """
    name: str
    id: Any
    kind: EntryKind
    filemode: int

    is_root = False

    @classmethod
    def from_object(cls, obj: pygit2.Object) -> 'TreeEntry':
        """Build an entry from a pygit2 tree item."""
        return cls(
            name=obj.name,
            id=obj.id,
            kind=EntryKind.from_type_str(obj.type_str),
            filemode=int(obj.filemode),
        )

    @property
    def is_leaf(self) -> bool:
        return self.kind is EntryKind.LEAF

    @property
    def is_subtree(self) -> bool:
        return self.kind is EntryKind.SUBTREE


@dataclass(frozen=True)
class RootEntry:
    """
    The filesystem root.

    Not part of any tree: it has no name and always refers to the tree the
    filesystem was bound to.
    """
    id: Any

    name = ''
    kind = EntryKind.SUBTREE
    filemode = pygit2.GIT_FILEMODE_TREE
    is_root = True
    is_leaf = False
    is_subtree = True


Entry = Union[TreeEntry, RootEntry]

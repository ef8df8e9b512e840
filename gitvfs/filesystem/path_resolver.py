"""
Path Resolver Module

Resolves slash-separated paths against a git tree.
"""

from dataclasses import dataclass
from typing import Any

import pygit2

from .entry import Entry, RootEntry
from .store import ObjectStore
from gitvfs.exceptions import FileNotFoundError, ObjectTypeError


@dataclass
class ResolvedPath:
    """An entry together with the object it points at."""
    path: str
    entry: Entry
    obj: Any

    @property
    def is_root(self) -> bool:
        return self.entry.is_root


class PathResolver:
    """
    Resolves paths inside a root tree.

    Only leading slashes are stripped; everything else is handed to the
    object store's path lookup as is. The empty path and any run of
    slashes refer to the root tree itself.
    """

    @staticmethod
    def normalize(path: str) -> str:
        """
        Strip leading slashes.

        Args:
            path: Path as received from the caller

        Returns:
            Path relative to the root, '' for the root itself
        """
        while path.startswith('/'):
            path = path[1:]
        return path

    @staticmethod
    def is_root(path: str) -> bool:
        """Check if a path names the filesystem root."""
        return PathResolver.normalize(path) == ''

    @staticmethod
    def find_entry(store: ObjectStore, tree: pygit2.Tree, path: str) -> Entry:
        """
        Find the entry for a path without loading its object.

        Raises:
            FileNotFoundError: If a segment of the path does not exist
        """
        name = PathResolver.normalize(path)
        if not name:
            return RootEntry(id=tree.id)

        try:
            return store.entry_by_path(tree, name)
        except KeyError as e:
            raise FileNotFoundError(name) from e

    @staticmethod
    def resolve(store: ObjectStore, tree: pygit2.Tree, path: str) -> ResolvedPath:
        """
        Resolve a path to its entry and object.

        Args:
            store: Object store the tree belongs to
            tree: Root tree
            path: Slash-separated path

        Returns:
            ResolvedPath with the entry and the looked-up object

        Raises:
            FileNotFoundError: If a segment of the path does not exist
            ObjectTypeError: If the object kind disagrees with the entry
        """
        name = PathResolver.normalize(path)
        entry = PathResolver.find_entry(store, tree, name)

        obj = store.lookup(entry.id)

        if obj.type_str != entry.kind.value:
            raise ObjectTypeError(
                name,
                expected=entry.kind.value,
                actual=obj.type_str
            )

        return ResolvedPath(path=name, entry=entry, obj=obj)

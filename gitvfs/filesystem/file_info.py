"""
File Info Module

Stat-like values derived from a tree entry and its object.
"""

import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import pygit2

from .entry import Entry, EntryKind


# Read-only permission bits reported for every entry
FILE_PERMISSIONS = 0o444
DIRECTORY_PERMISSIONS = 0o555


def mode_for_kind(kind: EntryKind) -> int:
    """
    Map an entry kind to ``st_mode`` style bits.

    Blobs are regular files, trees are directories, anything else
    (submodule commits) gets 0.
    """
    if kind is EntryKind.LEAF:
        return stat.S_IFREG | FILE_PERMISSIONS
    if kind is EntryKind.SUBTREE:
        return stat.S_IFDIR | DIRECTORY_PERMISSIONS
    return 0


@dataclass(frozen=True)
class FileInfo:
    """
    Stat result for an entry in the tree.

    A plain value: it holds no reference to the store and can be kept
    after the handle that produced it is closed.

    Attributes:
        name: Entry name, '' for the root
        size: Blob size in bytes, 0 for anything that is not a blob
        mode: ``st_mode`` style type and permission bits
        filemode: Raw git filemode of the entry
    """
    name: str
    size: int
    mode: int
    filemode: int
    commit_time: Optional[datetime] = None

    @classmethod
    def from_entry(
        cls,
        entry: Entry,
        obj: Any,
        commit_time: Optional[datetime] = None
    ) -> 'FileInfo':
        """Build a FileInfo from an entry and the object it resolved to."""
        size = obj.size if isinstance(obj, pygit2.Blob) else 0
        return cls(
            name=entry.name,
            size=size,
            mode=mode_for_kind(entry.kind),
            filemode=int(entry.filemode),
            commit_time=commit_time,
        )

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    @property
    def mod_time(self) -> datetime:
        """
        Modification time.

        Git keeps no per-file timestamps. This is the commit time when the
        filesystem was bound through a commit, otherwise the current time.
        """
        if self.commit_time is not None:
            return self.commit_time
        return datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'size': self.size,
            'mode': oct(self.mode),
            'is_dir': self.is_dir,
            'mod_time': self.mod_time.isoformat(),
        }

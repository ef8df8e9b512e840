"""
gitvfs File System Module

Read-only filesystem over a git tree:
- Tree entries and the synthetic root entry
- Object store adapter over pygit2
- Path resolution
- File and directory handles
- Stat results
"""

from .entry import EntryKind, TreeEntry, RootEntry, Entry
from .store import ObjectStore
from .path_resolver import PathResolver, ResolvedPath
from .file_info import FileInfo, mode_for_kind
from .handles import Handle, FileHandle, DirectoryHandle
from .gitfs import (
    GitFileSystem,
    commit_datetime,
    from_tree,
    from_commit,
    from_reference,
    from_reference_name,
)

__all__ = [
    # Entries
    'EntryKind',
    'TreeEntry',
    'RootEntry',
    'Entry',
    # Store
    'ObjectStore',
    # Path Resolver
    'PathResolver',
    'ResolvedPath',
    # Stat
    'FileInfo',
    'mode_for_kind',
    # Handles
    'Handle',
    'FileHandle',
    'DirectoryHandle',
    # Filesystem root
    'GitFileSystem',
    'commit_datetime',
    'from_tree',
    'from_commit',
    'from_reference',
    'from_reference_name',
]

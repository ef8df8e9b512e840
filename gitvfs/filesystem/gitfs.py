"""
Git Tree File System Module

Presents a single git tree as a read-only filesystem:
- Path resolution against the bound tree
- Blob entries open as FileHandle, tree entries as DirectoryHandle
- Root binding from a tree, a commit, a reference or a reference name

Example:
    >>> repo = pygit2.Repository('/srv/site.git')
    >>> fs = from_reference_name(repo, 'refs/heads/main')
    >>> with fs.open('/README') as handle:
    ...     handle.read()
    b'foo\\n'
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import pygit2

from .entry import EntryKind
from .file_info import FileInfo
from .handles import DirectoryHandle, FileHandle
from .path_resolver import PathResolver
from .store import ObjectStore
from gitvfs.exceptions import FileNotFoundError, ObjectTypeError
from gitvfs.logger import get_logger


class GitFileSystem:
    """
    Read-only filesystem over one git tree.

    The tree is fixed for the lifetime of the filesystem. open() may be
    called concurrently only if the underlying repository supports
    concurrent reads; nothing here takes a lock.
    """

    def __init__(
        self,
        store: ObjectStore,
        tree: pygit2.Tree,
        commit_time: Optional[datetime] = None
    ):
        self._store = store
        self._tree = tree
        self._commit_time = commit_time
        self._logger = get_logger('gitfs')

        self._logger.debug(
            "Bound filesystem root",
            context={'tree': str(tree.id), 'commit_time': commit_time}
        )

    @property
    def tree(self) -> pygit2.Tree:
        return self._tree

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def commit_time(self) -> Optional[datetime]:
        return self._commit_time

    def open(self, path: str) -> Union[FileHandle, DirectoryHandle]:
        """
        Open a path.

        Args:
            path: Slash-separated path; '' and '/' open the root

        Returns:
            FileHandle for blobs, DirectoryHandle for trees

        Raises:
            FileNotFoundError: If a segment of the path does not exist
            ObjectTypeError: If the entry is not a blob or a tree
        """
        resolved = PathResolver.resolve(self._store, self._tree, path)
        entry = resolved.entry

        if entry.kind is EntryKind.SUBTREE:
            handle = DirectoryHandle(
                resolved.path,
                entry,
                resolved.obj,
                self._store,
                commit_time=self._commit_time
            )
        elif entry.kind is EntryKind.LEAF:
            handle = FileHandle(
                resolved.path,
                entry,
                resolved.obj,
                commit_time=self._commit_time
            )
        else:
            raise ObjectTypeError(resolved.path, actual=resolved.obj.type_str)

        self._logger.debug(
            f"Opened {'directory' if entry.is_subtree else 'file'}",
            context={'path': resolved.path or '/', 'id': str(entry.id)}
        )

        return handle

    def stat(self, path: str) -> FileInfo:
        """Stat a path without keeping a handle open."""
        with self.open(path) as handle:
            return handle.stat()

    def exists(self, path: str) -> bool:
        """Check if a path exists in the tree."""
        try:
            PathResolver.find_entry(self._store, self._tree, path)
        except FileNotFoundError:
            return False
        return True


def commit_datetime(commit: pygit2.Commit) -> datetime:
    """Commit time as an aware datetime in the committer's offset."""
    offset = timezone(timedelta(minutes=commit.commit_time_offset))
    return datetime.fromtimestamp(commit.commit_time, tz=offset)


def from_tree(
    repo: pygit2.Repository,
    tree: pygit2.Tree,
    commit_time: Optional[datetime] = None
) -> GitFileSystem:
    """
    Create a filesystem whose root is the given tree.

    Without a commit_time, stat results report the current time.
    """
    return GitFileSystem(ObjectStore(repo), tree, commit_time=commit_time)


def from_commit(
    repo: pygit2.Repository,
    commit: pygit2.Commit,
    use_commit_time: bool = True
) -> GitFileSystem:
    """Create a filesystem from a commit's tree."""
    commit_time = commit_datetime(commit) if use_commit_time else None
    return from_tree(repo, commit.tree, commit_time=commit_time)


def from_reference(
    repo: pygit2.Repository,
    ref: pygit2.Reference,
    use_commit_time: bool = True
) -> GitFileSystem:
    """
    Create a filesystem from a reference.

    The reference must peel to a tree; if it passes through a commit, that
    commit's time is used for stat results.

    Raises:
        pygit2.GitError, ValueError: If the reference does not peel to a tree
    """
    tree = ref.peel(pygit2.Tree)

    commit_time = None
    if use_commit_time:
        target = ref.peel()
        if isinstance(target, pygit2.Commit):
            commit_time = commit_datetime(target)

    return from_tree(repo, tree, commit_time=commit_time)


def from_reference_name(
    repo: pygit2.Repository,
    name: str,
    use_commit_time: bool = True
) -> GitFileSystem:
    """
    Create a filesystem from a reference name such as 'HEAD' or
    'refs/heads/main'.

    Raises:
        KeyError: If the reference does not exist
    """
    ref = ObjectStore(repo).lookup_reference(name)
    return from_reference(repo, ref, use_commit_time=use_commit_time)

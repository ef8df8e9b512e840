"""
Handle Module

Open handles on blobs and trees.

FileHandle reads blob content through a byte cursor. DirectoryHandle
lists tree entries through an entry cursor. Both share the Handle
interface; operations that make no sense for a variant raise instead of
being silently ignored.

Handles are not thread-safe. Each one must be used by a single caller
and closed when done, preferably with a ``with`` block.
"""

import io
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional

import pygit2

from .entry import Entry
from .file_info import FileInfo
from .store import ObjectStore
from gitvfs.exceptions import (
    HandleClosedError,
    InvalidSeekError,
    InvalidWhenceError,
    NotADirectoryError,
    NotSeekableError,
)
from gitvfs.logger import get_logger


class Handle(ABC):
    """
    Base class for open files and directories.

    Lifecycle:
        1. Created by GitFileSystem.open()
        2. read/readinto/seek/readdir/stat as supported by the variant
        3. close() releases the object; later calls raise HandleClosedError
    """

    def __init__(
        self,
        path: str,
        entry: Entry,
        obj: Any,
        commit_time: Optional[datetime] = None
    ):
        self._path = path
        self._entry = entry
        self._obj = obj
        self._commit_time = commit_time
        self._logger = get_logger('handle')

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._entry.name

    @property
    def closed(self) -> bool:
        return self._obj is None

    def _check_open(self, operation: str) -> None:
        if self._obj is None:
            raise HandleClosedError(self._path, operation=operation)

    @abstractmethod
    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes; b'' at end of stream."""
        pass

    @abstractmethod
    def readinto(self, buffer: Any) -> int:
        """Read into a writable buffer; return the number of bytes copied."""
        pass

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor and return its new position."""
        pass

    @abstractmethod
    def readdir(self, count: int = 0) -> List[FileInfo]:
        """List the entries not returned by earlier calls."""
        pass

    def stat(self) -> FileInfo:
        """Get the FileInfo of the opened entry."""
        self._check_open('stat')
        return FileInfo.from_entry(self._entry, self._obj, self._commit_time)

    def close(self) -> None:
        """
        Release the underlying object.

        Calling close() more than once is harmless.
        """
        if self._obj is None:
            return
        self._obj = None
        self._logger.debug(
            f"Closed {self.__class__.__name__}",
            context={'path': self._path or '/'}
        )

    def __enter__(self) -> 'Handle':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = 'closed' if self.closed else 'open'
        return f"<{self.__class__.__name__} path={self._path or '/'!r} {state}>"


class FileHandle(Handle):
    """
    Handle on a blob.

    The cursor may be moved past the end of the content; reads there
    return end of stream. It can never become negative.
    """

    def __init__(
        self,
        path: str,
        entry: Entry,
        blob: pygit2.Blob,
        commit_time: Optional[datetime] = None
    ):
        super().__init__(path, entry, blob, commit_time)
        self._offset = 0

    @property
    def size(self) -> int:
        self._check_open('size')
        return self._obj.size

    @property
    def at_eof(self) -> bool:
        """True once the cursor is at or past the end of the content."""
        return self._offset >= self.size

    def tell(self) -> int:
        self._check_open('tell')
        return self._offset

    def readinto(self, buffer: Any) -> int:
        """
        Copy bytes at the cursor into buffer and advance the cursor.

        Returns 0 at end of stream. An empty buffer also yields 0 but
        does not mean end of stream; check ``at_eof`` to tell them apart.
        """
        self._check_open('readinto')

        view = memoryview(buffer).cast('B')
        if len(view) == 0 or self.at_eof:
            return 0

        with memoryview(self._obj) as content:
            chunk = content[self._offset:self._offset + len(view)]
            count = len(chunk)
            view[:count] = chunk
        self._offset += count

        return count

    def read(self, size: int = -1) -> bytes:
        """
        Read from the cursor.

        Args:
            size: Bytes to read (-1 for all remaining)

        Returns:
            Data read, b'' at end of stream
        """
        self._check_open('read')

        if size == 0 or self.at_eof:
            return b''

        if size is None or size < 0:
            end = self.size
        else:
            end = self._offset + size

        with memoryview(self._obj) as content:
            data = bytes(content[self._offset:end])
        self._offset += len(data)

        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move the cursor.

        Args:
            offset: Offset relative to whence
            whence: io.SEEK_SET, io.SEEK_CUR or io.SEEK_END

        Returns:
            New offset

        Raises:
            InvalidWhenceError: If whence is not one of the three origins
            InvalidSeekError: If the new offset would be negative
        """
        self._check_open('seek')

        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._offset + offset
        elif whence == io.SEEK_END:
            position = self.size + offset
        else:
            raise InvalidWhenceError(self._path, whence=whence)

        if position < 0:
            raise InvalidSeekError(self._path, position)

        self._offset = position
        return self._offset

    def readdir(self, count: int = 0) -> List[FileInfo]:
        self._check_open('readdir')
        raise NotADirectoryError(self._path)


class DirectoryHandle(Handle):
    """
    Handle on a tree.

    readdir() returns every entry not yet returned, in tree order,
    regardless of the count argument.
    """

    def __init__(
        self,
        path: str,
        entry: Entry,
        tree: pygit2.Tree,
        store: ObjectStore,
        commit_time: Optional[datetime] = None
    ):
        super().__init__(path, entry, tree, commit_time)
        self._store = store
        self._index = 0

    def read(self, size: int = -1) -> bytes:
        self._check_open('read')
        return b''

    def readinto(self, buffer: Any) -> int:
        self._check_open('readinto')
        return 0

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open('seek')
        raise NotSeekableError(self._path)

    def readdir(self, count: int = 0) -> List[FileInfo]:
        """
        List the remaining entries.

        Each entry's object is looked up in the store to fill in its size.
        If a lookup fails the error propagates and the cursor stays put.

        Args:
            count: Ignored; all remaining entries are returned

        Returns:
            FileInfo per entry, [] once exhausted
        """
        self._check_open('readdir')

        tree = self._obj
        total = self._store.entry_count(tree)
        entries: List[FileInfo] = []

        for index in range(self._index, total):
            entry = self._store.entry_by_index(tree, index)
            obj = self._store.lookup(entry.id)
            entries.append(FileInfo.from_entry(entry, obj, self._commit_time))

        self._index = total
        return entries

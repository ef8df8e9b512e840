"""
Filesystem Exceptions

Exceptions raised by the git tree filesystem: path resolution misses,
operations a handle does not support, and misuse of closed handles.

Failures reported by the object store itself (pygit2) are never wrapped
in these classes; they reach the caller unchanged.
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: File path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = context or {}
        if path is not None:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path is not None:
            base = f"{base} (path={self.path})"
        return base


class FileNotFoundError(FileSystemException):
    """
    A path segment does not exist in the tree.

    Raised for a missing final segment as well as for a missing
    intermediate directory.

    Example:
        >>> raise FileNotFoundError("docs/missing.md")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"File not found: {path}",
            path=path,
            error_code=4001,
            context=context
        )


class NotADirectoryError(FileSystemException):
    """
    Path is not a directory.

    Raised when a directory listing is requested from a file handle.

    Example:
        >>> raise NotADirectoryError("README")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Not a directory: {path}",
            path=path,
            error_code=4009,
            context=context
        )


class NotSeekableError(FileSystemException):
    """Directory handles cannot be positioned by byte offset."""

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Not seekable: {path}",
            path=path,
            error_code=4010,
            context=context
        )


class InvalidWhenceError(FileSystemException):
    """
    Seek origin is not one of SEEK_SET, SEEK_CUR or SEEK_END.

    Example:
        >>> raise InvalidWhenceError("README", whence=7)
    """

    def __init__(
        self,
        path: str,
        whence: Any = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["whence"] = whence
        super().__init__(
            message=f"Invalid whence: {whence!r}",
            path=path,
            error_code=4011,
            context=ctx
        )
        self.whence = whence


class InvalidSeekError(FileSystemException):
    """
    Seek would move the cursor before the start of the content.

    The cursor is left where it was.
    """

    def __init__(
        self,
        path: str,
        offset: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["offset"] = offset
        super().__init__(
            message=f"Negative seek position: {offset}",
            path=path,
            error_code=4012,
            context=ctx
        )
        self.offset = offset


class HandleClosedError(FileSystemException):
    """An operation was attempted on a handle after close()."""

    def __init__(
        self,
        path: str,
        operation: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(
            message=f"I/O operation on closed handle: {path}",
            path=path,
            error_code=4013,
            context=ctx
        )
        self.operation = operation


class ObjectTypeError(FileSystemException):
    """
    The object behind a tree entry cannot be opened.

    Raised when the object returned by the store is of a different kind
    than the entry declared, or when the entry is neither a blob nor a
    tree (for example a submodule commit).

    Example:
        >>> raise ObjectTypeError("vendor/lib", expected="tree", actual="commit")
    """

    def __init__(
        self,
        path: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if expected:
            ctx["expected"] = expected
        if actual:
            ctx["actual"] = actual
        super().__init__(
            message=f"Unsupported object type: {actual or 'unknown'}",
            path=path,
            error_code=4014,
            context=ctx
        )
        self.expected = expected
        self.actual = actual

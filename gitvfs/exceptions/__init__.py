"""
gitvfs Exception Hierarchy

Architecture:
    FileSystemException
    ├── FileNotFoundError
    ├── NotADirectoryError
    ├── NotSeekableError
    ├── InvalidWhenceError
    ├── InvalidSeekError
    ├── HandleClosedError
    └── ObjectTypeError
    ConfigException
    ├── ConfigLoadError
    └── ConfigValidationError

Errors raised by pygit2 (KeyError, pygit2.GitError,
pygit2.InvalidSpecError) are not part of this hierarchy and
propagate unchanged.
"""

from .fs_exceptions import (
    FileSystemException,
    FileNotFoundError,
    NotADirectoryError,
    NotSeekableError,
    InvalidWhenceError,
    InvalidSeekError,
    HandleClosedError,
    ObjectTypeError,
)

from .config_exceptions import (
    ConfigException,
    ConfigLoadError,
    ConfigValidationError,
)

__all__ = [
    # Filesystem exceptions
    "FileSystemException",
    "FileNotFoundError",
    "NotADirectoryError",
    "NotSeekableError",
    "InvalidWhenceError",
    "InvalidSeekError",
    "HandleClosedError",
    "ObjectTypeError",
    # Configuration exceptions
    "ConfigException",
    "ConfigLoadError",
    "ConfigValidationError",
]

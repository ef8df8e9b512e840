"""
gitvfs - Git trees as read-only filesystems

Exposes one git tree through a small open/read/seek/readdir/stat/close
contract, so generic consumers such as a static file server can serve
repository content without knowing about git objects.
"""

__version__ = "1.0.0"

from .filesystem import (
    GitFileSystem,
    FileHandle,
    DirectoryHandle,
    FileInfo,
    from_tree,
    from_commit,
    from_reference,
    from_reference_name,
)

__all__ = [
    'GitFileSystem',
    'FileHandle',
    'DirectoryHandle',
    'FileInfo',
    'from_tree',
    'from_commit',
    'from_reference',
    'from_reference_name',
]

"""
Object Store Module

Thin adapter over a pygit2 repository exposing only what the filesystem
needs: object lookup, tree entry access by index and by path, and
reference lookup.

Errors raised by pygit2 propagate unchanged.
"""

from typing import Any

import pygit2

from .entry import TreeEntry


class ObjectStore:
    """
    Read access to a git object database.

    The store does not own the repository; closing is left to whoever
    opened it.

    Example:
        >>> store = ObjectStore(pygit2.Repository('/srv/site.git'))
        >>> blob = store.lookup(store.entry_by_path(tree, 'README').id)
    """

    def __init__(self, repo: pygit2.Repository):
        self._repo = repo

    @property
    def repository(self) -> pygit2.Repository:
        return self._repo

    def lookup(self, oid: Any) -> pygit2.Object:
        """
        Resolve an identifier to its object.

        Raises:
            KeyError: If the object is not in the database
        """
        return self._repo[oid]

    def entry_count(self, tree: pygit2.Tree) -> int:
        return len(tree)

    def entry_by_index(self, tree: pygit2.Tree, index: int) -> TreeEntry:
        return TreeEntry.from_object(tree[index])

    def entry_by_path(self, tree: pygit2.Tree, path: str) -> TreeEntry:
        """
        Find an entry by slash-separated path, descending through subtrees.

        Raises:
            KeyError: If any segment of the path is missing
        """
        return TreeEntry.from_object(tree[path])

    def lookup_reference(self, name: str) -> pygit2.Reference:
        """
        Raises:
            KeyError: If no reference has this name
            pygit2.InvalidSpecError: If the name is not a valid reference name
        """
        return self._repo.lookup_reference(name)

"""
Test repository fixtures.

Builds bare pygit2 repositories in a temporary directory.
"""

import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from typing import Optional

import pygit2


# 2013-03-06 14:30 Europe/Berlin
SEED_TIME = 1362576600
SEED_OFFSET = 60
SEED_DATETIME = datetime(2013, 3, 6, 14, 30, tzinfo=timezone(timedelta(minutes=60)))

README_CONTENT = b"foo\n"


def create_bare_test_repo(path: str) -> pygit2.Repository:
    return pygit2.init_repository(path, bare=True)


def write_tree(repo: pygit2.Repository, files: dict[str, bytes]) -> pygit2.Oid:
    """
    Write a tree from a mapping of slash-separated paths to contents.

    Example:
        >>> write_tree(repo, {'README': b'foo\\n', 'docs/guide.md': b'# guide\\n'})
    """
    builder = repo.TreeBuilder()
    subdirs: dict[str, dict[str, bytes]] = {}

    for path, content in files.items():
        head, _, rest = path.partition('/')
        if rest:
            subdirs.setdefault(head, {})[rest] = content
        else:
            builder.insert(head, repo.create_blob(content), pygit2.GIT_FILEMODE_BLOB)

    for name, children in subdirs.items():
        builder.insert(name, write_tree(repo, children), pygit2.GIT_FILEMODE_TREE)

    return builder.write()


def seed_repo(
    repo: pygit2.Repository,
    files: Optional[dict[str, bytes]] = None,
    branch: str = 'refs/heads/main'
) -> tuple[pygit2.Oid, pygit2.Oid]:
    """
    Commit a tree on a branch and point HEAD at it.

    Defaults to a single README containing "foo\\n".

    Returns:
        (commit id, tree id)
    """
    if files is None:
        files = {'README': README_CONTENT}

    sig = pygit2.Signature('Rand Om Hacker', 'random@hacker.com', SEED_TIME, SEED_OFFSET)
    tree_id = write_tree(repo, files)
    commit_id = repo.create_commit(branch, sig, sig, "This is a commit\n", tree_id, [])
    repo.set_head(branch)

    return commit_id, tree_id


class RepoTestCase(unittest.TestCase):
    """TestCase with a fresh bare repository in ``self.repo``."""

    files: Optional[dict[str, bytes]] = None

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory(prefix='gitvfs')
        self.addCleanup(self._tmpdir.cleanup)

        self.repo = create_bare_test_repo(self._tmpdir.name)
        self.addCleanup(self.repo.free)
        self.commit_id, self.tree_id = seed_repo(self.repo, self.files)
        self.tree = self.repo[self.tree_id]

"""
gitvfs Unit Tests

Exceptions, logging, configuration, path normalization, entries and
stat values.

Run with: python -m pytest gitvfs/tests -v
"""

import json
import logging
import os
import stat
import sys
import tempfile
import unittest
from datetime import datetime, timezone

import pygit2

from gitvfs.tests.helpers import RepoTestCase


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_file_not_found(self):
        from gitvfs.exceptions import FileNotFoundError, FileSystemException

        exc = FileNotFoundError("docs/missing.md")

        self.assertIsInstance(exc, FileSystemException)
        self.assertEqual(exc.error_code, 4001)
        self.assertEqual(exc.path, "docs/missing.md")
        self.assertEqual(exc.context["path"], "docs/missing.md")
        self.assertIn("4001", str(exc))
        self.assertIn("path=docs/missing.md", str(exc))

    def test_root_path_is_reported(self):
        from gitvfs.exceptions import NotSeekableError

        exc = NotSeekableError("")
        self.assertIn("(path=)", str(exc))

    def test_seek_exceptions(self):
        from gitvfs.exceptions import InvalidWhenceError, InvalidSeekError

        exc = InvalidWhenceError("README", whence=7)
        self.assertEqual(exc.whence, 7)
        self.assertEqual(exc.error_code, 4011)

        exc = InvalidSeekError("README", -3)
        self.assertEqual(exc.offset, -3)
        self.assertEqual(exc.context["offset"], -3)

    def test_object_type_error(self):
        from gitvfs.exceptions import ObjectTypeError

        exc = ObjectTypeError("vendor/lib", expected="tree", actual="commit")
        self.assertEqual(exc.expected, "tree")
        self.assertEqual(exc.actual, "commit")
        self.assertIn("commit", exc.message)

    def test_config_exceptions(self):
        from gitvfs.exceptions import ConfigException, ConfigLoadError, ConfigValidationError

        exc = ConfigLoadError("Configuration file not found", config_path="x.json")
        self.assertIsInstance(exc, ConfigException)
        self.assertEqual(exc.error_code, 5001)
        self.assertIn("config_path=x.json", str(exc))

        exc = ConfigValidationError("Invalid port", key="server.port")
        self.assertEqual(exc.key, "server.port")
        self.assertEqual(exc.error_code, 5002)


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def test_logger_singleton(self):
        from gitvfs.logger import Logger

        log1 = Logger('test1')
        log2 = Logger('test1')

        self.assertIs(log1, log2)
        self.assertEqual(log1.subsystem, 'test1')

    def test_log_levels(self):
        from gitvfs.logger import LogLevel

        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertEqual(LogLevel.from_name('debug'), LogLevel.DEBUG)
        with self.assertRaises(ValueError):
            LogLevel.from_name('loud')

    def test_formatter_includes_subsystem_and_context(self):
        from gitvfs.logger import LogFormatter

        record = logging.LogRecord(
            'gitvfs.gitfs', logging.DEBUG, __file__, 1, "Opened file", None, None
        )
        record.subsystem = 'gitfs'
        record.context = {'path': 'README'}

        output = LogFormatter(use_colors=False).format(record)

        self.assertIn("[gitfs]", output)
        self.assertIn("Opened file", output)
        self.assertIn("{path=README}", output)

    def test_messages_reach_gitvfs_namespace(self):
        from gitvfs.logger import get_logger

        log = get_logger('unit')
        with self.assertLogs('gitvfs.unit', level='DEBUG') as captured:
            log.debug("hello", context={'k': 'v'})

        self.assertEqual(captured.records[0].subsystem, 'unit')
        self.assertEqual(captured.records[0].context, {'k': 'v'})


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def setUp(self):
        from gitvfs.core.config_loader import ConfigLoader

        self.loader = ConfigLoader()
        self.loader.reset()
        self.addCleanup(self.loader.reset)

    def _write(self, data) -> str:
        handle = tempfile.NamedTemporaryFile('w', suffix='.json', delete=False)
        with handle:
            if isinstance(data, str):
                handle.write(data)
            else:
                json.dump(data, handle)
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_default_config(self):
        from gitvfs.core.config_loader import Config

        config = Config()

        self.assertEqual(config.repository.reference, "HEAD")
        self.assertEqual(config.filesystem.mod_time, "commit")
        self.assertEqual(config.server.port, 8080)
        self.assertEqual(config.server.index_file, "index.html")
        self.assertEqual(config.logging.level, "INFO")

    def test_load_partial_file(self):
        path = self._write({'server': {'port': 9000}, 'repository': {'reference': 'refs/heads/main'}})

        config = self.loader.load(path)

        self.assertEqual(config.server.port, 9000)
        self.assertEqual(config.server.host, "127.0.0.1")
        self.assertEqual(config.repository.reference, "refs/heads/main")
        self.assertEqual(self.loader.get('server.port'), 9000)

    def test_missing_file(self):
        from gitvfs.exceptions import ConfigLoadError

        with self.assertRaises(ConfigLoadError):
            self.loader.load('/nonexistent/gitvfs.json')

    def test_invalid_json(self):
        from gitvfs.exceptions import ConfigLoadError

        path = self._write("{not json")
        with self.assertRaises(ConfigLoadError):
            self.loader.load(path)

    def test_validation(self):
        from gitvfs.exceptions import ConfigValidationError

        with self.assertRaises(ConfigValidationError):
            self.loader.load(self._write({'filesystem': {'mod_time': 'yesterday'}}))
        with self.assertRaises(ConfigValidationError):
            self.loader.load(self._write({'server': {'port': 70000}}))
        with self.assertRaises(ConfigValidationError):
            self.loader.load(self._write({'storage': {}}))

    def test_set_and_get(self):
        from gitvfs.exceptions import ConfigValidationError

        self.loader.set('server.port', 0)
        self.assertEqual(self.loader.get('server.port'), 0)
        self.assertEqual(self.loader.get('server.missing', 'x'), 'x')

        with self.assertRaises(ConfigValidationError):
            self.loader.set('server.nothing', 1)
        with self.assertRaises(ConfigValidationError):
            self.loader.set('logging.level', 'LOUD')
        self.assertEqual(self.loader.get('logging.level'), 'INFO')

    def test_to_dict(self):
        data = self.loader.to_dict()

        self.assertEqual(data['repository'], {'path': '.', 'reference': 'HEAD'})
        self.assertIn('logging', data)


class TestPathResolver(unittest.TestCase):
    """Test path normalization."""

    def test_normalize(self):
        from gitvfs.filesystem import PathResolver

        self.assertEqual(PathResolver.normalize('/README'), 'README')
        self.assertEqual(PathResolver.normalize('//index.html'), 'index.html')
        self.assertEqual(PathResolver.normalize('docs/guide.md'), 'docs/guide.md')
        self.assertEqual(PathResolver.normalize('/'), '')
        self.assertEqual(PathResolver.normalize(''), '')

    def test_is_root(self):
        from gitvfs.filesystem import PathResolver

        self.assertTrue(PathResolver.is_root(''))
        self.assertTrue(PathResolver.is_root('///'))
        self.assertFalse(PathResolver.is_root('/README'))


class TestEntries(unittest.TestCase):
    """Test entry kinds and the synthetic root."""

    def test_entry_kind_mapping(self):
        from gitvfs.filesystem import EntryKind

        self.assertIs(EntryKind.from_type_str('blob'), EntryKind.LEAF)
        self.assertIs(EntryKind.from_type_str('tree'), EntryKind.SUBTREE)
        self.assertIs(EntryKind.from_type_str('commit'), EntryKind.OTHER)

    def test_root_entry(self):
        from gitvfs.filesystem import RootEntry, EntryKind

        root = RootEntry(id='abc')

        self.assertEqual(root.name, '')
        self.assertIs(root.kind, EntryKind.SUBTREE)
        self.assertTrue(root.is_root)
        self.assertTrue(root.is_subtree)


class TestFileInfo(unittest.TestCase):
    """Test stat values."""

    def test_mode_for_kind(self):
        from gitvfs.filesystem import EntryKind, mode_for_kind

        self.assertTrue(stat.S_ISREG(mode_for_kind(EntryKind.LEAF)))
        self.assertTrue(stat.S_ISDIR(mode_for_kind(EntryKind.SUBTREE)))
        self.assertEqual(mode_for_kind(EntryKind.OTHER), 0)

    def test_mod_time_without_commit_is_now(self):
        from gitvfs.filesystem import FileInfo

        info = FileInfo(name='README', size=4, mode=stat.S_IFREG | 0o444, filemode=0o100644)
        before = datetime.now(timezone.utc)

        self.assertGreaterEqual(info.mod_time, before)
        self.assertFalse(info.is_dir)
        self.assertTrue(info.is_file)

    def test_mod_time_with_commit(self):
        from gitvfs.filesystem import FileInfo
        from gitvfs.tests.helpers import SEED_DATETIME

        info = FileInfo(
            name='docs', size=0, mode=stat.S_IFDIR | 0o555, filemode=0o040000,
            commit_time=SEED_DATETIME
        )

        self.assertEqual(info.mod_time, SEED_DATETIME)
        self.assertTrue(info.is_dir)
        self.assertEqual(info.to_dict()['mod_time'], SEED_DATETIME.isoformat())


class TestObjectStore(RepoTestCase):
    """Test the pygit2 adapter."""

    files = {'README': b'foo\n', 'docs/guide.md': b'# guide\n'}

    def test_entries(self):
        from gitvfs.filesystem import ObjectStore, EntryKind

        store = ObjectStore(self.repo)

        self.assertEqual(store.entry_count(self.tree), 2)
        names = [store.entry_by_index(self.tree, i).name for i in range(2)]
        self.assertEqual(names, ['README', 'docs'])

        entry = store.entry_by_path(self.tree, 'docs/guide.md')
        self.assertEqual(entry.name, 'guide.md')
        self.assertIs(entry.kind, EntryKind.LEAF)
        self.assertEqual(entry.filemode, pygit2.GIT_FILEMODE_BLOB)

        docs = store.entry_by_path(self.tree, 'docs')
        self.assertIs(docs.kind, EntryKind.SUBTREE)

    def test_lookup_errors_are_not_wrapped(self):
        from gitvfs.filesystem import ObjectStore

        store = ObjectStore(self.repo)

        with self.assertRaises(KeyError):
            store.entry_by_path(self.tree, 'missing')
        with self.assertRaises(KeyError):
            store.lookup_reference('refs/heads/missing')
        self.assertIsInstance(store.lookup(self.tree_id), pygit2.Tree)


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())

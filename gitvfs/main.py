#!/usr/bin/env python3
"""
gitvfs command line

Commands:
    serve REPO   Serve a reference's tree over HTTP
    ls REPO      List a directory of a reference's tree
    cat REPO     Print a file of a reference's tree

Repository, reference and server settings come from the configuration
file (``--config``) and can be overridden per option.
"""

import argparse
import stat
import sys
from typing import List, Optional

import pygit2

from gitvfs.core.config_loader import Config, ConfigLoader
from gitvfs.exceptions import ConfigException, FileSystemException
from gitvfs.filesystem import FileInfo, GitFileSystem, from_reference_name
from gitvfs.logger import LogLevel, Logger, get_logger
from gitvfs.server import serve


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gitvfs',
        description='Expose a git tree as a read-only filesystem.'
    )
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument(
        '--log-level',
        choices=[level.name for level in LogLevel],
        help='Override the configured log level'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    serve_parser = commands.add_parser('serve', help='serve the tree over HTTP')
    serve_parser.add_argument('repo', nargs='?', help='repository path')
    serve_parser.add_argument('--ref', help='reference name (default: HEAD)')
    serve_parser.add_argument('--host', help='address to bind')
    serve_parser.add_argument('--port', type=int, help='port to bind')

    ls_parser = commands.add_parser('ls', help='list a directory')
    ls_parser.add_argument('repo', help='repository path')
    ls_parser.add_argument('path', nargs='?', default='/', help='directory path')
    ls_parser.add_argument('--ref', help='reference name (default: HEAD)')

    cat_parser = commands.add_parser('cat', help='print a file')
    cat_parser.add_argument('repo', help='repository path')
    cat_parser.add_argument('path', help='file path')
    cat_parser.add_argument('--ref', help='reference name (default: HEAD)')

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """
    Load the configuration file (if any) and apply command line overrides.

    Starts from defaults on every call so overrides from an earlier run in
    the same process do not leak into this one.
    """
    loader = ConfigLoader()
    loader.reset()
    if args.config:
        loader.load(args.config)

    if args.repo:
        loader.set('repository.path', args.repo)
    if args.ref:
        loader.set('repository.reference', args.ref)
    if args.log_level:
        loader.set('logging.level', args.log_level)
    if getattr(args, 'host', None):
        loader.set('server.host', args.host)
    if getattr(args, 'port', None) is not None:
        loader.set('server.port', args.port)

    return loader.config


def open_filesystem(config: Config) -> GitFileSystem:
    repo = pygit2.Repository(config.repository.path)
    return from_reference_name(
        repo,
        config.repository.reference,
        use_commit_time=config.filesystem.mod_time == 'commit'
    )


def format_entry(info: FileInfo) -> str:
    return f"{stat.filemode(info.mode)} {info.size:>10} {info.name}"


def cmd_ls(fs: GitFileSystem, path: str) -> int:
    with fs.open(path) as handle:
        if handle.stat().is_dir:
            for info in handle.readdir():
                print(format_entry(info))
        else:
            print(format_entry(handle.stat()))
    return 0


def cmd_cat(fs: GitFileSystem, path: str) -> int:
    with fs.open(path) as handle:
        while True:
            chunk = handle.read(65536)
            if not chunk:
                break
            sys.stdout.buffer.write(chunk)
    sys.stdout.buffer.flush()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the ``gitvfs`` console script.

    Returns:
        0 on success, 1 on a configuration, filesystem or repository error
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigException as e:
        print(f"gitvfs: {e}", file=sys.stderr)
        return 1

    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file,
        console_output=config.logging.console_output
    )
    logger = get_logger('main')

    try:
        fs = open_filesystem(config)

        if args.command == 'serve':
            serve(
                fs,
                host=config.server.host,
                port=config.server.port,
                index_file=config.server.index_file
            )
            return 0
        if args.command == 'ls':
            return cmd_ls(fs, args.path)
        if args.command == 'cat':
            return cmd_cat(fs, args.path)
    except FileSystemException as e:
        print(f"gitvfs: {e}", file=sys.stderr)
        return 1
    except KeyError as e:
        logger.debug("Lookup failed", context={'error': e})
        print(f"gitvfs: not found: {e}", file=sys.stderr)
        return 1
    except (pygit2.GitError, ValueError) as e:
        print(f"gitvfs: {e}", file=sys.stderr)
        return 1

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == '__main__':
    sys.exit(main())

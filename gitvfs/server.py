"""
Static File Server Module

Serves any object with an ``open(path)`` method returning gitvfs-style
handles over HTTP. It only uses read, readdir, stat and close. Store
errors (``KeyError`` for a missing object, ``pygit2.GitError``) that the
filesystem passes through are mapped to 404 and 500 responses.

Example:
    >>> fs = from_reference_name(pygit2.Repository('site.git'), 'HEAD')
    >>> serve(fs, port=8080)
"""

import functools
import html
import mimetypes
import posixpath
import shutil
from datetime import datetime, timezone
from email.utils import formatdate, parsedate_to_datetime
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, List, Optional
from urllib.parse import quote, unquote

import pygit2

from gitvfs.exceptions import FileNotFoundError, FileSystemException
from gitvfs.logger import get_logger


class FileSystemRequestHandler(BaseHTTPRequestHandler):
    """
    GET/HEAD handler backed by a filesystem object.

    Directory requests without a trailing slash are redirected, directories
    containing the index file serve it, other directories get an HTML
    listing.
    """

    server_version = "gitvfs/1.0"

    def __init__(self, *args, filesystem: Any, index_file: str = 'index.html', **kwargs):
        self.filesystem = filesystem
        self.index_file = index_file
        self._logger = get_logger('server')
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:
        self._serve(send_body=True)

    def do_HEAD(self) -> None:
        self._serve(send_body=False)

    def log_message(self, format: str, *args: Any) -> None:
        self._logger.info(format % args, context={'client': self.client_address[0]})

    def _request_path(self) -> str:
        path = self.path.split('?', 1)[0].split('#', 1)[0]
        path = '/' + unquote(path).lstrip('/')
        cleaned = posixpath.normpath(path)
        if path.endswith('/') and cleaned != '/':
            cleaned += '/'
        return cleaned

    def _serve(self, send_body: bool) -> None:
        path = self._request_path()

        try:
            handle = self.filesystem.open(path)
        except (FileNotFoundError, KeyError):
            self.send_error(HTTPStatus.NOT_FOUND)
            return
        except (FileSystemException, pygit2.GitError) as e:
            self._send_server_error(path, e)
            return

        with handle:
            info = handle.stat()
            if info.is_dir:
                if not path.endswith('/'):
                    self._redirect(path + '/')
                    return
                index_path = posixpath.join(path, self.index_file)
                if self.index_file and self._is_file(index_path):
                    with self.filesystem.open(index_path) as index_handle:
                        self._send_file(index_handle, index_path, send_body)
                    return
                try:
                    entries = handle.readdir()
                except (FileSystemException, KeyError, pygit2.GitError) as e:
                    self._send_server_error(path, e)
                    return
                self._send_listing(entries, path, send_body)
                return

            if path.endswith('/'):
                self.send_error(HTTPStatus.NOT_FOUND)
                return
            self._send_file(handle, path, send_body)

    def _send_server_error(self, path: str, error: Exception) -> None:
        self._logger.error(
            "Request failed",
            context={'path': path, 'error': repr(error)}
        )
        self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR)

    def _is_file(self, path: str) -> bool:
        """
        Check for a servable file at path.

        An index entry that cannot be opened is treated as absent and the
        directory gets a listing instead.
        """
        try:
            with self.filesystem.open(path) as handle:
                return not handle.stat().is_dir
        except FileNotFoundError:
            return False
        except (FileSystemException, KeyError, pygit2.GitError) as e:
            self._logger.warning(
                "Index file not servable",
                context={'path': path, 'error': repr(e)}
            )
            return False

    def _redirect(self, location: str) -> None:
        self.send_response(HTTPStatus.MOVED_PERMANENTLY)
        self.send_header('Location', quote(location))
        self.send_header('Content-Length', '0')
        self.end_headers()

    def _not_modified_since(self, mod_time: datetime) -> bool:
        header = self.headers.get('If-Modified-Since')
        if not header:
            return False
        try:
            since = parsedate_to_datetime(header)
        except (TypeError, ValueError, IndexError):
            return False
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        return mod_time.replace(microsecond=0) <= since

    def _send_file(self, handle: Any, path: str, send_body: bool) -> None:
        info = handle.stat()
        mod_time = info.mod_time

        if self._not_modified_since(mod_time):
            self.send_response(HTTPStatus.NOT_MODIFIED)
            self.send_header('Last-Modified', formatdate(mod_time.timestamp(), usegmt=True))
            self.end_headers()
            return

        content_type = mimetypes.guess_type(path)[0] or 'application/octet-stream'

        self.send_response(HTTPStatus.OK)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(info.size))
        self.send_header('Last-Modified', formatdate(mod_time.timestamp(), usegmt=True))
        self.end_headers()

        if send_body:
            shutil.copyfileobj(handle, self.wfile)

    def _send_listing(self, entries: List[Any], path: str, send_body: bool) -> None:
        entries = sorted(entries, key=lambda info: info.name)
        title = html.escape(path)

        lines = [
            '<!DOCTYPE html>',
            f'<html><head><meta charset="utf-8"><title>{title}</title></head>',
            f'<body><h1>{title}</h1><pre>',
        ]
        for info in entries:
            name = info.name + ('/' if info.is_dir else '')
            lines.append(f'<a href="{quote(name)}">{html.escape(name)}</a>')
        lines.append('</pre></body></html>')

        body = '\n'.join(lines).encode('utf-8')

        self.send_response(HTTPStatus.OK)
        self.send_header('Content-Type', 'text/html; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()

        if send_body:
            self.wfile.write(body)


def make_server(
    filesystem: Any,
    host: str = '127.0.0.1',
    port: int = 8080,
    index_file: str = 'index.html'
) -> ThreadingHTTPServer:
    """
    Create (but do not start) an HTTP server for a filesystem.

    Port 0 binds an ephemeral port; read it back from ``server_address``.
    """
    handler = functools.partial(
        FileSystemRequestHandler,
        filesystem=filesystem,
        index_file=index_file
    )
    return ThreadingHTTPServer((host, port), handler)


def serve(
    filesystem: Any,
    host: str = '127.0.0.1',
    port: int = 8080,
    index_file: str = 'index.html',
    server: Optional[ThreadingHTTPServer] = None
) -> None:
    """Serve a filesystem until interrupted."""
    logger = get_logger('server')
    httpd = server or make_server(filesystem, host, port, index_file)
    bound_host, bound_port = httpd.server_address[:2]
    logger.info("Serving", context={'host': bound_host, 'port': bound_port})

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        httpd.server_close()

import functools
import logging
import os
import signal
from concurrent.futures import ThreadPoolExecutor
from http import HTTPStatus
from http.server import HTTPServer, SimpleHTTPRequestHandler
from socketserver import ThreadingMixIn

from serve import const

_logger = logging.getLogger(__name__)

MAX_PORT = 65535


class Handler(SimpleHTTPRequestHandler):
    """Serves files from the configured directory."""

    def send_error(self, code, message=None, explain=None):
        if code != HTTPStatus.NOT_FOUND:
            super().send_error(code, message, explain)
            return

        self.log_error("code %d, message %s", code, message)
        body = const.NOT_FOUND_BODY.encode("utf-8")
        self.send_response(code, message)
        self.send_header("Content-Type", "text/html;charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.close_connection = True
        if self.command != "HEAD":
            self.wfile.write(body)

    def log_message(self, format, *args):
        _logger.info("%s %s", self.address_string(), format % args)


class Server(ThreadingMixIn, HTTPServer):
    """
    An HTTP server that hands requests to a fixed pool of threads.
    """

    daemon_threads = True
    allow_reuse_address = True

    _pool: ThreadPoolExecutor

    def __init__(self, address, handler, threads: int, bind_and_activate=True):
        self._pool = ThreadPoolExecutor(
            max_workers=max(1, threads), thread_name_prefix="serve"
        )
        super().__init__(address, handler, bind_and_activate)

    def process_request(self, request, client_address):
        self._pool.submit(self.process_request_thread, request, client_address)

    def server_close(self):
        super().server_close()
        self._pool.shutdown(wait=True)


def bind(path: str, port: int, threads: int, host: str = const.DEFAULT_HOST) -> Server:
    """Creates a server listening on `host:port` and serving `path`."""
    if not os.path.isdir(path):
        raise NotADirectoryError(f"'{path}' is not a directory")

    if port < 0 or port > MAX_PORT:
        raise OverflowError(f"Port {port} is out of range [0, {MAX_PORT}]")

    handler = functools.partial(Handler, directory=path)
    return Server((host, port), handler, threads)


def _fork(workers: int) -> tuple[bool, list[int]]:
    """
    Forks the extra worker processes.

    Returns:
        Whether the caller is the parent process, and the children's pids.
    """
    if workers <= 1:
        return True, []

    if not hasattr(os, "fork"):
        _logger.warning(
            f"Process workers are not supported on this platform, running 1 instead of {workers}"
        )
        return True, []

    children: list[int] = []
    for _ in range(workers - 1):
        pid = os.fork()
        if pid == 0:
            return False, []
        children.append(pid)
    return True, children


def _reap(children: list[int]):
    for pid in children:
        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            pass
        os.waitpid(pid, 0)
        _logger.debug(f"Worker {pid} stopped")


def start(
    path: str,
    port: int,
    threads: int,
    workers: int,
    host: str = const.DEFAULT_HOST,
):
    """Serves `path` until interrupted."""
    with bind(path, port, threads, host) as server:
        _logger.info(
            f"Serving '{os.path.abspath(path)}' on http://{host}:{port} "
            f"(threads: {threads}, workers: {workers})"
        )

        parent, children = _fork(workers)
        _logger.debug(f"Worker {os.getpid()} listening")
        try:
            server.serve_forever()
        finally:
            if parent:
                _reap(children)

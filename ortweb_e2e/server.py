"""
Simple static HTTP server for the externally hosted browser test pass.

Serves the installed onnxruntime-web package so the browser tests can load
ort.*.js and *.wasm cross-origin. Only .js and .wasm files are served, every
response allows any origin, and anything else answers 404.

The server runs in a daemon thread: once started by the driver it is never
stopped explicitly and dies with the parent process.
"""

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote, urlsplit

from ortweb_e2e.config.parser import DEFAULT_SERVER_PORT

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"

MIME_TYPES = {
    ".js": "text/javascript",
    ".wasm": "application/wasm",
}


def resolve_request(root: Path, url: str) -> Optional[Tuple[Path, str]]:
    """
    Map a request URL to a file under root and its content type.

    Returns:
        (file_path, content_type), or None if the URL must not be served
    """
    pathname = unquote(urlsplit(url).path)
    try:
        file_path = (root / pathname.lstrip("/")).resolve()
    except (ValueError, OSError):
        # embedded NUL bytes and similar unrepresentable paths
        return None

    try:
        file_path.relative_to(root)
    except ValueError:
        return None

    content_type = MIME_TYPES.get(file_path.suffix)
    if content_type is None:
        return None

    return file_path, content_type


class StaticFileHandler(BaseHTTPRequestHandler):
    """Serves .js and .wasm files below the server's root directory."""

    server: "_RootedHTTPServer"

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:  # noqa: N802
        logger.info("request %s", self.path.replace("\n", "").replace("\r", ""))

        request = resolve_request(self.server.root, self.path)
        if request is None:
            self._send_text(404, "404")
            return

        file_path, content_type = request
        try:
            content = file_path.read_bytes()
        except FileNotFoundError:
            self._send_text(404, "404")
            return
        except OSError as e:
            logger.error(f"Failed to read {file_path}: {e}")
            self._send_text(500, "500")
            return

        self.send_response(200)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def _send_text(self, status: int, body: str) -> None:
        body_bytes = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body_bytes)))
        self.end_headers()
        self.wfile.write(body_bytes)


class _RootedHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, root: Path, address: Tuple[str, int]):
        self.root = root
        super().__init__(address, StaticFileHandler)


class StaticFileServer:
    """
    Handle to a running static file server.

    Attributes:
        root: Directory being served
        host: Bound host
        port: Bound port (the real one when started with port 0)
    """

    def __init__(
        self, root: Path, port: int = DEFAULT_SERVER_PORT, host: str = DEFAULT_HOST
    ):
        self.root = Path(root).resolve()
        self._httpd = _RootedHTTPServer(self.root, (host, port))
        self.host, self.port = self._httpd.server_address[:2]
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def start(self) -> "StaticFileServer":
        """Serve from a daemon thread and return immediately."""
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="ortweb-e2e-server", daemon=True
        )
        self._thread.start()
        logger.info(f"Server running at {self.url} (serving {self.root})")
        return self

    def serve_forever(self) -> None:
        """Serve in the calling thread until shutdown() or KeyboardInterrupt."""
        logger.info(f"Server running at {self.url} (serving {self.root})")
        try:
            self._httpd.serve_forever()
        finally:
            self._httpd.server_close()

    def shutdown(self) -> None:
        """Stop the background serve loop, if any, and close the socket."""
        if self._thread is not None:
            self._httpd.shutdown()
            self._thread.join(timeout=5)
            self._thread = None
        self._httpd.server_close()


def start_server(
    directory: Path, port: int = DEFAULT_SERVER_PORT, host: str = DEFAULT_HOST
) -> StaticFileServer:
    """
    Start serving directory over HTTP in the background.

    Example:
        >>> server = start_server(Path('build/js/e2e/node_modules/onnxruntime-web'))
        >>> server.url
        'http://127.0.0.1:8081/'
    """
    return StaticFileServer(directory, port=port, host=host).start()

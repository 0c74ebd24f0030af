"""
Tests for the static file server.
"""

import threading

import pytest
import requests

from ortweb_e2e.server import StaticFileServer, resolve_request, start_server


@pytest.fixture
def served_dir(tmp_path):
    root = tmp_path / "onnxruntime-web"
    (root / "dist").mkdir(parents=True)
    (root / "dist" / "ort.min.js").write_text("var ort = {};")
    (root / "dist" / "ort-wasm.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")
    (root / "package.json").write_text("{}")
    (tmp_path / "secret.js").write_text("nope")
    return root


@pytest.fixture
def server(served_dir):
    server = start_server(served_dir, port=0)
    try:
        yield server
    finally:
        server.shutdown()


class TestResolveRequest:
    """Test URL to file mapping."""

    def test_js_file(self, served_dir):
        path, content_type = resolve_request(served_dir.resolve(), "/dist/ort.min.js?v=1")

        assert path == served_dir.resolve() / "dist" / "ort.min.js"
        assert content_type == "text/javascript"

    def test_wasm_file(self, served_dir):
        _, content_type = resolve_request(served_dir.resolve(), "/dist/ort-wasm.wasm")

        assert content_type == "application/wasm"

    def test_other_extension_rejected(self, served_dir):
        assert resolve_request(served_dir.resolve(), "/package.json") is None

    def test_path_traversal_rejected(self, served_dir):
        assert resolve_request(served_dir.resolve(), "/../secret.js") is None
        assert resolve_request(served_dir.resolve(), "/dist/%2e%2e/%2e%2e/secret.js") is None

    def test_nul_byte_rejected(self, served_dir):
        assert resolve_request(served_dir.resolve(), "/%00.js") is None
        assert resolve_request(served_dir.resolve(), "/dist/ort%00.min.js") is None


class TestStaticFileServer:
    """Test the server over HTTP."""

    def test_binds_requested_port(self, server):
        assert server.port > 0
        assert server.url == f"http://127.0.0.1:{server.port}/"

    def test_serves_js_with_cors(self, server):
        response = requests.get(server.url + "dist/ort.min.js", timeout=5)

        assert response.status_code == 200
        assert response.text == "var ort = {};"
        assert response.headers["Content-Type"] == "text/javascript"
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_serves_wasm(self, server):
        response = requests.get(server.url + "dist/ort-wasm.wasm", timeout=5)

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/wasm"
        assert response.content.startswith(b"\x00asm")

    def test_missing_file_is_404(self, server):
        response = requests.get(server.url + "dist/missing.js", timeout=5)

        assert response.status_code == 404

    def test_unsupported_type_is_404(self, server):
        response = requests.get(server.url + "package.json", timeout=5)

        assert response.status_code == 404

    def test_nul_byte_url_is_404(self, server):
        response = requests.get(server.url + "%00.js", timeout=5)

        assert response.status_code == 404

    def test_shutdown_without_start_returns(self, served_dir):
        """Closing a server that never served must not block."""
        server = StaticFileServer(served_dir, port=0)
        closer = threading.Thread(target=server.shutdown, daemon=True)

        closer.start()
        closer.join(timeout=3)

        assert not closer.is_alive()

    def test_shutdown_twice(self, served_dir):
        server = start_server(served_dir, port=0)

        server.shutdown()
        server.shutdown()

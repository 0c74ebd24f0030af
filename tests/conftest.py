"""
Pytest configuration and shared fixtures for ortweb-e2e tests.
"""

import pytest
from pathlib import Path

from ortweb_e2e.workspace import WorkspaceLayout


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that spawn real shell commands",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def js_root(tmp_path) -> Path:
    """
    Create a fake <ORT_ROOT>/js tree.

    Contains:
    - common/ (no packed package)
    - web/onnxruntime-web-1.15.0.tgz
    - web/test/e2e/ template with a few test mains and a nested folder
    """
    root = tmp_path / "ort" / "js"
    (root / "common").mkdir(parents=True)
    web = root / "web"
    web.mkdir()
    (web / "onnxruntime-web-1.15.0.tgz").write_bytes(b"web-package")

    template = web / "test" / "e2e"
    template.mkdir(parents=True)
    (template / "package.json").write_text('{"devDependencies": {}}')
    (template / "karma.conf.js").write_text("module.exports = () => {};")
    (template / "node-test-main.js").write_text("// node test")
    (template / "browser-test-wasm.js").write_text("// browser test")
    (template / "model").mkdir()
    (template / "model" / "add.onnx").write_bytes(b"\x08\x07")

    return root


@pytest.fixture
def layout(js_root) -> WorkspaceLayout:
    """Default workspace layout for the fake JS root."""
    return WorkspaceLayout.from_js_root(js_root)


@pytest.fixture
def installed_web_package(layout) -> Path:
    """Simulate `npm install` having put onnxruntime-web into the run folder."""
    dist = layout.installed_web_package / "dist"
    dist.mkdir(parents=True)
    (dist / "ort-wasm.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")
    (dist / "ort.min.js").write_text("var ort = {};")
    return layout.installed_web_package

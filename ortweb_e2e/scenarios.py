"""
Fixed e2e test matrix and the command lines that run it.

Node.js cases run mocha directly; browser cases run karma once per test main,
first with the library hosted by karma (--self-host) and then served by the
separate static file server.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

from ortweb_e2e.config.parser import DEFAULT_BROWSER

MOCHA_BIN = "./node_modules/mocha/bin/mocha"
WASM_THREADS_FLAG = "--experimental-wasm-threads"


@dataclass(frozen=True)
class NodeTestCase:
    """A mocha run under Node.js."""

    main: str
    node_flags: Tuple[str, ...] = ()

    def command(self) -> str:
        return " ".join(["node", *self.node_flags, MOCHA_BIN, self.main])


@dataclass(frozen=True)
class BrowserTestCase:
    """A karma run in a browser."""

    main: str
    browser: str = DEFAULT_BROWSER


NODE_TEST_CASES: Tuple[NodeTestCase, ...] = (
    NodeTestCase("./node-test-main-no-threads.js"),
    NodeTestCase("./node-test-main.js"),
    NodeTestCase("./node-test-main-no-threads.js", (WASM_THREADS_FLAG,)),
    NodeTestCase("./node-test-main.js", (WASM_THREADS_FLAG,)),
    NodeTestCase("./node-test-wasm-path-override-filename.js"),
    NodeTestCase("./node-test-wasm-path-override-prefix.js"),
)

BROWSER_TEST_MAINS: Tuple[str, ...] = (
    "./browser-test-webgl.js",
    "./browser-test-wasm.js",
    "./browser-test-wasm-no-threads.js",
    "./browser-test-wasm-proxy.js",
    "./browser-test-wasm-no-threads-proxy.js",
    "./browser-test-wasm-path-override-filename.js",
    "./browser-test-wasm-path-override-prefix.js",
)


def browser_test_cases(browser: str = DEFAULT_BROWSER) -> Tuple[BrowserTestCase, ...]:
    """The browser cases of one pass, in run order."""
    return tuple(BrowserTestCase(main, browser) for main in BROWSER_TEST_MAINS)


def build_dev_install_command() -> str:
    """Install the dev dependencies of the copied test folder."""
    return "npm install"


def build_package_install_command(cache_folder: Path, packages: Iterable[Path]) -> str:
    """
    Install packed packages with an isolated npm cache.

    Example:
        >>> build_package_install_command(Path('/c'), [Path('/w/onnxruntime-web-1.0.0.tgz')])
        'npm install --cache "/c" "/w/onnxruntime-web-1.0.0.tgz"'
    """
    quoted = " ".join(f'"{package}"' for package in packages)
    return f'npm install --cache "{cache_folder}" {quoted}'


def build_karma_command(
    case: BrowserTestCase, self_host: bool, user_data_dir: Path
) -> str:
    """
    Build the karma command line for one browser case.

    --self-host is only passed when karma serves the library itself.
    """
    parts = ["npx karma start --single-run", f"--browsers {case.browser}"]
    if self_host:
        parts.append("--self-host")
    parts.append(f"--test-main={case.main}")
    parts.append(f"--user-data={user_data_dir}")
    return " ".join(parts)

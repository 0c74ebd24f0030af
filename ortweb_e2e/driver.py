"""
Sequential e2e test driver.

Runs the fixed pipeline one step at a time in the run folder:

    1. npm install                          (dev dependencies)
    2. npm install --cache <empty> <pkgs>   (packed packages)
    3. prepare wasm path override files
    4. Node.js cases                        (mocha)
    5. browser cases, self-hosted by karma
    6. start static file server on the installed onnxruntime-web
    7. browser cases, served by the static file server

The first failing command raises StepFailedError and nothing after it runs.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from ortweb_e2e.config.parser import DEFAULT_BROWSER, E2EConfig
from ortweb_e2e.core.locking import workspace_lock
from ortweb_e2e.scenarios import (
    NODE_TEST_CASES,
    BrowserTestCase,
    browser_test_cases,
    build_dev_install_command,
    build_karma_command,
    build_package_install_command,
)
from ortweb_e2e.server import StaticFileServer, start_server
from ortweb_e2e.shell import ShellRunner
from ortweb_e2e.workspace import (
    UserDataDirAllocator,
    WorkspaceLayout,
    WorkspacePreparer,
    prepare_wasm_path_override_files,
)

logger = logging.getLogger(__name__)

ServerFactory = Callable[[Path], StaticFileServer]


class E2ETestDriver:
    """
    Runs the e2e pipeline against a prepared workspace.

    Attributes:
        layout: Workspace paths
        packages: Packed packages to install, in order
        runner: Shell runner bound to the run folder
        user_data_dirs: Allocator of per-run browser user-data-dirs
        server: Static file server, once started
    """

    def __init__(
        self,
        layout: WorkspaceLayout,
        packages: List[Path],
        runner: Optional[ShellRunner] = None,
        user_data_dirs: Optional[UserDataDirAllocator] = None,
        server_factory: Optional[ServerFactory] = None,
        browser: str = DEFAULT_BROWSER,
    ):
        self.layout = layout
        self.packages = list(packages)
        self.runner = runner or ShellRunner(layout.run_folder)
        self.user_data_dirs = user_data_dirs or UserDataDirAllocator(
            layout.user_data_folder
        )
        self.server_factory = server_factory or start_server
        self.browser = browser
        self.server: Optional[StaticFileServer] = None

    def run(self) -> int:
        """
        Run every step in order.

        Returns:
            0 when all steps succeeded

        Raises:
            StepFailedError: On the first command exiting non-zero
        """
        self.install_dependencies()
        prepare_wasm_path_override_files(self.layout)
        self.test_all_nodejs_cases()

        # ort hosted by karma, same origin
        self.test_all_browser_cases(self_host=True)

        # ort hosted by the static server, different origin
        self.server = self.server_factory(self.layout.installed_web_package)
        self.test_all_browser_cases(self_host=False)

        logger.info("All e2e tests passed")
        return 0

    def install_dependencies(self) -> None:
        self.runner.run(build_dev_install_command())
        # an empty cache makes npm install the packed packages, not a cached copy
        self.runner.run(
            build_package_install_command(self.layout.npm_cache_folder, self.packages)
        )

    def test_all_nodejs_cases(self) -> None:
        for case in NODE_TEST_CASES:
            self.runner.run(case.command())

    def test_all_browser_cases(self, self_host: bool) -> None:
        for case in browser_test_cases(self.browser):
            self.run_karma(case, self_host)

    def run_karma(self, case: BrowserTestCase, self_host: bool) -> None:
        user_data_dir = self.user_data_dirs.next_dir()
        self.runner.run(build_karma_command(case, self_host, user_data_dir))


def run_e2e(layout: WorkspaceLayout, config: Optional[E2EConfig] = None) -> int:
    """
    Prepare the workspace and run the whole pipeline while owning it.

    Returns:
        0 when all steps succeeded

    Raises:
        ConfigurationError: If packed packages are missing or ambiguous
        WorkspaceError: If the workspace is locked or cannot be prepared
        StepFailedError: On the first failing command
    """
    config = config or E2EConfig()

    with workspace_lock(layout.run_folder, timeout=config.lock_timeout):
        packages = WorkspacePreparer(layout).prepare()

        driver = E2ETestDriver(
            layout,
            packages,
            server_factory=lambda root: start_server(root, port=config.server.port),
            browser=config.browser,
        )
        return driver.run()

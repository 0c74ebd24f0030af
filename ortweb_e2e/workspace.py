"""
Workspace preparation for the ONNX Runtime Web e2e tests.

The e2e tests must run in a folder that has no package.json in any parent
folder, so the test sources are copied out of <ORT_ROOT>/js/ into
<ORT_ROOT>/build/js/e2e/ before anything is installed.

Directory Structure (defaults, relative to the JS root):
    web/test/e2e/          : test template copied into the run folder
    ../build/js/e2e/       : run folder (working directory of every command)
    ../build/js/npm_cache/ : empty npm cache used when installing packed packages
    ../build/js/user_data/ : browser user-data-dir per karma run (0/, 1/, ...)

Classes:
    WorkspaceLayout: Resolved paths of one e2e workspace
    UserDataDirAllocator: Hands out a fresh, empty user-data-dir per browser run
    WorkspacePreparer: Stages the run folder and resolves packed packages
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ortweb_e2e.config.parser import E2EConfig
from ortweb_e2e.core.exceptions import (
    ConfigurationError,
    MultiplePackagesFoundError,
    PackageNotFoundError,
    WorkspaceError,
)
from ortweb_e2e.core.filesystem import (
    FilesystemError,
    copy_file,
    empty_directory,
    is_relative_to,
    recursive_copy,
)

logger = logging.getLogger(__name__)

COMMON_PACKAGE_NAME = "onnxruntime-common"
WEB_PACKAGE_NAME = "onnxruntime-web"
COMMON_PACKAGE_PATTERN = f"{COMMON_PACKAGE_NAME}-*.tgz"
WEB_PACKAGE_PATTERN = f"{WEB_PACKAGE_NAME}-*.tgz"

WASM_PATH_OVERRIDE_FOLDER = "test-wasm-path-override"
WASM_BINARY_NAME = "ort-wasm.wasm"
WASM_OVERRIDE_FILENAMES = ("ort-wasm.wasm", "renamed.wasm")


# =============================================================================
# Layout
# =============================================================================


@dataclass(frozen=True)
class WorkspaceLayout:
    """
    Resolved paths of an e2e workspace.

    Attributes:
        js_root: <ORT_ROOT>/js, holding common/ and web/
        template_dir: Test sources copied into the run folder
        run_folder: Build root, working directory of every shell step
        npm_cache_folder: npm cache emptied before installing packed packages
        user_data_folder: Parent of the per-run browser user-data-dirs
    """

    js_root: Path
    template_dir: Path
    run_folder: Path
    npm_cache_folder: Path
    user_data_folder: Path

    @classmethod
    def from_js_root(
        cls, js_root: Path, config: Optional[E2EConfig] = None
    ) -> "WorkspaceLayout":
        """
        Build the layout for a JS root, applying configured overrides.

        Example:
            >>> layout = WorkspaceLayout.from_js_root(Path('/ort/js'))
            >>> layout.run_folder
            PosixPath('/ort/build/js/e2e')
        """
        js_root = Path(js_root).resolve()
        overrides = config.workspace if config is not None else None

        def resolve(value: Optional[str], default: Path) -> Path:
            if value is None:
                return default.resolve()
            return (js_root / value).resolve()

        template_dir = resolve(
            overrides and overrides.template_dir, js_root / "web" / "test" / "e2e"
        )
        run_folder = resolve(
            overrides and overrides.run_folder, js_root.parent / "build" / "js" / "e2e"
        )
        npm_cache_folder = resolve(
            overrides and overrides.npm_cache_folder, run_folder.parent / "npm_cache"
        )
        user_data_folder = resolve(
            overrides and overrides.user_data_folder, run_folder.parent / "user_data"
        )

        layout = cls(
            js_root=js_root,
            template_dir=template_dir,
            run_folder=run_folder,
            npm_cache_folder=npm_cache_folder,
            user_data_folder=user_data_folder,
        )
        layout.check_scratch_folders()
        return layout

    @property
    def scratch_folders(self) -> List[Path]:
        """Folders emptied when the workspace is prepared."""
        return [self.run_folder, self.npm_cache_folder, self.user_data_folder]

    def check_scratch_folders(self) -> None:
        """
        Refuse layouts whose scratch folders would wipe the sources.

        No scratch folder may equal or contain the JS root, the test template
        or the folders holding the packed packages.

        Raises:
            ConfigurationError: If a scratch folder overlaps a source folder
        """
        protected = [
            self.js_root,
            self.template_dir,
            self.common_package_dir,
            self.web_package_dir,
        ]
        for folder in self.scratch_folders:
            for source in protected:
                if is_relative_to(source.resolve(), folder.resolve()):
                    raise ConfigurationError(
                        f"Workspace folder {folder} would delete {source}; "
                        "point it outside the JS source tree"
                    )

    @property
    def common_package_dir(self) -> Path:
        return self.js_root / "common"

    @property
    def web_package_dir(self) -> Path:
        return self.js_root / "web"

    @property
    def installed_web_package(self) -> Path:
        """onnxruntime-web as installed into the run folder."""
        return self.run_folder / "node_modules" / WEB_PACKAGE_NAME

    @property
    def wasm_path_override_folder(self) -> Path:
        return self.run_folder / WASM_PATH_OVERRIDE_FOLDER


# =============================================================================
# Packed packages
# =============================================================================


def find_packed_candidates(folder: Path, pattern: str) -> List[Path]:
    """Return absolute paths of files in folder matching pattern, sorted."""
    folder = Path(folder)
    if not folder.is_dir():
        return []
    return sorted(p.resolve() for p in folder.glob(pattern) if p.is_file())


def resolve_packed_packages(common_dir: Path, web_dir: Path) -> List[Path]:
    """
    Resolve the packed packages to install, in install order.

    onnxruntime-common is optional: zero matches are skipped, a single match is
    installed. onnxruntime-web is mandatory and must match exactly once.

    Args:
        common_dir: Folder searched for onnxruntime-common-*.tgz
        web_dir: Folder searched for onnxruntime-web-*.tgz

    Returns:
        List of archive paths (common first when present, then web)

    Raises:
        MultiplePackagesFoundError: If either pattern matches more than once
        PackageNotFoundError: If no onnxruntime-web archive exists
    """
    packages: List[Path] = []

    common_candidates = find_packed_candidates(common_dir, COMMON_PACKAGE_PATTERN)
    if len(common_candidates) > 1:
        raise MultiplePackagesFoundError(COMMON_PACKAGE_NAME, common_candidates)
    if common_candidates:
        packages.append(common_candidates[0])
    else:
        logger.debug(f"No {COMMON_PACKAGE_NAME} package in {common_dir}, skipping")

    web_candidates = find_packed_candidates(web_dir, WEB_PACKAGE_PATTERN)
    if len(web_candidates) > 1:
        raise MultiplePackagesFoundError(WEB_PACKAGE_NAME, web_candidates)
    if not web_candidates:
        raise PackageNotFoundError(WEB_PACKAGE_NAME, web_dir)
    packages.append(web_candidates[0])

    for package in packages:
        logger.info(f"Package to install: {package}")

    return packages


# =============================================================================
# Browser user-data-dirs
# =============================================================================


class UserDataDirAllocator:
    """
    Always use a new folder as browser user-data-dir.

    Folders are numbered from 0 under the user-data root; each one is emptied
    right before it is handed out.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.next_id = 0

    def next_dir(self) -> Path:
        directory = self.root / str(self.next_id)
        self.next_id += 1
        return empty_directory(directory)


# =============================================================================
# Preparer
# =============================================================================


class WorkspacePreparer:
    """
    Stages an isolated e2e workspace.

    Example:
        >>> preparer = WorkspacePreparer(WorkspaceLayout.from_js_root(js_root))
        >>> packages = preparer.prepare()
    """

    def __init__(self, layout: WorkspaceLayout):
        self.layout = layout

    def clean(self) -> None:
        """Empty the run folder, npm cache and user-data root."""
        self.layout.check_scratch_folders()
        for folder in self.layout.scratch_folders:
            logger.debug(f"Emptying {folder}")
            try:
                empty_directory(folder)
            except FilesystemError as e:
                raise WorkspaceError(f"Cannot empty {folder}: {e}") from e

    def copy_template(self) -> None:
        """Copy the e2e test sources into the run folder."""
        logger.info(
            f"Copying {self.layout.template_dir} -> {self.layout.run_folder}"
        )
        try:
            recursive_copy(self.layout.template_dir, self.layout.run_folder)
        except FilesystemError as e:
            raise WorkspaceError(f"Cannot copy test template: {e}") from e

    def resolve_packages(self) -> List[Path]:
        return resolve_packed_packages(
            self.layout.common_package_dir, self.layout.web_package_dir
        )

    def prepare(self) -> List[Path]:
        """
        Clean the workspace, copy the template and resolve packages to install.

        Returns:
            Install target list
        """
        self.clean()
        self.copy_template()
        return self.resolve_packages()


def prepare_wasm_path_override_files(layout: WorkspaceLayout) -> List[Path]:
    """
    Prepare .wasm files for path override testing.

    Copies the installed ort-wasm.wasm twice into test-wasm-path-override/,
    once under its own name and once as renamed.wasm.

    Returns:
        Paths of the copied files

    Raises:
        WorkspaceError: If the installed package has no ort-wasm.wasm
    """
    folder = layout.wasm_path_override_folder
    source = layout.installed_web_package / "dist" / WASM_BINARY_NAME

    empty_directory(folder)
    try:
        return [copy_file(source, folder / name) for name in WASM_OVERRIDE_FILENAMES]
    except FilesystemError as e:
        raise WorkspaceError(f"Cannot prepare wasm path override files: {e}") from e

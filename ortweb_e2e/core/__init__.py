"""
Core functionality for ortweb-e2e.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    E2EError,
    ConfigurationError,
    ArtifactResolutionError,
    PackageNotFoundError,
    MultiplePackagesFoundError,
    WorkspaceError,
    WorkspaceLockedError,
    StepFailedError,
)

from .filesystem import (
    FilesystemError,
    empty_directory,
    recursive_copy,
    copy_file,
    safe_rmtree,
)

from .locking import (
    get_lock_path,
    workspace_lock,
)

__all__ = [
    # Exceptions
    "E2EError",
    "ConfigurationError",
    "ArtifactResolutionError",
    "PackageNotFoundError",
    "MultiplePackagesFoundError",
    "WorkspaceError",
    "WorkspaceLockedError",
    "StepFailedError",
    "FilesystemError",
    # Filesystem
    "empty_directory",
    "recursive_copy",
    "copy_file",
    "safe_rmtree",
    # Locking
    "get_lock_path",
    "workspace_lock",
]

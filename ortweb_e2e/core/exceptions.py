"""
Centralized exception hierarchy for ortweb-e2e.

Configuration errors are raised before any shell command runs. Step failures
carry the exit code of the command that failed so the top level can exit
with the same code.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class E2EError(Exception):
    """Base exception for all ortweb-e2e errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(E2EError):
    """Invalid configuration or workspace inputs."""

    pass


class ArtifactResolutionError(ConfigurationError):
    """Base exception for packed artifact lookup errors."""

    pass


class PackageNotFoundError(ArtifactResolutionError):
    """Raised when a required packed package cannot be found."""

    def __init__(self, package_name: str, search_dir=None):
        self.package_name = package_name
        self.search_dir = search_dir
        msg = f"cannot find exactly single package for {package_name}."
        if search_dir is not None:
            msg += f" (searched {search_dir})"
        super().__init__(msg)


class MultiplePackagesFoundError(ArtifactResolutionError):
    """Raised when a package pattern matches more than one archive."""

    def __init__(self, package_name: str, candidates=None):
        self.package_name = package_name
        self.candidates = list(candidates or [])
        super().__init__(f"multiple packages found for {package_name}.")


# ============================================================================
# Workspace Exceptions
# ============================================================================


class WorkspaceError(E2EError):
    """Base exception for build workspace errors."""

    pass


class WorkspaceLockedError(WorkspaceError):
    """Raised when another runner owns the build workspace."""

    pass


# ============================================================================
# Step Exceptions
# ============================================================================


class StepFailedError(E2EError):
    """Raised when a shell step exits with a non-zero code."""

    def __init__(self, command: str, returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command exited with code {returncode}: {command}")

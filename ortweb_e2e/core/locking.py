"""
Exclusive ownership of the e2e build workspace.

The run folder, npm cache and browser user-data folders are emptied and
rewritten by a single runner for its whole lifetime. A second runner pointed
at the same workspace would delete files out from under the first one, so the
runner holds a file lock for as long as it owns the workspace.

The lock file lives next to the run folder (``<run_folder>.lock``) rather than
inside it, because the run folder itself is emptied on startup.

Usage:
    from ortweb_e2e.core.locking import workspace_lock

    with workspace_lock(layout.run_folder):
        # prepare workspace and run the tests
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

from ortweb_e2e.core.exceptions import WorkspaceLockedError

logger = logging.getLogger(__name__)


def get_lock_path(run_folder: Union[str, Path]) -> Path:
    """
    Get the lock file path guarding a run folder.

    Example:
        >>> get_lock_path(Path('/ort/build/js/e2e'))
        PosixPath('/ort/build/js/e2e.lock')
    """
    run_folder = Path(run_folder)
    return run_folder.with_name(run_folder.name + ".lock")


@contextmanager
def workspace_lock(run_folder: Union[str, Path], timeout: float = 0):
    """
    Acquire the workspace lock for a run folder.

    Args:
        run_folder: Build root owned by this runner
        timeout: Maximum wait time in seconds (0 fails immediately)

    Yields:
        Path to the lock file

    Raises:
        WorkspaceLockedError: If the lock can't be acquired within timeout
    """
    lock_path = get_lock_path(run_folder)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        lock.acquire()
    except LockTimeout as e:
        logger.error(f"Could not acquire workspace lock: {lock_path}")
        raise WorkspaceLockedError(
            f"Workspace {run_folder} is in use by another e2e run "
            f"(lock not acquired after {timeout}s: {lock_path})"
        ) from e

    logger.debug(f"Acquired workspace lock: {lock_path}")
    try:
        yield lock_path
    finally:
        lock.release()
        logger.debug(f"Released workspace lock: {lock_path}")


__all__ = ["get_lock_path", "workspace_lock"]

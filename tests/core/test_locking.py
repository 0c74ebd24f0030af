"""
Unit tests for the workspace lock.
"""

import pytest
from unittest.mock import patch

from filelock import Timeout as LockTimeout

from ortweb_e2e.core.exceptions import WorkspaceLockedError
from ortweb_e2e.core.filesystem import empty_directory
from ortweb_e2e.core.locking import get_lock_path, workspace_lock


class TestWorkspaceLock:
    """Tests for workspace_lock."""

    def test_lock_path_is_sibling_of_run_folder(self, tmp_path):
        run_folder = tmp_path / "build" / "js" / "e2e"

        assert get_lock_path(run_folder) == tmp_path / "build" / "js" / "e2e.lock"

    def test_acquire_and_release(self, tmp_path):
        """Test acquiring and releasing the lock twice in a row."""
        run_folder = tmp_path / "e2e"

        with workspace_lock(run_folder) as lock_path:
            assert lock_path == get_lock_path(run_folder)
            assert lock_path.parent.is_dir()

        with workspace_lock(run_folder):
            pass

    def test_emptying_run_folder_keeps_lock(self, tmp_path):
        """Test that the run folder can be emptied while the lock is held."""
        run_folder = tmp_path / "e2e"
        (run_folder / "stale").mkdir(parents=True)

        with workspace_lock(run_folder) as lock_path:
            empty_directory(run_folder)
            assert lock_path.exists()

    def test_timeout_raises_workspace_locked(self, tmp_path):
        """Test that a held lock surfaces as WorkspaceLockedError."""
        with patch(
            "ortweb_e2e.core.locking.FileLock.acquire",
            side_effect=LockTimeout(str(tmp_path / "e2e.lock")),
        ):
            with pytest.raises(WorkspaceLockedError, match="in use by another e2e run"):
                with workspace_lock(tmp_path / "e2e"):
                    pytest.fail("body must not run without the lock")

    def test_lock_released_on_exception(self, tmp_path):
        """Test that an error inside the block releases the lock."""
        run_folder = tmp_path / "e2e"

        with pytest.raises(RuntimeError):
            with workspace_lock(run_folder):
                raise RuntimeError("boom")

        with workspace_lock(run_folder):
            pass

"""
File system utilities for ortweb-e2e.

This module provides the small set of directory operations the e2e workspace
needs:
- Emptying directories (create if absent, clear contents if present)
- Recursive tree copy
- Directory tree deletion
- Single-file copy with parent creation

All functions accept either strings or Path objects.
"""

import os
import shutil
from pathlib import Path
from typing import Union

IS_WINDOWS = os.name == "nt"


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check if path is under parent directory."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Safe File Operations
# ============================================================================


def _handle_remove_readonly(func, path, exc_info):
    """Error handler for Windows read-only files."""
    if not os.access(path, os.W_OK):
        os.chmod(path, 0o777)
        func(path)
    else:
        raise


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, clearing read-only bits on Windows.

    Args:
        path: Directory to remove

    Raises:
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path).resolve()

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:
            shutil.rmtree(path, onerror=_handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}")


def empty_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists and is empty.

    Creates the directory (and parents) if absent. If it already exists, every
    entry inside it is removed while the directory itself is kept.

    Args:
        path: Directory path

    Returns:
        Resolved directory path

    Raises:
        FilesystemError: If path exists but is not a directory, or an entry
            cannot be removed

    Example:
        >>> empty_directory('/tmp/build/e2e')
        PosixPath('/tmp/build/e2e')
    """
    path = Path(path)

    if path.exists() and not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    path.mkdir(parents=True, exist_ok=True)

    for entry in path.iterdir():
        try:
            if entry.is_dir() and not entry.is_symlink():
                safe_rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            raise FilesystemError(f"Failed to remove '{entry}': {e}")

    return path.resolve()


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy the contents of a directory tree into destination.

    Existing files in destination are overwritten.

    Args:
        source: Source directory
        destination: Destination directory

    Example:
        >>> recursive_copy('/source', '/dest')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    destination.mkdir(parents=True, exist_ok=True)

    for item in sorted(source.rglob("*")):
        dest_item = destination / item.relative_to(source)

        if item.is_dir():
            dest_item.mkdir(parents=True, exist_ok=True)
        else:
            dest_item.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest_item)


def copy_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy a single file, creating the destination's parent directory.

    Args:
        source: File to copy
        destination: Target file path

    Returns:
        Destination path

    Raises:
        FilesystemError: If source is not an existing file
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise FilesystemError(f"Source file not found: {source}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    return destination


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "safe_rmtree",
    "empty_directory",
    "recursive_copy",
    "copy_file",
    "IS_WINDOWS",
]

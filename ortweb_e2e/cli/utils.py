"""
Shared utilities for CLI commands.

Provides the configuration and layout loading every command starts with.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from ortweb_e2e.config.parser import E2EConfig, load_config
from ortweb_e2e.workspace import WorkspaceLayout

logger = logging.getLogger(__name__)


def resolve_js_root(path: Optional[Path] = None) -> Path:
    """
    Resolve the JS root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def load_layout(args) -> Tuple[WorkspaceLayout, E2EConfig]:
    """
    Load configuration and build the workspace layout from parsed arguments.

    Args:
        args: Parsed arguments with js_root and config

    Returns:
        (layout, config)
    """
    js_root = resolve_js_root(getattr(args, "js_root", None))
    config = load_config(js_root, getattr(args, "config", None))
    layout = WorkspaceLayout.from_js_root(js_root, config)
    logger.debug(f"Workspace layout: {layout}")
    return layout, config


def print_box(text: str, width: int = 63, char: str = "="):
    """Print text in a box for emphasis."""
    print(char * width)
    print(text)
    print(char * width)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)

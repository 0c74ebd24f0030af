"""
Prepare command implementation.

Stages the e2e workspace without running any command.
"""

import logging

from ortweb_e2e.cli.utils import load_layout, print_box
from ortweb_e2e.core.locking import workspace_lock
from ortweb_e2e.workspace import WorkspacePreparer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the prepare command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    layout, config = load_layout(args)

    with workspace_lock(layout.run_folder, timeout=config.lock_timeout):
        packages = WorkspacePreparer(layout).prepare()

    print_box(f" Workspace prepared: {layout.run_folder}")
    print("Packages to install:")
    for package in packages:
        print(f"  {package}")

    return 0

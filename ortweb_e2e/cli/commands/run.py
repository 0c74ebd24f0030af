"""
Run command implementation.

Stages the workspace and runs the full e2e pipeline.
"""

import logging

from ortweb_e2e.cli.utils import load_layout
from ortweb_e2e.driver import run_e2e

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        StepFailedError: When a pipeline step fails (mapped to its exit code by the CLI)
    """
    layout, config = load_layout(args)
    logger.info(f"Running e2e tests in {layout.run_folder}")
    return run_e2e(layout, config)

"""
Serve command implementation.

Runs the static file server in the foreground until interrupted.
"""

import logging

from ortweb_e2e.cli.utils import load_layout, print_error
from ortweb_e2e.server import StaticFileServer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the serve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    layout, config = load_layout(args)

    directory = args.directory or layout.installed_web_package
    if not directory.is_dir():
        print_error(f"Directory not found: {directory}")
        return 1

    port = args.port if args.port is not None else config.server.port
    server = StaticFileServer(directory, port=port)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server stopped")

    return 0

"""
ortweb-e2e CLI argument parser.

This module implements the command-line interface for ortweb-e2e using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ortweb_e2e.core.exceptions import E2EError, StepFailedError

try:
    from importlib.metadata import version

    __version__ = version("ortweb-e2e")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """ortweb-e2e command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="ortweb-e2e",
            description="End-to-end tests for the packed onnxruntime-web package",
            epilog='Use "ortweb-e2e COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"ortweb-e2e {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: <js-root>/ortweb-e2e.yaml)",
        )
        parser.add_argument(
            "--js-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="ONNX Runtime js/ directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_run_command(subparsers)
        self._add_prepare_command(subparsers)
        self._add_serve_command(subparsers)

        return parser

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        subparsers.add_parser(
            "run",
            help="Run the full e2e pipeline",
            description=(
                "Stage the workspace, install the packed packages and run all "
                "Node.js and browser test cases, stopping at the first failure"
            ),
        )

    def _add_prepare_command(self, subparsers):
        """Add 'prepare' subcommand."""
        subparsers.add_parser(
            "prepare",
            help="Stage the workspace only",
            description=(
                "Empty the run, npm cache and user-data folders, copy the test "
                "template and list the packed packages that would be installed"
            ),
        )

    def _add_serve_command(self, subparsers):
        """Add 'serve' subcommand."""
        parser = subparsers.add_parser(
            "serve",
            help="Run the static file server in the foreground",
            description="Serve .js and .wasm files of a directory over HTTP",
        )
        parser.add_argument(
            "directory",
            nargs="?",
            type=Path,
            help="Directory to serve (default: installed onnxruntime-web in the run folder)",
        )
        parser.add_argument(
            "--port",
            type=int,
            metavar="N",
            help="Port to listen on (default: from config, 8081)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, the failing step's code, 1 for errors)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except StepFailedError as e:
            logger.error(str(e))
            return e.returncode
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except E2EError as e:
            logger.error(f"Error: {e}")
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "ortweb_e2e.cli.commands.run",
            "prepare": "ortweb_e2e.cli.commands.prepare",
            "serve": "ortweb_e2e.cli.commands.serve",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

"""
Fail-fast shell command runner.

Every step of the e2e pipeline is a command string run through the system
shell in the build root, with stdin/stdout/stderr inherited from this process.
Only one child process runs at a time: run() returns after the child exits.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import List

from ortweb_e2e.core.exceptions import StepFailedError

logger = logging.getLogger(__name__)

BANNER_WIDTH = 63


def print_banner(command: str, width: int = BANNER_WIDTH, file=None) -> None:
    """Print the banner shown before each shell step."""
    file = file or sys.stdout
    print("=" * width, file=file)
    print(" Running command in shell:", file=file)
    print(f" > {command}", file=file)
    print("=" * width, file=file)
    file.flush()


class ShellRunner:
    """
    Runs shell commands one at a time in a fixed working directory.

    Attributes:
        cwd: Working directory of every command
        history: Commands started so far, in order
    """

    def __init__(self, cwd: Path):
        self.cwd = Path(cwd)
        self.history: List[str] = []

    def run(self, command: str) -> int:
        """
        Run a command in the shell and wait for it to exit.

        Args:
            command: Command line interpreted by the system shell

        Returns:
            0 (the command succeeded)

        Raises:
            StepFailedError: If the command exits with a non-zero code. A child
                killed by signal N reports 128 + N.
        """
        print_banner(command)
        self.history.append(command)
        logger.debug(f"Spawning in {self.cwd}: {command}")

        process = subprocess.Popen(command, shell=True, cwd=self.cwd)
        returncode = process.wait()
        if returncode < 0:
            # killed by a signal; report it the way a shell would
            returncode = 128 - returncode

        if returncode != 0:
            logger.error(f"Command failed with exit code {returncode}: {command}")
            raise StepFailedError(command, returncode)

        logger.debug(f"Command succeeded: {command}")
        return returncode

"""Local WP-CLI command execution."""

import logging
import shlex
import subprocess

from taskbridge.core.errors import AdapterError
from taskbridge.core.models import OperationResult

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run ``wp`` commands in a fixed working directory."""

    def __init__(self, working_dir: str, executable: str = "wp", timeout: int = 120) -> None:
        self.working_dir = working_dir
        self.executable = executable
        self.timeout = timeout

    def run(self, command: str) -> OperationResult:
        """Execute ``wp <command>`` and return its stdout.

        Args:
            command: Arguments passed to wp, as a single shell-quoted string

        Raises:
            AdapterError: If the command is malformed, cannot be started, times out
                or exits non-zero
        """
        try:
            args = shlex.split(command)
        except ValueError as e:
            raise AdapterError(f"WP-CLI Error: {e}") from e
        cmd = [self.executable, *args]
        logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), self.working_dir)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.working_dir,
            )
        except FileNotFoundError as e:
            raise AdapterError(f"WP-CLI Error: {self.executable} not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise AdapterError(f"WP-CLI Error: command timed out after {self.timeout} seconds") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise AdapterError(f"WP-CLI Error: {detail}")

        return OperationResult(
            text=f"WP-CLI Result:\n{result.stdout}",
            data={"stdout": result.stdout, "returncode": result.returncode},
        )

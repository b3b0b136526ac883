"""
Shell command runner: execute install steps through the host shell.

Each step runs as ``sh -c <line>`` on POSIX hosts and ``cmd /c <line>``
on Windows, blocking until the process exits.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from offsetup.adapters.base import SHELL_POSIX, SHELL_WINDOWS, CommandRunner
from offsetup.core.models.receipt import CommandReceipt

logger = logging.getLogger(__name__)

_SHELL_ARGS: dict[str, list[str]] = {
    SHELL_POSIX: ["sh", "-c"],
    SHELL_WINDOWS: ["cmd", "/c"],
}


class ShellCommandRunner(CommandRunner):
    """Run commands with ``subprocess`` and capture their output."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self, shell: str = SHELL_POSIX) -> bool:
        argv = _SHELL_ARGS.get(shell)
        return argv is not None and shutil.which(argv[0]) is not None

    def run(self, command: str, shell: str = SHELL_POSIX) -> CommandReceipt:
        argv = _SHELL_ARGS.get(shell)
        if argv is None:
            return CommandReceipt.failure(
                command, error=f"Unsupported shell: {shell}", shell=shell,
            )

        logger.debug("Executing via %s: %s", shell, command)
        start = time.monotonic()

        try:
            result = subprocess.run(
                [*argv, command],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            return CommandReceipt.failure(
                command, error=f"Command execution error: {e}", shell=shell,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return CommandReceipt.success(
                command,
                output=output,
                shell=shell,
                return_code=result.returncode,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr} if stderr else {},
            )
        return CommandReceipt.failure(
            command,
            error=stderr or f"Command exited with code {result.returncode}",
            shell=shell,
            output=output,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )

"""
Mock command runner: test double for the shell.

Records every command it is given and returns success, or a failure
for commands configured with ``set_failure``.
"""

from __future__ import annotations

from offsetup.adapters.base import SHELL_POSIX, CommandRunner
from offsetup.core.models.receipt import CommandReceipt


class MockCommandRunner(CommandRunner):
    """Universal mock runner for testing and dry runs."""

    def __init__(self, available: bool = True, default_output: str = "[mock] executed"):
        self._available = available
        self._default_output = default_output
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """``(command, shell)`` pairs in call order."""
        return self._call_log

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self, shell: str = SHELL_POSIX) -> bool:
        return self._available

    def set_failure(self, command: str, error: str = "Mock failure") -> None:
        """Configure a specific command to fail."""
        self._failures[command] = error

    def run(self, command: str, shell: str = SHELL_POSIX) -> CommandReceipt:
        self._call_log.append((command, shell))

        if command in self._failures:
            return CommandReceipt.failure(
                command, error=self._failures[command], shell=shell, return_code=1,
            )
        return CommandReceipt.success(
            command, output=self._default_output, shell=shell, return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()

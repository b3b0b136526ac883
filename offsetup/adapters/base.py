"""
Command runner base: the contract between the installer and the shell.

The installer never spawns processes itself; it hands each install
step to a ``CommandRunner`` and reads back a receipt.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod

from offsetup.core.models.receipt import CommandReceipt

SHELL_POSIX = "sh"
SHELL_WINDOWS = "cmd"


def host_shell(windows: bool | None = None) -> str:
    """Shell used for install steps on this host."""
    if windows is None:
        windows = sys.platform == "win32"
    return SHELL_WINDOWS if windows else SHELL_POSIX


class CommandRunner(ABC):
    """Runs one command line through a shell.

    Runners NEVER raise: a non-zero exit, a missing shell or an OS error
    comes back as a failed receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Runner identifier (e.g. 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, shell: str = SHELL_POSIX) -> bool:
        """Whether ``shell`` can be launched. Fast, never raises."""

    @abstractmethod
    def run(self, command: str, shell: str = SHELL_POSIX) -> CommandReceipt:
        """Run ``command`` to completion and return its receipt."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

"""Adapters: how install steps reach the host.

Public re-exports for convenient access.
"""

from offsetup.adapters.base import CommandRunner, host_shell
from offsetup.adapters.mock import MockCommandRunner
from offsetup.adapters.shell.command import ShellCommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "ShellCommandRunner",
    "host_shell",
]

"""
Tests for the command runners.
"""

import sys

import pytest

from offsetup.adapters.base import SHELL_POSIX, SHELL_WINDOWS, host_shell
from offsetup.adapters.mock import MockCommandRunner
from offsetup.adapters.shell.command import ShellCommandRunner
from offsetup.core.models.receipt import CommandReceipt

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs sh")


class TestHostShell:
    def test_explicit(self):
        assert host_shell(windows=True) == SHELL_WINDOWS
        assert host_shell(windows=False) == SHELL_POSIX

    def test_default_follows_host(self):
        expected = SHELL_WINDOWS if sys.platform == "win32" else SHELL_POSIX
        assert host_shell() == expected


class TestReceipt:
    def test_factories(self):
        assert CommandReceipt.success("true").ok
        assert CommandReceipt.failure("false", error="x").failed
        skipped = CommandReceipt.skip("ls", reason="dry")
        assert skipped.status == "skipped"
        assert skipped.output == "dry"


class TestMockCommandRunner:
    def test_default_success(self):
        mock = MockCommandRunner()
        receipt = mock.run("apt update")
        assert receipt.ok
        assert mock.call_count == 1
        assert mock.call_log == [("apt update", "sh")]

    def test_set_failure(self):
        mock = MockCommandRunner()
        mock.set_failure("apt update", error="no network")
        receipt = mock.run("apt update", shell="sh")
        assert receipt.failed
        assert receipt.error == "no network"

    def test_reset(self):
        mock = MockCommandRunner()
        mock.set_failure("x")
        mock.run("x")
        mock.reset()
        assert mock.call_count == 0
        assert mock.run("x").ok


class TestShellCommandRunner:
    @posix_only
    def test_success_captures_output(self):
        receipt = ShellCommandRunner().run("echo hello")
        assert receipt.ok
        assert receipt.output == "hello"
        assert receipt.return_code == 0

    @posix_only
    def test_shell_syntax(self):
        receipt = ShellCommandRunner().run("printf 'a b' | wc -w")
        assert receipt.ok
        assert receipt.output.strip() == "2"

    @posix_only
    def test_non_zero_exit(self):
        receipt = ShellCommandRunner().run("echo oops >&2; exit 3")
        assert receipt.failed
        assert receipt.return_code == 3
        assert receipt.error == "oops"

    @posix_only
    def test_non_zero_exit_without_stderr(self):
        receipt = ShellCommandRunner().run("exit 4")
        assert receipt.error == "Command exited with code 4"

    def test_unsupported_shell(self):
        receipt = ShellCommandRunner().run("echo hi", shell="fish")
        assert receipt.failed
        assert "Unsupported shell" in receipt.error

    @posix_only
    def test_is_available(self):
        runner = ShellCommandRunner()
        assert runner.is_available("sh")
        assert not runner.is_available("fish")

"""Tests for gitup.platform.process module."""

from __future__ import annotations

import sys

import pytest

from gitup.core.result import Err, Ok
from gitup.platform.process import ProcessError, SubprocessRunner, output_tail


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(("git", "config"), 1, "", "")
        assert str(error) == "git config failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(("sudo", "apt-get", "install", "-y", "git"), 100, "", "")
        assert str(error) == "sudo apt-get install ... failed (exit 100)"

    def test_str_not_found(self) -> None:
        error = ProcessError(("brew", "install", "git"), -1, "", "", kind="not_found")
        assert str(error) == "brew: command not found"

    def test_output_combines_streams(self) -> None:
        error = ProcessError(("x",), 1, "out\n", "err\n")
        assert error.output == "out\nerr"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestOutputTail:
    def test_keeps_last_lines(self) -> None:
        text = "\n".join(f"line {i}" for i in range(100))
        tail = output_tail(text, max_lines=3)
        assert tail == "line 97\nline 98\nline 99"

    def test_bounded_in_chars(self) -> None:
        tail = output_tail("x" * 5000, max_chars=100)
        assert len(tail) == 100

    def test_empty(self) -> None:
        assert output_tail("") == ""


class TestSubprocessRunner:
    def test_success_returns_stdout(self) -> None:
        result = SubprocessRunner().run([sys.executable, "-c", "print('hello')"])

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self) -> None:
        result = SubprocessRunner().run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(42)"]
        )

        assert isinstance(result, Err)
        assert result.error.kind == "exit"
        assert result.error.returncode == 42
        assert "boom" in result.error.stderr

    def test_command_not_found(self) -> None:
        result = SubprocessRunner().run(["nonexistent_command_12345"])

        assert isinstance(result, Err)
        assert result.error.kind == "not_found"
        assert result.error.returncode == -1

    def test_timeout(self) -> None:
        result = SubprocessRunner().run(
            [sys.executable, "-c", "import time; time.sleep(5)"],
            timeout=0.2,
        )

        assert isinstance(result, Err)
        assert result.error.kind == "timeout"

    def test_extra_env_is_merged(self) -> None:
        result = SubprocessRunner().run(
            [
                sys.executable,
                "-c",
                "import os; print(os.environ['GITUP_TEST_VAR'], 'PATH' in os.environ)",
            ],
            extra_env={"GITUP_TEST_VAR": "value"},
        )

        assert isinstance(result, Ok)
        assert result.value.split() == ["value", "True"]

    def test_which(self) -> None:
        assert SubprocessRunner().which("nonexistent_command_12345") is None

"""Subprocess execution with Result-based error handling.

All external processes (git, package managers) go through a ``CommandRunner``
so services can be tested with a mock runner that never spawns anything.

Usage:
    runner = SubprocessRunner()
    match runner.run(["git", "--version"], timeout=10):
        case Ok(stdout):
            print(stdout)
        case Err(error) if error.kind == "not_found":
            print("git is not installed")
        case Err(error):
            print(f"failed: {error}")
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, Protocol

from gitup.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "ProcessError",
    "ProcessErrorKind",
    "SubprocessRunner",
    "output_tail",
]

ProcessErrorKind = Literal["exit", "not_found", "spawn_failed", "timeout"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process (-1 if it never ran to completion).
        stdout: Standard output (may be empty).
        stderr: Standard error, or the OS error text if spawning failed.
        kind: Why it failed: non-zero exit, binary not found, other spawn
            failure, or timeout.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    kind: ProcessErrorKind = "exit"

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.kind == "not_found":
            return f"{self.command[0]}: command not found"
        if self.kind == "timeout":
            return f"{cmd_str} timed out"
        if self.kind == "spawn_failed":
            return f"{cmd_str} could not be started: {self.stderr}"
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        parts = [p for p in (self.stdout, self.stderr) if p]
        return "\n".join(p.rstrip("\n") for p in parts)


def output_tail(text: str, *, max_lines: int = 20, max_chars: int = 2000) -> str:
    """Return the last lines of ``text``, bounded in both lines and characters."""
    lines = text.rstrip().splitlines()[-max_lines:]
    tail = "\n".join(lines)
    if len(tail) > max_chars:
        tail = tail[-max_chars:]
    return tail


class CommandRunner(Protocol):
    """Protocol for running external commands.

    This abstraction allows mocking subprocess calls in tests.
    """

    def run(
        self,
        cmd: list[str],
        *,
        extra_env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        """Run ``cmd`` and return its stdout, or the failure."""
        ...

    def which(self, name: str) -> str | None:
        """Resolve an executable on PATH without running it."""
        ...


class SubprocessRunner:
    """Default runner using subprocess.run."""

    def run(
        self,
        cmd: list[str],
        *,
        extra_env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        env = {**os.environ, **extra_env} if extra_env else None
        try:
            proc = subprocess.run(
                cmd,
                env=env,
                capture_output=True,
                text=True,
                errors="replace",
                stdin=subprocess.DEVNULL,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            return Err(
                ProcessError(
                    command=tuple(cmd),
                    returncode=-1,
                    stdout=e.stdout if isinstance(e.stdout, str) else "",
                    stderr=f"Command timed out after {timeout}s",
                    kind="timeout",
                )
            )
        except FileNotFoundError as e:
            return Err(ProcessError(tuple(cmd), -1, "", str(e), kind="not_found"))
        except OSError as e:
            return Err(ProcessError(tuple(cmd), -1, "", str(e), kind="spawn_failed"))

        if proc.returncode != 0:
            return Err(
                ProcessError(
                    command=tuple(cmd),
                    returncode=proc.returncode,
                    stdout=proc.stdout,
                    stderr=proc.stderr,
                )
            )

        return Ok(proc.stdout)

    def which(self, name: str) -> str | None:
        return shutil.which(name)

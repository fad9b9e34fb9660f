# SPDX-License-Identifier: MIT
"""Detect whether Git is installed.

A missing binary, a binary that exits non-zero and a binary that hangs all
count as "not installed": each of them is fixed the same way, by installing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gitup.core.result import Err, Ok, Result
from gitup.core.settings import DEFAULT_GIT_TIMEOUT
from gitup.platform.process import CommandRunner

__all__ = [
    "DetectionError",
    "InstallStatus",
    "InstallationDetector",
    "Installed",
    "NotInstalled",
    "parse_git_version",
]

_GIT_VERSION_RE = re.compile(r"git version (\S+)")


@dataclass(frozen=True, slots=True)
class Installed:
    version: str


@dataclass(frozen=True, slots=True)
class NotInstalled:
    pass


InstallStatus = Installed | NotInstalled


@dataclass(frozen=True, slots=True)
class DetectionError:
    """Git could not be probed at all (e.g. permission denied on spawn)."""

    message: str


def parse_git_version(output: str) -> str:
    """Extract the version from ``git --version`` output.

    "git version 2.43.0" -> "2.43.0"; unrecognized output is returned as its
    first non-empty line.
    """
    match = _GIT_VERSION_RE.search(output)
    if match:
        return match.group(1)
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return ""


class InstallationDetector:
    def __init__(self, runner: CommandRunner, *, timeout: float = DEFAULT_GIT_TIMEOUT) -> None:
        self._runner = runner
        self._timeout = timeout

    def detect(self) -> Result[InstallStatus, DetectionError]:
        """Run ``git --version`` once and classify the outcome."""
        result = self._runner.run(["git", "--version"], timeout=self._timeout)
        if isinstance(result, Ok):
            return Ok(Installed(version=parse_git_version(result.value)))

        error = result.error
        if error.kind == "spawn_failed":
            return Err(DetectionError(f"could not run git: {error.stderr}"))
        return Ok(NotInstalled())

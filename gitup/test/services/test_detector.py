from __future__ import annotations

import pytest

from gitup.core.result import Err, Ok
from gitup.services.detector import (
    DetectionError,
    InstallationDetector,
    Installed,
    NotInstalled,
    parse_git_version,
)
from gitup.test.fakes import FakeRunner


@pytest.mark.parametrize(
    ("output", "expected"),
    [
        ("git version 2.43.0\n", "2.43.0"),
        ("git version 2.39.3 (Apple Git-146)\n", "2.39.3"),
        ("git version 2.44.0.windows.1\n", "2.44.0.windows.1"),
        ("\nsomething else\n", "something else"),
        ("", ""),
    ],
)
def test_parse_git_version(output: str, expected: str) -> None:
    assert parse_git_version(output) == expected


def test_detect_installed(runner: FakeRunner) -> None:
    result = InstallationDetector(runner).detect()

    assert result == Ok(Installed(version="2.43.0"))
    assert runner.calls == [["git", "--version"]]


def test_detect_missing_binary(runner: FakeRunner) -> None:
    runner.installed = False

    assert InstallationDetector(runner).detect() == Ok(NotInstalled())


def test_detect_spawn_failure_is_error(runner: FakeRunner) -> None:
    runner.spawn_error = "Permission denied"

    result = InstallationDetector(runner).detect()

    assert isinstance(result, Err)
    assert result.error == DetectionError("could not run git: Permission denied")

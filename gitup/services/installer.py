# SPDX-License-Identifier: MIT
"""Install Git with the host's native package manager.

Each platform family maps to a fixed, ordered list of install candidates.
The first candidate whose package manager is on PATH is run once; there is no
retry and no fallback to another candidate after a run has failed. A
reported success is only trusted once ``git --version`` works afterwards.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Callable
from dataclasses import dataclass, field

from gitup.core.result import Err, Ok, Result
from gitup.core.settings import DEFAULT_INSTALL_TIMEOUT
from gitup.output.console import ConsoleProtocol, Style
from gitup.platform.detection import PlatformIdentity
from gitup.platform.process import CommandRunner, output_tail

from .detector import DetectionError, InstallationDetector, NotInstalled

__all__ = [
    "InstallCandidate",
    "InstallError",
    "InstallFailed",
    "InstallStep",
    "InstallUnverified",
    "InstallerDispatcher",
    "PackageManagerMissing",
    "UnsupportedPlatform",
    "recipe_for",
]


def _empty_env() -> dict[str, str]:
    """Factory for an empty env mapping (helps type inference)."""
    return {}


@dataclass(frozen=True, slots=True)
class InstallCandidate:
    """One way of installing git on a platform family.

    Attributes:
        manager: Executable that must be on PATH for this candidate to apply.
        argv: Install command, without privilege elevation.
        elevate: Prefix with sudo unless already running as root.
        env: Extra environment for the install process.
    """

    manager: str
    argv: tuple[str, ...]
    elevate: bool = False
    env: dict[str, str] = field(default_factory=_empty_env)


@dataclass(frozen=True, slots=True)
class InstallStep:
    """A resolved command, ready to run."""

    manager: str
    argv: list[str]
    env: dict[str, str]

    @property
    def display(self) -> str:
        return shlex.join(self.argv)


_RECIPES: dict[PlatformIdentity, tuple[InstallCandidate, ...]] = {
    PlatformIdentity.DEBIAN: (
        InstallCandidate(
            manager="apt-get",
            argv=("apt-get", "install", "-y", "git"),
            elevate=True,
            env={"DEBIAN_FRONTEND": "noninteractive"},
        ),
    ),
    PlatformIdentity.ARCH: (
        InstallCandidate(
            manager="pacman",
            argv=("pacman", "-S", "--noconfirm", "--needed", "git"),
            elevate=True,
        ),
    ),
    PlatformIdentity.RHEL: (
        InstallCandidate(manager="dnf", argv=("dnf", "install", "-y", "git"), elevate=True),
        InstallCandidate(manager="yum", argv=("yum", "install", "-y", "git"), elevate=True),
    ),
    PlatformIdentity.MACOS: (InstallCandidate(manager="brew", argv=("brew", "install", "git")),),
    PlatformIdentity.WINDOWS: (
        InstallCandidate(
            manager="winget",
            argv=(
                "winget",
                "install",
                "--id",
                "Git.Git",
                "-e",
                "--silent",
                "--accept-package-agreements",
                "--accept-source-agreements",
            ),
        ),
        InstallCandidate(manager="choco", argv=("choco", "install", "git", "-y")),
    ),
    PlatformIdentity.UNKNOWN: (),
}


def recipe_for(platform: PlatformIdentity) -> tuple[InstallCandidate, ...]:
    """Install candidates for ``platform``, in preference order."""
    return _RECIPES[platform]


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    platform: PlatformIdentity


@dataclass(frozen=True, slots=True)
class PackageManagerMissing:
    platform: PlatformIdentity
    tried: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class InstallFailed:
    """The package manager ran and failed.

    Attributes:
        command: The command line that was run.
        exit_code: Its exit code (-1 if it timed out or could not start).
        output: Tail of its combined output.
    """

    command: str
    exit_code: int
    output: str


@dataclass(frozen=True, slots=True)
class InstallUnverified:
    """The package manager reported success but git is still not runnable."""

    command: str
    reason: str


InstallError = UnsupportedPlatform | PackageManagerMissing | InstallFailed | InstallUnverified


def _running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class InstallerDispatcher:
    def __init__(
        self,
        *,
        runner: CommandRunner,
        detector: InstallationDetector,
        console: ConsoleProtocol,
        timeout: float = DEFAULT_INSTALL_TIMEOUT,
        is_root: Callable[[], bool] = _running_as_root,
    ) -> None:
        self._runner = runner
        self._detector = detector
        self._console = console
        self._timeout = timeout
        self._is_root = is_root

    def plan(self, platform: PlatformIdentity) -> Result[InstallStep, InstallError]:
        """Pick the install command for ``platform`` without running anything."""
        candidates = recipe_for(platform)
        if not candidates:
            return Err(UnsupportedPlatform(platform))

        for candidate in candidates:
            if self._runner.which(candidate.manager) is None:
                continue
            argv = list(candidate.argv)
            if candidate.elevate and not self._is_root():
                argv = ["sudo", *argv]
            return Ok(InstallStep(manager=candidate.manager, argv=argv, env=dict(candidate.env)))

        return Err(
            PackageManagerMissing(
                platform=platform,
                tried=tuple(c.manager for c in candidates),
            )
        )

    def install(self, platform: PlatformIdentity) -> Result[str, InstallError]:
        """Install git and return the version that is now on PATH."""
        planned = self.plan(platform)
        if isinstance(planned, Err):
            return planned

        step = planned.value
        self._console.print(f"Running: {step.display}", Style.DIM)
        result = self._runner.run(step.argv, extra_env=step.env, timeout=self._timeout)
        if isinstance(result, Err):
            error = result.error
            return Err(
                InstallFailed(
                    command=step.display,
                    exit_code=error.returncode,
                    output=output_tail(error.output),
                )
            )

        return self._verify(step)

    def _verify(self, step: InstallStep) -> Result[str, InstallError]:
        detected = self._detector.detect()
        match detected:
            case Err(DetectionError(message=message)):
                return Err(InstallUnverified(command=step.display, reason=message))
            case Ok(NotInstalled()):
                return Err(
                    InstallUnverified(
                        command=step.display,
                        reason="git is still not found on PATH",
                    )
                )
            case Ok(status):
                return Ok(status.version)

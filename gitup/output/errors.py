"""Error presentation utilities.

Centralized one-line messages and exit code mapping for every error the
services can return.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gitup.core.errors import ErrorCode
from gitup.core.identity import InvalidIdentity
from gitup.git.config import ConfigError
from gitup.git.identity import MissingField
from gitup.services.backup import BackupIOError, MalformedBackup
from gitup.services.detector import DetectionError
from gitup.services.installer import (
    InstallFailed,
    InstallUnverified,
    PackageManagerMissing,
    UnsupportedPlatform,
)
from gitup.services.profiles import DuplicateProfile, StoreError, UnknownProfile

if TYPE_CHECKING:
    from gitup.output.console import ConsoleProtocol

__all__ = ["GitMissing", "UsageError", "AppError", "error_exit_code", "print_error"]


@dataclass(frozen=True, slots=True)
class GitMissing:
    """An operation needs git but it is not installed."""


@dataclass(frozen=True, slots=True)
class UsageError:
    """Flags that cannot be combined or are incomplete."""

    message: str


AppError = (
    GitMissing
    | UsageError
    | DetectionError
    | UnsupportedPlatform
    | PackageManagerMissing
    | InstallFailed
    | InstallUnverified
    | ConfigError
    | InvalidIdentity
    | MissingField
    | DuplicateProfile
    | UnknownProfile
    | StoreError
    | MalformedBackup
    | BackupIOError
)


def print_error(error: AppError, console: ConsoleProtocol, *, operation: str) -> None:
    """Print a one-line diagnostic naming ``operation``, plus any detail lines."""
    match error:
        case GitMissing():
            console.error(f"{operation}: git is not installed")
            console.hint("hint: run `gitup --install`")
        case UsageError(message=message):
            console.error(f"{operation}: {message}")
        case DetectionError(message=message):
            console.error(f"{operation}: {message}")
        case UnsupportedPlatform(platform=platform):
            console.error(f"{operation}: no installer known for platform '{platform}'")
            console.hint("hint: install git manually from https://git-scm.com/")
        case PackageManagerMissing(platform=platform, tried=tried):
            console.error(f"{operation}: no package manager found for {platform}")
            console.hint(f"tried: {', '.join(tried)}")
        case InstallFailed(command=command, exit_code=code, output=output):
            console.error(f"{operation}: `{command}` failed (exit {code})")
            if output:
                console.hint(output)
        case InstallUnverified(command=command, reason=reason):
            console.error(f"{operation}: `{command}` succeeded but {reason}")
            console.hint("hint: open a new shell so PATH is refreshed")
        case ConfigError(key=key, message=message):
            console.error(f"{operation}: git config {key}: {message}")
        case InvalidIdentity():
            console.error(f"{operation}: {error.message}")
        case MissingField(missing=missing):
            console.error(f"{operation}: not set in global git config: {', '.join(missing)}")
        case DuplicateProfile(name=name):
            console.error(f"{operation}: profile '{name}' already exists")
        case UnknownProfile(name=name, available=available):
            console.error(f"{operation}: unknown profile '{name}'")
            if available:
                console.hint(f"available: {', '.join(available)}")
        case StoreError(message=message):
            console.error(f"{operation}: profile store: {message}")
        case MalformedBackup():
            console.error(f"{operation}: malformed backup: {error.message}")
        case BackupIOError(message=message):
            console.error(f"{operation}: {message}")


def error_exit_code(error: AppError) -> int:
    """Get the process exit code for an error."""
    match error:
        case UsageError():
            return int(ErrorCode.USER_ERROR)
        case InvalidIdentity(field="profile"):
            return int(ErrorCode.USER_ERROR)
        case GitMissing() | DetectionError() | ConfigError():
            return int(ErrorCode.ENV_ERROR)
        case UnsupportedPlatform():
            return int(ErrorCode.UNSUPPORTED_PLATFORM)
        case PackageManagerMissing() | InstallFailed() | InstallUnverified():
            return int(ErrorCode.INSTALL_ERROR)
        case InvalidIdentity():
            return int(ErrorCode.INVALID_IDENTITY)
        case MissingField():
            return int(ErrorCode.MISSING_FIELD)
        case DuplicateProfile():
            return int(ErrorCode.DUPLICATE_PROFILE)
        case UnknownProfile():
            return int(ErrorCode.UNKNOWN_PROFILE)
        case MalformedBackup():
            return int(ErrorCode.MALFORMED_BACKUP)
        case StoreError() | BackupIOError():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.USER_ERROR)

"""Narrow client for Git's global configuration store.

Git's global config is external shared state: every read and write goes
through ``git config --global`` and nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from gitup.core.result import Err, Ok, Result
from gitup.core.settings import DEFAULT_GIT_TIMEOUT
from gitup.platform.process import CommandRunner

__all__ = ["ConfigError", "GitConfigClient"]

# `git config --get` exits 1 when the key is not set.
_EXIT_KEY_UNSET = 1


@dataclass(frozen=True, slots=True)
class ConfigError:
    """A git config invocation failed.

    Attributes:
        key: Config key being read or written.
        message: Error message (stderr or OS error).
        returncode: Process return code (-1 if git could not be run).
    """

    key: str
    message: str
    returncode: int = 1


class GitConfigClient:
    """Read and write single keys in the global git config."""

    def __init__(self, runner: CommandRunner, *, timeout: float = DEFAULT_GIT_TIMEOUT) -> None:
        self._runner = runner
        self._timeout = timeout

    def get(self, key: str) -> Result[str | None, ConfigError]:
        """Return the value of ``key``, or None if it is not set."""
        result = self._runner.run(
            ["git", "config", "--global", "--get", key],
            timeout=self._timeout,
        )
        if isinstance(result, Err):
            error = result.error
            if error.kind == "exit" and error.returncode == _EXIT_KEY_UNSET:
                return Ok(None)
            message = error.stderr.strip() or str(error)
            return Err(ConfigError(key=key, message=message, returncode=error.returncode))

        value = result.value.rstrip("\r\n")
        return Ok(value or None)

    def set(self, key: str, value: str) -> Result[None, ConfigError]:
        """Write ``key`` = ``value``, replacing any existing values."""
        result = self._runner.run(
            ["git", "config", "--global", "--replace-all", key, value],
            timeout=self._timeout,
        )
        if isinstance(result, Err):
            error = result.error
            message = error.stderr.strip() or str(error)
            return Err(ConfigError(key=key, message=message, returncode=error.returncode))
        return Ok(None)

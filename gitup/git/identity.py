"""Global Git identity access.

Usage:
    configurator = IdentityConfigurator(GitConfigClient(runner))

    match configurator.get():
        case Ok(identity):
            print(identity)
        case Err(MissingField(name=name, missing=missing)):
            print(f"name={name!r}, missing: {missing}")
        case Err(e):
            print(f"git config failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass

from gitup.core.identity import Identity, InvalidIdentity, validate_identity
from gitup.core.result import Err, Ok, Result

from .config import ConfigError, GitConfigClient

__all__ = [
    "EMAIL_KEY",
    "NAME_KEY",
    "IdentityConfigurator",
    "IdentityError",
    "MissingField",
]

NAME_KEY = "user.name"
EMAIL_KEY = "user.email"


@dataclass(frozen=True, slots=True)
class MissingField:
    """One or both identity keys are not set.

    Carries whatever was found so callers only have to ask for the rest.
    """

    name: str | None
    email: str | None

    @property
    def missing(self) -> tuple[str, ...]:
        out: list[str] = []
        if self.name is None:
            out.append(NAME_KEY)
        if self.email is None:
            out.append(EMAIL_KEY)
        return tuple(out)


IdentityError = ConfigError | InvalidIdentity | MissingField


class IdentityConfigurator:
    """Get and set the global user.name / user.email pair."""

    def __init__(self, client: GitConfigClient) -> None:
        self._client = client

    def get(self) -> Result[Identity, ConfigError | MissingField]:
        name_result = self._client.get(NAME_KEY)
        if isinstance(name_result, Err):
            return name_result
        email_result = self._client.get(EMAIL_KEY)
        if isinstance(email_result, Err):
            return email_result

        name, email = name_result.value, email_result.value
        if name is None or email is None:
            return Err(MissingField(name=name, email=email))
        return Ok(Identity(name=name, email=email))

    def set(self, identity: Identity) -> Result[None, ConfigError | InvalidIdentity]:
        """Validate ``identity`` and write it to the global config.

        An invalid identity is rejected before git is invoked.
        """
        validated = validate_identity(identity.name, identity.email)
        if isinstance(validated, Err):
            return validated

        clean = validated.value
        name_result = self._client.set(NAME_KEY, clean.name)
        if isinstance(name_result, Err):
            return name_result
        return self._client.set(EMAIL_KEY, clean.email)

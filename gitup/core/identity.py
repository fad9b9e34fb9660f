"""Identity value type and validation.

An identity is the ``user.name`` / ``user.email`` pair Git stamps on commits.
Validation is deliberately minimal: it rejects values Git would store but
that are clearly not an identity (empty, multi-line, no address shape).
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from .result import Err, Ok, Result

__all__ = [
    "Identity",
    "InvalidIdentity",
    "is_valid_email",
    "validate_identity",
    "validate_profile_name",
]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.][^@\s]*\.[^@\s.]+$")


@dataclass(frozen=True, slots=True)
class Identity:
    """Git user name and email."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True, slots=True)
class InvalidIdentity:
    """Identity (or profile name) rejected before anything was written.

    Attributes:
        field: Which value was rejected ("name", "email" or "profile").
        reason: Human-readable explanation.
    """

    field: str
    reason: str

    @property
    def message(self) -> str:
        return f"invalid {self.field}: {self.reason}"


# Control characters (NEL included) plus U+2028/U+2029: str.splitlines() breaks
# on all of them, so none may appear in a value written to a backup line.
_LINE_BREAKING_CATEGORIES = frozenset({"Cc", "Zl", "Zp"})


def _has_control_chars(value: str) -> bool:
    return any(unicodedata.category(ch) in _LINE_BREAKING_CATEGORIES for ch in value)


def is_valid_email(email: str) -> bool:
    """Return True if ``email`` has the minimal ``local@domain.tld`` shape."""
    return bool(_EMAIL_RE.match(email))


def validate_identity(name: str, email: str) -> Result[Identity, InvalidIdentity]:
    """Build an Identity from raw values, stripping surrounding whitespace."""
    name = name.strip()
    email = email.strip()

    if not name:
        return Err(InvalidIdentity("name", "must not be empty"))
    if _has_control_chars(name):
        return Err(InvalidIdentity("name", "must not contain control characters"))
    if not email:
        return Err(InvalidIdentity("email", "must not be empty"))
    if _has_control_chars(email) or not is_valid_email(email):
        return Err(InvalidIdentity("email", f"'{email}' is not a valid address"))

    return Ok(Identity(name=name, email=email))


def validate_profile_name(name: str) -> Result[str, InvalidIdentity]:
    """Check a profile name is usable as a store and backup key."""
    if not name or not name.strip():
        return Err(InvalidIdentity("profile", "name must not be empty"))
    if name != name.strip():
        return Err(InvalidIdentity("profile", "name must not start or end with whitespace"))
    if _has_control_chars(name):
        return Err(InvalidIdentity("profile", "name must not contain control characters"))
    if "=" in name:
        return Err(InvalidIdentity("profile", "name must not contain '='"))
    return Ok(name)

"""Git global config access."""

from .config import ConfigError, GitConfigClient
from .identity import EMAIL_KEY, NAME_KEY, IdentityConfigurator, IdentityError, MissingField

__all__ = [
    "EMAIL_KEY",
    "NAME_KEY",
    "ConfigError",
    "GitConfigClient",
    "IdentityConfigurator",
    "IdentityError",
    "MissingField",
]

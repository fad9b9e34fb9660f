"""Core domain types and logic."""

from .errors import ErrorCode
from .identity import Identity, InvalidIdentity, validate_identity, validate_profile_name
from .result import Err, Ok, Result, is_err, is_ok
from .settings import Settings, SettingsError, load_settings

__all__ = [
    # errors
    "ErrorCode",
    # identity
    "Identity",
    "InvalidIdentity",
    "validate_identity",
    "validate_profile_name",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # settings
    "Settings",
    "SettingsError",
    "load_settings",
]

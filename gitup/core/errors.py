"""Error codes for CLI exit status.

Each error family gets its own exit code so that scripts can branch on the
failure kind. The numeric values are part of the public interface and must
not be renumbered within a release line.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the gitup command.

    - 0: Success
    - 1: User error (bad flag combination, invalid profile name)
    - 2: Environment error (git missing, git config unusable)
    - 3: Installation failed
    - 4: No installer for this platform
    - 5: Identity rejected by validation
    - 6: Identity incomplete in the global config
    - 7: Profile already exists
    - 8: Profile does not exist
    - 9: Backup file could not be parsed
    - 10: I/O error (profile store or backup file)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    INSTALL_ERROR = 3
    UNSUPPORTED_PLATFORM = 4
    INVALID_IDENTITY = 5
    MISSING_FIELD = 6
    DUPLICATE_PROFILE = 7
    UNKNOWN_PROFILE = 8
    MALFORMED_BACKUP = 9
    IO_ERROR = 10

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

"""Platform abstraction layer."""

from .detection import (
    PlatformIdentity,
    resolve,
    resolve_from,
)
from .files import atomic_write_text
from .paths import (
    home,
    user_config_dir,
)
from .process import (
    CommandRunner,
    ProcessError,
    SubprocessRunner,
)

__all__ = [
    # detection
    "PlatformIdentity",
    "resolve",
    "resolve_from",
    # files
    "atomic_write_text",
    # paths
    "home",
    "user_config_dir",
    # process
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
]

"""Git installation, profile and backup services."""

from .backup import BackupService, MalformedBackup, RestoreSummary
from .detector import DetectionError, InstallationDetector, Installed, InstallStatus, NotInstalled
from .installer import InstallerDispatcher, InstallError, UnsupportedPlatform
from .profiles import DuplicateProfile, Profile, ProfileStore, StoreError, UnknownProfile

__all__ = [
    # backup
    "BackupService",
    "MalformedBackup",
    "RestoreSummary",
    # detector
    "DetectionError",
    "InstallStatus",
    "InstallationDetector",
    "Installed",
    "NotInstalled",
    # installer
    "InstallError",
    "InstallerDispatcher",
    "UnsupportedPlatform",
    # profiles
    "DuplicateProfile",
    "Profile",
    "ProfileStore",
    "StoreError",
    "UnknownProfile",
]

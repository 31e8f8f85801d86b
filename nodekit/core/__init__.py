"""
Core functionality for nodekit.

This package contains the foundational modules the installer depends on.
"""

from .platform import (
    OSFamily,
    Architecture,
    PlatformInfo,
    node_os_name,
    detect_platform,
    clear_platform_cache,
)

from .locking import (
    InstallLock,
    LockTimeout,
)

from .exceptions import (
    NodeKitError,
    ConfigurationError,
    InstallationError,
    ManifestReadError,
    VersionProbeError,
    DownloadError,
    MalformedURLError,
    ExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    BinaryNotFoundError,
    FilesystemError,
)

__all__ = [
    "OSFamily",
    "Architecture",
    "PlatformInfo",
    "node_os_name",
    "detect_platform",
    "clear_platform_cache",
    "InstallLock",
    "LockTimeout",
    "NodeKitError",
    "ConfigurationError",
    "InstallationError",
    "ManifestReadError",
    "VersionProbeError",
    "DownloadError",
    "MalformedURLError",
    "ExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "BinaryNotFoundError",
    "FilesystemError",
]

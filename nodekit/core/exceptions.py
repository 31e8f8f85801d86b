"""
Centralized exception hierarchy for nodekit.

Every error raised while installing Node.js and npm derives from
InstallationError so callers can surface a single failure type, while
still being able to tell a download failure from a broken archive.
"""

from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class NodeKitError(Exception):
    """Base exception for all nodekit errors."""

    pass


class ConfigurationError(NodeKitError):
    """Raised when installation settings are missing or invalid."""

    pass


class InstallationError(NodeKitError):
    """Base exception for failures while provisioning Node.js or npm."""

    pass


# ============================================================================
# Version Check Exceptions
# ============================================================================


class ManifestReadError(InstallationError):
    """Raised when npm's package.json exists but cannot be parsed."""

    def __init__(self, manifest_path: Union[str, Path], reason: str = ""):
        self.manifest_path = Path(manifest_path)
        msg = f"Could not read package.json at {self.manifest_path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class VersionProbeError(InstallationError):
    """Raised when an installed binary cannot report its version."""

    pass


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class DownloadError(InstallationError):
    """Raised when a download fails. Carries the attempted URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        msg = f"Could not download {url}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class MalformedURLError(DownloadError):
    """Raised when a computed download URL is not a valid URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        super().__init__(url, reason or "the download link was invalid")


class ExtractionError(InstallationError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class BinaryNotFoundError(InstallationError):
    """Raised when an extracted distribution lacks the expected binary."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Could not find the downloaded Node.js binary in {self.path}")


class FilesystemError(InstallationError):
    """Raised when moving or deleting installed files fails."""

    pass


__all__ = [
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

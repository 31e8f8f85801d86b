"""
Version introspection for installed Node.js and npm.

npm records its version in npm/package.json; Node.js only reports it when
executed. Both are exposed as narrow capabilities so the installer can be
tested without spawning processes.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from nodekit.core.exceptions import ManifestReadError, VersionProbeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NpmManifest:
    """The part of npm's package.json nodekit cares about."""

    version: Optional[str] = None


def read_npm_manifest(manifest_path: Path) -> Optional[NpmManifest]:
    """
    Read npm's package.json.

    Args:
        manifest_path: Path to npm/package.json

    Returns:
        NpmManifest, or None if the file does not exist

    Raises:
        ManifestReadError: If the file exists but is not a JSON object
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.is_file():
        return None

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ManifestReadError(manifest_path, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestReadError(manifest_path, "expected a JSON object")

    version = data.get("version")
    return NpmManifest(version=str(version) if version is not None else None)


class VersionProbe(ABC):
    """Capability for asking an installed binary for its version."""

    @abstractmethod
    def get_installed_version(self, binary_path: Path) -> str:
        """
        Return the version reported by the binary.

        Raises:
            VersionProbeError: If the version cannot be obtained
        """
        pass


class SubprocessVersionProbe(VersionProbe):
    """Runs `<binary> --version` and returns its trimmed stdout."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def get_installed_version(self, binary_path: Path) -> str:
        try:
            result = subprocess.run(
                [str(binary_path), "--version"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise VersionProbeError(f"Could not execute {binary_path}: {e}") from e

        if result.returncode != 0:
            raise VersionProbeError(
                f"{binary_path} --version exited with code {result.returncode}: "
                f"{result.stderr.strip()}"
            )

        version = result.stdout.strip()
        logger.debug(f"{binary_path} reports version {version}")
        return version


__all__ = [
    "NpmManifest",
    "read_npm_manifest",
    "VersionProbe",
    "SubprocessVersionProbe",
]

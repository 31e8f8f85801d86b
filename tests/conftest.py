"""
Pytest configuration and shared fixtures for nodekit tests.
"""

import io
import json
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from nodekit.core.platform import Architecture, OSFamily, PlatformInfo
from nodekit.core.exceptions import VersionProbeError
from nodekit.installer.config import InstallRequest
from nodekit.installer.version import VersionProbe

DOWNLOAD_ROOT = "https://dist.example.com/"
NODE_VERSION = "v0.10.26"
NPM_VERSION = "1.4.4"


# ============================================================================
# Archive Builders
# ============================================================================


def build_tar_gz(
    files: Dict[str, bytes], modes: Optional[Dict[str, int]] = None
) -> bytes:
    """
    Build an in-memory .tar.gz archive.

    Args:
        files: Mapping of member name to content
        modes: Optional mapping of member name to file mode (default 0o644)

    Returns:
        Archive bytes
    """
    modes = modes or {}
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = modes.get(name, 0o644)
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def build_npm_tarball(version: str = NPM_VERSION) -> bytes:
    """Build an npm distribution archive with npm/package.json."""
    manifest = json.dumps({"name": "npm", "version": version}).encode()
    return build_tar_gz(
        {
            "npm/package.json": manifest,
            "npm/bin/npm-cli.js": b"#!/usr/bin/env node\n",
        }
    )


def build_node_tarball(long_name: str, include_binary: bool = True) -> bytes:
    """Build a Node.js distribution archive laid out as <long_name>/bin/node."""
    files = {f"{long_name}/README.md": b"Node.js\n"}
    if include_binary:
        files[f"{long_name}/bin/node"] = b"\x7fELF fake node binary"
    return build_tar_gz(files)


def write_npm_manifest(install_dir: Path, content: str) -> Path:
    """Write node/npm/package.json under install_dir with raw content."""
    manifest = install_dir / "node" / "npm" / "package.json"
    manifest.parent.mkdir(parents=True, exist_ok=True)
    manifest.write_text(content)
    return manifest


# ============================================================================
# Fakes
# ============================================================================


class FakeVersionProbe(VersionProbe):
    """Version probe that returns a fixed answer and records calls."""

    def __init__(self, version: Optional[str] = None, error: Optional[str] = None):
        self.version = version
        self.error = error
        self.calls = []

    def get_installed_version(self, binary_path: Path) -> str:
        self.calls.append(Path(binary_path))
        if self.error:
            raise VersionProbeError(self.error)
        return self.version


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """Empty installation directory."""
    target = tmp_path / "target"
    target.mkdir()
    return target


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo(OSFamily.LINUX, Architecture.X64)


@pytest.fixture
def mac_x64() -> PlatformInfo:
    return PlatformInfo(OSFamily.MAC, Architecture.X64)


@pytest.fixture
def windows_x64() -> PlatformInfo:
    return PlatformInfo(OSFamily.WINDOWS, Architecture.X64)


@pytest.fixture
def windows_x86() -> PlatformInfo:
    return PlatformInfo(OSFamily.WINDOWS, Architecture.X86)


@pytest.fixture
def make_request(install_dir: Path, linux_x64: PlatformInfo):
    """Factory for InstallRequest with test defaults."""

    def _make(**overrides) -> InstallRequest:
        values = {
            "node_version": NODE_VERSION,
            "npm_version": NPM_VERSION,
            "install_directory": install_dir,
            "platform": linux_x64,
            "download_root": DOWNLOAD_ROOT,
        }
        values.update(overrides)
        return InstallRequest(**values)

    return _make


@pytest.fixture
def sample_config_yaml(tmp_path: Path, install_dir: Path) -> Path:
    """Create sample nodekit.yaml configuration."""
    config_content = f"""node_version: {NODE_VERSION}
npm_version: "{NPM_VERSION}"
install_directory: {install_dir.as_posix()}
download_root: {DOWNLOAD_ROOT}
"""
    config_file = tmp_path / "nodekit.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def tar_gz():
    """Factory for arbitrary .tar.gz archives."""
    return build_tar_gz


@pytest.fixture
def npm_tarball():
    """Factory for npm distribution archives."""
    return build_npm_tarball


@pytest.fixture
def node_tarball():
    """Factory for Node.js distribution archives."""
    return build_node_tarball


@pytest.fixture
def fake_probe():
    """Factory for FakeVersionProbe instances."""
    return FakeVersionProbe


@pytest.fixture
def npm_manifest_writer():
    """Write raw content to node/npm/package.json under a directory."""
    return write_npm_manifest

"""
Node.js and npm provisioning.

This package decides whether the requested versions are already installed
and downloads whatever is missing.
"""

from .config import (
    InstallRequest,
    load_install_config,
    DEFAULT_DOWNLOAD_ROOT,
    DEFAULT_CONFIG_FILE,
)
from .version import (
    NpmManifest,
    read_npm_manifest,
    VersionProbe,
    SubprocessVersionProbe,
)
from .node_installer import (
    NodeInstaller,
    InstallStatus,
    install_node_and_npm,
)

__all__ = [
    "InstallRequest",
    "load_install_config",
    "DEFAULT_DOWNLOAD_ROOT",
    "DEFAULT_CONFIG_FILE",
    "NpmManifest",
    "read_npm_manifest",
    "VersionProbe",
    "SubprocessVersionProbe",
    "NodeInstaller",
    "InstallStatus",
    "install_node_and_npm",
]

"""
Installation settings.

An InstallRequest is built once, from a YAML file and/or command-line
values, and never mutated afterwards.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from nodekit.core.exceptions import ConfigurationError
from nodekit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_ROOT = "http://nodejs.org/dist/"
DEFAULT_CONFIG_FILE = "nodekit.yaml"

REQUIRED_KEYS = ("node_version", "npm_version", "install_directory")

# Spellings accepted from build-tool style configuration
_KEY_ALIASES = {
    "nodeVersion": "node_version",
    "npmVersion": "npm_version",
    "installDirectory": "install_directory",
    "downloadRoot": "download_root",
}


@dataclass(frozen=True)
class InstallRequest:
    """
    What to install, and where.

    Attributes:
        node_version: Required Node.js version, compared verbatim
        npm_version: Required npm version, compared verbatim
        install_directory: Directory that receives the node/ tree
        platform: Target platform (detected if not given)
        download_root: Root URL of the distribution server
    """

    node_version: str
    npm_version: str
    install_directory: Path
    platform: PlatformInfo = field(default_factory=detect_platform)
    download_root: str = DEFAULT_DOWNLOAD_ROOT

    def __post_init__(self):
        object.__setattr__(self, "install_directory", Path(self.install_directory))

    @property
    def node_directory(self) -> Path:
        return self.install_directory / "node"

    @property
    def node_binary(self) -> Path:
        name = "node.exe" if self.platform.is_windows() else "node"
        return self.node_directory / name

    @property
    def npm_manifest(self) -> Path:
        return self.node_directory / "npm" / "package.json"

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        platform: Optional[PlatformInfo] = None,
    ) -> "InstallRequest":
        """
        Build a request from a configuration mapping.

        Args:
            mapping: Configuration values (snake_case or camelCase keys)
            platform: Target platform (detected if None)

        Raises:
            ConfigurationError: If a required value is missing
        """
        values = _normalize_config_keys(mapping)

        missing = [key for key in REQUIRED_KEYS if not values.get(key)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        for key in ("node_version", "npm_version"):
            if not isinstance(values[key], str):
                raise ConfigurationError(
                    f"{key} must be a string, got {values[key]!r}. "
                    "Quote the version in the configuration file, e.g. \"1.10\""
                )

        return cls(
            node_version=values["node_version"],
            npm_version=values["npm_version"],
            install_directory=Path(values["install_directory"]),
            platform=platform or detect_platform(),
            download_root=str(values.get("download_root") or DEFAULT_DOWNLOAD_ROOT),
        )


def _normalize_config_keys(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate camelCase aliases to snake_case keys."""
    normalized: Dict[str, Any] = {}
    for key, value in mapping.items():
        canonical = _KEY_ALIASES.get(key, key)
        if canonical != key:
            logger.debug(f"Using configuration key '{key}' as '{canonical}'")
        normalized.setdefault(canonical, value)
    return normalized


def load_install_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, or is not valid YAML

    Example:
        >>> config = load_install_config(Path("nodekit.yaml"))
        >>> config.get("node_version")
        'v0.10.26'
    """
    config_file = Path(config_file)
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {config_file}")

    return config


__all__ = [
    "InstallRequest",
    "load_install_config",
    "DEFAULT_DOWNLOAD_ROOT",
    "DEFAULT_CONFIG_FILE",
]

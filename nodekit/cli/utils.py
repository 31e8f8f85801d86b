"""
Shared utilities for CLI commands.

Provides common functionality used across CLI commands: resolving the
installation settings from the config file and command-line overrides.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from nodekit.installer.config import (
    DEFAULT_CONFIG_FILE,
    InstallRequest,
    load_install_config,
)

logger = logging.getLogger(__name__)

# argparse destinations that override config file values
OVERRIDE_KEYS = ("node_version", "npm_version", "install_directory", "download_root")


def resolve_config_file(args) -> Path:
    """
    Determine which configuration file to read.

    Returns the --config path if given, otherwise ./nodekit.yaml.
    """
    if getattr(args, "config", None):
        return Path(args.config)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def merge_overrides(config: Dict[str, Any], args) -> Dict[str, Any]:
    """
    Overlay command-line values on configuration file values.

    Args:
        config: Values loaded from the YAML file
        args: Parsed arguments

    Returns:
        New dictionary; arguments left unset do not override the file
    """
    merged = dict(config)
    for key in OVERRIDE_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            merged[key] = value
    return merged


def build_install_request(args) -> InstallRequest:
    """
    Build the InstallRequest for a command.

    An explicitly passed --config must exist; the default file is optional.

    Raises:
        ConfigurationError: If the file is invalid or required values are missing
    """
    config_file = resolve_config_file(args)
    config = load_install_config(
        config_file, required=bool(getattr(args, "config", None))
    )
    return InstallRequest.from_mapping(merge_overrides(config, args))


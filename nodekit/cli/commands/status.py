"""
Status command implementation.

Reports installed Node.js and npm versions against the requested ones.
"""

import logging

from nodekit.cli.utils import build_install_request
from nodekit.installer.node_installer import NodeInstaller

logger = logging.getLogger(__name__)


def _describe(name: str, installed, required: str, matches: bool) -> str:
    if installed is None:
        return f"  {name}: not installed (required {required})"
    marker = "OK" if matches else "MISMATCH"
    return f"  {name}: {installed} (required {required}) [{marker}]"


def run(args) -> int:
    """
    Run the status command.

    Args:
        args: Parsed command-line arguments

    Returns:
        0 if both components match the request, 1 otherwise
    """
    request = build_install_request(args)
    status = NodeInstaller(request).status()

    print(f"Installation directory: {request.node_directory}")
    print(
        _describe("node", status.node_version, request.node_version, status.node_matches)
    )
    print(_describe("npm", status.npm_version, request.npm_version, status.npm_matches))

    return 0 if status.satisfied else 1

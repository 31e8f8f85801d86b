"""
Install command implementation.

Installs Node.js and npm into the configured directory, holding the
directory's install lock so concurrent invocations do not interleave.
"""

import logging

from nodekit.cli.utils import build_install_request
from nodekit.core.locking import InstallLock
from nodekit.installer.node_installer import NodeInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    request = build_install_request(args)
    logger.debug(
        f"Installing node {request.node_version} and npm {request.npm_version} "
        f"for {request.platform} into {request.install_directory}"
    )

    installer = NodeInstaller(request, strict=args.strict)

    with InstallLock(request.install_directory).acquire(timeout=args.lock_timeout):
        installer.install(force=args.force)

    print(
        f"Node.js {request.node_version} and npm {request.npm_version} "
        f"are installed in {request.node_directory}"
    )
    return 0

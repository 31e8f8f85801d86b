"""
Concurrent access control for nodekit.

Two installs into the same directory would race on the same archive, scratch
directory and binaries. InstallLock serializes them with a file lock stored
next to the installation.

Usage:
    from nodekit.core.locking import InstallLock

    with InstallLock(install_directory).acquire(timeout=300):
        installer.install()
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".nodekit.lock"


class InstallLock:
    """
    File-based lock guarding one installation directory.

    Uses the `filelock` library so the lock works across processes and is
    released automatically if the holder dies.

    Attributes:
        lock_path: Path of the lock file
    """

    def __init__(self, install_directory: Union[str, Path]):
        self.install_directory = Path(install_directory)
        self.lock_path = self.install_directory / LOCK_FILE_NAME

    @contextmanager
    def acquire(self, timeout: float = 300):
        """
        Hold the installation lock for the duration of the block.

        Args:
            timeout: Maximum wait time in seconds (negative waits forever)

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        self.install_directory.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {self.lock_path}")
                yield
                logger.debug(f"Released install lock: {self.lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire install lock after {timeout}s. "
                "Another nodekit process may be installing into "
                f"{self.install_directory}."
            )
            raise LockTimeout(str(self.lock_path)) from e


__all__ = ["InstallLock", "LockTimeout", "LOCK_FILE_NAME"]

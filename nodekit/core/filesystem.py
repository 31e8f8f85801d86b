"""
File system utilities for nodekit.

This module provides the file operations the installer needs:
- Archive extraction (tar.gz, tgz) with directory traversal checks
- Safe deletion of scratch directories
- Moving binaries into place and marking them executable
"""

import os
import shutil
import stat
import sys
import tarfile
from pathlib import Path
from typing import Union

from nodekit.core.exceptions import (
    ExtractionError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
        >>> is_relative_to(Path('/a/b'), Path('/c'))
        False
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats:
    - .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('npm.tar.gz', 'target/node')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.suffix}. "
                "Supported: .tar.gz, .tgz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Paths are validated above for interpreters without extraction filters
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree if it exists.

    Raises:
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path)

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, target, exc):
                """Error handler for Windows read-only files."""
                if not os.access(target, os.W_OK):
                    os.chmod(target, stat.S_IWRITE)
                    func(target)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def move_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Move a file or directory into place, replacing whatever is at destination.

    Returns:
        The destination path

    Raises:
        FilesystemError: If the move fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Cannot move {source}: it does not exist")

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        if destination.is_dir():
            shutil.rmtree(destination)
        elif destination.exists():
            destination.unlink()
        shutil.move(str(source), str(destination))
    except OSError as e:
        raise FilesystemError(f"Failed to move {source} to {destination}: {e}") from e

    return destination


def make_executable(path: Union[str, Path]) -> None:
    """Add execute permission for user, group and others."""
    path = Path(path)
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(f"Failed to mark {path} executable: {e}") from e


__all__ = [
    "is_relative_to",
    "extract_archive",
    "safe_rmtree",
    "move_file",
    "make_executable",
]

"""
Platform detection for nodekit.

This module detects the operating system family and CPU architecture of the
host so the right Node.js distribution can be selected.

Usage:
    from nodekit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Running on {platform_info.platform_string()}")
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum


class OSFamily(Enum):
    """Operating system families with distinct Node.js distributions."""

    WINDOWS = "windows"
    MAC = "mac"
    SUNOS = "sunos"
    LINUX = "linux"


class Architecture(Enum):
    """CPU architectures Node.js is distributed for."""

    X86 = "x86"
    X64 = "x64"

    def __str__(self) -> str:
        return self.value


# Names used by the Node.js distribution server, which differ from ours.
NODE_OS_NAMES = {
    OSFamily.MAC: "darwin",
    OSFamily.SUNOS: "sunos",
}


def node_os_name(os_family: OSFamily) -> str:
    """
    Map an OS family to the name used in Node.js archive filenames.

    Example:
        >>> node_os_name(OSFamily.MAC)
        'darwin'
        >>> node_os_name(OSFamily.WINDOWS)
        'linux'
    """
    return NODE_OS_NAMES.get(os_family, "linux")


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system family
        arch: CPU architecture
    """

    os: OSFamily
    arch: Architecture

    def is_windows(self) -> bool:
        """Check if this is the Windows family."""
        return self.os is OSFamily.WINDOWS

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'darwin-x64').

        Example:
            >>> PlatformInfo(OSFamily.MAC, Architecture.X64).platform_string()
            'darwin-x64'
        """
        if self.is_windows():
            return f"win-{self.arch}"
        return f"{node_os_name(self.os)}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> OSFamily:
    """
    Detect operating system family.

    Returns:
        OSFamily; anything unrecognised is treated as Linux
    """
    system = platform.system().lower()

    if system == "windows":
        return OSFamily.WINDOWS
    elif system == "darwin":
        return OSFamily.MAC
    elif system == "sunos":
        return OSFamily.SUNOS
    else:
        return OSFamily.LINUX


def _detect_architecture() -> Architecture:
    """
    Detect CPU architecture.

    Returns:
        Architecture.X64 for any 64-bit machine name, otherwise X86
    """
    machine = platform.machine().lower()

    if "64" in machine:
        return Architecture.X64
    return Architecture.X86


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "OSFamily",
    "Architecture",
    "PlatformInfo",
    "NODE_OS_NAMES",
    "node_os_name",
    "detect_platform",
    "clear_platform_cache",
]

"""
Unit tests for the platform detection module.

Tests cover:
- PlatformInfo methods
- OS family detection with mocking
- Architecture detection
- Distribution OS naming table
- Cache behavior
"""

import pytest
from unittest.mock import patch

from nodekit.core.platform import (
    Architecture,
    OSFamily,
    PlatformInfo,
    clear_platform_cache,
    detect_platform,
    node_os_name,
    _detect_architecture,
    _detect_os,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_is_windows(self):
        assert PlatformInfo(OSFamily.WINDOWS, Architecture.X64).is_windows()
        assert not PlatformInfo(OSFamily.LINUX, Architecture.X64).is_windows()

    def test_platform_string_mac(self):
        """Test platform string uses distribution naming."""
        info = PlatformInfo(OSFamily.MAC, Architecture.X64)
        assert info.platform_string() == "darwin-x64"

    def test_platform_string_windows(self):
        info = PlatformInfo(OSFamily.WINDOWS, Architecture.X86)
        assert info.platform_string() == "win-x86"

    def test_architecture_str(self):
        assert str(Architecture.X64) == "x64"
        assert str(Architecture.X86) == "x86"


class TestNodeOsName:
    """Tests for the distribution OS naming table."""

    @pytest.mark.parametrize(
        "os_family,expected",
        [
            (OSFamily.MAC, "darwin"),
            (OSFamily.SUNOS, "sunos"),
            (OSFamily.LINUX, "linux"),
            (OSFamily.WINDOWS, "linux"),
        ],
    )
    def test_mapping(self, os_family, expected):
        assert node_os_name(os_family) == expected


class TestOSDetection:
    """Tests for OS family detection."""

    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Windows", OSFamily.WINDOWS),
            ("Darwin", OSFamily.MAC),
            ("SunOS", OSFamily.SUNOS),
            ("Linux", OSFamily.LINUX),
            ("FreeBSD", OSFamily.LINUX),
        ],
    )
    def test_detect_os(self, system, expected):
        with patch("platform.system", return_value=system):
            assert _detect_os() == expected


class TestArchitectureDetection:
    """Tests for architecture detection."""

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", Architecture.X64),
            ("AMD64", Architecture.X64),
            ("aarch64", Architecture.X64),
            ("arm64", Architecture.X64),
            ("i686", Architecture.X86),
            ("x86", Architecture.X86),
        ],
    )
    def test_detect_architecture(self, machine, expected):
        with patch("platform.machine", return_value=machine):
            assert _detect_architecture() == expected


class TestDetectPlatform:
    """Tests for detect_platform caching."""

    def setup_method(self):
        clear_platform_cache()

    def teardown_method(self):
        clear_platform_cache()

    def test_detect_platform_combines_os_and_arch(self):
        with patch("platform.system", return_value="Darwin"), patch(
            "platform.machine", return_value="x86_64"
        ):
            info = detect_platform()

        assert info == PlatformInfo(OSFamily.MAC, Architecture.X64)

    def test_detect_platform_is_cached(self):
        with patch("platform.system", return_value="Linux") as mock_system:
            first = detect_platform()
            second = detect_platform()

        assert first is second
        assert mock_system.call_count == 1

    def test_clear_platform_cache(self):
        with patch("platform.system", return_value="Linux"):
            first = detect_platform()
        clear_platform_cache()
        with patch("platform.system", return_value="Windows"):
            second = detect_platform()

        assert first.os == OSFamily.LINUX
        assert second.os == OSFamily.WINDOWS

"""
Unit tests for host platform detection.
"""

from unittest.mock import patch

import pytest

from tordownloader.core.platform import (
    HostPlatform,
    _detect_architecture,
    _detect_platform,
    clear_host_cache,
    detect_host,
)


class TestDetectPlatform:
    """Tests for _detect_platform()."""

    @pytest.mark.parametrize(
        "sys_platform,expected",
        [
            ("linux", "linux"),
            ("linux2", "linux"),
            ("darwin", "darwin"),
            ("win32", "win32"),
            ("cygwin", "win32"),
            ("freebsd13", "freebsd13"),
        ],
    )
    def test_platform_mapping(self, sys_platform, expected):
        with patch("tordownloader.core.platform.sys.platform", sys_platform):
            assert _detect_platform() == expected


class TestDetectArchitecture:
    """Tests for _detect_architecture()."""

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", "x64"),
            ("AMD64", "x64"),
            ("i686", "ia32"),
            ("i386", "ia32"),
            ("aarch64", "arm64"),
            ("arm64", "arm64"),
            ("riscv64", "riscv64"),
        ],
    )
    def test_architecture_mapping(self, machine, expected):
        with patch("tordownloader.core.platform.platform.machine", return_value=machine):
            assert _detect_architecture() == expected


class TestHostPlatform:
    """Tests for HostPlatform."""

    def test_is_windows(self):
        assert HostPlatform("win32", "x64").is_windows()
        assert not HostPlatform("linux", "x64").is_windows()

    def test_with_overrides(self):
        host = HostPlatform("linux", "x64")

        assert host.with_overrides() == host
        assert host.with_overrides("darwin") == HostPlatform("darwin", "x64")
        assert host.with_overrides(arch="ia32") == HostPlatform("linux", "ia32")

    def test_str(self):
        assert str(HostPlatform("linux", "x64")) == "linux-x64"


class TestDetectHost:
    """Tests for detect_host() caching."""

    def test_cached(self):
        clear_host_cache()
        with patch("tordownloader.core.platform._detect_platform", return_value="linux") as p:
            with patch("tordownloader.core.platform._detect_architecture", return_value="x64"):
                first = detect_host()
                second = detect_host()

        assert first is second
        assert first == HostPlatform("linux", "x64")
        assert p.call_count == 1

    def test_clear_cache(self):
        with patch("tordownloader.core.platform._detect_platform", return_value="linux"):
            with patch("tordownloader.core.platform._detect_architecture", return_value="x64"):
                detect_host()
        clear_host_cache()
        with patch("tordownloader.core.platform._detect_platform", return_value="darwin"):
            with patch("tordownloader.core.platform._detect_architecture", return_value="x64"):
                assert detect_host().platform == "darwin"

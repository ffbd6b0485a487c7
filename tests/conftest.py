"""
Pytest configuration and shared fixtures for tordownloader tests.
"""

import io
import lzma
import zipfile
from pathlib import Path

import pytest

from tordownloader.core.platform import HostPlatform
from tordownloader.torbrowser.platform_arch import PlatformArch
from tordownloader.torbrowser.release import Release
from tordownloader.torbrowser.repository import Repository

REPOSITORY_URL = "https://dist.example.org/torbrowser/"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def _listing(versions) -> str:
    links = "\n".join(f'<a href="{version}/">{version}/</a>' for version in versions)
    return f"<html><body><h1>Index of /torbrowser</h1><pre>\n{links}\n</pre></body></html>"


def xz_bytes(content: bytes) -> bytes:
    return lzma.compress(content, format=lzma.FORMAT_XZ)


def zip_bytes(members) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return buffer.getvalue()


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset host detection cache between tests."""
    from tordownloader.core.platform import clear_host_cache

    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(platform="linux", arch="x64")


@pytest.fixture
def repository() -> Repository:
    return Repository(REPOSITORY_URL)


@pytest.fixture
def linux_release() -> Release:
    return Release("10.0.16", PlatformArch("linux", "64"))


@pytest.fixture
def osx_release() -> Release:
    return Release("10.5a12", PlatformArch("osx", "64"))


@pytest.fixture
def unpacked_linux_bundle(tmp_path) -> Path:
    """
    Unpacked Linux bundle layout with xz compressed files.

    Mirrors what the mar tool produces from a Linux Tor Browser bundle.
    """
    unpack_dir = tmp_path / "tor-browser"
    tor_dir = unpack_dir / "TorBrowser" / "Tor"
    data_dir = unpack_dir / "TorBrowser" / "Data" / "Tor"
    (tor_dir / "PluggableTransports").mkdir(parents=True)
    data_dir.mkdir(parents=True)

    (tor_dir / "tor").write_bytes(xz_bytes(b"#!/bin/sh\necho tor\n"))
    (tor_dir / "libevent.so").write_bytes(xz_bytes(b"libevent"))
    (tor_dir / "PluggableTransports" / "obfs4proxy").write_bytes(xz_bytes(b"obfs4"))
    (data_dir / "torrc-defaults").write_bytes(xz_bytes(b"# defaults\n"))
    (data_dir / "geoip").write_bytes(xz_bytes(b"geoip"))
    (data_dir / "geoip6").write_bytes(xz_bytes(b"geoip6"))

    return unpack_dir


@pytest.fixture
def make_listing():
    """Build a directory listing page linking one sub-directory per version."""
    return _listing


@pytest.fixture
def xz_compress():
    return xz_bytes


@pytest.fixture
def make_zip():
    """Build zip archive bytes from a {name: content} mapping."""
    return zip_bytes

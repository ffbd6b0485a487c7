"""
Host platform detection for tordownloader.

This module reports the current platform and CPU architecture using the
runtime vocabulary that release naming is derived from:

- platforms: 'darwin', 'win32', 'linux' (other systems are reported as-is)
- architectures: 'x64', 'ia32', 'arm64' (other machines are reported as-is)

Detection only happens at public entry points. Everything below them receives
an explicit HostPlatform instead of reading the runtime again.

Usage:
    from tordownloader.core.platform import detect_host

    host = detect_host()
    print(f"Running on {host.platform} {host.arch}")
"""

import functools
import platform
import sys
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class HostPlatform:
    """
    Native platform and architecture identifiers.

    Attributes:
        platform: Runtime platform ('darwin', 'win32', 'linux', ...)
        arch: Runtime architecture ('x64', 'ia32', 'arm64', ...)
    """

    platform: str
    arch: str

    def is_windows(self) -> bool:
        """Check whether executables on this platform need an .exe suffix."""
        return self.platform in ("win32", "win")

    def with_overrides(
        self, platform: Optional[str] = None, arch: Optional[str] = None
    ) -> "HostPlatform":
        """Return a copy with the given identifiers replaced."""
        return HostPlatform(
            platform=platform or self.platform,
            arch=arch or self.arch,
        )

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_host() -> HostPlatform:
    """
    Detect the current host platform.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform for the running interpreter

    Example:
        >>> detect_host()
        HostPlatform(platform='linux', arch='x64')
    """
    return HostPlatform(platform=_detect_platform(), arch=_detect_architecture())


def _detect_platform() -> str:
    """
    Detect the runtime platform.

    Returns:
        'darwin', 'win32', 'linux', or the raw sys.platform value
    """
    system = sys.platform.lower()

    if system.startswith("linux"):
        return "linux"
    elif system in ("win32", "cygwin", "msys"):
        return "win32"
    elif system == "darwin":
        return "darwin"
    else:
        return system


def _detect_architecture() -> str:
    """
    Detect the CPU architecture.

    Returns:
        'x64', 'ia32', 'arm64', or the lowercased machine name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("i386", "i686", "x86", "ia32"):
        return "ia32"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    else:
        return machine


def clear_host_cache():
    """
    Clear the host detection cache.

    This forces the next call to detect_host() to re-detect.
    """
    detect_host.cache_clear()


__all__ = [
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
]

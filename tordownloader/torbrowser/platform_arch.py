"""
Normalized platform/architecture pair used in Tor Browser release names.

The Tor project names releases 'osx64', 'linux32', 'linux64', 'win32' and
'win64'. PlatformArch maps native runtime identifiers onto that scheme and
rejects every pair that has no published release.
"""

from dataclasses import dataclass
from typing import Tuple

from tordownloader.core.exceptions import UnsupportedPlatformError
from tordownloader.torbrowser.dictionary import UNSUPPORTED, ReleasePlatform

_PLATFORMS = {
    "darwin": "osx",
    "win32": "win",
    "linux": "linux",
}

_ARCHS = {
    "x64": "64",
    "ia32": "32",
}

# Native pairs with a published release (darwin/ia32 is not one)
NATIVE_SUPPORTED: Tuple[Tuple[str, str], ...] = (
    ("darwin", "x64"),
    ("linux", "ia32"),
    ("linux", "x64"),
    ("win32", "ia32"),
    ("win32", "x64"),
)

# Platform renamed for the mar tools archive naming convention
_MAR_TOOLS_PLATFORMS = {
    "osx": "mac",
}


@dataclass(frozen=True)
class PlatformArch:
    """
    Release platform and architecture.

    Attributes:
        platform: 'osx', 'linux', 'win' or the unsupported sentinel
        arch: '32', '64' or the unsupported sentinel
    """

    platform: ReleasePlatform
    arch: str

    @classmethod
    def _normalize(cls, native_platform: str, native_arch: str) -> "PlatformArch":
        return cls(
            platform=_PLATFORMS.get(native_platform, UNSUPPORTED),
            arch=_ARCHS.get(native_arch, UNSUPPORTED),
        )

    @classmethod
    def from_values(cls, native_platform: str, native_arch: str) -> "PlatformArch":
        """
        Build a PlatformArch from native runtime identifiers.

        Args:
            native_platform: Runtime platform ('darwin', 'win32', 'linux')
            native_arch: Runtime architecture ('x64', 'ia32')

        Returns:
            Supported PlatformArch

        Raises:
            UnsupportedPlatformError: If no release exists for the pair

        Example:
            >>> str(PlatformArch.from_values("darwin", "x64"))
            'osx64'
        """
        platform_arch = cls._normalize(native_platform, native_arch)

        if platform_arch not in SUPPORTED:
            raise UnsupportedPlatformError(
                f"Unsupported platform architecture: {native_platform} {native_arch}"
            )

        return platform_arch

    def equals(self, other: "PlatformArch") -> bool:
        return self == other

    def mar_tools_platform_arch(self) -> str:
        """
        Platform architecture as spelled in mar tools archive names.

        Example:
            >>> PlatformArch("osx", "64").mar_tools_platform_arch()
            'mac64'
        """
        platform = _MAR_TOOLS_PLATFORMS.get(self.platform, self.platform)
        return f"{platform}{self.arch}"

    def __str__(self) -> str:
        return f"{self.platform}{self.arch}"


SUPPORTED = frozenset(
    PlatformArch._normalize(native_platform, native_arch)
    for native_platform, native_arch in NATIVE_SUPPORTED
)

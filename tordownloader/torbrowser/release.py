"""
A resolved Tor Browser release: a version plus a platform architecture.
"""

from dataclasses import dataclass
from typing import Optional

from tordownloader.core.platform import HostPlatform, detect_host
from tordownloader.torbrowser.dictionary import Branch, ReleasePlatform, Version
from tordownloader.torbrowser.platform_arch import PlatformArch
from tordownloader.torbrowser.repository import Repository


@dataclass(frozen=True)
class Release:
    """
    Immutable (version, platform architecture) pair.

    Use Release.from_values() when the version is known, or
    Release.from_branch() to resolve the latest version of a branch.
    """

    version: Version
    platform_arch: PlatformArch

    @classmethod
    def from_values(
        cls,
        version: Version,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
    ) -> "Release":
        """
        Create a release for an explicit version.

        Args:
            version: Release version (e.g. '10.0.16', '10.5a12')
            platform: Native platform, defaults to the host platform
            arch: Native architecture, defaults to the host architecture

        Raises:
            UnsupportedPlatformError: If the platform architecture has no release
        """
        host = detect_host().with_overrides(platform, arch)
        return cls(version, PlatformArch.from_values(host.platform, host.arch))

    @classmethod
    def from_branch(
        cls,
        branch: Branch,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
        repository: Optional[Repository] = None,
    ) -> "Release":
        """
        Create a release for the latest version of a branch.

        Args:
            branch: Release branch to resolve
            platform: Native platform, defaults to the host platform
            arch: Native architecture, defaults to the host architecture
            repository: Repository to query, defaults to the main repository

        Raises:
            VersionNotFoundError: If the branch has no version on the repository
            UnsupportedPlatformError: If the platform architecture has no release
        """
        repository = repository or Repository()
        version = repository.get_latest_version(branch)
        host = detect_host().with_overrides(platform, arch)
        return cls(version, PlatformArch.from_values(host.platform, host.arch))

    @property
    def platform(self) -> ReleasePlatform:
        return self.platform_arch.platform

    def get_filename(self) -> str:
        """
        Name of the MAR bundle for this release.

        Example:
            >>> Release("10.5a12", PlatformArch("osx", "64")).get_filename()
            'tor-browser-osx64-10.5a12_en-US.mar'
        """
        return f"tor-browser-{self.platform_arch}-{self.version}_en-US.mar"

    def get_mar_tools_filename(self) -> str:
        """Name of the mar tools archive for this release."""
        return f"mar-tools-{self.platform_arch.mar_tools_platform_arch()}.zip"

    def get_mar_tools_release(self, host: HostPlatform) -> "Release":
        """
        Release of the mar tools able to run on the given host.

        The tools unpack the bundle locally, so they follow the host rather
        than the platform the bundle targets.
        """
        return Release(self.version, PlatformArch.from_values(host.platform, host.arch))

    def __str__(self) -> str:
        return f"{self.version} ({self.platform_arch})"

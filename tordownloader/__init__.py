"""
tordownloader - Provision Tor from Tor Browser releases.

Resolves a Tor Browser release for the current platform, downloads it with
the matching mar tools, and extracts Tor with its data files into a single
directory.

Example:
    >>> from tordownloader import TorDownloader, Release, Branch
    >>> release = Release.from_branch(Branch.ALPHA)
    >>> TorDownloader().retrieve("/opt/tor", release)
"""

from tordownloader.core.exceptions import (
    TorDownloaderError,
    UnsupportedPlatformError,
    VersionNotFoundError,
    HttpError,
    UnpackError,
)
from tordownloader.torbrowser import Branch, PlatformArch, Release, Repository
from tordownloader.downloader import TorDownloader, retrieve_tor

__version__ = "0.1.0"

__all__ = [
    "TorDownloader",
    "retrieve_tor",
    "Branch",
    "PlatformArch",
    "Release",
    "Repository",
    "TorDownloaderError",
    "UnsupportedPlatformError",
    "VersionNotFoundError",
    "HttpError",
    "UnpackError",
]

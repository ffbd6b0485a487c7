"""
Core functionality for tordownloader.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    HostPlatform,
    detect_host,
    clear_host_cache,
)

from .exceptions import (
    TorDownloaderError,
    UnsupportedPlatformError,
    VersionNotFoundError,
    HttpError,
    MissingStatusCodeError,
    TooManyRedirectsError,
    ArchiveExtractionError,
    InsecureArchiveError,
    UnpackError,
    ConfigError,
)

__all__ = [
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
    "TorDownloaderError",
    "UnsupportedPlatformError",
    "VersionNotFoundError",
    "HttpError",
    "MissingStatusCodeError",
    "TooManyRedirectsError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "UnpackError",
    "ConfigError",
]

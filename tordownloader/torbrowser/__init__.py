"""
Tor Browser release naming and repository discovery.
"""

from .dictionary import Branch, Version, ReleasePlatform
from .platform_arch import PlatformArch
from .repository import Repository, MAIN_REPOSITORY_URL, version_key, sort_versions
from .release import Release

__all__ = [
    "Branch",
    "Version",
    "ReleasePlatform",
    "PlatformArch",
    "Repository",
    "MAIN_REPOSITORY_URL",
    "version_key",
    "sort_versions",
    "Release",
]

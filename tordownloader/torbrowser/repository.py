"""
Tor Browser distribution repository.

A repository is a plain directory listing (such as
https://dist.torproject.org/torbrowser/) with one sub-directory per
released version. Versions are discovered by scraping that listing on every
call; nothing is cached.
"""

import logging
import re
from typing import TYPE_CHECKING, Iterable, List, Optional

import requests

from tordownloader.core.exceptions import VersionNotFoundError
from tordownloader.core.http import RequestOptions, request
from tordownloader.torbrowser.dictionary import Branch, Version

if TYPE_CHECKING:
    from tordownloader.torbrowser.release import Release

logger = logging.getLogger(__name__)

MAIN_REPOSITORY_URL = "https://dist.torproject.org/torbrowser/"

VERSION_LINK_PATTERN = re.compile(
    r'<a[^>]+href="/?(?P<version>\d{1,3}\.\d{1,3}[a.]?\d{0,3})/?"[^>]*>'
)
VERSION_PATTERN = re.compile(r"^(?P<major>\d{1,3})\.(?P<minor>\d{1,3})[a.]?(?P<fix>\d{0,3})$")
URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def version_key(version: Version) -> int:
    """
    Numeric sort key of a version.

    major.minor[.|a]fix is folded into major * 1_000_000 + minor * 1_000 + fix,
    so '10.0.0' sorts after '9.12.2'. A missing fix counts as 0.

    Raises:
        ValueError: If the version is not in the expected format
    """
    match = VERSION_PATTERN.match(version)
    if not match:
        raise ValueError(f"Invalid version: {version}")

    major = int(match.group("major"))
    minor = int(match.group("minor"))
    fix = int(match.group("fix") or 0)
    return major * 1_000_000 + minor * 1_000 + fix


def sort_versions(versions: Iterable[Version]) -> List[Version]:
    """Sort versions in ascending numeric order."""
    return sorted(versions, key=version_key)


def parse_versions(listing: str) -> List[Version]:
    """Extract version directory names linked from a listing page."""
    return [match.group("version") for match in VERSION_LINK_PATTERN.finditer(listing)]


class Repository:
    """
    Remote Tor Browser repository.

    Example:
        >>> repository = Repository("http://mirror.example/torbrowser")
        >>> repository.repository_url
        'http://mirror.example/torbrowser/'
    """

    def __init__(
        self,
        repository_url: str = MAIN_REPOSITORY_URL,
        request_options: Optional[RequestOptions] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize repository.

        Args:
            repository_url: Base URL of the listing, http:// or https://
            request_options: Options for listing requests
            session: Optional requests session to reuse

        Raises:
            TypeError: If repository_url is not an http(s) URL
        """
        if not isinstance(repository_url, str) or not URL_PATTERN.match(repository_url):
            raise TypeError("repository_url must be a valid url")

        if not repository_url.endswith("/"):
            repository_url += "/"

        self._repository_url = repository_url
        self.request_options = request_options
        self.session = session

    @property
    def repository_url(self) -> str:
        return self._repository_url

    def get_latest_version(self, branch: Branch = Branch.STABLE) -> Version:
        """
        Find the newest version of a branch.

        Args:
            branch: Release branch (stable by default)

        Returns:
            Highest version of the branch

        Raises:
            VersionNotFoundError: If the listing has no version of the branch
        """
        branch = Branch(branch)
        logger.debug(f"Fetching repository listing: {self.repository_url}")
        listing = request(self.repository_url, self.request_options, self.session)

        available_versions = [
            version for version in parse_versions(listing) if branch.includes(version)
        ]

        if not available_versions:
            raise VersionNotFoundError(branch.value)

        latest_version = max(available_versions, key=version_key)
        logger.info(f"Latest {branch.value} version: {latest_version}")
        return latest_version

    def get_release_directory_url(self, version: Version) -> str:
        return f"{self.repository_url}{version}/"

    def get_release_url(self, release: "Release") -> str:
        return f"{self.get_release_directory_url(release.version)}{release.get_filename()}"

    def get_mar_tools_url(self, release: "Release") -> str:
        return (
            f"{self.get_release_directory_url(release.version)}"
            f"{release.get_mar_tools_filename()}"
        )

    def __repr__(self) -> str:
        return f"Repository({self.repository_url!r})"

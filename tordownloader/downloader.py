"""
Tor retrieval pipeline.

This module orchestrates resolving, downloading and extracting a Tor Browser
release, and rewrites its layout into a flat directory holding the tor
binary and its support files.

Pipeline of TorDownloader.retrieve():
1. Resolve the latest stable release if none was given
2. Create a private operation directory and the target directory
3. Download the MAR bundle and the mar tools concurrently, unzip the tools
4. Unpack the bundle with the mar tool
5. Move tor and its data files into the target directory
6. Decompress every file in the target directory
7. Remove the operation directory (always, even on failure)
"""

import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union
from urllib.parse import urlparse

from tordownloader.core.archive import decompress_xz, unzip
from tordownloader.core.exceptions import UnpackError, UnsupportedPlatformError
from tordownloader.core.filesystem import (
    add_execute_permission,
    make_directory,
    remove_file,
    rename,
    temporary_directory,
)
from tordownloader.core.http import DownloadProgress, RequestOptions, request_stream
from tordownloader.core.platform import HostPlatform, detect_host
from tordownloader.torbrowser.dictionary import Branch
from tordownloader.torbrowser.release import Release
from tordownloader.torbrowser.repository import Repository

logger = logging.getLogger(__name__)

TOR_BINARY_FILENAME = "tor"
MAR_BINARY_FILE_PATH = Path("mar-tools", "signmar")
UNPACKED_TOR_BROWSER_PATH = "tor-browser"
TOR_DATA_FILENAMES = ("torrc-defaults", "geoip", "geoip6")
DECOMPRESSED_SUFFIX = ".decompressed"
DEFAULT_DECOMPRESS_WORKERS = 8


def _log_progress(filename: str, progress: DownloadProgress) -> None:
    logger.info(f"{filename}: {progress}")


class TorDownloader:
    """
    Retrieves Tor from a Tor Browser repository.

    Example:
        >>> downloader = TorDownloader()
        >>> tor_directory = downloader.retrieve(Path("/opt/tor"))
        >>> downloader.add_execution_rights(tor_directory)
    """

    def __init__(
        self,
        repository: Optional[Repository] = None,
        host: Optional[HostPlatform] = None,
        request_options: Optional[RequestOptions] = None,
        decompress_workers: int = DEFAULT_DECOMPRESS_WORKERS,
    ):
        """
        Initialize downloader.

        Args:
            repository: Repository to download from, defaults to the main one
            host: Platform the mar tools must run on, defaults to this host
            request_options: Options for download requests
            decompress_workers: Concurrent decompressions per directory level
        """
        self.repository = repository or Repository()
        self.host = host or detect_host()
        self.request_options = request_options
        self.decompress_workers = decompress_workers

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _fetch_file(self, url: str, directory: Path) -> Path:
        """Download url into directory, keeping the URL's file name."""
        filename = PurePosixPath(urlparse(url).path).name
        file_path = directory / filename

        logger.info(f"Downloading {url}")
        with open(file_path, "wb") as sink:
            request_stream(
                sink,
                url,
                self.request_options,
                progress_callback=lambda progress: _log_progress(filename, progress),
            )
        logger.debug(f"Downloaded {file_path}")

        return file_path

    def _fetch_tor_browser(self, release: Release, operation_dir: Path) -> Path:
        return self._fetch_file(self.repository.get_release_url(release), operation_dir)

    def _fetch_mar_tools(self, release: Release, operation_dir: Path) -> Path:
        """Download the mar tools archive and unzip it in place."""
        mar_tools_path = self._fetch_file(
            self.repository.get_mar_tools_url(release.get_mar_tools_release(self.host)),
            operation_dir,
        )
        unzip(mar_tools_path, operation_dir)
        return mar_tools_path

    def _fetch(self, release: Release, operation_dir: Path) -> Path:
        """
        Run both downloads concurrently and wait for both.

        Returns:
            Path of the downloaded MAR bundle
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            tor_browser_future = executor.submit(
                self._fetch_tor_browser, release, operation_dir
            )
            mar_tools_future = executor.submit(
                self._fetch_mar_tools, release, operation_dir
            )

        # Both futures are settled once the executor has shut down
        mar_tools_future.result()
        return tor_browser_future.result()

    # ------------------------------------------------------------------
    # Unpacking
    # ------------------------------------------------------------------

    def _get_mar_binary_path(self, operation_dir: Path) -> Path:
        if self.host.is_windows():
            return operation_dir / MAR_BINARY_FILE_PATH.with_suffix(".exe")
        return operation_dir / MAR_BINARY_FILE_PATH

    def _exec_mar_unpack(
        self, unpack_dir: Path, tor_browser_path: Path, operation_dir: Path
    ) -> int:
        """
        Run the mar tool to extract the bundle.

        Raises:
            OSError: If the mar tool cannot be started
            UnpackError: If the mar tool exits with a non-zero code
        """
        result = subprocess.run(
            [
                str(self._get_mar_binary_path(operation_dir)),
                "-C",
                str(unpack_dir),
                "-x",
                str(tor_browser_path),
            ],
            cwd=operation_dir,
            capture_output=True,
            text=True,
        )

        if result.returncode != 0:
            raise UnpackError(result.returncode, result.stderr)

        return result.returncode

    def _unpack_tor_browser(self, tor_browser_path: Path, operation_dir: Path) -> Path:
        add_execute_permission(self._get_mar_binary_path(operation_dir))

        unpack_dir = make_directory(operation_dir / UNPACKED_TOR_BROWSER_PATH)

        logger.info(f"Unpacking {tor_browser_path.name}")
        self._exec_mar_unpack(unpack_dir, tor_browser_path, operation_dir)

        return unpack_dir

    # ------------------------------------------------------------------
    # Relocation
    # ------------------------------------------------------------------

    def _move_tor_files_to_location(
        self, tor_directory: Path, platform: str, unpack_dir: Path
    ) -> None:
        """
        Move tor and its data files from the unpacked bundle.

        Args:
            tor_directory: Target directory
            platform: Native or release platform of the bundle
            unpack_dir: Directory the bundle was unpacked into

        Raises:
            UnsupportedPlatformError: If the bundle layout is unknown
        """
        if platform in ("darwin", "osx"):
            rename(unpack_dir / "Contents" / "MacOS" / "Tor", tor_directory)
            rename(tor_directory / "tor.real", tor_directory / TOR_BINARY_FILENAME)
            tor_data_dir = unpack_dir / "Contents" / "Resources" / "TorBrowser" / "Tor"
        elif platform in ("linux", "win32", "win"):
            rename(unpack_dir / "TorBrowser" / "Tor", tor_directory)
            tor_data_dir = unpack_dir / "TorBrowser" / "Data" / "Tor"
        else:
            raise UnsupportedPlatformError(f"Unsupported platform: {platform}")

        for filename in TOR_DATA_FILENAMES:
            rename(tor_data_dir / filename, tor_directory / filename)

    # ------------------------------------------------------------------
    # Decompression
    # ------------------------------------------------------------------

    @staticmethod
    def _decompress_tor_file(file_path: Path) -> None:
        decompressed_file_path = file_path.with_name(file_path.name + DECOMPRESSED_SUFFIX)

        decompress_xz(file_path, decompressed_file_path)

        remove_file(file_path)
        rename(decompressed_file_path, file_path)

    def _decompress_tor_files(self, tor_directory: Path) -> None:
        """
        Decompress every file below tor_directory in place.

        Directories are walked with an explicit stack. The files of one
        directory are decompressed concurrently; entries that are neither
        files nor directories, symlinks included, are skipped.
        """
        pending: List[Path] = [tor_directory]

        with ThreadPoolExecutor(max_workers=self.decompress_workers) as executor:
            while pending:
                directory = pending.pop()
                files = []

                with os.scandir(directory) as entries:
                    for entry in sorted(entries, key=lambda e: e.name):
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(Path(entry.path))
                        elif entry.is_file(follow_symlinks=False):
                            files.append(Path(entry.path))

                logger.debug(f"Decompressing {len(files)} file(s) in {directory}")
                futures = [
                    executor.submit(self._decompress_tor_file, file_path)
                    for file_path in files
                ]
                for future in futures:
                    future.result()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_tor_binary_filename(self, platform: Optional[str] = None) -> str:
        """
        Name of the tor binary for a platform.

        Args:
            platform: Native or release platform, defaults to the host's

        Example:
            >>> TorDownloader().get_tor_binary_filename("win")
            'tor.exe'
        """
        platform = platform or self.host.platform
        if platform in ("win32", "win"):
            return f"{TOR_BINARY_FILENAME}.exe"
        return TOR_BINARY_FILENAME

    def retrieve(
        self, tor_directory: Union[str, Path], release: Optional[Release] = None
    ) -> Path:
        """
        Download Tor into tor_directory.

        Args:
            tor_directory: Directory receiving tor, torrc-defaults, geoip, geoip6
            release: Release to retrieve, defaults to the latest stable one
                for this host

        Returns:
            The target directory

        Raises:
            VersionNotFoundError: If no stable release could be resolved
            HttpError: If a download is refused by the server
            UnpackError: If the mar tool fails
            UnsupportedPlatformError: If the release platform is unknown
        """
        tor_directory = Path(tor_directory)

        if release is None:
            release = Release.from_branch(
                Branch.STABLE,
                self.host.platform,
                self.host.arch,
                self.repository,
            )
        logger.info(f"Retrieving Tor Browser {release}")

        with temporary_directory() as operation_dir:
            try:
                make_directory(tor_directory, parents=True)

                tor_browser_path = self._fetch(release, operation_dir)

                unpack_dir = self._unpack_tor_browser(tor_browser_path, operation_dir)

                logger.info(f"Moving Tor files to {tor_directory}")
                self._move_tor_files_to_location(
                    tor_directory, release.platform, unpack_dir
                )

                logger.info("Decompressing Tor files")
                self._decompress_tor_files(tor_directory)
            except Exception as e:
                logger.error(f"Tor retrieval failed: {e}")
                raise

        logger.info(f"Tor retrieved to {tor_directory}")
        return tor_directory

    def add_execution_rights(
        self, tor_directory: Union[str, Path], platform: Optional[str] = None
    ) -> Path:
        """
        Make the tor binary in tor_directory executable.

        Returns:
            Path of the tor binary
        """
        tor_binary_path = Path(tor_directory) / self.get_tor_binary_filename(platform)
        add_execute_permission(tor_binary_path)
        return tor_binary_path


def retrieve_tor(
    tor_directory: Union[str, Path],
    release: Optional[Release] = None,
    repository: Optional[Repository] = None,
) -> Path:
    """
    Convenience function to retrieve Tor in one call.

    Example:
        >>> from tordownloader.downloader import retrieve_tor
        >>> retrieve_tor("/opt/tor")
    """
    downloader = TorDownloader(repository)
    return downloader.retrieve(tor_directory, release)

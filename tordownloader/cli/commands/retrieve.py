"""
Retrieve command implementation.

Downloads a Tor Browser release and extracts Tor into a target directory.
"""

import logging

from tordownloader.cli.utils import create_repository, resolve_config, resolve_release
from tordownloader.core.platform import detect_host
from tordownloader.downloader import TorDownloader

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the retrieve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = resolve_config(args)
    repository = create_repository(config)
    release = resolve_release(config, repository)

    # The mar tools run here, whatever platform the bundle targets
    downloader = TorDownloader(
        repository=repository,
        host=detect_host(),
        request_options=config.http.request_options(),
        decompress_workers=config.decompress_workers,
    )

    tor_directory = downloader.retrieve(args.target, release)

    tor_binary_path = tor_directory / downloader.get_tor_binary_filename(release.platform)
    if not args.no_execution_rights:
        downloader.add_execution_rights(tor_directory, release.platform)
        logger.debug(f"Marked {tor_binary_path} as executable")

    print(tor_binary_path)
    return 0

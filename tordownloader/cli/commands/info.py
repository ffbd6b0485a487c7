"""
Info command implementation.

Prints the file names and download URLs of a release.
"""

import logging

from tordownloader.cli.utils import create_repository, resolve_config, resolve_release
from tordownloader.core.platform import detect_host

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = resolve_config(args)
    repository = create_repository(config)
    release = resolve_release(config, repository)
    mar_tools_release = release.get_mar_tools_release(detect_host())

    print(f"Release:   {release}")
    print(f"Bundle:    {repository.get_release_url(release)}")
    print(f"Mar tools: {repository.get_mar_tools_url(mar_tools_release)}")
    return 0

"""
Latest command implementation.

Prints the newest version of a release branch.
"""

import logging

from tordownloader.cli.utils import create_repository, resolve_config

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the latest command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = resolve_config(args)
    repository = create_repository(config)

    print(repository.get_latest_version(config.branch))
    return 0

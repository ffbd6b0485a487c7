"""
Shared utilities for CLI commands.

Merges command-line overrides into the file configuration and builds the
objects every command needs from the result.
"""

import logging
from dataclasses import replace

from tordownloader.config.parser import DownloaderConfig, load_config
from tordownloader.core.exceptions import ConfigError
from tordownloader.torbrowser.dictionary import Branch
from tordownloader.torbrowser.release import Release
from tordownloader.torbrowser.repository import Repository

logger = logging.getLogger(__name__)


def resolve_config(args) -> DownloaderConfig:
    """
    Load the configuration file and apply command-line overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        Effective configuration
    """
    config = load_config(getattr(args, "config", None))

    overrides = {}
    for key in ("repository", "release", "platform", "arch"):
        value = getattr(args, key, None)
        if value:
            overrides[key] = value

    branch = getattr(args, "branch", None)
    if branch:
        overrides["branch"] = Branch(branch)

    if overrides:
        logger.debug(f"Command-line overrides: {overrides}")
        config = replace(config, **overrides)

    return config


def create_repository(config: DownloaderConfig) -> Repository:
    """Build the repository described by a configuration."""
    try:
        return Repository(config.repository, config.http.request_options())
    except TypeError as e:
        raise ConfigError(f"Invalid repository url: {config.repository}") from e


def resolve_release(config: DownloaderConfig, repository: Repository) -> Release:
    """
    Resolve the release described by a configuration.

    An explicit release version wins over the branch.
    """
    host = config.host()
    if config.release:
        return Release.from_values(config.release, host.platform, host.arch)
    return Release.from_branch(config.branch, host.platform, host.arch, repository)

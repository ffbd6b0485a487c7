"""
Configuration loading for tordownloader.
"""

from .parser import (
    DownloaderConfig,
    HttpConfig,
    parse_config,
    load_config,
    DEFAULT_CONFIG_FILENAME,
)

__all__ = [
    "DownloaderConfig",
    "HttpConfig",
    "parse_config",
    "load_config",
    "DEFAULT_CONFIG_FILENAME",
]

"""YAML configuration parser for tordownloader.

This module provides parsing and validation for tordownloader.yaml files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tordownloader.core.exceptions import ConfigError
from tordownloader.core.http import DEFAULT_MAX_REDIRECTS, RequestOptions
from tordownloader.core.platform import HostPlatform, detect_host
from tordownloader.torbrowser.dictionary import Branch
from tordownloader.torbrowser.repository import MAIN_REPOSITORY_URL, URL_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "tordownloader.yaml"


@dataclass
class HttpConfig:
    """HTTP client configuration."""

    timeout: Optional[float] = None  # seconds, None waits indefinitely
    max_redirects: Optional[int] = DEFAULT_MAX_REDIRECTS

    def request_options(self) -> RequestOptions:
        return RequestOptions(timeout=self.timeout, max_redirects=self.max_redirects)


@dataclass
class DownloaderConfig:
    """Complete tordownloader configuration."""

    version: int = 1
    repository: str = MAIN_REPOSITORY_URL
    branch: Branch = Branch.STABLE
    release: Optional[str] = None  # explicit version, overrides branch
    platform: Optional[str] = None  # native platform override
    arch: Optional[str] = None  # native arch override
    http: HttpConfig = field(default_factory=HttpConfig)
    decompress_workers: int = 8

    def host(self) -> HostPlatform:
        """Host platform with configured overrides applied."""
        return detect_host().with_overrides(self.platform, self.arch)


def parse_config(config_path: Path) -> DownloaderConfig:
    """
    Parse tordownloader.yaml configuration file.

    Args:
        config_path: Path to tordownloader.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    return _parse_and_validate(data)


def load_config(config_path: Optional[Path] = None) -> DownloaderConfig:
    """
    Load configuration, falling back to defaults.

    An explicit path must exist. Without one, ./tordownloader.yaml is used
    when present.

    Args:
        config_path: Optional explicit configuration file

    Returns:
        DownloaderConfig
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        logger.debug(f"Loading configuration from {default_path}")
        return parse_config(default_path)

    logger.debug("No configuration file, using defaults")
    return DownloaderConfig()


def _parse_and_validate(data: Dict[str, Any]) -> DownloaderConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    repository = data.get("repository", MAIN_REPOSITORY_URL)
    if not isinstance(repository, str) or not URL_PATTERN.match(repository):
        raise ConfigError(f"Invalid repository url: {repository}")

    try:
        branch = Branch(data.get("branch", Branch.STABLE.value))
    except ValueError:
        valid = ", ".join(b.value for b in Branch)
        raise ConfigError(f"Invalid branch: {data.get('branch')} (expected {valid})")

    release = data.get("release")
    if release is not None:
        release = str(release)

    return DownloaderConfig(
        version=version,
        repository=repository,
        branch=branch,
        release=release,
        platform=_optional_str(data, "platform"),
        arch=_optional_str(data, "arch"),
        http=_parse_http_config(data.get("http") or {}),
        decompress_workers=_positive_int(data, "decompress_workers", 8),
    )


def _parse_http_config(data: Dict[str, Any]) -> HttpConfig:
    """Parse the http section."""
    if not isinstance(data, dict):
        raise ConfigError("http must be a mapping")

    timeout = data.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        raise ConfigError(f"http.timeout must be a positive number, got {timeout!r}")

    max_redirects = data.get("max_redirects", DEFAULT_MAX_REDIRECTS)
    if max_redirects is not None:
        max_redirects = _positive_int(data, "max_redirects", DEFAULT_MAX_REDIRECTS, "http.")

    return HttpConfig(timeout=timeout, max_redirects=max_redirects)


def _positive_int(data: Dict[str, Any], key: str, default: int, prefix: str = "") -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{prefix}{key} must be a positive integer, got {value!r}")
    return value


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    return value

"""
Centralized exception hierarchy for tordownloader.

Every error raised by the retrieval pipeline itself derives from
TorDownloaderError. Transport errors from requests and OS errors from the
filesystem are not wrapped and reach callers unchanged.
"""

from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class TorDownloaderError(Exception):
    """Base exception for all tordownloader errors."""

    pass


# ============================================================================
# Platform / Release Exceptions
# ============================================================================


class UnsupportedPlatformError(TorDownloaderError):
    """Raised when a platform or platform architecture has no Tor release."""

    pass


class VersionNotFoundError(TorDownloaderError):
    """Raised when no version of a branch is listed on the repository."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f'No latest "{branch}" version found on the repository')


# ============================================================================
# HTTP Exceptions
# ============================================================================


class HttpError(TorDownloaderError):
    """
    Raised when a response carries a non-2xx status code.

    Accepts either ``HttpError(message, status_code)`` or
    ``HttpError(status_code)``; the status code is mandatory.

    Raises:
        TypeError: If no status code is given
    """

    def __init__(
        self,
        message_or_status_code: Union[str, int, None] = None,
        status_code: Optional[int] = None,
    ):
        if isinstance(message_or_status_code, int) and not isinstance(
            message_or_status_code, bool
        ):
            status_code = message_or_status_code

        if not status_code:
            raise TypeError("status_code is mandatory")

        super().__init__(str(message_or_status_code))
        self.status_code = status_code


class MissingStatusCodeError(TorDownloaderError):
    """Raised when a response has no usable status code."""

    def __init__(self, message: str = "Unknown error: missing status code on response"):
        super().__init__(message)


class TooManyRedirectsError(TorDownloaderError):
    """Raised when a request is redirected more times than allowed."""

    def __init__(self, url: str, max_redirects: int):
        self.url = url
        self.max_redirects = max_redirects
        super().__init__(f"Exceeded {max_redirects} redirects while requesting {url}")


# ============================================================================
# Archive / Unpack Exceptions
# ============================================================================


class ArchiveExtractionError(TorDownloaderError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class UnpackError(TorDownloaderError):
    """Raised when the mar unpack tool exits with a non-zero code."""

    def __init__(self, returncode: int, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        msg = f"mar unpack failed with exit code {returncode}"
        if stderr:
            msg += f": {stderr.strip()}"
        super().__init__(msg)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(TorDownloaderError):
    """Configuration parsing or validation error."""

    pass

"""
HTTP client with explicit redirect handling and streaming downloads.

This module provides the two request modes the retrieval pipeline needs:
- request(): buffered, returns the response body as text
- request_stream(): streams the response body into a writable binary sink

Both share one request engine built on requests. Redirects are followed by
the engine itself rather than by requests so that method rewriting matches
RFC 7231:
- 301, 302, 303: the next hop is always a GET without a body
- 307, 308: the next hop reuses the original method and body

Example:
    >>> from tordownloader.core.http import request, request_stream
    >>> listing = request("https://dist.torproject.org/torbrowser/")
    >>> with open("bundle.mar", "wb") as sink:
    ...     request_stream(sink, "https://example.com/bundle.mar")
"""

import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Optional
from urllib.parse import urljoin

import requests

from tordownloader.core.exceptions import (
    HttpError,
    MissingStatusCodeError,
    TooManyRedirectsError,
)

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = (301, 302, 303, 307, 308)
METHOD_REWRITING_STATUS_CODES = (301, 302, 303)
DEFAULT_MAX_REDIRECTS = 20


@dataclass(frozen=True)
class RequestOptions:
    """
    Options applied to every hop of a request.

    Attributes:
        method: HTTP method of the first hop
        headers: Extra request headers
        data: Request body
        timeout: Timeout in seconds, None waits indefinitely
        max_redirects: Maximum number of redirects followed, None for no limit
    """

    method: str = "GET"
    headers: Optional[Dict[str, str]] = None
    data: Optional[bytes] = None
    timeout: Optional[float] = None
    max_redirects: Optional[int] = DEFAULT_MAX_REDIRECTS


@dataclass
class DownloadProgress:
    """Progress information for a streaming download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def _send(
    session: requests.Session, url: str, options: RequestOptions
) -> requests.Response:
    """
    Issue a request and follow redirects until a final response arrives.

    The returned response has passed status validation and still holds an
    unread, streamed body. The caller must close it.

    Raises:
        MissingStatusCodeError: If a response has no positive status code
        TooManyRedirectsError: If the redirect limit is exceeded
        HttpError: If the final status code is not 2xx
        requests.RequestException: On transport failure
    """
    redirects = 0

    while True:
        logger.debug(f"{options.method} {url}")
        response = session.request(
            options.method,
            url,
            headers=options.headers,
            data=options.data,
            timeout=options.timeout,
            stream=True,
            allow_redirects=False,
        )

        status_code = response.status_code
        if not status_code or status_code <= 0:
            response.close()
            raise MissingStatusCodeError()

        if status_code in REDIRECT_STATUS_CODES:
            location = response.headers.get("location")
            response.close()

            if not location:
                raise HttpError(
                    f"Redirect {status_code} without Location header", status_code
                )

            redirects += 1
            if options.max_redirects is not None and redirects > options.max_redirects:
                raise TooManyRedirectsError(url, options.max_redirects)

            if status_code in METHOD_REWRITING_STATUS_CODES:
                # RFC 7231: user agents switch to GET for these codes
                options = dataclasses.replace(options, method="GET", data=None)

            next_url = urljoin(url, location)
            logger.debug(f"Redirect {status_code}: {url} -> {next_url}")
            url = next_url
            continue

        if status_code // 100 != 2:
            message = response.reason or str(status_code)
            response.close()
            raise HttpError(message, status_code)

        return response


def request(
    url: str,
    options: Optional[RequestOptions] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Perform a request and return the whole response body as text.

    Args:
        url: http:// or https:// URL
        options: Request options (GET with defaults if None)
        session: Session to use; a short-lived one is created if None

    Returns:
        Decoded response body

    Raises:
        HttpError: If the response status is not 2xx
        MissingStatusCodeError: If a response has no status code
        TooManyRedirectsError: If the redirect limit is exceeded
    """
    options = options or RequestOptions()
    owns_session = session is None
    session = session or requests.Session()

    try:
        response = _send(session, url, options)
        try:
            return response.text
        finally:
            response.close()
    finally:
        if owns_session:
            session.close()


def request_stream(
    sink: BinaryIO,
    url: str,
    options: Optional[RequestOptions] = None,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    chunk_size: int = 8192,
) -> None:
    """
    Perform a request and write the response body into a binary sink.

    Returns once every chunk has been written and the sink has been flushed.
    Closing the sink is left to the caller.

    Args:
        sink: Writable binary file-like object
        url: http:// or https:// URL
        options: Request options (GET with defaults if None)
        session: Session to use; a short-lived one is created if None
        progress_callback: Optional callback for progress updates
        chunk_size: Number of bytes read per chunk

    Raises:
        HttpError: If the response status is not 2xx
        MissingStatusCodeError: If a response has no status code
        TooManyRedirectsError: If the redirect limit is exceeded
    """
    options = options or RequestOptions()
    owns_session = session is None
    session = session or requests.Session()

    try:
        response = _send(session, url, options)
        try:
            content_length = response.headers.get("content-length")
            total_size = int(content_length) if content_length else 0

            downloaded = 0
            start_time = time.time()
            last_progress_time = start_time

            for chunk in response.iter_content(chunk_size=chunk_size):
                if not chunk:
                    continue

                sink.write(chunk)
                downloaded += len(chunk)

                # Report progress (max once per 0.5 seconds to avoid spam)
                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    progress_callback(
                        _make_progress(downloaded, total_size, current_time - start_time)
                    )
                    last_progress_time = current_time

            sink.flush()
        finally:
            response.close()
    finally:
        if owns_session:
            session.close()


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0

    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


__all__ = [
    "RequestOptions",
    "DownloadProgress",
    "request",
    "request_stream",
    "format_progress",
    "DEFAULT_MAX_REDIRECTS",
]

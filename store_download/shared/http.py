"""HTTP utility functions for downloading a single resource.

This module provides session creation, header generation and a one-shot
fetch that writes the response body to an open file. There is no retry
logic: a failed download is terminal for the run.
"""

import logging
import random
from dataclasses import dataclass
from typing import BinaryIO, Dict, Optional
from urllib.parse import urlparse

import requests

from store_download.shared.constants import HTTP
from store_download.shared.errors import FetchError

__all__ = [
    'DEFAULT_USER_AGENTS',
    'FetchResult',
    'create_session',
    'fetch_to_file',
    'get_headers',
]


def _sanitize_url(url: str) -> str:
    """Redact query parameters from URL for safe logging.

    The sanitized URL retains scheme, host, and path but replaces query
    parameters with [REDACTED].

    Args:
        url: URL to sanitize

    Returns:
        Sanitized URL with query parameters redacted
    """
    try:
        parsed = urlparse(url)
        safe_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
        if parsed.query:
            safe_url += "?[REDACTED]"
        return safe_url
    except ValueError:
        return "[INVALID_URL]"


# Default user agents for rotation
DEFAULT_USER_AGENTS = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
]


def get_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    """Get headers dict with optional user agent rotation.

    Args:
        user_agent: User agent string (random if not provided)

    Returns:
        Dictionary of HTTP headers
    """
    if user_agent is None:
        user_agent = random.choice(DEFAULT_USER_AGENTS)

    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Accept-Language": "en-US,en;q=0.5",
        "Connection": "keep-alive",
    }


@dataclass
class FetchResult:
    """Metadata about a completed download."""
    url: str
    final_url: str
    status_code: int
    content_type: Optional[str]
    size: int


def create_session() -> requests.Session:
    """Create a plain requests session. The caller is responsible for closing it."""
    return requests.Session()


def fetch_to_file(
    session: requests.Session,
    url: str,
    dest: BinaryIO,
    timeout: float = HTTP.TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
) -> FetchResult:
    """Download ``url`` and write the body to the open binary file ``dest``.

    Redirects are followed. Any transport error or non-2xx status is raised
    as FetchError; nothing is retried.

    Args:
        session: requests.Session to use
        url: URL to fetch
        dest: Binary file object receiving the body
        timeout: Request timeout in seconds
        headers: Request headers (random browser headers if not provided)

    Returns:
        FetchResult describing the response

    Raises:
        FetchError: If the request fails or the server returns an error status
    """
    safe_url = _sanitize_url(url)
    if headers is None:
        headers = get_headers()

    try:
        response = session.get(
            url,
            headers=headers,
            timeout=timeout,
            allow_redirects=HTTP.ALLOW_REDIRECTS,
            stream=True,
        )
    except requests.exceptions.RequestException as e:
        logging.error(f"Request error for {safe_url}: {e}")
        raise FetchError(f"Failed to download {url}: {e}", url=url) from e

    with response:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logging.error(f"HTTP {response.status_code} for {safe_url}")
            raise FetchError(
                f"Failed to download {url}: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            ) from e

        size = 0
        try:
            for chunk in response.iter_content(chunk_size=HTTP.CHUNK_SIZE):
                if not chunk:
                    continue
                dest.write(chunk)
                size += len(chunk)
        except requests.exceptions.RequestException as e:
            logging.error(f"Connection dropped while reading {safe_url}: {e}")
            raise FetchError(f"Failed to download {url}: {e}", url=url) from e
        dest.flush()

    logging.debug(f"Fetched {size} bytes from {safe_url} (HTTP {response.status_code})")
    return FetchResult(
        url=url,
        final_url=response.url or url,
        status_code=response.status_code,
        content_type=response.headers.get('Content-Type'),
        size=size,
    )

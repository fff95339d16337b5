"""Input validation for the command line."""

import re

from store_download.shared.errors import UsageError

__all__ = [
    'URL_PATTERN',
    'validate_url',
]


URL_PATTERN = re.compile(r'^https?://')


def validate_url(url: str) -> str:
    """Check that ``url`` is an http(s) URL.

    Args:
        url: URL given on the command line

    Returns:
        The URL unchanged

    Raises:
        UsageError: If the URL is empty or does not start with http:// or https://
    """
    if not url:
        raise UsageError("URL is required")
    if not URL_PATTERN.match(url):
        raise UsageError("URL must start with http:// or https://")
    return url

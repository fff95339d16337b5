"""Exception types raised by the download pipeline."""

from typing import Optional

__all__ = [
    'DownloadError',
    'FetchError',
    'FormatError',
    'UsageError',
]


class DownloadError(Exception):
    """Base class for all download pipeline failures."""


class UsageError(DownloadError):
    """Bad or missing command line arguments. Raised before any network call."""


class FetchError(DownloadError):
    """The resource could not be downloaded.

    Attributes:
        url: URL that was requested
        status_code: HTTP status code, or None when no response was received
    """

    def __init__(self, message: str, url: str = '', status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FormatError(DownloadError):
    """Best-effort reformatting of downloaded content failed."""

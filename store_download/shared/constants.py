"""Centralized constants for the store downloader.

Frozen dataclass groups for the magic numbers and literals used across the
fetch, sniff and export steps.

Usage:
    from store_download.shared.constants import HTTP, OUTPUT

    timeout = HTTP.TIMEOUT
    filename = f"{stem}{OUTPUT.STORES_SUFFIX}"
"""

from dataclasses import dataclass

__all__ = [
    'HTTP',
    'HttpDefaults',
    'LOGGING',
    'LoggingDefaults',
    'OUTPUT',
    'OutputDefaults',
    'SNIFF',
    'SniffDefaults',
]


@dataclass(frozen=True)
class HttpDefaults:
    """HTTP request configuration defaults.

    These values can be overridden in config/downloader.yaml or through
    STORE_DOWNLOAD_* environment variables.
    """

    TIMEOUT: int = 30
    """Request timeout in seconds."""

    CHUNK_SIZE: int = 8192
    """Bytes read per iteration when writing the response body to disk."""

    ALLOW_REDIRECTS: bool = True
    """Follow redirects like `curl -L`."""


@dataclass(frozen=True)
class LoggingDefaults:
    """Logging configuration.

    Controls log file rotation settings.
    """

    LOG_FILE: str = "logs/store_download.log"
    """Default log file path when file logging is enabled."""

    MAX_BYTES: int = 5 * 1024 * 1024
    """Maximum log file size before rotation (5MB)."""

    BACKUP_COUNT: int = 3
    """Number of backup log files to keep."""


@dataclass(frozen=True)
class OutputDefaults:
    """Output naming and serialization settings."""

    DEFAULT_STEM: str = "index"
    """Filename stem used when the URL leaves nothing after stripping."""

    STORES_SUFFIX: str = "-stores.json"
    """Suffix replacing the extension when store data is extracted."""

    JSON_INDENT: int = 2
    """Indent used for extracted data and pretty-printed JSON downloads."""

    TEMP_PREFIX: str = "store-download-"
    """Prefix for the temporary file holding fetched bytes."""


@dataclass(frozen=True)
class SniffDefaults:
    """Content sniffing limits."""

    HEAD_BYTES: int = 4096
    """Number of leading bytes inspected for magic numbers and markup."""

    TAR_MAGIC_OFFSET: int = 257
    """Offset of the `ustar` marker in a POSIX tar header."""


# Singleton instances for import
HTTP = HttpDefaults()
LOGGING = LoggingDefaults()
OUTPUT = OutputDefaults()
SNIFF = SniffDefaults()

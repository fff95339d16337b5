"""Shared building blocks for the downloader"""

from .content_type import (
    ContentType,
    decode_text,
    sniff_content,
    sniff_file,
)

from .download_runner import (
    DownloadOutcome,
    run_download,
    temporary_download,
)

from .errors import (
    DownloadError,
    FetchError,
    FormatError,
    UsageError,
)

from .export_service import (
    ExportService,
    pretty_print_json,
)

from .filenames import (
    build_filename,
    destination_path,
    url_to_stem,
)

from .http import (
    DEFAULT_USER_AGENTS,
    FetchResult,
    create_session,
    fetch_to_file,
    get_headers,
)

from .logging_config import setup_logging

from .settings import (
    DownloadSettings,
    load_settings,
)

from .validation import validate_url

__all__ = [
    'ContentType',
    'DEFAULT_USER_AGENTS',
    'DownloadError',
    'DownloadOutcome',
    'DownloadSettings',
    'ExportService',
    'FetchError',
    'FetchResult',
    'FormatError',
    'UsageError',
    'build_filename',
    'create_session',
    'decode_text',
    'destination_path',
    'fetch_to_file',
    'get_headers',
    'load_settings',
    'pretty_print_json',
    'run_download',
    'setup_logging',
    'sniff_content',
    'sniff_file',
    'temporary_download',
    'url_to_stem',
    'validate_url',
]

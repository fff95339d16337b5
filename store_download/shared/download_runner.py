"""Download pipeline orchestration.

One run is strictly sequential: fetch into a temporary file, classify the
bytes, then either extract store data (HTML or unrecognised content) or save the bytes under a
filename derived from the URL. The temporary file is removed on every path.
"""

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

import requests

from store_download.scrapers import DEFAULT_RETAILER, get_scraper_module
from store_download.shared.constants import OUTPUT
from store_download.shared.content_type import ContentType, decode_text, sniff_file
from store_download.shared.export_service import ExportService
from store_download.shared.filenames import build_filename, destination_path
from store_download.shared.http import _sanitize_url, create_session, fetch_to_file, get_headers
from store_download.shared.settings import DownloadSettings
from store_download.shared.validation import validate_url

__all__ = [
    'DownloadOutcome',
    'run_download',
    'temporary_download',
]


@dataclass
class DownloadOutcome:
    """Result of a completed run.

    Args:
        path: Where the output was written
        content_type: Detected type of the fetched bytes
        extracted: True when store data was extracted instead of saving bytes
        store_count: Number of extracted stores (None for passthrough)
    """
    path: Path
    content_type: ContentType
    extracted: bool = False
    store_count: Optional[int] = None


@contextlib.contextmanager
def temporary_download() -> Iterator[Path]:
    """Yield a fresh temporary file path that is deleted on exit.

    The file may already have been moved away by the caller; a missing file
    is not an error.
    """
    temp_fd, temp_path = tempfile.mkstemp(prefix=OUTPUT.TEMP_PREFIX)
    os.close(temp_fd)
    path = Path(temp_path)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def run_download(
    url: str,
    extract_stores: bool = False,
    output_dir: Optional[Union[str, Path]] = None,
    session: Optional[requests.Session] = None,
    settings: Optional[DownloadSettings] = None,
    retailer: str = DEFAULT_RETAILER,
) -> DownloadOutcome:
    """Download ``url`` and write the result next to ``output_dir``.

    Args:
        url: http(s) URL to download
        extract_stores: Extract store listings when the content is HTML
        output_dir: Directory for the output file (default: current directory)
        session: requests.Session to use; a new one is created and closed if omitted
        settings: Runtime settings (defaults if omitted)
        retailer: Extractor to use for store listings

    Returns:
        DownloadOutcome describing what was written

    Raises:
        UsageError: If the URL is not http(s)
        FetchError: If the download fails
    """
    validate_url(url)
    settings = settings or DownloadSettings()
    own_session = session is None
    if own_session:
        session = create_session()

    try:
        with temporary_download() as temp_path:
            with open(temp_path, 'wb') as f:
                fetched = fetch_to_file(
                    session,
                    url,
                    f,
                    timeout=settings.timeout,
                    headers=get_headers(settings.user_agent),
                )

            content_type = sniff_file(temp_path, fetched.content_type)
            logging.info(
                f"Downloaded {fetched.size} bytes from {_sanitize_url(url)} "
                f"as {content_type.mime_type} ({content_type.extension})"
            )

            # Unrecognised content is saved as .html and is scanned like HTML
            if extract_stores and content_type.extension != ContentType.HTML.extension:
                logging.info(f"Content is {content_type.mime_type}, not HTML; saving without store extraction")
                extract_stores = False

            filename = build_filename(url, content_type.extension, extract_stores=extract_stores)
            destination = destination_path(filename, output_dir)

            if extract_stores:
                scraper = get_scraper_module(retailer)
                html = decode_text(temp_path.read_bytes())
                result = scraper.extract_stores(html, retailer=retailer)
                ExportService.export_extraction(result, destination)
                return DownloadOutcome(
                    path=destination,
                    content_type=content_type,
                    extracted=True,
                    store_count=result.total_stores,
                )

            ExportService.save_passthrough(temp_path, destination, content_type)
            return DownloadOutcome(path=destination, content_type=content_type)
    finally:
        if own_session:
            session.close()

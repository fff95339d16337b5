"""Destination filename construction.

The filename is derived from the URL itself:
``https://www.example.com/page/`` becomes ``example.com-page`` plus the
extension of the detected content type.
"""

import re
from pathlib import Path
from typing import Optional, Union

from store_download.shared.constants import OUTPUT

__all__ = [
    'build_filename',
    'destination_path',
    'url_to_stem',
]


_SCHEME_RE = re.compile(r'^https?://')


def url_to_stem(url: str) -> str:
    """Turn a URL into a flat filename stem.

    Strips the scheme, a leading ``www.`` and one trailing slash, then
    replaces the remaining slashes with hyphens.

    Args:
        url: Source URL

    Returns:
        Filename stem, possibly empty
    """
    stem = _SCHEME_RE.sub('', url, count=1)
    if stem.startswith('www.'):
        stem = stem[len('www.'):]
    if stem.endswith('/'):
        stem = stem[:-1]
    return stem.replace('/', '-')


def build_filename(url: str, extension: str, extract_stores: bool = False) -> str:
    """Build the destination filename for a download.

    Args:
        url: Source URL
        extension: Extension of the detected content type, including the dot
        extract_stores: True when store data is being extracted from HTML;
            the extension is then replaced by the stores suffix

    Returns:
        Filename without directory
    """
    stem = url_to_stem(url) or OUTPUT.DEFAULT_STEM
    if extract_stores:
        return f"{stem}{OUTPUT.STORES_SUFFIX}"
    return f"{stem}{extension}"


def destination_path(filename: str, output_dir: Optional[Union[str, Path]] = None) -> Path:
    """Resolve ``filename`` against ``output_dir`` (default: current directory).

    The output directory is created if it does not exist.
    """
    base = Path(output_dir) if output_dir else Path.cwd()
    base.mkdir(parents=True, exist_ok=True)
    return (base / filename).absolute()

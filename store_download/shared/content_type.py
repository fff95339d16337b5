"""Content type detection for downloaded files.

Classifies raw bytes into a fixed set of categories, each tied to one file
extension. Binary formats are recognised by their magic numbers, text
formats by the shape of their leading characters. Anything unrecognised is
UNKNOWN, which is saved with the .html extension.
"""

import json
import re
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from bs4 import UnicodeDammit

from store_download.shared.constants import SNIFF

__all__ = [
    'ContentType',
    'decode_text',
    'sniff_content',
    'sniff_file',
]


class ContentType(Enum):
    """Known content categories."""
    HTML = "html"
    JSON = "json"
    TEXT = "text"
    JAVASCRIPT = "javascript"
    XML = "xml"
    PDF = "pdf"
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    SVG = "svg"
    ZIP = "zip"
    GZIP = "gzip"
    TAR = "tar"
    BZIP2 = "bzip2"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        """File extension including the leading dot."""
        return _EXTENSIONS[self]

    @property
    def mime_type(self) -> str:
        """Canonical MIME type for this category."""
        return _MIME_TYPES[self][0]

    @classmethod
    def from_mime(cls, mime: Optional[str]) -> "ContentType":
        """Map a MIME string (parameters ignored, case-insensitive) to a category."""
        if not mime:
            return cls.UNKNOWN
        base = mime.split(';', 1)[0].strip().lower()
        for content_type, mimes in _MIME_TYPES.items():
            if base in mimes:
                return content_type
        return cls.UNKNOWN


_EXTENSIONS = {
    ContentType.HTML: ".html",
    ContentType.JSON: ".json",
    ContentType.TEXT: ".txt",
    ContentType.JAVASCRIPT: ".js",
    ContentType.XML: ".xml",
    ContentType.PDF: ".pdf",
    ContentType.JPEG: ".jpg",
    ContentType.PNG: ".png",
    ContentType.GIF: ".gif",
    ContentType.SVG: ".svg",
    ContentType.ZIP: ".zip",
    ContentType.GZIP: ".gz",
    ContentType.TAR: ".tar",
    ContentType.BZIP2: ".bz2",
    ContentType.UNKNOWN: ".html",
}

# First entry is the canonical MIME type
_MIME_TYPES = {
    ContentType.HTML: ("text/html", "application/xhtml+xml"),
    ContentType.JSON: ("application/json", "text/json", "application/ld+json"),
    ContentType.TEXT: ("text/plain",),
    ContentType.JAVASCRIPT: ("application/javascript", "text/javascript", "application/x-javascript"),
    ContentType.XML: ("application/xml", "text/xml"),
    ContentType.PDF: ("application/pdf",),
    ContentType.JPEG: ("image/jpeg",),
    ContentType.PNG: ("image/png",),
    ContentType.GIF: ("image/gif",),
    ContentType.SVG: ("image/svg+xml",),
    ContentType.ZIP: ("application/zip", "application/x-zip-compressed"),
    ContentType.GZIP: ("application/gzip", "application/x-gzip"),
    ContentType.TAR: ("application/x-tar",),
    ContentType.BZIP2: ("application/x-bzip2",),
    ContentType.UNKNOWN: ("application/octet-stream",),
}

_MAGIC_NUMBERS = (
    (b"%PDF-", ContentType.PDF),
    (b"\xff\xd8\xff", ContentType.JPEG),
    (b"\x89PNG\r\n\x1a\n", ContentType.PNG),
    (b"GIF87a", ContentType.GIF),
    (b"GIF89a", ContentType.GIF),
    (b"PK\x03\x04", ContentType.ZIP),
    (b"PK\x05\x06", ContentType.ZIP),
    (b"\x1f\x8b", ContentType.GZIP),
    (b"BZh", ContentType.BZIP2),
)

_HTML_MARKERS = re.compile(
    r'<(?:!doctype\s+html|html|head|body|title|meta|script|style|div|iframe|table|h1|p|br|span|ul|li|a)[\s>/]'
)
# Inside an XML declaration only a real html root counts
_XHTML_MARKERS = re.compile(r'<(?:!doctype\s+html|html)[\s>/]')

# Declared types trusted for text that does not identify itself
_TEXT_HINTS = frozenset({
    ContentType.HTML,
    ContentType.JSON,
    ContentType.JAVASCRIPT,
    ContentType.XML,
})


def _decode_head(head: bytes) -> Optional[str]:
    """Decode leading bytes as text, or return None if they look binary."""
    if b"\x00" in head:
        return None
    try:
        return head.decode('utf-8')
    except UnicodeDecodeError as e:
        # A multi-byte character cut off at the end of the sample is still text
        if e.start >= len(head) - 3:
            return head[:e.start].decode('utf-8', errors='replace')

    text = head.decode('latin-1')
    control = sum(
        1 for ch in text
        if (ord(ch) < 32 and ch not in '\t\n\r\f\b') or 0x7f <= ord(ch) < 0xa0
    )
    if control > len(text) * 0.1:
        return None
    return text


def _is_json(data: bytes) -> bool:
    try:
        json.loads(data.decode('utf-8-sig'))
    except (UnicodeDecodeError, ValueError):
        return False
    return True


def _classify_markup(lowered: str, declared: ContentType) -> Optional[ContentType]:
    """Classify text that begins with '<'.

    XML is reported for documents with an XML declaration, or for an
    unrecognised leading tag that the server did not declare as HTML.
    """
    if lowered.startswith('<?xml'):
        if '<svg' in lowered:
            return ContentType.SVG
        if _XHTML_MARKERS.search(lowered):
            return ContentType.HTML
        return ContentType.XML
    if lowered.startswith('<svg'):
        return ContentType.SVG
    if _HTML_MARKERS.search(lowered):
        return ContentType.HTML
    # Comments often precede the doctype
    if lowered.startswith('<!--') and 'html' in lowered:
        return ContentType.HTML
    if re.match(r'<[a-z_][\w.:-]*[\s>/]', lowered):
        if declared is ContentType.HTML:
            return ContentType.HTML
        return ContentType.XML
    return None


def sniff_content(data: bytes, declared_type: Optional[str] = None) -> ContentType:
    """Classify downloaded bytes.

    Args:
        data: Full response body
        declared_type: Optional Content-Type header, used only for text that
            cannot be classified from its own contents

    Returns:
        The detected ContentType (UNKNOWN for empty or unrecognised binary data)
    """
    head = data[:SNIFF.HEAD_BYTES]
    if not head:
        return ContentType.UNKNOWN

    for magic, content_type in _MAGIC_NUMBERS:
        if head.startswith(magic):
            return content_type
    offset = SNIFF.TAR_MAGIC_OFFSET
    if head[offset:offset + 5] == b"ustar":
        return ContentType.TAR

    text = _decode_head(head)
    if text is None:
        return ContentType.UNKNOWN

    declared = ContentType.from_mime(declared_type)
    stripped = text.lstrip('\ufeff').lstrip()
    lowered = stripped.lower()
    if lowered.startswith('<'):
        markup_type = _classify_markup(lowered, declared)
        if markup_type is not None:
            return markup_type

    if stripped[:1] in ('{', '[') and _is_json(data):
        return ContentType.JSON

    if declared in _TEXT_HINTS:
        # Declared JSON must actually parse to be pretty-printed later
        if declared is ContentType.JSON and not _is_json(data):
            return ContentType.TEXT
        return declared
    return ContentType.TEXT


def sniff_file(path: Union[str, Path], declared_type: Optional[str] = None) -> ContentType:
    """Classify a file on disk.

    Only the leading bytes are read unless the content may be JSON, in which
    case the whole file is parsed.

    Args:
        path: File to inspect
        declared_type: Optional Content-Type header from the server

    Returns:
        The detected ContentType
    """
    path = Path(path)
    with open(path, 'rb') as f:
        head = f.read(SNIFF.HEAD_BYTES)

    stripped = head.lstrip(b"\xef\xbb\xbf \t\r\n")
    if len(head) == SNIFF.HEAD_BYTES and stripped[:1] in (b"{", b"["):
        return sniff_content(path.read_bytes(), declared_type)
    return sniff_content(head, declared_type)


def decode_text(data: bytes) -> str:
    """Decode downloaded markup to text.

    UTF-8 is tried first; otherwise the encoding declared in the document or
    guessed from its bytes is used. Undecodable bytes never raise.
    """
    dammit = UnicodeDammit(data, ["utf-8"], is_html=True)
    if dammit.unicode_markup is None:
        return data.decode('utf-8', errors='replace')
    return dammit.unicode_markup

"""
Export Service - writes downloaded content and extracted store data to disk.

Two output modes are supported:
- passthrough: the fetched bytes are moved to the destination unchanged,
  except that JSON is re-indented when it parses
- extraction: an extraction result is serialized as indented JSON
"""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from store_download.shared.constants import OUTPUT
from store_download.shared.content_type import ContentType
from store_download.shared.errors import FormatError

__all__ = [
    'ExportService',
    'pretty_print_json',
]


def pretty_print_json(data: bytes) -> bytes:
    """Re-indent a JSON document.

    Args:
        data: Raw JSON bytes (UTF-8, optional BOM)

    Returns:
        Indented UTF-8 JSON with a trailing newline, non-ASCII characters kept

    Raises:
        FormatError: If the content is not valid JSON
    """
    try:
        parsed = json.loads(data.decode('utf-8-sig'))
    except (UnicodeDecodeError, ValueError) as e:
        raise FormatError(f"Content is not valid JSON: {e}") from e
    text = json.dumps(parsed, indent=OUTPUT.JSON_INDENT, ensure_ascii=False)
    return (text + "\n").encode('utf-8')


class ExportService:
    """Service for writing download results to disk."""

    @staticmethod
    def save_passthrough(
        source: Union[str, Path],
        destination: Union[str, Path],
        content_type: ContentType,
    ) -> Path:
        """Move fetched bytes from ``source`` to ``destination``.

        JSON content is pretty-printed first when possible; if reformatting
        fails the original bytes are kept.

        Args:
            source: Temporary file holding the fetched bytes
            destination: Final output path
            content_type: Detected content type of the bytes

        Returns:
            The destination path
        """
        source = Path(source)
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        if content_type is ContentType.JSON:
            try:
                formatted = pretty_print_json(source.read_bytes())
            except FormatError as e:
                logging.debug(f"Keeping JSON as downloaded: {e}")
            else:
                ExportService._write_atomic(formatted, destination)
                source.unlink(missing_ok=True)
                logging.info(f"Saved pretty-printed JSON to {destination}")
                return destination

        shutil.move(str(source), str(destination))
        logging.info(f"Saved {content_type.value.upper()} content to {destination}")
        return destination

    @staticmethod
    def export_extraction(result: Any, destination: Union[str, Path]) -> Path:
        """Serialize an extraction result as indented UTF-8 JSON.

        Args:
            result: Object with a ``to_dict()`` method, or a plain dict
            destination: Output path

        Returns:
            The destination path
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = result.to_dict() if hasattr(result, 'to_dict') else result
        with open(destination, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=OUTPUT.JSON_INDENT, ensure_ascii=False)

        logging.info(f"Exported {data.get('total_stores', 0)} stores to JSON: {destination}")
        return destination

    @staticmethod
    def _write_atomic(data: bytes, destination: Path) -> None:
        """Write bytes next to ``destination`` then rename into place."""
        temp_fd, temp_path = tempfile.mkstemp(
            suffix='.tmp',
            dir=destination.parent,
            prefix=destination.name + '.'
        )
        try:
            with os.fdopen(temp_fd, 'wb') as f:
                f.write(data)
            os.replace(temp_path, str(destination))
        except OSError:
            Path(temp_path).unlink(missing_ok=True)
            raise

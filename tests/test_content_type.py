"""Tests for content type detection."""

import gzip
import io
import json
import tarfile
import zipfile

import pytest

from store_download.shared.constants import SNIFF
from store_download.shared.content_type import (
    ContentType,
    decode_text,
    sniff_content,
    sniff_file,
)


class TestContentType:
    """Tests for the ContentType enum."""

    @pytest.mark.parametrize('content_type,extension', [
        (ContentType.HTML, '.html'),
        (ContentType.JSON, '.json'),
        (ContentType.TEXT, '.txt'),
        (ContentType.JAVASCRIPT, '.js'),
        (ContentType.XML, '.xml'),
        (ContentType.PDF, '.pdf'),
        (ContentType.JPEG, '.jpg'),
        (ContentType.PNG, '.png'),
        (ContentType.GIF, '.gif'),
        (ContentType.SVG, '.svg'),
        (ContentType.ZIP, '.zip'),
        (ContentType.GZIP, '.gz'),
        (ContentType.TAR, '.tar'),
        (ContentType.BZIP2, '.bz2'),
    ])
    def test_extensions(self, content_type, extension):
        """Test each category maps to its extension."""
        assert content_type.extension == extension

    def test_unknown_uses_html_extension(self):
        """Test that unrecognised content is saved as .html."""
        assert ContentType.UNKNOWN.extension == '.html'

    def test_from_mime(self):
        """Test MIME string mapping ignores parameters and case."""
        assert ContentType.from_mime('text/html; charset=UTF-8') is ContentType.HTML
        assert ContentType.from_mime('Application/JSON') is ContentType.JSON
        assert ContentType.from_mime('text/xml') is ContentType.XML
        assert ContentType.from_mime('application/x-bzip2') is ContentType.BZIP2
        assert ContentType.from_mime('video/mp4') is ContentType.UNKNOWN
        assert ContentType.from_mime(None) is ContentType.UNKNOWN

    def test_mime_type(self):
        """Test canonical MIME types."""
        assert ContentType.PNG.mime_type == 'image/png'
        assert ContentType.GZIP.mime_type == 'application/gzip'


class TestSniffBinary:
    """Tests for magic number detection."""

    @pytest.mark.parametrize('data,expected', [
        (b'%PDF-1.7\n%\xe2\xe3\xcf\xd3', ContentType.PDF),
        (b'\xff\xd8\xff\xe0\x00\x10JFIF\x00', ContentType.JPEG),
        (b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR', ContentType.PNG),
        (b'GIF89a\x01\x00\x01\x00', ContentType.GIF),
        (b'GIF87a\x01\x00\x01\x00', ContentType.GIF),
        (b'BZh91AY&SY', ContentType.BZIP2),
    ])
    def test_magic_numbers(self, data, expected):
        """Test signatures of common binary formats."""
        assert sniff_content(data) is expected

    def test_zip_archive(self):
        """Test a real zip archive."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w') as archive:
            archive.writestr('stores.txt', 'hello')
        assert sniff_content(buffer.getvalue()) is ContentType.ZIP

    def test_gzip_stream(self):
        """Test gzip-compressed data."""
        assert sniff_content(gzip.compress(b'{"a": 1}')) is ContentType.GZIP

    def test_tar_archive(self):
        """Test the ustar marker of a tar archive."""
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode='w', format=tarfile.USTAR_FORMAT) as archive:
            payload = b'hello'
            info = tarfile.TarInfo('stores.txt')
            info.size = len(payload)
            archive.addfile(info, io.BytesIO(payload))
        assert sniff_content(buffer.getvalue()) is ContentType.TAR

    def test_unrecognised_binary(self):
        """Test binary data without a known signature."""
        assert sniff_content(b'\x00\x01\x02\x03\xfe\xfd') is ContentType.UNKNOWN

    def test_empty(self):
        """Test that empty content is UNKNOWN."""
        assert sniff_content(b'') is ContentType.UNKNOWN


class TestSniffText:
    """Tests for text format detection."""

    def test_html_doctype(self, directory_html):
        """Test an HTML document with doctype."""
        assert sniff_content(directory_html.encode('utf-8')) is ContentType.HTML

    def test_html_without_doctype(self):
        """Test HTML starting with a bare tag."""
        assert sniff_content(b'  <html><body>hi</body></html>') is ContentType.HTML
        assert sniff_content(b'<div class="x">fragment</div>') is ContentType.HTML

    @pytest.mark.parametrize('data', [
        b'<a href="/nsw/sydney/1-main-st" class="Directory-listLink" data-count="(1)">Sydney</a>',
        b'<table><tr><td>Stores</td></tr></table>',
        b'<style>.Hero-title { color: red; }</style>',
        b'<ul class="Directory-list"><li>Sydney</li></ul>',
        b'<span class="Hero-title">ALDI Stores</span>',
        b'<p>Opening hours</p>',
        b'<h1 class="Hero-heading">Stores</h1>',
    ])
    def test_html_fragments(self, data):
        """Test fragments starting with common body tags are HTML."""
        assert sniff_content(data) is ContentType.HTML

    def test_unknown_tag_declared_html(self):
        """Test an unrecognised leading tag served as text/html is HTML."""
        data = b'<nav class="Directory"><section>Stores</section></nav>'
        assert sniff_content(data, 'text/html; charset=utf-8') is ContentType.HTML
        assert sniff_content(data) is ContentType.XML

    def test_xml_declaration_with_title_is_xml(self):
        """Test a feed with a title element under an XML declaration stays XML."""
        data = b'<?xml version="1.0"?><rss><channel><title>Stores</title></channel></rss>'
        assert sniff_content(data, 'text/html') is ContentType.XML

    def test_xhtml_document(self):
        """Test an XML declaration followed by an html root is HTML."""
        data = b'<?xml version="1.0"?>\n<html xmlns="http://www.w3.org/1999/xhtml"></html>'
        assert sniff_content(data) is ContentType.HTML

    def test_html_after_comment(self):
        """Test a leading comment before the doctype."""
        assert sniff_content(b'<!-- generated -->\n<!DOCTYPE html><html></html>') is ContentType.HTML

    def test_html_with_bom(self):
        """Test a UTF-8 byte order mark before the markup."""
        assert sniff_content(b'\xef\xbb\xbf<!doctype html><html></html>') is ContentType.HTML

    def test_json_object_and_array(self):
        """Test JSON documents."""
        assert sniff_content(b'{"stores": [1, 2]}') is ContentType.JSON
        assert sniff_content(b'\n  [1, 2, 3]') is ContentType.JSON

    def test_invalid_json_is_text(self):
        """Test that brace-prefixed text that does not parse is plain text."""
        assert sniff_content(b'{"incomplete": "json"') is ContentType.TEXT

    def test_xml(self):
        """Test XML with and without a declaration."""
        assert sniff_content(b'<?xml version="1.0"?><urlset></urlset>') is ContentType.XML
        assert sniff_content(b'<urlset xmlns="http://www.sitemaps.org/"></urlset>') is ContentType.XML

    def test_svg(self):
        """Test SVG with and without an XML declaration."""
        assert sniff_content(b'<svg xmlns="http://www.w3.org/2000/svg"></svg>') is ContentType.SVG
        assert sniff_content(
            b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"></svg>'
        ) is ContentType.SVG

    def test_plain_text(self):
        """Test text with no recognisable structure."""
        assert sniff_content(b'just some notes\nline two\n') is ContentType.TEXT

    def test_latin1_text(self):
        """Test non-UTF-8 text is still text."""
        assert sniff_content('Caf\xe9 cr\xe8me'.encode('latin-1')) is ContentType.TEXT


class TestDeclaredTypeHint:
    """Tests for the Content-Type hint on ambiguous text."""

    def test_javascript_hint(self):
        """Test that scripts are recognised from the declared type."""
        data = b'function hello() { return 1; }'
        assert sniff_content(data, 'application/javascript') is ContentType.JAVASCRIPT
        assert sniff_content(data) is ContentType.TEXT

    def test_hint_does_not_override_content(self):
        """Test that the bytes win over a wrong declared type."""
        assert sniff_content(b'%PDF-1.4', 'text/html') is ContentType.PDF
        assert sniff_content(b'{"a": 1}', 'text/plain') is ContentType.JSON

    def test_declared_json_must_parse(self):
        """Test that declared JSON that does not parse is plain text."""
        assert sniff_content(b'not json', 'application/json') is ContentType.TEXT


class TestSniffFile:
    """Tests for sniff_file function."""

    def test_small_file(self, tmp_path):
        """Test sniffing a small file on disk."""
        path = tmp_path / 'page'
        path.write_bytes(b'<!DOCTYPE html><html></html>')
        assert sniff_file(path) is ContentType.HTML

    def test_large_json_file(self, tmp_path):
        """Test that JSON larger than the sniff window is validated in full."""
        path = tmp_path / 'data'
        payload = {'stores': [{'id': i, 'name': f'Store {i}'} for i in range(SNIFF.HEAD_BYTES)]}
        path.write_bytes(json.dumps(payload).encode('utf-8'))
        assert sniff_file(path) is ContentType.JSON


class TestDecodeText:
    """Tests for decode_text function."""

    def test_utf8(self):
        """Test UTF-8 bytes decode unchanged."""
        assert decode_text('Café'.encode('utf-8')) == 'Café'

    def test_declared_charset(self):
        """Test a page in its declared legacy encoding."""
        html = '<html><head><meta charset="windows-1252"></head><body>Caf\xe9</body></html>'
        assert 'Café' in decode_text(html.encode('windows-1252'))

    def test_invalid_bytes_do_not_raise(self):
        """Test undecodable bytes still give text."""
        assert isinstance(decode_text(b'\x80\x81\x82\x83\x84'), str)

"""Pytest configuration and fixtures for downloader tests"""

import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import requests
from unittest.mock import MagicMock


SAMPLE_DIRECTORY_HTML = """<!DOCTYPE html>
<html>
<head><title>ALDI Stores in Sydney</title></head>
<body>
  <h1 class="Hero-heading">
    <span class="Hero-title">ALDI Stores</span>
    <span class="Hero-geo">Sydney, NSW</span>
  </h1>
  <ul class="Directory-listLinks">
    <li class="Directory-listItem">
      <a class="Directory-listLink" href="/nsw/sydney/123-main-street" data-count="(3)">
        <span class="Directory-listLinkText">Sydney CBD</span>
      </a>
    </li>
    <li class="Directory-listItem">
      <a class="Directory-listLink" href="/nsw/st-kilda/7-acland-st" data-count="(1)">
        <span class="Directory-listLinkText">St Kilda</span>
      </a>
    </li>
    <li class="Directory-listItem">
      <a class="Directory-listLink" href="/nsw/bondi-junction">
        <span class="Directory-listLinkText">Bondi Junction</span>
      </a>
    </li>
  </ul>
</body>
</html>
"""


@pytest.fixture
def directory_html():
    """ALDI directory page with three store links"""
    return SAMPLE_DIRECTORY_HTML


@pytest.fixture
def mock_response_factory():
    """Factory for creating mock streamed HTTP responses.

    Usage:
        response = mock_response_factory(content=b'{"a": 1}', headers={'Content-Type': 'application/json'})
        response = mock_response_factory(status_code=404)
    """
    def _create_response(
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[dict] = None,
        url: str = "https://example.com/",
        raise_error: Optional[Exception] = None
    ):
        """Create a mock response object usable as a context manager.

        Args:
            status_code: HTTP status code
            content: Response body
            headers: Response headers
            url: Final URL after redirects
            raise_error: Exception raised while iterating the body

        Returns:
            MagicMock response object
        """
        response = MagicMock()
        response.status_code = status_code
        response.headers = headers or {}
        response.url = url
        response.__enter__.return_value = response
        response.__exit__.return_value = False

        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error", response=response
            )
        else:
            response.raise_for_status.return_value = None

        if raise_error:
            response.iter_content.side_effect = raise_error
        else:
            response.iter_content.return_value = [content] if content else []

        return response

    return _create_response


@pytest.fixture
def mock_session(mock_response_factory):
    """Factory for a mock session whose get() returns one canned response."""
    def _create(**response_kwargs):
        session = MagicMock(spec=requests.Session)
        session.get.return_value = mock_response_factory(**response_kwargs)
        return session
    return _create

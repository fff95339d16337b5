"""Tests for the command line interface."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add parent directory to path to import run module
sys.path.insert(0, str(Path(__file__).parent.parent))

from run import main, setup_parser
from store_download.shared.content_type import ContentType
from store_download.shared.download_runner import DownloadOutcome
from store_download.shared.errors import FetchError


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keep a developer's .env file out of CLI tests."""
    monkeypatch.setattr('run.load_dotenv', lambda *args, **kwargs: False)


class TestSetupParser:
    """Tests for argument parsing."""

    def test_url_and_flag(self):
        """Test the URL and --extract-stores flag are parsed."""
        args = setup_parser().parse_args(['https://example.com', '--extract-stores'])
        assert args.urls == ['https://example.com']
        assert args.extract_stores is True

    def test_flag_defaults_off(self):
        """Test --extract-stores is off by default."""
        args = setup_parser().parse_args(['https://example.com'])
        assert args.extract_stores is False
        assert args.output_dir is None


class TestMain:
    """Tests for main() exit codes and output."""

    def test_no_url_prints_usage(self, capsys):
        """Test that no URL prints help and exits 1."""
        with patch('run.run_download') as mock_run:
            assert main([]) == 1

        mock_run.assert_not_called()
        assert 'usage:' in capsys.readouterr().out.lower()

    def test_invalid_scheme_rejected_before_network(self, capsys):
        """Test a non-http URL exits 1 without downloading."""
        with patch('run.run_download') as mock_run:
            assert main(['ftp://example.com/file']) == 1

        mock_run.assert_not_called()
        assert 'must start with http:// or https://' in capsys.readouterr().out

    def test_success_prints_path(self, tmp_path, capsys):
        """Test a passthrough download prints the saved path."""
        outcome = DownloadOutcome(path=tmp_path / 'example.com-page.html', content_type=ContentType.HTML)
        with patch('run.run_download', return_value=outcome) as mock_run:
            assert main(['https://www.example.com/page/']) == 0

        assert mock_run.call_args.kwargs['extract_stores'] is False
        out = capsys.readouterr().out
        assert 'Downloading https://www.example.com/page/' in out
        assert f"Saved to {tmp_path / 'example.com-page.html'}" in out

    def test_extraction_prints_count(self, tmp_path, capsys):
        """Test an extraction run prints the store count and path."""
        path = tmp_path / 'store.aldi.com.au-nsw-stores.json'
        outcome = DownloadOutcome(path=path, content_type=ContentType.HTML, extracted=True, store_count=42)
        with patch('run.run_download', return_value=outcome) as mock_run:
            assert main(['https://store.aldi.com.au/nsw', '--extract-stores']) == 0

        assert mock_run.call_args.kwargs['extract_stores'] is True
        assert f"Extracted 42 stores to {path}" in capsys.readouterr().out

    def test_fetch_error_exits_one(self, capsys):
        """Test a failed download prints an error and exits 1."""
        error = FetchError('boom', url='https://example.com/x')
        with patch('run.run_download', side_effect=error):
            assert main(['https://example.com/x']) == 1

        assert 'Error: Failed to download https://example.com/x' in capsys.readouterr().out

    def test_only_first_url_used(self):
        """Test extra positional arguments are ignored."""
        outcome = DownloadOutcome(path=Path('a.html'), content_type=ContentType.HTML)
        with patch('run.run_download', return_value=outcome) as mock_run:
            assert main(['https://a.example.com', 'https://b.example.com']) == 0

        assert mock_run.call_args.args[0] == 'https://a.example.com'

    def test_unknown_options_ignored(self):
        """Test unrecognised options do not abort the run."""
        outcome = DownloadOutcome(path=Path('a.html'), content_type=ContentType.HTML)
        with patch('run.run_download', return_value=outcome):
            assert main(['https://a.example.com', '--bogus']) == 0

    def test_keyboard_interrupt(self):
        """Test Ctrl-C exits 130."""
        with patch('run.run_download', side_effect=KeyboardInterrupt):
            assert main(['https://example.com']) == 130

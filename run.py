#!/usr/bin/env python3
"""
Store Downloader - save any URL to disk, optionally extracting ALDI store data

Usage:
    python run.py https://example.com/data.json                       # Save with detected extension
    python run.py https://store.aldi.com.au/nsw --extract-stores      # Extract store listing to JSON
    python run.py https://store.aldi.com.au/nsw --extract-stores --output-dir data
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from store_download.shared.download_runner import run_download
from store_download.shared.errors import FetchError, UsageError
from store_download.shared.logging_config import setup_logging
from store_download.shared.settings import load_settings
from store_download.shared.validation import validate_url


DEFAULT_CONFIG = str(Path(__file__).resolve().parent / "config" / "downloader.yaml")


def setup_parser() -> argparse.ArgumentParser:
    """Setup command line argument parser"""
    parser = argparse.ArgumentParser(
        prog='store-download',
        description="Downloader that can extract ALDI store data from HTML to JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Only the first positional is used; extras are ignored
    parser.add_argument(
        'urls',
        nargs='*',
        metavar='URL',
        help='http:// or https:// URL to download'
    )
    parser.add_argument(
        '--extract-stores',
        action='store_true',
        help='Extract ALDI store data from HTML to JSON'
    )
    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        default=None,
        help='Directory for the output file (default: current directory)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=DEFAULT_CONFIG,
        help='Path to downloader settings YAML'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the downloader and return the process exit code."""
    load_dotenv()

    parser = setup_parser()
    args, unknown = parser.parse_known_args(argv)

    settings = load_settings(args.config)
    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(settings.log_file if settings.log_to_file else None, level=log_level)

    if unknown:
        logging.warning(f"Ignoring unrecognized arguments: {' '.join(unknown)}")

    if not args.urls:
        parser.print_help()
        return 1

    url = args.urls[0]
    try:
        validate_url(url)
    except UsageError as e:
        print(f"Error: {e}")
        return 1

    print(f"Downloading {url}")
    try:
        outcome = run_download(
            url,
            extract_stores=args.extract_stores,
            output_dir=args.output_dir,
            settings=settings,
        )
    except FetchError as e:
        logging.debug(f"Fetch failed: {e}")
        print(f"Error: Failed to download {url}")
        return 1
    except KeyboardInterrupt:
        logging.info("Download interrupted by user")
        return 130

    if outcome.extracted:
        print(f"Extracted {outcome.store_count} stores to {outcome.path}")
    else:
        print(f"Saved to {outcome.path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())

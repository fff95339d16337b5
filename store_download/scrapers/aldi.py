"""Store extraction for ALDI store locator directory pages

ALDI directory pages list stores as flat link elements:
- <a class="Directory-listLink" href="/state/suburb/address-slug" data-count="(N)">
- store name inside <span class="Directory-listLinkText">
- page heading and region in <span class="Hero-title"> / <span class="Hero-geo">

The page is scanned as a stream of tag and text events rather than built
into a tree, so markup the parser does not recognise is skipped instead of
breaking the extraction.
"""

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from store_download.scrapers import DEFAULT_RETAILER

__all__ = [
    'AldiStoreParser',
    'ExtractionResult',
    'StoreRecord',
    'extract_stores',
    'parse_store_count',
    'parse_store_path',
    'slug_to_address',
    'title_case',
]

# Constants for the default retailer; parsers may be given another config module
_DEFAULT_CONFIG = get_config(DEFAULT_RETAILER)


_NON_DIGITS = re.compile(r'[^\d]')


@dataclass
class StoreRecord:
    """Data model for one store locator entry"""
    url_path: str           # /nsw/sydney/123-main-street
    state: str              # NSW
    suburb: str             # Sydney
    address_slug: str       # 123-main-street
    address: str            # 123 Main Street
    store_count: int = 1    # parsed from data-count="(3)"
    name: Optional[str] = None  # text of Directory-listLinkText

    def to_dict(self) -> dict:
        """Convert to dictionary for export.

        ``name`` is left out when the link had no name span.
        """
        data = {
            'url_path': self.url_path,
            'state': self.state,
            'suburb': self.suburb,
            'address_slug': self.address_slug,
            'address': self.address,
            'store_count': self.store_count,
        }
        if self.name is not None:
            data['name'] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreRecord":
        return cls(
            url_path=data.get('url_path', ''),
            state=data.get('state', ''),
            suburb=data.get('suburb', ''),
            address_slug=data.get('address_slug', ''),
            address=data.get('address', ''),
            store_count=int(data.get('store_count', 1)),
            name=data.get('name'),
        )


@dataclass
class ExtractionResult:
    """Stores and page metadata recovered from one directory page"""
    source: str = _DEFAULT_CONFIG.SOURCE_LABEL
    page_title: Optional[str] = None
    location: Optional[str] = None
    stores: List[StoreRecord] = field(default_factory=list)

    @property
    def total_stores(self) -> int:
        return len(self.stores)

    def to_dict(self) -> dict:
        """Convert to dictionary for export (stable key order)"""
        return {
            'source': self.source,
            'page_title': self.page_title,
            'location': self.location,
            'total_stores': self.total_stores,
            'stores': [store.to_dict() for store in self.stores],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractionResult":
        """Rebuild a result from its exported dictionary form.

        ``total_stores`` is derived from the store list, not read back.
        """
        return cls(
            source=data.get('source', _DEFAULT_CONFIG.SOURCE_LABEL),
            page_title=data.get('page_title'),
            location=data.get('location'),
            stores=[StoreRecord.from_dict(item) for item in data.get('stores') or []],
        )


def title_case(value: str) -> str:
    """Capitalize the first letter of each word and lowercase the rest.

    A word starts after any non-letter character, so hyphens, spaces and
    apostrophes all begin a new word ("st-kilda" -> "St-Kilda").
    """
    return value.title()


def parse_store_count(value: Optional[str]) -> int:
    """Parse a data-count annotation such as "(12)".

    All non-digit characters are dropped; an empty remainder means 1.

    Examples:
        "(12)" -> 12
        "abc"  -> 1
    """
    digits = _NON_DIGITS.sub('', value or '')
    return int(digits) if digits else 1


def slug_to_address(slug: str) -> str:
    """Convert an address slug to readable form: "123-main-street" -> "123 Main Street"."""
    if not slug:
        return ''
    return title_case(slug.replace('-', ' '))


def parse_store_path(href: str) -> Tuple[str, str, str]:
    """Split a directory link into (state, suburb, address_slug).

    Leading and trailing slashes are ignored; missing segments are ''.
    Values are returned as they appear in the link.
    """
    parts = href.strip('/').split('/')
    state = parts[0] if len(parts) > 0 else ''
    suburb = parts[1] if len(parts) > 1 else ''
    address_slug = parts[2] if len(parts) > 2 else ''
    return state, suburb, address_slug


def _has_class(attrs: Dict[str, Optional[str]], token: str) -> bool:
    # Substring match on the raw class attribute
    return token in (attrs.get('class') or '')


class AldiStoreParser(HTMLParser):
    """Tag-stream scanner for ALDI directory pages.

    State is kept in four flags plus the store currently being built. A
    store is only added to ``stores`` when its link closes; spans are
    assumed not to nest, so any closing span clears all span flags.
    """

    def __init__(self, config=None) -> None:
        super().__init__(convert_charrefs=True)
        self.config = config if config is not None else _DEFAULT_CONFIG
        self.stores: List[StoreRecord] = []
        self.current_store: Optional[StoreRecord] = None
        self.in_store_link = False
        self.in_store_name = False
        self.in_title = False
        self.in_geo = False
        self.page_title: Optional[str] = None
        self.page_location: Optional[str] = None

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attrs_dict = dict(attrs)

        if tag == 'span' and _has_class(attrs_dict, self.config.HERO_TITLE_CLASS):
            self.in_title = True

        if tag == 'span' and _has_class(attrs_dict, self.config.HERO_GEO_CLASS):
            self.in_geo = True

        if tag == 'a' and _has_class(attrs_dict, self.config.STORE_LINK_CLASS):
            self.in_store_link = True
            self.current_store = self._build_store(attrs_dict)

        if tag == 'span' and _has_class(attrs_dict, self.config.STORE_NAME_CLASS):
            self.in_store_name = True

    def handle_endtag(self, tag: str) -> None:
        if tag == 'a' and self.in_store_link:
            if self.current_store is not None:
                self.stores.append(self.current_store)
                self.current_store = None
            self.in_store_link = False
        if tag == 'span':
            self.in_store_name = False
            self.in_title = False
            self.in_geo = False

    def handle_data(self, data: str) -> None:
        if self.in_store_name and self.current_store is not None:
            self.current_store.name = data.strip()
        if self.in_title:
            self.page_title = data.strip()
        if self.in_geo:
            self.page_location = data.strip()

    def _build_store(self, attrs: Dict[str, Optional[str]]) -> StoreRecord:
        href = attrs.get('href') or ''
        count = attrs.get(self.config.COUNT_ATTRIBUTE)
        if count is None:
            count = self.config.DEFAULT_COUNT

        state, suburb, address_slug = parse_store_path(href)
        return StoreRecord(
            url_path=href,
            state=state.upper(),
            suburb=title_case(suburb),
            address_slug=address_slug,
            address=slug_to_address(address_slug),
            store_count=parse_store_count(count),
        )

    def result(self) -> ExtractionResult:
        return ExtractionResult(
            source=self.config.SOURCE_LABEL,
            page_title=self.page_title,
            location=self.page_location,
            stores=list(self.stores),
        )


def extract_stores(html: str, retailer: str = DEFAULT_RETAILER) -> ExtractionResult:
    """Extract store records from an ALDI directory page.

    Each call uses a fresh parser, so results never leak between pages.
    Unrecognised or malformed markup is skipped.

    Args:
        html: Page HTML as text
        retailer: Retailer whose config supplies the class tokens (also used in log messages)

    Returns:
        ExtractionResult with stores in document order
    """
    parser = AldiStoreParser(get_config(retailer))
    try:
        parser.feed(html)
        parser.close()
    except AssertionError as e:
        # html.parser gives up on some malformed declarations (e.g. "<![bogus[")
        logging.warning(f"[{retailer}] Stopped parsing at malformed markup: {e}")

    result = parser.result()
    if parser.current_store is not None:
        logging.debug(f"[{retailer}] Dropped unterminated store link {parser.current_store.url_path}")
    logging.info(f"[{retailer}] Extracted {result.total_stores} stores")
    return result

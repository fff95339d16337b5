"""Store locator extractors registry"""

import importlib
from typing import Dict, List

# Registry of available extractors
SCRAPER_REGISTRY: Dict[str, str] = {
    'aldi': 'store_download.scrapers.aldi',
}

# Extractor used by --extract-stores
DEFAULT_RETAILER = 'aldi'


def get_available_retailers() -> List[str]:
    """Get list of all registered retailer names"""
    return list(SCRAPER_REGISTRY.keys())


def get_scraper_module(retailer: str = DEFAULT_RETAILER):
    """Dynamically import and return an extractor module"""
    if retailer not in SCRAPER_REGISTRY:
        raise ValueError(f"Unknown retailer: {retailer}. Available: {get_available_retailers()}")
    return importlib.import_module(SCRAPER_REGISTRY[retailer])


__all__ = ['DEFAULT_RETAILER', 'SCRAPER_REGISTRY', 'get_available_retailers', 'get_scraper_module']

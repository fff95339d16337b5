"""Configuration module for store locator extractors"""

import importlib

# Mapping of retailer names to their config modules
CONFIG_MODULES = {
    'aldi': 'config.aldi_config',
}

def get_config(retailer: str):
    """Get configuration module for a retailer"""
    if retailer not in CONFIG_MODULES:
        raise ValueError(f"Unknown retailer: {retailer}")
    return importlib.import_module(CONFIG_MODULES[retailer])

__all__ = ['get_config', 'CONFIG_MODULES']

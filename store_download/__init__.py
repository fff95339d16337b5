"""Store downloader: fetch a URL, detect its type and save it, optionally extracting store listings"""

__version__ = "1.0.0"

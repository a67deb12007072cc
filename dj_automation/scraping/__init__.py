"""
Scraping Layer.

This package drives a headless browser to read song metadata from rendered
pages that offer no API.
"""

from .browser import BrowserSessionManager
from .extractor import DomExtractor
from .tunebat import TUNEBAT_FIELDS, TunebatClient

__all__ = ["BrowserSessionManager", "DomExtractor", "TUNEBAT_FIELDS", "TunebatClient"]

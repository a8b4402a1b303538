"""
Scrape providers: product URL -> raw composition text (+ markup).

The browser provider needs Playwright and is imported lazily by callers.
"""

from .base import CompositionProvider, ScrapeResult
from .http_provider import HttpCompositionProvider
from .markup_extractor import extract_composition_text
from .zara_provider import ZaraCompositionProvider, composition_text_from_api

__all__ = [
    "CompositionProvider",
    "ScrapeResult",
    "HttpCompositionProvider",
    "ZaraCompositionProvider",
    "composition_text_from_api",
    "extract_composition_text",
]

"""
Static-page composition provider.

Fetches the product page over HTTP and pulls the composition block out of
the markup. Works for retailers that render composition server-side; use
BrowserCompositionProvider for pages that need JavaScript.
"""

import random
import sys
from typing import Optional

import httpx
from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import config, ScraperConfig

from .base import ScrapeResult
from .markup_extractor import extract_composition_text

console = Console()


class HttpCompositionProvider:
    """Scrapes composition text from server-rendered product pages."""

    def __init__(
        self,
        scraper_config: Optional[ScraperConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = scraper_config or config.scraper
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.request_timeout_seconds,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict:
        return {
            "User-Agent": random.choice(self.config.user_agents),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        """
        Fetch a product page and extract its composition block.

        Returns:
            ScrapeResult with the block text and the full page HTML, or None
            on HTTP errors or when the page has no composition block
        """
        try:
            response = await self._get_client().get(url, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPError as e:
            console.print(f"[yellow]HTTP scrape failed for {url}: {e}[/yellow]")
            return None

        html = response.text
        text = extract_composition_text(html)
        if not text:
            console.print(f"[dim]No composition block found: {url}[/dim]")
            return None

        return ScrapeResult(text=text, html=html, source="http")

"""
Scrape provider contract.

A provider turns a product URL into raw composition text (plus the page
markup when it has it), or None when the page yields no composition.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class ScrapeResult:
    """Raw composition data for one product page."""

    text: str
    html: Optional[str] = None
    source: str = "unknown"  # provider that produced it

    @property
    def is_multiline(self) -> bool:
        return "\n" in self.text.strip()


class CompositionProvider(Protocol):
    """Anything that can scrape composition data for a URL."""

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        ...

"""
Rendered-page composition provider using Playwright with stealth settings.
Handles JavaScript rendering and collapsed "Composition & care" panels.
"""

import asyncio
import random
import sys
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from playwright_stealth import stealth_async
from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import config, ScraperConfig

from .base import ScrapeResult
from .markup_extractor import extract_composition_text

console = Console()

# Buttons / tabs that reveal the composition panel
COMPOSITION_TOGGLE_SELECTOR = (
    'button:has-text("COMPOSITION"), button:has-text("Composition"), '
    'button:has-text("Material"), button:has-text("Fabric"), '
    '[class*="accordion"]:has-text("Composition")'
)


class BrowserCompositionProvider:
    """Scrapes composition text from rendered product pages."""

    def __init__(self, scraper_config: Optional[ScraperConfig] = None):
        self.config = scraper_config or config.scraper
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.playwright = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self) -> None:
        """Start the browser with stealth settings."""
        console.print(f"[bold blue]Starting {self.config.browser_type} browser...[/bold blue]")

        self.playwright = await async_playwright().start()

        browser_launchers = {
            "firefox": self.playwright.firefox,
            "chromium": self.playwright.chromium,
            "webkit": self.playwright.webkit,
        }
        launcher = browser_launchers.get(self.config.browser_type, self.playwright.firefox)

        try:
            self.browser = await launcher.launch(headless=self.config.headless)
        except Exception as e:
            console.print(f"[yellow]Failed to launch {self.config.browser_type}: {e}[/yellow]")
            console.print("[yellow]Trying Firefox as fallback...[/yellow]")
            self.browser = await self.playwright.firefox.launch(headless=self.config.headless)

        self.context = await self.browser.new_context(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
            user_agent=random.choice(self.config.user_agents),
            locale="en-US",
        )

        console.print("[bold green]Browser started successfully[/bold green]")

    async def close(self) -> None:
        """Close the browser."""
        if self.context:
            await self.context.close()
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()
        self.context = self.browser = self.playwright = None
        console.print("[bold blue]Browser closed[/bold blue]")

    async def _create_stealth_page(self) -> Page:
        """Create a new page with stealth settings."""
        if self.context is None:
            await self.start()
        page = await self.context.new_page()
        await stealth_async(page)
        return page

    async def _expand_composition(self, page: Page) -> None:
        """Click any composition toggle so its panel is in the DOM."""
        try:
            buttons = await page.query_selector_all(COMPOSITION_TOGGLE_SELECTOR)
        except Exception as e:
            console.print(f"[dim]Composition toggle lookup failed: {e}[/dim]")
            return

        for btn in buttons:
            try:
                await btn.click(timeout=2000)
                await asyncio.sleep(0.5)  # Wait for content to expand
                return
            except Exception:
                continue

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        """
        Render a product page and extract its composition block.

        Returns:
            ScrapeResult with block text and rendered HTML, or None
        """
        page = await self._create_stealth_page()
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=self.config.timeout_ms)
            await asyncio.sleep(self.config.dynamic_content_wait_seconds)
            await self._expand_composition(page)
            html = await page.content()
        except Exception as e:
            console.print(f"[yellow]Browser scrape failed for {url}: {e}[/yellow]")
            return None
        finally:
            await page.close()

        text = extract_composition_text(html)
        if not text:
            console.print(f"[dim]No composition block found: {url}[/dim]")
            return None

        return ScrapeResult(text=text, html=html, source="browser")

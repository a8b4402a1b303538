"""
Single-flight scrape queue with a URL-keyed TTL cache.

Only one provider call is in flight at a time; concurrent callers wait their
turn in FIFO order and the slot is held for a short settling delay after
each call so the target site is not hammered. Results (including "no data")
are cached per URL until their time-to-live expires.

Usage:
    queue = ScrapeQueue(HttpCompositionProvider())
    result = await queue.scrape("https://www.zara.com/us/en/shirt-p01234567.html")
"""

import asyncio
import sys
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import config, QueueConfig
from src.extractors.base import CompositionProvider, ScrapeResult

console = Console()

_MISSING = object()


@dataclass
class QueueStats:
    """Counters for cache effectiveness."""

    cache_hits: int = 0
    cache_misses: int = 0
    timeouts: int = 0
    errors: int = 0

    def to_dict(self) -> dict:
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "timeouts": self.timeouts,
            "errors": self.errors,
        }


class ScrapeQueue:
    """
    Serializes scrapes through one provider and caches their results.
    """

    def __init__(
        self,
        provider: CompositionProvider,
        queue_config: Optional[QueueConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.provider = provider
        self.config = queue_config or config.queue
        self.stats = QueueStats()
        self._clock = clock
        self._sleep = sleep
        self._cache: dict[str, tuple[float, Optional[ScrapeResult]]] = {}
        self._lock: Optional[asyncio.Lock] = None

    def __len__(self) -> int:
        return len(self._cache)

    def _get_lock(self) -> asyncio.Lock:
        # asyncio.Lock wakes waiters in FIFO order
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def _cache_get(self, url: str):
        entry = self._cache.get(url)
        if entry is None:
            return _MISSING
        expires_at, result = entry
        if self._clock() >= expires_at:
            del self._cache[url]
            return _MISSING
        return result

    def _prune_expired(self, now: float) -> None:
        expired = [url for url, (expires_at, _) in self._cache.items() if now >= expires_at]
        for url in expired:
            del self._cache[url]

    def _cache_put(self, url: str, result: Optional[ScrapeResult]) -> None:
        now = self._clock()
        self._prune_expired(now)
        self._cache[url] = (now + self.config.cache_ttl_seconds, result)

    def cached(self, url: str) -> bool:
        return self._cache_get(url) is not _MISSING

    def clear(self) -> None:
        self._cache.clear()

    async def _run_provider(self, url: str) -> tuple[Optional[ScrapeResult], bool]:
        """Call the provider once. Returns (result, cacheable)."""
        try:
            result = await asyncio.wait_for(
                self.provider.scrape(url), timeout=self.config.scrape_timeout_seconds
            )
            return result, True
        except asyncio.TimeoutError:
            self.stats.timeouts += 1
            console.print(
                f"[yellow]Scrape timed out after {self.config.scrape_timeout_seconds}s: {url}[/yellow]"
            )
        except Exception as e:
            self.stats.errors += 1
            console.print(f"[red]Scrape error for {url}: {e}[/red]")
        return None, False

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        """
        Scrape a URL through the queue.

        Returns:
            The provider's ScrapeResult, or None when the page has no
            composition, the provider failed, or the call timed out
        """
        cached = self._cache_get(url)
        if cached is not _MISSING:
            self.stats.cache_hits += 1
            return cached

        async with self._get_lock():
            # Another waiter may have scraped this URL while we queued
            cached = self._cache_get(url)
            if cached is not _MISSING:
                self.stats.cache_hits += 1
                return cached

            self.stats.cache_misses += 1
            result, cacheable = await self._run_provider(url)
            if cacheable:
                self._cache_put(url, result)

            if self.config.settle_seconds > 0:
                await self._sleep(self.config.settle_seconds)

        return result

"""
Pytest configuration and shared fixtures for the fabric scoring tests.
"""
import asyncio
import os
import sys
from typing import Optional

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from config.settings import QueueConfig
from src.composition import DEFAULT_VOCABULARY
from src.extractors.base import ScrapeResult
from src.scoring import BlendScorer


# ============================================================================
# Fakes
# ============================================================================

class FakeProvider:
    """Scrape provider returning canned results, tracking concurrency."""

    def __init__(self, results: Optional[dict] = None, delay: float = 0.0, error: Exception = None):
        self.results = results or {}
        self.delay = delay
        self.error = error
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            if self.error:
                raise self.error
            return self.results.get(url)
        finally:
            self.active -= 1


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stand-in for asyncio.sleep that records durations and only yields."""

    def __init__(self):
        self.durations: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        await asyncio.sleep(0)


class StubAIClient:
    """Chat client returning queued responses (or raising)."""

    def __init__(self, responses=None, error: Exception = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def generate(self, prompt, system=None, model=None, temperature=None, max_tokens=None):
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error:
            raise self.error
        return self.responses.pop(0)

    async def close(self):
        self.closed = True


class FakeAPIError(Exception):
    """Carries the attributes the server inspects on OpenAI errors."""

    def __init__(self, message="boom", code=None, status_code=None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def vocabulary():
    return DEFAULT_VOCABULARY


@pytest.fixture
def scorer():
    return BlendScorer()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def queue_config() -> QueueConfig:
    return QueueConfig(cache_ttl_seconds=60, settle_seconds=0.5, scrape_timeout_seconds=1.0)


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def make_ai_client():
    return StubAIClient


@pytest.fixture
def api_error():
    return FakeAPIError


@pytest.fixture
def sectioned_text() -> str:
    return "OUTER SHELL\n100% cotton\nLINING\n100% polyester"


@pytest.fixture
def composition_html() -> str:
    return """
    <html>
      <head><style>.x { width: 100%; }</style></head>
      <body>
        <div class="price-material-note">20% off today only</div>
        <div class="product-detail-info__composition">
          <h3>COMPOSITION</h3>
          <p>OUTER SHELL</p>
          <p>100% cotton</p>
          <p>LINING</p>
          <p>100% polyester</p>
        </div>
        <script>window.banner = "50% off everything";</script>
      </body>
    </html>
    """

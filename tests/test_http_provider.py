"""
Tests for the static-page HTTP provider
"""
import asyncio

import httpx

from config.settings import config
from src.extractors.http_provider import HttpCompositionProvider


def run_scrape(handler, url):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            provider = HttpCompositionProvider(client=client)
            return await provider.scrape(url)

    return asyncio.run(go())


class TestHttpCompositionProvider:
    def test_scrapes_composition_block(self, composition_html):
        seen = {}

        def handler(request):
            seen["user_agent"] = request.headers["user-agent"]
            return httpx.Response(200, text=composition_html)

        result = run_scrape(handler, "https://shop.test/p/shirt")

        assert result.source == "http"
        assert result.text.startswith("COMPOSITION\nOUTER SHELL")
        assert result.is_multiline
        assert "<html>" in result.html
        assert seen["user_agent"] in config.scraper.user_agents

    def test_http_error_returns_none(self):
        result = run_scrape(lambda request: httpx.Response(404), "https://shop.test/missing")
        assert result is None

    def test_connection_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert run_scrape(handler, "https://shop.test/p/shirt") is None

    def test_page_without_composition(self):
        html = "<html><body><h1>Shirt</h1><p>Lovely shirt</p></body></html>"
        result = run_scrape(lambda request: httpx.Response(200, text=html), "https://shop.test/p/shirt")
        assert result is None

    def test_injected_client_not_closed(self):
        async def go():
            client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
            async with HttpCompositionProvider(client=client):
                pass
            closed = client.is_closed
            await client.aclose()
            return closed

        assert asyncio.run(go()) is False

"""
Zara composition provider.

Zara's product endpoint returns composition as structured JSON:

    {"detail": {"detailedComposition": {"parts": [
        {"description": "OUTER SHELL",
         "areas": [{"description": "MAIN FABRIC",
                    "components": [{"material": "cotton", "percentage": "82%"}]}]},
        {"description": "LINING",
         "components": [{"material": "polyester", "percentage": "100%"}]}
    ]}}}

That structure is rendered back into sectioned text (one header line per
part, one "<percentage> <material>" line per component) so it goes through
the same section aggregator as scraped markup.
"""

import re
import sys
from typing import Any, Optional

import httpx
from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import config, ScraperConfig

from .base import ScrapeResult

console = Console()

# Footwear keeps only the UPPER part (no lining, sole, insole)
FOOTWEAR_CATEGORIES = ("shoes", "boots")


def extract_product_id(url: str) -> Optional[str]:
    """Product ID from a Zara URL like /us/en/product-name-p12345678.html."""
    match = re.search(r"-p(\d+)\.html", url)
    if match:
        return match.group(1)
    return None


def _format_percentage(value: Any) -> str:
    text = str(value).strip()
    return text if text.endswith("%") else f"{text}%"


def _component_lines(components: list) -> list[str]:
    lines = []
    for comp in components or []:
        if not isinstance(comp, dict):
            continue
        material = comp.get("material", "")
        percentage = comp.get("percentage", "")
        if material and percentage:
            lines.append(f"{_format_percentage(percentage)} {material}")
    return lines


def _part_blocks(part: dict) -> list[str]:
    """
    One text block per area ("OUTER SHELL - MAIN FABRIC"), plus one for the
    part's direct components. Each area sums to 100% on its own, so each
    becomes its own section.
    """
    name = (part.get("description") or "").strip().upper()
    blocks = []

    for area in part.get("areas", []) or []:
        if not isinstance(area, dict):
            continue
        lines = _component_lines(area.get("components", []))
        if not lines:
            continue
        area_name = (area.get("description") or "").strip().upper()
        header = " - ".join(n for n in (name, area_name) if n)
        blocks.append("\n".join([header] + lines) if header else "\n".join(lines))

    lines = _component_lines(part.get("components", []))
    if lines:
        blocks.append("\n".join([name] + lines) if name else "\n".join(lines))

    return blocks


def _detailed_composition_text(detailed: dict, category: Optional[str]) -> Optional[str]:
    parts = [p for p in detailed.get("parts", []) or [] if isinstance(p, dict)]

    if category and category.lower() in FOOTWEAR_CATEGORIES:
        upper = [p for p in parts if (p.get("description") or "").upper().strip() == "UPPER"]
        if upper:
            parts = upper

    blocks = []
    for part in parts:
        blocks.extend(_part_blocks(part))

    return "\n".join(blocks) if blocks else None


def _raw_materials_text(raw_materials: Any) -> Optional[str]:
    if isinstance(raw_materials, str):
        return raw_materials or None
    if not isinstance(raw_materials, list):
        return None

    comp_parts = []
    for mat in raw_materials:
        if isinstance(mat, dict):
            percentage = mat.get("percentage", "")
            material = mat.get("description", mat.get("name", mat.get("material", "")))
            if percentage and material:
                comp_parts.append(f"{_format_percentage(percentage)} {material}")
        elif isinstance(mat, str):
            comp_parts.append(mat)
    return ", ".join(comp_parts) or None


def composition_text_from_api(payload: dict, category: Optional[str] = None) -> Optional[str]:
    """
    Render a Zara product payload into composition text.

    Prefers detail.detailedComposition (sectioned), then the first colour's
    rawMaterials / composition, then detail.composition.
    """
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if not isinstance(detail, dict):
        return None

    detailed = detail.get("detailedComposition")
    if isinstance(detailed, dict):
        text = _detailed_composition_text(detailed, category)
        if text:
            return text

    colors = detail.get("colors") or []
    if colors and isinstance(colors[0], dict):
        first_color = colors[0]
        text = _raw_materials_text(first_color.get("rawMaterials"))
        if text:
            return text
        comp = first_color.get("composition")
        if isinstance(comp, str) and comp:
            return comp

    comp = detail.get("composition")
    if isinstance(comp, str) and comp:
        return comp
    return _raw_materials_text(detail.get("rawMaterials"))


class ZaraCompositionProvider:
    """Scrapes composition from Zara's product API."""

    def __init__(
        self,
        scraper_config: Optional[ScraperConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        category: Optional[str] = None,
    ):
        self.config = scraper_config or config.scraper
        self.category = category
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

    async def scrape(self, url: str) -> Optional[ScrapeResult]:
        product_id = extract_product_id(url)
        if not product_id:
            console.print(f"[yellow]Not a Zara product URL: {url}[/yellow]")
            return None

        api_url = self.config.zara_api_url.format(product_id=product_id)
        headers = {
            "User-Agent": self.config.user_agents[0],
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "en-US,en;q=0.9",
            "Referer": self.config.zara_referer,
        }

        try:
            response = await self._get_client().get(api_url, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            console.print(f"[dim]Zara API composition lookup failed: {e}[/dim]")
            return None

        text = composition_text_from_api(payload, self.category)
        if not text:
            console.print(f"[dim]No composition in Zara API response for {product_id}[/dim]")
            return None

        console.print(f"[dim]Got composition from Zara API: {text.replace(chr(10), ' | ')}[/dim]")
        return ScrapeResult(text=text, source="zara")

"""
Fabric Recommender - LLM-backed advice for the product being viewed

Provides:
- A short recommendation for a product given its material breakdown, plus a
  search query and retailer search URL for a more sustainable alternative
- Short answers to free-form questions, grounded in the page context

Usage:
    from src.ai import FabricRecommender

    async with FabricRecommender() as recommender:
        rec = await recommender.recommend(
            "Oversized knit sweater",
            [{"name": "acrylic", "percentage": 70}, {"name": "wool", "percentage": 30}],
            site="zara.com",
        )
        print(rec.recommendation, rec.search_url)
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import AIConfig, config

console = Console()

# Import OpenAI client
try:
    from .openai_client import OpenAIClient, OpenAIConfig

    OPENAI_AVAILABLE = True
except ImportError:
    OpenAIClient = None
    OpenAIConfig = None
    OPENAI_AVAILABLE = False


MASCOT_SYSTEM_PROMPT = (
    "You are Wooly, a friendly sheep mascot who helps people find sustainable, "
    "high-quality clothing. Keep responses brief and helpful."
)

SEARCH_QUERY_SYSTEM_PROMPT = (
    "Generate a SHORT search query (3-6 words) to find sustainable alternatives. "
    "Return ONLY the search query, nothing else."
)

CHAT_SYSTEM_PROMPT = (
    "You are Wooly, a friendly sheep mascot who is an expert on fabric quality and "
    "sustainable fashion. You can see the product the user is currently viewing on "
    "their screen. Use this context to give specific, helpful advice about the fabric "
    "quality, sustainability, and value. Keep answers brief (2-3 sentences max) but "
    "reference the specific product details when relevant."
)

RECOMMENDATION_PROMPT = """You are a sustainable fashion expert helping someone make better clothing choices.

Product: "{product_name}"
Materials: {materials}
{price_line}
{concerns_line}

Provide a brief, helpful recommendation (max 150 words) that includes:
1. Quick assessment of the fabric quality/sustainability
2. What to look for in a better alternative (specific materials)
3. One search term they could use to find a sustainable alternative

Be friendly, concise, and practical. Use emojis sparingly."""

SYNTHETIC_MATERIALS = ("polyester", "acrylic", "nylon", "polyamide")

# Retailer search pages, keyed by site domain
SEARCH_URLS = {
    "zara.com": "https://www.zara.com/us/en/search?searchTerm={query}",
    "hm.com": "https://www2.hm.com/en_us/search-results.html?q={query}",
    "uniqlo.com": "https://www.uniqlo.com/us/en/search?q={query}",
    "asos.com": "https://www.asos.com/us/search/?q={query}",
    "amazon.com": "https://www.amazon.com/s?k={query}",
}
FALLBACK_SEARCH_URL = "https://www.google.com/search?tbm=shop&q={query}+sustainable"


@dataclass
class Recommendation:
    """LLM recommendation for one product."""

    recommendation: str
    search_query: str
    search_url: str

    def to_dict(self) -> dict:
        return {
            "recommendation": self.recommendation,
            "searchQuery": self.search_query,
            "searchUrl": self.search_url,
        }


@dataclass
class PageContext:
    """What the user is looking at when they ask a question."""

    product_name: Optional[str] = None
    price: Optional[str] = None
    materials: list = field(default_factory=list)
    site: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PageContext":
        data = data or {}
        return cls(
            product_name=data.get("productName"),
            price=data.get("price"),
            materials=data.get("materials") or [],
            site=data.get("site"),
        )


def _material_fields(material: Any) -> tuple[str, Any]:
    if isinstance(material, dict):
        return str(material.get("name") or ""), material.get("percentage")
    return str(getattr(material, "name", "")), getattr(material, "percentage", None)


def format_materials(materials: Optional[list]) -> str:
    """'60% cotton, 40% polyester', or 'Unknown materials'."""
    parts = []
    for material in materials or []:
        name, percentage = _material_fields(material)
        if name:
            pct = f"{percentage:g}" if isinstance(percentage, (int, float)) else percentage
            parts.append(f"{pct}% {name}")
    return ", ".join(parts) if parts else "Unknown materials"


def concerning_materials(materials: Optional[list]) -> list[str]:
    """Names of materials containing a synthetic fibre."""
    names = []
    for material in materials or []:
        name, _ = _material_fields(material)
        if any(s in name.lower() for s in SYNTHETIC_MATERIALS):
            names.append(name)
    return names


def build_search_url(query: str, site: Optional[str] = None) -> str:
    """Retailer search URL for a query; Google Shopping when the site is unknown."""
    template = SEARCH_URLS.get((site or "").lower().removeprefix("www."), FALLBACK_SEARCH_URL)
    return template.format(query=quote(query, safe=""))


def build_recommendation_prompt(
    product_name: str,
    materials: Optional[list],
    price: Optional[str] = None,
) -> str:
    concerns = concerning_materials(materials)
    return RECOMMENDATION_PROMPT.format(
        product_name=product_name,
        materials=format_materials(materials),
        price_line=f"Price: {price}" if price else "",
        concerns_line=f"Concerning materials: {', '.join(concerns)}" if concerns else "",
    )


def build_context_block(context: Optional[PageContext]) -> str:
    """'[Current page context]' block appended to the user's question."""
    if context is None:
        return ""

    parts = []
    if context.product_name:
        parts.append(f'Product: "{context.product_name}"')
    if context.price:
        parts.append(f"Price: {context.price}")
    if context.materials:
        parts.append(f"Materials: {format_materials(context.materials)}")
    if context.site:
        parts.append(f"Site: {context.site}")

    if not parts:
        return ""
    return "\n\n[Current page context]\n" + "\n".join(parts)


class FabricRecommender:
    """
    Recommendation and chat service backed by a chat-completion client.
    """

    def __init__(self, ai_client: Optional[Any] = None, ai_config: Optional[AIConfig] = None):
        """
        Args:
            ai_client: Anything with an async generate(prompt, system=..., ...) method
            ai_config: Token limits and temperatures
        """
        self.client = ai_client
        self.config = ai_config or config.ai
        self._owns_client = ai_client is None

    async def __aenter__(self):
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._owns_client and self.client:
            await self.client.close()

    def _get_client(self):
        if self.client is None:
            if not OPENAI_AVAILABLE:
                raise RuntimeError("OpenAI not available. Install openai and set OPENAI_API_KEY in .env")
            self.client = OpenAIClient(OpenAIConfig(api_key=self.config.api_key))
            self._owns_client = True
        return self.client

    async def recommend(
        self,
        product_name: str,
        materials: Optional[list] = None,
        price: Optional[str] = None,
        site: Optional[str] = None,
    ) -> Recommendation:
        """
        Recommendation text plus a search for a more sustainable alternative.

        Raises:
            ValueError: if product_name is empty
        """
        if not product_name or not product_name.strip():
            raise ValueError("Product name is required")

        client = self._get_client()

        recommendation = await client.generate(
            build_recommendation_prompt(product_name, materials, price),
            system=MASCOT_SYSTEM_PROMPT,
            temperature=self.config.recommendation_temperature,
            max_tokens=self.config.recommendation_max_tokens,
        )

        search_query = await client.generate(
            f'Find sustainable alternative for: "{product_name}" '
            f"(currently made of {format_materials(materials)})",
            system=SEARCH_QUERY_SYSTEM_PROMPT,
            temperature=self.config.search_query_temperature,
            max_tokens=self.config.search_query_max_tokens,
        )
        search_query = search_query.strip().strip('"').strip()

        return Recommendation(
            recommendation=recommendation.strip(),
            search_query=search_query,
            search_url=build_search_url(search_query, site),
        )

    async def answer(self, question: str, page_context: Optional[PageContext] = None) -> str:
        """
        Short answer to a question about the product being viewed.

        Raises:
            ValueError: if question is empty
        """
        if not question or not question.strip():
            raise ValueError("Question is required")

        client = self._get_client()
        response = await client.generate(
            question + build_context_block(page_context),
            system=CHAT_SYSTEM_PROMPT,
            temperature=self.config.chat_temperature,
            max_tokens=self.config.chat_max_tokens,
        )
        return response.strip()

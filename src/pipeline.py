"""
Scoring pipeline orchestrating scrape, parse, score and rating.
"""

import asyncio
import sys
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

sys.path.insert(0, str(__file__).rsplit("/", 2)[0])
from config.settings import config, QueueConfig
from src.composition import (
    DEFAULT_VOCABULARY,
    DegenerateBlendError,
    MaterialEntry,
    MaterialVocabulary,
    parse_composition,
    parse_sectioned_composition,
)
from src.extractors.base import CompositionProvider, ScrapeResult
from src.extractors.http_provider import HttpCompositionProvider
from src.scoring import DEFAULT_PARAMS, BlendScorer, ScoringParams, rating_for_score
from src.services.scrape_queue import ScrapeQueue

console = Console()


class ProductScore(BaseModel):
    """Scored composition for one product (or one piece of text)."""

    url: Optional[str] = None
    source: Optional[str] = None
    raw_text: Optional[str] = None  # per-section summary for sectioned parses
    materials: list[MaterialEntry] = Field(default_factory=list)
    section_count: int = 0
    score: int = Field(ge=0, le=100)
    explanation: Optional[dict] = None  # {"base", "saturation", "penalty", "finalScore"}
    rating: str
    label: str
    scored_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_composition(self) -> bool:
        return bool(self.materials)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["has_composition"] = self.has_composition
        return data


class FabricScoringPipeline:
    """
    Scores product compositions.

    Orchestrates:
    - Scrape: fetch composition text through the single-flight queue
    - Parse: flat parser for one-line text, section aggregator for multi-line
    - Score: blend score + tier rating
    """

    def __init__(
        self,
        provider: Optional[CompositionProvider] = None,
        vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY,
        params: ScoringParams = DEFAULT_PARAMS,
        queue_config: Optional[QueueConfig] = None,
        verbose: Optional[bool] = None,
    ):
        self.provider = provider or HttpCompositionProvider()
        self.vocabulary = vocabulary
        self.scorer = BlendScorer(vocabulary, params)
        self.queue = ScrapeQueue(self.provider, queue_config or config.queue)
        self.verbose = config.logging.verbose if verbose is None else verbose

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()

    def _parse(self, text: str, sectioned: bool) -> tuple[list[MaterialEntry], int, str]:
        """Materials, section count and the raw text to report."""
        if sectioned:
            result = parse_sectioned_composition(text, self.vocabulary, verbose=self.verbose)
            if result is None:
                return [], 0, text
            return list(result.materials), result.section_count, result.summary

        materials = parse_composition(text, self.vocabulary, verbose=self.verbose)
        if not materials:
            return [], 0, text
        return materials, 1, text

    def score_text(
        self,
        text: Optional[str],
        sectioned: Optional[bool] = None,
        url: Optional[str] = None,
        source: Optional[str] = None,
    ) -> ProductScore:
        """
        Score raw composition text.

        Args:
            text: Composition text, possibly multi-line
            sectioned: Force (True) or skip (False) the section aggregator;
                by default multi-line text is aggregated by section
            url: Product URL, recorded on the result
            source: Provider name, recorded on the result

        Returns:
            ProductScore; text without a composition gets the neutral score
        """
        text = text or ""
        if sectioned is None:
            sectioned = "\n" in text.strip()

        materials, section_count, raw_text = self._parse(text, sectioned)

        explanation = None
        score = self.scorer.params.neutral_score
        if materials:
            try:
                result = self.scorer.explain(materials, verbose=self.verbose)
                score = result.final_score
                explanation = result.to_dict()
            except DegenerateBlendError:
                materials, section_count = [], 0

        tier = rating_for_score(score)
        return ProductScore(
            url=url,
            source=source,
            raw_text=raw_text or None,
            materials=materials,
            section_count=section_count,
            score=score,
            explanation=explanation,
            rating=tier.name,
            label=tier.label,
        )

    def score_scrape_result(
        self,
        url: str,
        result: Optional[ScrapeResult],
        sectioned: Optional[bool] = None,
    ) -> ProductScore:
        if result is None:
            return self.score_text(None, url=url)
        if sectioned is None:
            sectioned = result.is_multiline
        return self.score_text(result.text, sectioned=sectioned, url=url, source=result.source)

    async def score_url(self, url: str, sectioned: Optional[bool] = None) -> ProductScore:
        """Scrape one product page (through the queue) and score it."""
        result = await self.queue.scrape(url)
        if result is None:
            console.print(f"[yellow]No composition data for {url}[/yellow]")
        return self.score_scrape_result(url, result, sectioned=sectioned)

    async def score_urls(
        self, urls: list[str], sectioned: Optional[bool] = None
    ) -> list[ProductScore]:
        """Score many URLs; the queue serializes the actual scrapes."""
        return list(
            await asyncio.gather(*(self.score_url(url, sectioned=sectioned) for url in urls))
        )

    def print_results(self, results: list[ProductScore], explain: bool = False) -> None:
        print_results(results, explain=explain)

        stats = self.queue.stats
        if stats.cache_hits or stats.cache_misses:
            console.print(
                f"[dim]Cache: {stats.cache_hits} hits, {stats.cache_misses} misses, "
                f"{stats.timeouts} timeouts, {stats.errors} errors[/dim]"
            )


def print_results(results: list[ProductScore], explain: bool = False) -> None:
    """Print a summary table of scored products."""
    table = Table(title="Fabric Scores", show_header=True)
    table.add_column("Product", style="cyan", overflow="fold")
    table.add_column("Materials")
    table.add_column("Sections", justify="right")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Rating")
    if explain:
        table.add_column("B / S / P", style="dim")

    for r in results:
        materials = ", ".join(str(m) for m in r.materials) or "[dim]none found[/dim]"
        row = [
            r.url or "(text)",
            materials,
            str(r.section_count),
            str(r.score),
            r.label,
        ]
        if explain:
            e = r.explanation
            row.append(
                f"{e['base']:.3f} / {e['saturation']:.3f} / {e['penalty']:.3f}" if e else "-"
            )
        table.add_row(*row)

    console.print(table)

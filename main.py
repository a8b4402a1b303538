#!/usr/bin/env python3
"""
Wooly Fabric Scorer - Main Entry Point

Scores clothing fabric compositions (0-100) from literal text, a file, or
product page URLs, and optionally asks an LLM for a more sustainable
alternative.

Usage:
    python main.py --text "70% cotton, 30% polyester"
    python main.py --url https://www.zara.com/us/en/shirt-p01234567.html --provider zara
    python main.py --file composition.txt --explain
"""
import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path
from urllib.parse import urlparse

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import config
from rich.console import Console
from src.pipeline import FabricScoringPipeline, ProductScore, print_results
from src.scoring import DEFAULT_PARAMS

console = Console()

PROVIDERS = {
    "http": "Fetch raw HTML and extract the composition block (default)",
    "browser": "Render the page with Playwright (JS-heavy sites)",
    "zara": "Read structured composition from Zara's product API",
}


class CustomHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that preserves formatting and adds width."""

    def __init__(self, prog):
        super().__init__(prog, max_help_position=40, width=100)


def parse_args(argv=None):
    """Parse command line arguments."""

    provider_list = "\n".join(f"    {name:<10} {desc}" for name, desc in PROVIDERS.items())

    epilog = f"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
PROVIDERS
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
{provider_list}

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
EXAMPLES
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  Text:
    python main.py --text "100% cotton"              Single composition
    python main.py --text "95% cotton 5% elastane" --explain
    python main.py --file care_label.txt --sections  Multi-section label

  Product pages:
    python main.py --url URL [URL ...]               Scrape + score
    python main.py --url URL --provider zara         Zara product API
    python main.py --url URL --provider browser      Rendered page

  Output:
    python main.py --text "60% wool 40% acrylic" --json
    python main.py --params                          Show scoring constants

  AI (requires OPENAI_API_KEY in .env):
    python main.py --text "100% acrylic" --recommend --name "Cable knit sweater"
"""

    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
                           WOOLY FABRIC SCORER
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Scores fabric compositions from 0 (poor) to 100 (excellent):
  • Natural fibres score high, saturating as they dominate the blend
  • Polyester / acrylic and heavy stretch content are penalized
  • Multi-panel labels (OUTER SHELL / LINING ...) are weighted equally
""",
        epilog=epilog,
        formatter_class=CustomHelpFormatter,
    )

    # Input options group
    input_group = parser.add_argument_group("Input Options", "What to score")
    source = input_group.add_mutually_exclusive_group()

    source.add_argument(
        "--text",
        "-t",
        type=str,
        metavar="TEXT",
        help="Composition text to score",
    )

    source.add_argument(
        "--file",
        "-f",
        type=Path,
        metavar="PATH",
        help="Read composition text from a file",
    )

    source.add_argument(
        "--url",
        "-u",
        type=str,
        nargs="+",
        metavar="URL",
        help="Product page URL(s) to scrape and score",
    )

    input_group.add_argument(
        "--provider",
        "-p",
        type=str,
        default="http",
        choices=list(PROVIDERS.keys()),
        help="Scrape provider for --url (default: http)",
    )

    input_group.add_argument(
        "--category",
        type=str,
        default=None,
        metavar="CAT",
        help="Product category for the zara provider (shoes/boots keep only the upper)",
    )

    # Parsing options group
    parse_group = parser.add_argument_group("Parsing Options", "How text is parsed")

    parse_group.add_argument(
        "--sections",
        "-s",
        action="store_true",
        help="Force the section aggregator (default: only for multi-line text)",
    )

    parse_group.add_argument(
        "--flat",
        action="store_true",
        help="Force the flat parser, even for multi-line text",
    )

    # Output options group
    output_group = parser.add_argument_group("Output Options", "How results are shown")

    output_group.add_argument(
        "--explain",
        "-e",
        action="store_true",
        help="Show the base / saturation / penalty breakdown",
    )

    output_group.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Trace parsing and scoring",
    )

    output_group.add_argument(
        "--params",
        action="store_true",
        help="Print the scoring constants and exit",
    )

    # AI options group
    ai_group = parser.add_argument_group(
        "AI Features", "LLM recommendations (requires OPENAI_API_KEY in .env)"
    )

    ai_group.add_argument(
        "--recommend",
        action="store_true",
        help="Ask for a more sustainable alternative",
    )

    ai_group.add_argument(
        "--name",
        type=str,
        default=None,
        metavar="NAME",
        help="Product name for --recommend (default: the URL or 'this product')",
    )

    ai_group.add_argument(
        "--site",
        type=str,
        default=None,
        metavar="DOMAIN",
        help="Retailer domain for the search link (default: taken from the URL)",
    )

    args = parser.parse_args(argv)

    if args.sections and args.flat:
        parser.error("--sections and --flat are mutually exclusive")
    if not (args.text or args.file or args.url or args.params):
        parser.error("one of --text, --file, --url or --params is required")

    return args


def create_provider(name: str, category=None):
    """Build the scrape provider selected on the command line."""
    if name == "zara":
        from src.extractors.zara_provider import ZaraCompositionProvider

        return ZaraCompositionProvider(config.scraper, category=category)
    if name == "browser":
        from src.extractors.browser_provider import BrowserCompositionProvider

        return BrowserCompositionProvider(config.scraper)

    from src.extractors.http_provider import HttpCompositionProvider

    return HttpCompositionProvider(config.scraper)


def print_params() -> int:
    console.print("\n[bold cyan]Scoring parameters[/bold cyan]")
    for key, value in asdict(DEFAULT_PARAMS).items():
        console.print(f"  [dim]{key:<24}[/dim] {value}")
    return 0


async def recommend_for(result: ProductScore, name=None, site=None) -> None:
    """Print an LLM recommendation for a scored product."""
    from src.ai import FabricRecommender

    product_name = name or result.url or "this product"
    if site is None and result.url:
        site = urlparse(result.url).netloc

    try:
        async with FabricRecommender() as recommender:
            rec = await recommender.recommend(
                product_name,
                [m.model_dump() for m in result.materials],
                site=site,
            )
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Recommendation unavailable: {e}[/red]")
        return
    except Exception as e:
        console.print(f"[red]Recommendation failed: {e}[/red]")
        return

    console.print(f"\n[bold green]🐑 Wooly says:[/bold green]\n{rec.recommendation}")
    console.print(f"\n[dim]Search:[/dim] {rec.search_query}")
    console.print(f"[dim]Link:[/dim]   {rec.search_url}")


async def run(args) -> list[ProductScore]:
    """Score the requested input."""
    sectioned = True if args.sections else (False if args.flat else None)

    if args.url:
        provider = create_provider(args.provider, args.category)
        async with FabricScoringPipeline(provider, verbose=args.verbose) as pipeline:
            results = await pipeline.score_urls(args.url, sectioned=sectioned)
            if not args.json:
                pipeline.print_results(results, explain=args.explain)
            return results

    text = args.text if args.text is not None else args.file.read_text(encoding="utf-8")
    pipeline = FabricScoringPipeline(verbose=args.verbose)
    results = [pipeline.score_text(text, sectioned=sectioned)]
    if not args.json:
        print_results(results, explain=args.explain)
    return results


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.params:
        return print_params()

    if args.file and not args.file.exists():
        console.print(f"[red]File not found: {args.file}[/red]")
        return 1

    try:
        results = asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        return 130

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))

    if args.recommend:
        for result in results:
            asyncio.run(recommend_for(result, name=args.name, site=args.site))

    return 0 if any(r.has_composition for r in results) else 2


if __name__ == "__main__":
    sys.exit(main())

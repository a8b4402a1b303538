"""
Composition parser.

Turns a scraped composition string ("60% Cotton, 35% Polyester, 5% Elastane",
"Cotton: 95% Elastane: 5%") into a list of canonical MaterialEntry values.

Two patterns scan the same text so both orderings found in retail copy are
caught. Their hits may overlap: a percentage claimed by both patterns is kept
for one hit only, and hits that resolve to the same canonical material are
summed by the aggregation step and capped at 100.

Usage:
    from src.composition.parser import parse_composition

    materials = parse_composition("80% organic cotton, 20% polyester")
    # [MaterialEntry(name='organic cotton', percentage=80.0),
    #  MaterialEntry(name='polyester', percentage=20.0)]
"""

import re
from typing import Optional

from rich.console import Console

from .errors import NoCompositionFound
from .models import MaterialEntry, RawMatch
from .vocabulary import DEFAULT_VOCABULARY, MaterialVocabulary

console = Console()

# Material word-run: a letter followed by up to 25 letters/spaces
_WORD_RUN = r"[a-zA-Z][a-zA-Z\s]{1,25}"
_NUMBER = r"(?<![\d.])(\d+(?:\.\d+)?)"

# "60% Cotton", "60 % compact cotton"
PERCENT_FIRST_PATTERN = re.compile(_NUMBER + r"\s*%\s*(" + _WORD_RUN + r")")
# "Cotton 60%", "Cotton: 60%"
NAME_FIRST_PATTERN = re.compile(r"(" + _WORD_RUN + r")[:\s]+" + _NUMBER + r"\s*%")

PERCENT_FIRST = "percent_first"
NAME_FIRST = "name_first"

PERCENT_TOKEN_PATTERN = re.compile(r"\d+(?:\.\d+)?\s*%")

_WHITESPACE_RUN = re.compile(r"\s+")
_TRAILING_NOISE = re.compile(r"[,.\s]+$")

MAX_PERCENTAGE = 100.0


def clean_text(text: str) -> str:
    """Collapse newlines, tabs and runs of spaces into single spaces."""
    return _WHITESPACE_RUN.sub(" ", text or "").strip()


def has_percentage(text: str) -> bool:
    return bool(PERCENT_TOKEN_PATTERN.search(text or ""))


def _clean_name(raw: str) -> str:
    return _TRAILING_NOISE.sub("", raw.strip().lower())


def _accept(percentage: float, name: str, vocabulary: MaterialVocabulary) -> bool:
    if not 0 < percentage <= MAX_PERCENTAGE:
        return False
    if not name:
        return False
    return not vocabulary.is_non_material(name)


def scan_raw_matches(
    text: str, vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY
) -> list[RawMatch]:
    """
    Run both patterns over whitespace-normalized text.

    Percent-first hits come before name-first hits; within each pattern hits
    keep their position order. Zero, over-100 and blacklisted hits are dropped.
    """
    cleaned = clean_text(text)
    matches: list[RawMatch] = []

    for m in PERCENT_FIRST_PATTERN.finditer(cleaned):
        percentage = float(m.group(1))
        name = _clean_name(m.group(2))
        if _accept(percentage, name, vocabulary):
            matches.append(
                RawMatch(
                    raw_name=name,
                    percentage=percentage,
                    pattern=PERCENT_FIRST,
                    number_span=m.span(1),
                    name_span=m.span(2),
                )
            )

    for m in NAME_FIRST_PATTERN.finditer(cleaned):
        name = _clean_name(m.group(1))
        percentage = float(m.group(2))
        if _accept(percentage, name, vocabulary):
            matches.append(
                RawMatch(
                    raw_name=name,
                    percentage=percentage,
                    pattern=NAME_FIRST,
                    number_span=m.span(2),
                    name_span=m.span(1),
                )
            )

    return matches


def _spans_overlap(a: Optional[tuple[int, int]], b: Optional[tuple[int, int]]) -> bool:
    if a is None or b is None:
        return False
    return a[0] < b[1] and b[0] < a[1]


def _contested(a: RawMatch, b: RawMatch) -> bool:
    return _spans_overlap(a.number_span, b.number_span) or _spans_overlap(a.name_span, b.name_span)


def resolve_overlaps(matches: list[RawMatch]) -> list[RawMatch]:
    """
    Give every percentage token and every name to a single hit.

    In a list separated only by whitespace ("70% cotton 30% polyester") the
    name-first pattern also pairs "cotton" with 30%. When hits from the two
    patterns contest a token or a name, the pattern with more hits in the text
    keeps it (percent-first on a tie). Uncontested hits from both patterns are
    kept, so mixed orderings ("Cotton 60%, 40% wool") still parse fully.
    """
    percent_first = [m for m in matches if m.pattern == PERCENT_FIRST]
    name_first = [m for m in matches if m.pattern == NAME_FIRST]
    if len(name_first) > len(percent_first):
        primary, secondary = name_first, percent_first
    else:
        primary, secondary = percent_first, name_first

    kept = list(primary)
    for match in secondary:
        if not any(_contested(match, other) for other in kept):
            kept.append(match)

    kept_ids = {id(m) for m in kept}
    return [m for m in matches if id(m) in kept_ids or not m.pattern]


def aggregate_matches(
    matches: list[RawMatch], vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY
) -> list[MaterialEntry]:
    """
    Normalize raw hits to canonical names, sum duplicates, cap and sort.

    Hits contesting the same percentage are resolved first. Phrases the
    vocabulary does not recognize are kept under their cleaned name so they
    still count toward the blend (scored at the unknown-fabric quality).
    """
    totals: dict[str, float] = {}
    for match in resolve_overlaps(matches):
        key = vocabulary.normalize(match.raw_name) or " ".join(match.raw_name.split())
        totals[key] = totals.get(key, 0.0) + match.percentage

    entries = [
        MaterialEntry(name=name, percentage=min(total, MAX_PERCENTAGE))
        for name, total in totals.items()
    ]
    # sorted() is stable: ties keep first-seen order
    return sorted(entries, key=lambda e: e.percentage, reverse=True)


def extract_materials(
    text: str, vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY
) -> list[MaterialEntry]:
    """
    Parse composition text, raising NoCompositionFound when nothing usable matched.
    """
    if not text or not text.strip():
        raise NoCompositionFound("empty composition text")

    matches = scan_raw_matches(text, vocabulary)
    if not matches:
        raise NoCompositionFound(f"no material percentages in: {clean_text(text)[:80]!r}")

    return aggregate_matches(matches, vocabulary)


def parse_composition(
    text: Optional[str],
    vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY,
    verbose: bool = False,
) -> Optional[list[MaterialEntry]]:
    """
    Parse a single composition blob.

    Args:
        text: Scraped composition text (may contain newlines/tabs)
        vocabulary: Canonical material table
        verbose: Print the parsed breakdown

    Returns:
        Materials sorted by descending percentage, or None when the text
        holds no recognizable composition.
    """
    try:
        materials = extract_materials(text or "", vocabulary)
    except NoCompositionFound as e:
        if verbose:
            console.print(f"[dim]No composition found: {e}[/dim]")
        return None

    if verbose:
        console.print(f"[dim]Parsed composition: {', '.join(str(m) for m in materials)}[/dim]")
    return materials

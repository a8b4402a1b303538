"""
Section aggregator.

Some product pages split composition into labeled sub-panels:

    OUTER SHELL
    100% cotton
    LINING
    100% polyester

Concatenating those would double count, so each section is parsed on its own
and the results are recombined with equal weight per section (each named
layer is assumed to contribute equally in the absence of layer-mass data),
then renormalized to a 100% total.
"""

import re
from typing import Optional

from rich.console import Console

from .errors import NoCompositionFound
from .models import MaterialEntry, Section, SectionedComposition
from .parser import clean_text, extract_materials, has_percentage
from .vocabulary import DEFAULT_VOCABULARY, MaterialVocabulary

console = Console()

# "OUTER SHELL", "LINING", "COMPOSITION, CARE & ORIGIN"
ALL_CAPS_HEADER = re.compile(r"^[A-Z][A-Z\s,&:\-.]+$")
# "Body", "Sleeves"
SHORT_TITLE_HEADER = re.compile(r"^[A-Za-z\s]+$")

MIN_HEADER_LENGTH = 3
MAX_CAPS_HEADER_LENGTH = 50
MAX_TITLE_HEADER_LENGTH = 20

# Renormalize only when the weighted total drifts further than this from 100
TOTAL_TOLERANCE = 0.1

_LINE_SPLIT = re.compile(r"[\n\r]+")
# "OUTER SHELL 100% cotton", "LINING: 100% polyester"
_INLINE_HEADER = re.compile(r"^([A-Z][A-Z\s,&\-.]*[A-Z])\s*:?\s+(\d+(?:\.\d+)?\s*%.*)$")


def split_lines(
    text: str, vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY
) -> list[str]:
    """Non-empty stripped lines; a leading caps label before a percentage gets its own line."""
    lines = []
    for line in _LINE_SPLIT.split(text or ""):
        line = line.strip()
        if not line:
            continue
        inline = _INLINE_HEADER.match(line)
        if inline and not vocabulary.mentions_fabric(inline.group(1)):
            lines.extend([inline.group(1).strip(), inline.group(2).strip()])
        else:
            lines.append(line)
    return lines


def is_section_header(line: str, vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY) -> bool:
    """
    A header is a short label line: no percentage, no fabric word, and either
    ALL CAPS or a short capitalized word run.
    """
    if not line or len(line) < MIN_HEADER_LENGTH:
        return False
    if "%" in line:
        return False
    if vocabulary.mentions_fabric(line):
        return False

    if ALL_CAPS_HEADER.match(line) and len(line) <= MAX_CAPS_HEADER_LENGTH:
        return True

    return (
        len(line) <= MAX_TITLE_HEADER_LENGTH
        and bool(SHORT_TITLE_HEADER.match(line))
        and line[0].isupper()
    )


def split_sections(
    text: str, vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY
) -> list[Section]:
    """
    Group body lines under the header that precedes them.

    Only sections whose body carries percentage data are returned. When no
    such section exists but some lines carry a percentage sign, those lines
    form one synthetic section.
    """
    lines = split_lines(text, vocabulary)

    grouped: list[tuple[Optional[str], list[str]]] = []
    header: Optional[str] = None
    body: list[str] = []

    for line in lines:
        if is_section_header(line, vocabulary):
            if body:
                grouped.append((header, body))
            header = line
            body = []
        else:
            body.append(line)
    if body:
        grouped.append((header, body))

    sections = []
    for section_header, section_lines in grouped:
        section_text = " ".join(section_lines)
        if has_percentage(section_text):
            sections.append(Section(header=section_header, text=section_text))

    if not sections:
        percent_lines = [line for line in lines if "%" in line]
        if percent_lines:
            sections.append(Section(header=None, text=" ".join(percent_lines)))

    return sections


def _renormalize(combined: dict[str, float]) -> list[MaterialEntry]:
    total = sum(combined.values())
    if total <= 0:
        raise NoCompositionFound("sections produced no positive percentages")

    factor = 100.0 / total if abs(total - 100.0) > TOTAL_TOLERANCE else 1.0
    rounded = {name: round(value * factor, 1) for name, value in combined.items()}
    rounded = {name: value for name, value in rounded.items() if value > 0}
    if not rounded:
        raise NoCompositionFound("every material rounded away")

    ordered = sorted(rounded.items(), key=lambda item: item[1], reverse=True)

    # Rounding residue goes to the largest entry so the list sums to 100
    residue = round(100.0 - sum(value for _, value in ordered), 1)
    if residue:
        top_name, top_value = ordered[0]
        ordered[0] = (top_name, min(round(top_value + residue, 1), 100.0))
        ordered.sort(key=lambda item: item[1], reverse=True)

    return [MaterialEntry(name=name, percentage=value) for name, value in ordered]


def aggregate_sections(
    sections: list[Section],
    vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY,
    verbose: bool = False,
) -> list[MaterialEntry]:
    """Parse every section and merge the results with equal section weights."""
    if not sections:
        raise NoCompositionFound("no sections with percentage data")

    weight = 1.0 / len(sections)
    combined: dict[str, float] = {}

    for section in sections:
        try:
            materials = extract_materials(section.text, vocabulary)
        except NoCompositionFound:
            if verbose:
                console.print(f"[dim]  [{section.header or 'MAIN'}] no materials[/dim]")
            continue

        for material in materials:
            combined[material.name] = combined.get(material.name, 0.0) + material.percentage * weight
            if verbose:
                console.print(
                    f"[dim]  [{section.header or 'MAIN'}] {material.name}: "
                    f"{material.percentage:g}% x {weight:.1%}[/dim]"
                )

    return _renormalize(combined)


def describe_sections(sections: list[Section]) -> str:
    """One-line summary of the processed sections, used as the raw text of a sectioned result."""
    return " | ".join(f"[{s.header or 'MAIN'}] {clean_text(s.text)}" for s in sections)


def parse_sectioned_composition(
    text: Optional[str],
    vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY,
    verbose: bool = False,
) -> Optional[SectionedComposition]:
    """
    Parse a multi-section composition block.

    Returns:
        SectionedComposition whose materials sum to 100, or None when no
        section holds a recognizable composition.
    """
    sections = split_sections(text or "", vocabulary)
    if verbose:
        console.print(
            f"[dim]Found {len(sections)} fabric section(s): "
            f"{[s.header or 'MAIN' for s in sections]}[/dim]"
        )

    try:
        materials = aggregate_sections(sections, vocabulary, verbose=verbose)
    except NoCompositionFound as e:
        if verbose:
            console.print(f"[dim]No composition found: {e}[/dim]")
        return None

    return SectionedComposition(
        materials=tuple(materials),
        section_count=len(sections),
        headers=tuple(s.header for s in sections),
        summary=describe_sections(sections),
    )
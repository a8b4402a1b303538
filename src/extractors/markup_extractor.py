"""
Composition extraction from raw product-page HTML.

Walks a priority list of retailer selectors, scores every candidate block
by how composition-like it looks, and returns the best block's text with
line boundaries preserved so section headers stay on their own lines.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

# Most specific (Zara) containers first, generic fallbacks last
COMPOSITION_SELECTORS = [
    ".product-detail-extra-info__section:has(.product-detail-extra-info__title)",
    ".structured-component-text-block-subtitle",
    ".structured-component-text-block-paragraph",
    ".product-detail-info__composition",
    ".product-detail-extra-info__composition",
    ".expandable-text__inner-content",
    "#detailBullets_feature_div",
    "#productDetails_techSpec_section_1",
    '[class*="composition"]',
    '[class*="material"]',
]

PERCENT_PATTERN = re.compile(r"\d+\s*%")
FABRIC_WORD_PATTERN = re.compile(
    r"cotton|polyester|viscose|wool|silk|linen|elastane|nylon", re.IGNORECASE
)
COMPOSITION_HEADER_PATTERN = re.compile(
    r"composition|outer shell|main fabric", re.IGNORECASE
)

MIN_CANDIDATE_LENGTH = 10


def score_candidate(text: str) -> int:
    """
    Heuristic composition-likeness of a text block.

    +1 per percentage, +5 for a fabric word, +10 for a composition header,
    +3 under 500 chars and +2 more under 200 chars (less surrounding noise).
    """
    score = len(PERCENT_PATTERN.findall(text))
    if FABRIC_WORD_PATTERN.search(text):
        score += 5
    if COMPOSITION_HEADER_PATTERN.search(text):
        score += 10
    if len(text) < 500:
        score += 3
    if len(text) < 200:
        score += 2
    return score


def extract_composition_text(
    html: Optional[str], selectors: Optional[list[str]] = None
) -> Optional[str]:
    """
    Find the most composition-like block in a page.

    Args:
        html: Raw page markup
        selectors: CSS selectors to try, in priority order

    Returns:
        Block text with one line per text node, or None
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    best_text = None
    best_score = 0

    for selector in selectors or COMPOSITION_SELECTORS:
        for element in soup.select(selector):
            flat = element.get_text(" ", strip=True)
            if len(flat) < MIN_CANDIDATE_LENGTH or "%" not in flat:
                continue

            score = score_candidate(flat)
            if score > best_score:
                best_score = score
                best_text = element.get_text("\n", strip=True)

    return best_text

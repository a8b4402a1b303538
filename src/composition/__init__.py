"""
Fabric composition parsing.

Turns scraped composition text into canonical material breakdowns:
- vocabulary: canonical fabric table (quality + good/bad/stretch flags)
- parser: single composition blob -> materials
- sections: multi-section blob (OUTER SHELL / LINING ...) -> equal-weight merge
"""

from .errors import CompositionError, DegenerateBlendError, NoCompositionFound
from .models import MaterialEntry, RawMatch, ScoreResult, Section, SectionedComposition
from .parser import parse_composition
from .sections import parse_sectioned_composition, split_sections
from .vocabulary import (
    DEFAULT_VOCABULARY,
    UNKNOWN_FABRIC_QUALITY,
    CanonicalMaterial,
    MaterialVocabulary,
)

__all__ = [
    # Parsing
    "parse_composition",
    "parse_sectioned_composition",
    "split_sections",
    # Models
    "MaterialEntry",
    "RawMatch",
    "ScoreResult",
    "Section",
    "SectionedComposition",
    # Vocabulary
    "CanonicalMaterial",
    "MaterialVocabulary",
    "DEFAULT_VOCABULARY",
    "UNKNOWN_FABRIC_QUALITY",
    # Errors
    "CompositionError",
    "DegenerateBlendError",
    "NoCompositionFound",
]

"""
Canonical fabric vocabulary.

Maps recognized fabric names to a base quality (0.0 to 1.0) and to the
good / bad-base / stretch classification used by the blend scorer.

The vocabulary is built once and never mutated. Lookup precedence is
enforced by the match order computed at construction time: multi-word keys
("organic cotton", "recycled polyester") are always tried before their
single-word substrings ("cotton", "polyester").

Usage:
    from src.composition.vocabulary import DEFAULT_VOCABULARY

    DEFAULT_VOCABULARY.normalize("compact cotton")   # -> "cotton"
    DEFAULT_VOCABULARY.normalize("organic cotton")   # -> "organic cotton"
    DEFAULT_VOCABULARY.quality("mystery fibre")      # -> 0.40
"""

from dataclasses import dataclass
from typing import Iterable, Optional

# Fallback quality for any material not in the table
UNKNOWN_FABRIC_QUALITY = 0.40


@dataclass(frozen=True)
class CanonicalMaterial:
    """A single vocabulary record."""

    key: str
    base_quality: float
    is_good: bool = False
    is_bad_base: bool = False
    is_stretch: bool = False

    def __post_init__(self):
        if self.key != self.key.lower().strip():
            raise ValueError(f"Vocabulary key must be lowercase and trimmed: {self.key!r}")
        if not 0.0 <= self.base_quality <= 1.0:
            raise ValueError(
                f"Base quality for {self.key!r} must be within [0, 1], got {self.base_quality}"
            )

    @property
    def word_count(self) -> int:
        return len(self.key.split())


# =============================================================================
# DEFAULT TABLE
# =============================================================================

DEFAULT_MATERIALS: tuple[CanonicalMaterial, ...] = (
    # Premium naturals
    CanonicalMaterial("cashmere", 0.95, is_good=True),
    CanonicalMaterial("merino", 0.88, is_good=True),
    CanonicalMaterial("wool", 0.85, is_good=True),
    CanonicalMaterial("silk", 0.87, is_good=True),
    # Plant naturals
    CanonicalMaterial("linen", 0.82, is_good=True),
    CanonicalMaterial("flax", 0.82, is_good=True),
    CanonicalMaterial("hemp", 0.80, is_good=True),
    CanonicalMaterial("cotton", 0.72, is_good=True),
    CanonicalMaterial("organic cotton", 0.85, is_good=True),
    # Regenerated cellulose
    CanonicalMaterial("viscose", 0.62, is_good=True),
    CanonicalMaterial("rayon", 0.62, is_good=True),
    CanonicalMaterial("lyocell", 0.70, is_good=True),
    CanonicalMaterial("tencel", 0.70, is_good=True),
    CanonicalMaterial("modal", 0.68, is_good=True),
    # Synthetics
    CanonicalMaterial("nylon", 0.55),
    CanonicalMaterial("polyamide", 0.55),
    CanonicalMaterial("polyester", 0.40, is_bad_base=True),
    CanonicalMaterial("acrylic", 0.30, is_bad_base=True),
    # Stretch
    CanonicalMaterial("elastane", 0.35, is_stretch=True),
    CanonicalMaterial("spandex", 0.35, is_stretch=True),
    # Recycled
    CanonicalMaterial("recycled polyester", 0.55),
    CanonicalMaterial("recycled cotton", 0.80, is_good=True),
)

# Trade names that resolve to a canonical key before substring matching
DEFAULT_ALIASES: dict[str, str] = {
    "lycra": "elastane",
    "elasthane": "elastane",
    "polyacrylic": "acrylic",
}

# Words that sit next to percentages in retail copy but are not fabrics
# (labels, section headers, care/marketing noise)
DEFAULT_NON_MATERIALS: tuple[str, ...] = (
    "composition",
    "material",
    "materials",
    "fabric",
    "fabrics",
    "content",
    "care",
    "washing",
    "instructions",
    "made",
    "origin",
    "country",
    "shell",
    "lining",
    "outer",
    "inner",
    "main",
    "body",
    "exterior",
    "interior",
    "off",
    "discount",
    "sale",
)


class MaterialVocabulary:
    """
    Immutable lookup over canonical materials.

    Construction computes the match order once; every normalization walks
    that order, so the multi-word-first rule holds regardless of the order
    entries were supplied in.
    """

    def __init__(
        self,
        materials: Iterable[CanonicalMaterial],
        aliases: Optional[dict[str, str]] = None,
        non_materials: Iterable[str] = (),
        unknown_quality: float = UNKNOWN_FABRIC_QUALITY,
    ):
        entries = tuple(materials)
        by_key = {}
        for entry in entries:
            if entry.key in by_key:
                raise ValueError(f"Duplicate vocabulary key: {entry.key!r}")
            by_key[entry.key] = entry

        aliases = {k.lower().strip(): v for k, v in (aliases or {}).items()}
        for alias, target in aliases.items():
            if target not in by_key:
                raise ValueError(f"Alias {alias!r} points at unknown key {target!r}")

        self._by_key = by_key
        self._aliases = tuple(
            sorted(aliases.items(), key=lambda item: (-len(item[0].split()), -len(item[0])))
        )
        # Stable sort: most words first, table order within equal word counts
        self._match_order = tuple(sorted(entries, key=lambda e: -e.word_count))
        self._non_materials = tuple(w.lower() for w in non_materials)
        self._unknown_quality = unknown_quality

    def __contains__(self, key: str) -> bool:
        return key.lower().strip() in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self):
        return iter(self._match_order)

    @property
    def keys(self) -> tuple[str, ...]:
        """Canonical keys in match-priority order."""
        return tuple(entry.key for entry in self._match_order)

    @property
    def non_materials(self) -> tuple[str, ...]:
        return self._non_materials

    @property
    def unknown_quality(self) -> float:
        return self._unknown_quality

    def get(self, key: str) -> Optional[CanonicalMaterial]:
        return self._by_key.get(key.lower().strip())

    def quality(self, key: str) -> float:
        """Base quality for a canonical key, falling back for unknown materials."""
        entry = self.get(key)
        return entry.base_quality if entry else self._unknown_quality

    def is_good(self, key: str) -> bool:
        entry = self.get(key)
        return bool(entry and entry.is_good)

    def is_bad_base(self, key: str) -> bool:
        entry = self.get(key)
        return bool(entry and entry.is_bad_base)

    def is_stretch(self, key: str) -> bool:
        entry = self.get(key)
        return bool(entry and entry.is_stretch)

    def is_non_material(self, text: str) -> bool:
        """True if the phrase contains a blacklisted label/header word."""
        lowered = text.lower()
        return any(word in lowered for word in self._non_materials)

    def mentions_fabric(self, text: str) -> bool:
        """True if any canonical key or alias occurs in the text."""
        lowered = text.lower()
        if any(entry.key in lowered for entry in self._match_order):
            return True
        return any(alias in lowered for alias, _ in self._aliases)

    def normalize(self, raw_name: str) -> Optional[str]:
        """
        Resolve a raw material phrase to its canonical key.

        Exact key, then exact alias, then the first key (in match order)
        contained in the phrase, then the first alias contained in it.
        Returns None when nothing in the vocabulary occurs in the phrase.
        """
        name = " ".join(raw_name.lower().split())
        if not name:
            return None

        if name in self._by_key:
            return name
        for alias, target in self._aliases:
            if name == alias:
                return target

        for entry in self._match_order:
            if entry.key in name:
                return entry.key
        for alias, target in self._aliases:
            if alias in name:
                return target

        return None


DEFAULT_VOCABULARY = MaterialVocabulary(
    DEFAULT_MATERIALS,
    aliases=DEFAULT_ALIASES,
    non_materials=DEFAULT_NON_MATERIALS,
)

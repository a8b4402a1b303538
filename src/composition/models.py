"""
Value objects passed between the parser, the section aggregator and the scorer.

Percentages are on a 0-100 scale at every public boundary; fractions only
exist inside the scorer.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MaterialEntry(BaseModel):
    """One canonical material and its share of the blend."""

    model_config = ConfigDict(frozen=True)

    name: str
    percentage: float = Field(gt=0, le=100)

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        v = " ".join(v.lower().split())
        if not v:
            raise ValueError("material name must not be empty")
        return v

    def __str__(self) -> str:
        return f"{self.percentage:g}% {self.name}"


class SectionedComposition(BaseModel):
    """Result of aggregating a multi-section composition block."""

    model_config = ConfigDict(frozen=True)

    materials: tuple[MaterialEntry, ...]
    section_count: int = Field(ge=1)
    headers: tuple[Optional[str], ...] = ()
    summary: str = ""  # "[OUTER SHELL] 100% cotton | [LINING] 100% polyester"

    @property
    def total(self) -> float:
        return sum(m.percentage for m in self.materials)


@dataclass(frozen=True)
class RawMatch:
    """A pattern hit before vocabulary normalization.

    Spans index into the whitespace-normalized text that was scanned; they are
    only used to resolve two hits claiming the same percentage.
    """

    raw_name: str
    percentage: float
    pattern: str = field(default="", compare=False)
    number_span: Optional[tuple[int, int]] = field(default=None, compare=False)
    name_span: Optional[tuple[int, int]] = field(default=None, compare=False)


@dataclass(frozen=True)
class Section:
    """A labeled sub-panel of composition text (e.g. OUTER SHELL / LINING)."""

    header: Optional[str]
    text: str


@dataclass(frozen=True)
class ScoreResult:
    """Blend score with the intermediate terms of the formula."""

    base_quality: float
    saturation_bonus: float
    penalty: float
    final_score: int

    def to_dict(self) -> dict:
        return {
            "base": round(self.base_quality, 4),
            "saturation": round(self.saturation_bonus, 4),
            "penalty": round(self.penalty, 4),
            "finalScore": self.final_score,
        }

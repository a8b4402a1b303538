"""
Score presentation: maps a 0-100 blend score to a 4-tier rating.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingTier:
    """One rating bucket with its display attributes."""

    name: str
    label: str
    min_score: int
    max_score: int
    primary: str
    secondary: str
    slogan: str

    def contains(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "minScore": self.min_score,
            "maxScore": self.max_score,
            "primary": self.primary,
            "secondary": self.secondary,
            "slogan": self.slogan,
        }


RATING_TIERS: tuple[RatingTier, ...] = (
    RatingTier("red", "Poor", 0, 39, "#F44336", "#EF5350", "Don't get fleeced!"),
    RatingTier("medium", "Moderate", 40, 64, "#FF9800", "#FFB74D", "This fabric is a bit... fuzzy"),
    RatingTier("lightGreen", "Good", 65, 84, "#8BC34A", "#AED581", "Not baaa-d at all"),
    RatingTier("darkGreen", "Excellent", 85, 100, "#2E7D32", "#43A047", "Shear perfection!"),
)


def rating_for_score(score: float) -> RatingTier:
    """Tier for a score; out-of-range scores are clamped to [0, 100] first."""
    clamped = max(0, min(100, round(score)))
    for tier in RATING_TIERS:
        if tier.contains(clamped):
            return tier
    return RATING_TIERS[-1]


def label_for_score(score: float) -> str:
    return rating_for_score(score).label

"""Blend scoring and score presentation."""

from .blend_scorer import (
    DEFAULT_PARAMS,
    NEUTRAL_SCORE,
    BlendScorer,
    ScoringParams,
    explain_blend,
    normalize_blend,
    score_blend,
)
from .rating import RATING_TIERS, RatingTier, label_for_score, rating_for_score

__all__ = [
    "BlendScorer",
    "ScoringParams",
    "DEFAULT_PARAMS",
    "NEUTRAL_SCORE",
    "score_blend",
    "explain_blend",
    "normalize_blend",
    "RatingTier",
    "RATING_TIERS",
    "rating_for_score",
    "label_for_score",
]

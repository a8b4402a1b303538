"""
Fabric blend quality score.

    Score = clamp(0..100, 100 * (w_b*B + w_s*S - P))

Where:
    B = sum_i f_i * q_i                          weighted base quality
    S = sum_{i in GOOD} f_i * (1 - exp(-beta * f_i))   saturation bonus
    P = alpha * sum_{i in BAD(f_i)} f_i ** gamma      superlinear penalty

f_i are the blend fractions normalized to sum to 1.0. A fabric is BAD when it
is an always-bad base fibre (polyester, acrylic) or a stretch fibre whose
fraction exceeds the stretch threshold.

The constants are tuning parameters, not fabric science; they live in
ScoringParams so callers can override them.

Usage:
    from src.scoring.blend_scorer import score_blend, explain_blend

    score_blend([MaterialEntry(name="cotton", percentage=100)])   # -> 84
    explain_blend(materials).to_dict()
    # {"base": 0.72, "saturation": 0.8647, "penalty": 0.0, "finalScore": 84}
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from rich.console import Console

from src.composition.errors import DegenerateBlendError
from src.composition.models import MaterialEntry, ScoreResult
from src.composition.vocabulary import DEFAULT_VOCABULARY, MaterialVocabulary

console = Console()

# Score substituted whenever there is nothing to score
NEUTRAL_SCORE = 50

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class ScoringParams:
    """Constants of the blend formula."""

    w_b: float = 0.75  # base weight
    w_s: float = 0.35  # saturation bonus weight
    alpha: float = 1.00  # penalty strength
    gamma: float = 1.80  # penalty exponent (>1 = harsh growth)
    beta: float = 2.00  # saturation speed
    stretch_bad_threshold: float = 0.10  # stretch fibre above this fraction is "bad"
    neutral_score: int = NEUTRAL_SCORE


DEFAULT_PARAMS = ScoringParams()

MaterialsInput = Union[Iterable[MaterialEntry], Iterable[dict]]


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _as_pairs(materials: Optional[MaterialsInput]) -> list[tuple[str, float]]:
    """Accept MaterialEntry objects or {"name", "percentage"} dicts."""
    pairs = []
    for material in materials or []:
        if isinstance(material, MaterialEntry):
            name, percentage = material.name, material.percentage
        else:
            name = str(material.get("name") or "")
            percentage = material.get("percentage") or 0
        pairs.append((" ".join(name.lower().split()), float(percentage)))
    return pairs


def normalize_blend(materials: Optional[MaterialsInput]) -> dict[str, float]:
    """
    Convert percentages to fractions summing to exactly 1.0.

    Repeated names are merged; negative shares are ignored.

    Raises:
        DegenerateBlendError: if the list is empty or sums to zero
    """
    blend: dict[str, float] = {}
    for name, percentage in _as_pairs(materials):
        if not name or percentage <= 0:
            continue
        blend[name] = blend.get(name, 0.0) + percentage / 100.0

    total = sum(blend.values())
    if total <= 0:
        raise DegenerateBlendError("Blend has no positive percentages.")

    return {name: fraction / total for name, fraction in blend.items()}


class BlendScorer:
    """
    Scores normalized blends against a vocabulary.

    Holds no per-call state; one instance can be shared freely.
    """

    def __init__(
        self,
        vocabulary: MaterialVocabulary = DEFAULT_VOCABULARY,
        params: ScoringParams = DEFAULT_PARAMS,
    ):
        self.vocabulary = vocabulary
        self.params = params

    def is_bad(self, fabric: str, fraction: float) -> bool:
        """Always-bad base fibre, or stretch fibre above the threshold."""
        if self.vocabulary.is_bad_base(fabric):
            return True
        return self.vocabulary.is_stretch(fabric) and fraction > self.params.stretch_bad_threshold

    def base_quality(self, blend: dict[str, float]) -> float:
        return sum(fraction * self.vocabulary.quality(fabric) for fabric, fraction in blend.items())

    def saturation_bonus(self, blend: dict[str, float]) -> float:
        beta = self.params.beta
        return sum(
            fraction * (1 - math.exp(-beta * fraction))
            for fabric, fraction in blend.items()
            if self.vocabulary.is_good(fabric)
        )

    def penalty(self, blend: dict[str, float]) -> float:
        total = sum(
            fraction ** self.params.gamma
            for fabric, fraction in blend.items()
            if self.is_bad(fabric, fraction)
        )
        return self.params.alpha * total

    def explain(self, materials: Optional[MaterialsInput], verbose: bool = False) -> ScoreResult:
        """
        Compute the score with its intermediate terms.

        Raises:
            DegenerateBlendError: if the list is empty or sums to zero
        """
        blend = normalize_blend(materials)

        b = self.base_quality(blend)
        s = self.saturation_bonus(blend)
        p = self.penalty(blend)

        raw_score = 100 * (self.params.w_b * b + self.params.w_s * s - p)
        final_score = int(round(clamp(raw_score, MIN_SCORE, MAX_SCORE)))

        if verbose:
            console.print(f"[dim]Blend score: B={b:.3f}, S={s:.3f}, P={p:.3f} => {final_score}[/dim]")

        return ScoreResult(
            base_quality=b,
            saturation_bonus=s,
            penalty=p,
            final_score=final_score,
        )

    def score(self, materials: Optional[MaterialsInput], verbose: bool = False) -> int:
        """Final 0-100 score; degenerate blends get the neutral score."""
        try:
            return self.explain(materials, verbose=verbose).final_score
        except DegenerateBlendError:
            if verbose:
                console.print("[dim]Degenerate blend, using neutral score[/dim]")
            return self.params.neutral_score


DEFAULT_SCORER = BlendScorer()


def score_blend(materials: Optional[MaterialsInput], verbose: bool = False) -> int:
    """Score a material list with the default vocabulary and parameters."""
    return DEFAULT_SCORER.score(materials, verbose=verbose)


def explain_blend(materials: Optional[MaterialsInput]) -> Optional[ScoreResult]:
    """Score breakdown, or None for an empty / zero-sum list."""
    try:
        return DEFAULT_SCORER.explain(materials)
    except DegenerateBlendError:
        return None

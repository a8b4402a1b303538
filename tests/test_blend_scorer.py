"""
Tests for the blend scoring formula
"""
import math

import pytest

from src.composition.models import MaterialEntry
from src.scoring.blend_scorer import (
    NEUTRAL_SCORE,
    BlendScorer,
    ScoringParams,
    explain_blend,
    normalize_blend,
    score_blend,
)


def blend(*pairs):
    return [MaterialEntry(name=name, percentage=pct) for name, pct in pairs]


class TestScenarios:
    def test_pure_cotton(self):
        assert score_blend(blend(("cotton", 100))) == 84

    def test_pure_good_fibre_scores_high(self):
        assert score_blend(blend(("cashmere", 100))) >= 85

    def test_polluted_blend_scores_low(self):
        assert score_blend(blend(("polyester", 60), ("acrylic", 40))) <= 30

    def test_polluted_blend_clamped_to_zero(self):
        assert score_blend(blend(("polyester", 60), ("acrylic", 40))) == 0

    def test_tolerated_stretch_close_to_pure(self):
        pure = score_blend(blend(("cotton", 100)))
        stretch = score_blend(blend(("cotton", 95), ("elastane", 5)))
        assert stretch == 81
        assert abs(pure - stretch) <= 5

    def test_cotton_polyester_blend(self):
        assert score_blend(blend(("cotton", 70), ("polyester", 30))) == 54


class TestPenalty:
    def test_small_stretch_not_penalized(self, scorer):
        assert scorer.explain(blend(("cotton", 95), ("elastane", 5))).penalty == 0

    def test_stretch_at_threshold_not_penalized(self, scorer):
        assert scorer.explain(blend(("cotton", 90), ("elastane", 10))).penalty == 0

    def test_large_stretch_penalized(self, scorer):
        result = scorer.explain(blend(("cotton", 80), ("elastane", 20)))
        assert result.penalty == pytest.approx(0.2 ** 1.8)

    def test_penalty_is_superlinear(self, scorer):
        small = scorer.penalty({"polyester": 0.2, "cotton": 0.8})
        large = scorer.penalty({"polyester": 0.4, "cotton": 0.6})
        assert large > 2 * small

    def test_unknown_material_not_worse_than_polyester(self):
        with_polyester = score_blend(blend(("cotton", 70), ("polyester", 30)))
        with_unknown = score_blend(blend(("cotton", 70), ("bamboo", 30)))
        assert with_unknown >= with_polyester


def cotton_polyester_bamboo(polyester):
    materials = [{"name": "cotton", "percentage": 40}, {"name": "polyester", "percentage": polyester}]
    return materials + [{"name": "bamboo", "percentage": 60 - polyester}]


class TestMonotonicity:
    @pytest.mark.parametrize("polyester", range(0, 60, 5))
    def test_more_polyester_never_raises_score(self, scorer, polyester):
        lower = scorer.score(cotton_polyester_bamboo(polyester))
        higher = scorer.score(cotton_polyester_bamboo(polyester + 5))
        assert higher <= lower

    def test_sweep_is_non_increasing(self, scorer):
        scores = [scorer.score(cotton_polyester_bamboo(p)) for p in range(0, 61)]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] > scores[-1]


class TestBounds:
    @pytest.mark.parametrize(
        "materials",
        [
            [{"name": "cotton", "percentage": 900}, {"name": "polyester", "percentage": 400}],
            [{"name": "silk", "percentage": 1000}],
            [{"name": "elastane", "percentage": 5000}, {"name": "cotton", "percentage": 1}],
            [{"name": "acrylic", "percentage": 250}, {"name": "polyester", "percentage": 300}],
            [{"name": "cashmere", "percentage": 0.5}],
            [{"name": "acrylic", "percentage": 0.01}, {"name": "polyester", "percentage": 0.02}],
            [{"name": "wool", "percentage": 3}, {"name": "mystery fibre", "percentage": 2}],
        ],
    )
    def test_score_is_int_in_range(self, scorer, materials):
        score = scorer.score(materials)
        assert isinstance(score, int)
        assert 0 <= score <= 100

    def test_far_above_and_below_one_hundred_score_alike(self, scorer):
        above = [{"name": "cotton", "percentage": 700}, {"name": "polyester", "percentage": 300}]
        below = [{"name": "cotton", "percentage": 7}, {"name": "polyester", "percentage": 3}]
        assert scorer.score(above) == scorer.score(below) == 54


class TestNormalization:
    def test_scale_invariance(self):
        assert score_blend(blend(("cotton", 35), ("polyester", 15))) == score_blend(
            blend(("cotton", 70), ("polyester", 30))
        )

    def test_fractions_sum_to_one(self):
        fractions = normalize_blend(blend(("wool", 30), ("silk", 20)))
        assert sum(fractions.values()) == pytest.approx(1.0)
        assert fractions["wool"] == pytest.approx(0.6)

    def test_repeated_names_merged(self):
        fractions = normalize_blend([{"name": "Cotton", "percentage": 50}, {"name": "cotton", "percentage": 50}])
        assert fractions == {"cotton": 1.0}

    def test_accepts_dicts(self):
        assert score_blend([{"name": "cotton", "percentage": 100}]) == 84


class TestDegenerateInput:
    @pytest.mark.parametrize(
        "materials",
        [None, [], [{"name": "cotton", "percentage": 0}], [{"name": "", "percentage": 50}]],
    )
    def test_neutral_score(self, materials):
        assert score_blend(materials) == NEUTRAL_SCORE == 50

    def test_explain_returns_none(self):
        assert explain_blend([]) is None


class TestExplain:
    def test_breakdown_for_pure_cotton(self):
        result = explain_blend(blend(("cotton", 100)))
        assert result.base_quality == pytest.approx(0.72)
        assert result.saturation_bonus == pytest.approx(1 - math.exp(-2))
        assert result.penalty == 0
        assert result.final_score == 84

    def test_to_dict(self):
        assert explain_blend(blend(("cotton", 100))).to_dict() == {
            "base": 0.72,
            "saturation": 0.8647,
            "penalty": 0.0,
            "finalScore": 84,
        }

    def test_final_score_bounds(self, scorer):
        for materials in (blend(("cashmere", 100)), blend(("acrylic", 100)), blend(("nylon", 100))):
            assert 0 <= scorer.explain(materials).final_score <= 100


class TestCustomParams:
    def test_no_penalty(self):
        scorer = BlendScorer(params=ScoringParams(alpha=0.0))
        # 100 * 0.75 * 0.40
        assert scorer.score(blend(("polyester", 100))) == 30

    def test_custom_neutral_score(self):
        scorer = BlendScorer(params=ScoringParams(neutral_score=0))
        assert scorer.score([]) == 0

"""
Tests for score presentation tiers
"""
import pytest

from src.scoring.rating import RATING_TIERS, label_for_score, rating_for_score


@pytest.mark.parametrize(
    "score, name, label",
    [
        (0, "red", "Poor"),
        (39, "red", "Poor"),
        (40, "medium", "Moderate"),
        (64, "medium", "Moderate"),
        (65, "lightGreen", "Good"),
        (84, "lightGreen", "Good"),
        (85, "darkGreen", "Excellent"),
        (100, "darkGreen", "Excellent"),
    ],
)
def test_tier_boundaries(score, name, label):
    tier = rating_for_score(score)
    assert tier.name == name
    assert tier.label == label


def test_out_of_range_scores_clamped():
    assert rating_for_score(-10).name == "red"
    assert rating_for_score(250).name == "darkGreen"


def test_fractional_scores_rounded():
    assert rating_for_score(39.6).name == "medium"


def test_tiers_cover_every_score():
    for score in range(101):
        assert sum(tier.contains(score) for tier in RATING_TIERS) == 1


def test_label_for_score():
    assert label_for_score(50) == "Moderate"


def test_to_dict_uses_camel_case():
    data = rating_for_score(90).to_dict()
    assert data["minScore"] == 85
    assert data["slogan"] == "Shear perfection!"

"""
Tests for the single-blob composition parser
"""
import pytest

from src.composition.errors import NoCompositionFound
from src.composition.models import MaterialEntry, RawMatch
from src.composition.parser import (
    aggregate_matches,
    clean_text,
    extract_materials,
    parse_composition,
    resolve_overlaps,
    scan_raw_matches,
)


def as_pairs(materials):
    return [(m.name, m.percentage) for m in materials]


class TestParseComposition:
    def test_comma_separated(self):
        result = parse_composition("70% cotton, 30% polyester")
        assert as_pairs(result) == [("cotton", 70.0), ("polyester", 30.0)]

    def test_three_materials_sorted_descending(self):
        result = parse_composition("5% Elastane, 60% Cotton, 35% Polyester")
        assert as_pairs(result) == [("cotton", 60.0), ("polyester", 35.0), ("elastane", 5.0)]

    def test_decimal_percentages(self):
        result = parse_composition("62.5% viscose, 37.5% polyamide")
        assert as_pairs(result) == [("viscose", 62.5), ("polyamide", 37.5)]

    def test_name_first_ordering(self):
        assert as_pairs(parse_composition("Cotton 60%")) == [("cotton", 60.0)]

    def test_newlines_and_tabs(self):
        result = parse_composition("60% cotton,\n\t40% linen")
        assert as_pairs(result) == [("cotton", 60.0), ("linen", 40.0)]

    def test_zero_percent_rejected(self):
        assert as_pairs(parse_composition("0% polyester, 100% cotton")) == [("cotton", 100.0)]

    def test_over_one_hundred_rejected(self):
        assert parse_composition("150% cotton") is None

    def test_blacklisted_label_dropped(self):
        assert as_pairs(parse_composition("Composition: 100% cotton")) == [("cotton", 100.0)]

    def test_duplicates_summed(self):
        result = parse_composition("50% cotton, 30% cotton, 20% wool")
        assert as_pairs(result) == [("cotton", 80.0), ("wool", 20.0)]

    def test_summed_duplicates_capped_at_one_hundred(self):
        result = parse_composition("80% cotton, 40% compact cotton")
        assert as_pairs(result) == [("cotton", 100.0)]

    def test_multi_word_materials(self):
        result = parse_composition("80% organic cotton, 20% recycled polyester")
        assert as_pairs(result) == [("organic cotton", 80.0), ("recycled polyester", 20.0)]

    def test_alias_resolved(self):
        result = parse_composition("95% cotton, 5% lycra")
        assert as_pairs(result) == [("cotton", 95.0), ("elastane", 5.0)]

    def test_unknown_material_kept(self):
        result = parse_composition("60% bamboo, 40% cotton")
        assert as_pairs(result) == [("bamboo", 60.0), ("cotton", 40.0)]

    def test_ties_keep_first_seen_order(self):
        result = parse_composition("50% wool, 50% silk")
        assert as_pairs(result) == [("wool", 50.0), ("silk", 50.0)]

    def test_names_are_unique(self):
        result = parse_composition("40% cotton, 10% wool, 40% cotton, 10% wool")
        names = [m.name for m in result]
        assert len(names) == len(set(names))

    @pytest.mark.parametrize("text", [None, "", "   ", "no composition here", "100%"])
    def test_nothing_found(self, text):
        assert parse_composition(text) is None

    def test_returns_material_entries(self):
        result = parse_composition("100% silk")
        assert result == [MaterialEntry(name="silk", percentage=100)]


class TestWhitespaceSeparatedLists:
    def test_space_separated(self):
        result = parse_composition("70% cotton 30% polyester")
        assert as_pairs(result) == [("cotton", 70.0), ("polyester", 30.0)]

    def test_newline_separated(self):
        result = parse_composition("60% cotton\n40% polyester")
        assert as_pairs(result) == [("cotton", 60.0), ("polyester", 40.0)]

    def test_three_materials_space_separated(self):
        result = parse_composition("60% cotton 35% polyester 5% elastane")
        assert as_pairs(result) == [("cotton", 60.0), ("polyester", 35.0), ("elastane", 5.0)]

    def test_name_first_with_colons(self):
        result = parse_composition("Cotton: 95% Elastane: 5%")
        assert as_pairs(result) == [("cotton", 95.0), ("elastane", 5.0)]

    def test_name_first_space_separated(self):
        result = parse_composition("Cotton 60% Polyester 40%")
        assert as_pairs(result) == [("cotton", 60.0), ("polyester", 40.0)]

    @pytest.mark.parametrize(
        "text",
        ["70% cotton, 30% polyester", "70% cotton 30% polyester", "cotton 70%, polyester 30%", "cotton 70% polyester 30%"],
    )
    def test_same_result_for_either_ordering(self, text):
        assert as_pairs(parse_composition(text)) == [("cotton", 70.0), ("polyester", 30.0)]


class TestScanRawMatches:
    def test_both_patterns_run(self):
        matches = scan_raw_matches("Cotton 60%, 40% wool")
        assert RawMatch(raw_name="cotton", percentage=60.0) in matches
        assert RawMatch(raw_name="wool", percentage=40.0) in matches

    def test_number_glued_to_digits_not_split(self):
        matches = scan_raw_matches("12.5% silk")
        assert matches == [RawMatch(raw_name="silk", percentage=12.5)]


class TestResolveOverlaps:
    def test_each_percentage_used_once(self):
        resolved = resolve_overlaps(scan_raw_matches("70% cotton 30% polyester"))
        assert resolved == [RawMatch("cotton", 70.0), RawMatch("polyester", 30.0)]

    def test_uncontested_hits_from_both_patterns_kept(self):
        resolved = resolve_overlaps(scan_raw_matches("Cotton 60%, 40% wool"))
        assert RawMatch("cotton", 60.0) in resolved
        assert RawMatch("wool", 40.0) in resolved

    def test_hand_built_matches_untouched(self):
        matches = [RawMatch("cotton", 50.0), RawMatch("cotton", 50.0)]
        assert resolve_overlaps(matches) == matches


class TestAggregateMatches:
    def test_normalizes_and_sums(self):
        matches = [
            RawMatch("compact cotton", 30.0),
            RawMatch("cotton", 20.0),
            RawMatch("lycra", 5.0),
        ]
        result = aggregate_matches(matches)
        assert as_pairs(result) == [("cotton", 50.0), ("elastane", 5.0)]


class TestExtractMaterials:
    def test_raises_on_empty(self):
        with pytest.raises(NoCompositionFound):
            extract_materials("")

    def test_raises_without_matches(self):
        with pytest.raises(NoCompositionFound):
            extract_materials("Machine wash cold")


def test_clean_text_collapses_whitespace():
    assert clean_text("  60%\n\ncotton\t ") == "60% cotton"

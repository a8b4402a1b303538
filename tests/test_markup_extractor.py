"""
Tests for HTML composition block extraction
"""
from src.composition.sections import parse_sectioned_composition
from src.extractors.markup_extractor import extract_composition_text, score_candidate


class TestExtractCompositionText:
    def test_picks_composition_block(self, composition_html):
        assert extract_composition_text(composition_html) == (
            "COMPOSITION\nOUTER SHELL\n100% cotton\nLINING\n100% polyester"
        )

    def test_extracted_block_feeds_section_aggregator(self, composition_html):
        result = parse_sectioned_composition(extract_composition_text(composition_html))
        assert [(m.name, m.percentage) for m in result.materials] == [
            ("cotton", 50.0),
            ("polyester", 50.0),
        ]

    def test_no_percentages(self):
        html = '<div class="composition">Made from soft cotton</div>'
        assert extract_composition_text(html) is None

    def test_empty_html(self):
        assert extract_composition_text("") is None
        assert extract_composition_text(None) is None

    def test_scripts_ignored(self):
        html = '<div class="material-info"><script>var s = "100% cotton";</script></div>'
        assert extract_composition_text(html) is None

    def test_custom_selectors(self):
        html = '<ul id="specs"><li>Fabric: 100% linen</li></ul>'
        assert extract_composition_text(html, selectors=["#specs"]) == "Fabric: 100% linen"


def test_score_candidate():
    # 1 percentage + fabric word + short text bonuses
    assert score_candidate("100% cotton") == 11
    assert score_candidate("Composition: 100% cotton") == 21

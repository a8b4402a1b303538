"""
Tests for the command-line entry point
"""
import json

import pytest

import main


def test_text_json_output(capsys):
    assert main.main(["--text", "100% cotton", "--json"]) == 0

    results = json.loads(capsys.readouterr().out)
    assert results[0]["score"] == 84
    assert results[0]["materials"] == [{"name": "cotton", "percentage": 100.0}]


def test_file_input_uses_sections(tmp_path, capsys, sectioned_text):
    path = tmp_path / "label.txt"
    path.write_text(sectioned_text, encoding="utf-8")

    assert main.main(["--file", str(path), "--json"]) == 0

    result = json.loads(capsys.readouterr().out)[0]
    assert result["section_count"] == 2
    assert result["score"] == 24


def test_flat_flag(capsys, sectioned_text):
    main.main(["--text", sectioned_text, "--flat", "--json"])
    assert json.loads(capsys.readouterr().out)[0]["section_count"] == 1


def test_table_output(capsys):
    assert main.main(["--text", "95% cotton, 5% elastane", "--explain"]) == 0
    out = capsys.readouterr().out
    assert "Fabric Scores" in out
    assert "81" in out


def test_no_composition_exit_code():
    assert main.main(["--text", "Machine wash cold", "--json"]) == 2


def test_missing_file():
    assert main.main(["--file", "/nonexistent/label.txt"]) == 1


def test_params(capsys):
    assert main.main(["--params"]) == 0
    assert "gamma" in capsys.readouterr().out


def test_sections_and_flat_conflict():
    with pytest.raises(SystemExit):
        main.parse_args(["--text", "100% cotton", "--sections", "--flat"])


def test_input_required():
    with pytest.raises(SystemExit):
        main.parse_args([])


def test_create_provider():
    from src.extractors.http_provider import HttpCompositionProvider
    from src.extractors.zara_provider import ZaraCompositionProvider

    assert isinstance(main.create_provider("http"), HttpCompositionProvider)
    zara = main.create_provider("zara", category="shoes")
    assert isinstance(zara, ZaraCompositionProvider)
    assert zara.category == "shoes"


def test_create_browser_provider():
    from src.extractors.browser_provider import BrowserCompositionProvider

    provider = main.create_provider("browser")
    assert isinstance(provider, BrowserCompositionProvider)
    assert provider.browser is None

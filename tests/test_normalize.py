"""
Tests for normalize.py - text normalization and mall keys.
"""

import pytest

from mallmatch.normalize import STOPWORDS, normalize, normalize_key, build_mall_key


class TestNormalize:
    """Test store/brand name normalization."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize("Marks & Spencer") == "marks spencer"
        assert normalize("Levi's") == "levi s"

    def test_removes_stopwords(self):
        assert normalize("Nike Store") == "nike"
        assert normalize("The Raymond Shop, Ground Floor") == "raymond ground"

    def test_world_is_kept(self):
        """'world' is part of brand names like Titan World and must survive."""
        assert normalize("Titan World Orion Mall") == "titan world orion"

    def test_collapses_whitespace(self):
        assert normalize("  H  &  M \t Kids\n") == "h m kids"

    def test_keeps_digits(self):
        assert normalize("Store 99") == "99"

    def test_falsy_non_strings_are_stringified(self):
        assert normalize(0) == "0"
        assert normalize(False) == "false"

    @pytest.mark.parametrize("text", ["", None, "   ", "!!!", "Mall Store Outlet", "the and co"])
    def test_garbage_yields_empty(self, text):
        assert normalize(text) == ""

    @pytest.mark.parametrize("text", [
        "Titan World Orion Mall",
        "W Store Deals",
        "Café Coffee Day - Level 2",
        "Pvt. Ltd. Company",
        "M&S / Marks and Spencer",
        "",
    ])
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

    def test_non_ascii_letters_become_separators(self):
        assert normalize("Café") == "caf"

    def test_stopwords_are_lowercase_tokens(self):
        assert all(w == w.lower() and w.isalnum() for w in STOPWORDS)
        assert "world" not in STOPWORDS


class TestMallKey:
    """Test mall identity keys."""

    def test_normalize_key_collapses_case_and_space(self):
        assert normalize_key("  Phoenix   MarketCity ") == "phoenix marketcity"
        assert normalize_key(None) == ""

    def test_build_mall_key(self):
        mall = {"Name": "Orion Mall", "City": " Bengaluru", "State": "KARNATAKA"}
        assert build_mall_key(mall) == "orion mall|bengaluru|karnataka"

    def test_build_mall_key_missing_parts(self):
        assert build_mall_key({"Name": "Orion Mall"}) == "orion mall||"

    def test_mall_key_keeps_stopwords(self):
        """Mall identity is not matching text; 'mall' stays in the key."""
        assert build_mall_key({"Name": "City Centre Mall", "City": "X", "State": "Y"}) == "city centre mall|x|y"

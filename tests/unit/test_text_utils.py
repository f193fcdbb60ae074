"""
Unit tests for the text helpers.
"""

from reel.src.utils.text_utils import clean_field, is_blank, unique_in_order


class TestCleanField:

    def test_collapses_whitespace_and_newlines(self):
        assert clean_field("  A  thief\n\twho   steals ") == "A thief who steals"

    def test_strips_zero_width_and_bom(self):
        assert clean_field("\ufeffIncep\u200btion") == "Inception"

    def test_nfc_normalisation(self):
        decomposed = "Ame\u0301lie"
        assert clean_field(decomposed) == "Am\u00e9lie"

    def test_empty_string(self):
        assert clean_field("") == ""


class TestIsBlank:

    def test_none_and_whitespace(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   \t\n")

    def test_text_is_not_blank(self):
        assert not is_blank(" up ")


class TestUniqueInOrder:

    def test_keeps_first_occurrence_order(self):
        assert unique_in_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_exact_equality_only(self):
        assert unique_in_order(["[90.00%] ref", "[90.01%] ref"]) == ["[90.00%] ref", "[90.01%] ref"]

    def test_accepts_generators(self):
        assert unique_in_order(x for x in "aab") == ["a", "b"]

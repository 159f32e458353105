"""
Tests for the plain-text heuristics.
"""

import pytest

from readerview.utils.text import (
    BylineOutcome,
    clean_byline_text,
    clean_byline_text_with_reason,
    is_byline_redundant_with_site_name,
    is_url,
    looks_like_author_name,
    looks_like_bracket_menu,
    looks_like_byline,
    looks_like_caps_author,
    looks_like_dateline,
    looks_like_org_credit,
    normalize_whitespace,
    truncate_at_word_boundary,
    unescape_html_entities,
)

pytestmark = pytest.mark.unit


class TestBasics:
    def test_normalize_whitespace(self):
        assert normalize_whitespace("  a \n\t b  ") == "a b"

    def test_unescape(self):
        assert unescape_html_entities("Tom &amp; Jerry &#8217;s") == "Tom & Jerry ’s"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("https://example.com/author/jane", True),
            ("mailto:jane@example.com", True),
            ("Jane Doe", False),
            ("https://", False),
            ("see https://example.com", False),
        ],
    )
    def test_is_url(self, text, expected):
        assert is_url(text) is expected

    def test_truncate_at_word_boundary(self):
        assert truncate_at_word_boundary("short text", 50) == "short text"
        assert truncate_at_word_boundary("one two three four", 10) == "one two"
        assert truncate_at_word_boundary("abcdefghij klm", 5) == "abcde"


class TestBylineShapes:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("By Jane Doe", True),
            ("Par Sébastien Farcis", True),
            ("Written by Jane Doe", True),
            ("by the river", False),
            ("Jane Doe", False),
        ],
    )
    def test_looks_like_byline(self, text, expected):
        assert looks_like_byline(text) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("JOE HILDEBRAND", True),
            ("Joe Hildebrand", False),
            ("HOT", False),
            ("1,024 VIEWS", False),
        ],
    )
    def test_looks_like_caps_author(self, text, expected):
        assert looks_like_caps_author(text) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("CAIRO", True),
            ("CAIRO —", True),
            ("WASHINGTON, D.C. -", True),
            ("NEW YORK", False),
            ("Cairo", False),
        ],
    )
    def test_looks_like_dateline(self, text, expected):
        assert looks_like_dateline(text) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Nicolas Perriault", True),
            ("Ludwig van Beethoven", True),
            ("admin", False),
            ("jane doe", False),
            ("Agent 007", False),
        ],
    )
    def test_looks_like_author_name(self, text, expected):
        assert looks_like_author_name(text) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("AFP", True),
            ("The Associated Press", True),
            ("By Reuters", True),
            ("example.com", True),
            ("Herald Staff", True),
            ("Jane Doe", False),
        ],
    )
    def test_looks_like_org_credit(self, text, expected):
        assert looks_like_org_credit(text) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("[edit] [hide]", True),
            ("[edit] | [history] | [talk]", True),
            ("A sentence that mentions [1] a citation and carries on.", False),
            ("No brackets at all", False),
        ],
    )
    def test_looks_like_bracket_menu(self, text, expected):
        assert looks_like_bracket_menu(text) is expected


class TestCleanByline:
    @pytest.mark.parametrize(
        "raw, cleaned",
        [
            ("By Jane Doe", "By Jane Doe"),
            ("Written by: Jane Doe", "Jane Doe"),
            ("Author: Jane Doe", "Jane Doe"),
            ("  Jane   Doe  ", "Jane Doe"),
            ("Jane Doe, Staff Writer", "Jane Doe"),
            ("Jane Doe | Senior Reporter", "Jane Doe"),
            ("Jane Doe Updated 10:30 AM", "Jane Doe"),
            ("Jane Doe March 3, 2024", "Jane Doe"),
            ("Tom &amp; Jerry", "Tom & Jerry"),
        ],
    )
    def test_clean_byline_text(self, raw, cleaned):
        assert clean_byline_text(raw) == cleaned

    @pytest.mark.parametrize("raw", ["", None, "https://example.com/jane", "jane@example.com", "Reporter", "2024"])
    def test_dropped(self, raw):
        assert clean_byline_text(raw) is None

    def test_org_credit_is_classified(self):
        result = clean_byline_text_with_reason("Associated Press")

        assert result.outcome is BylineOutcome.DROPPED_ORG_CREDIT
        assert result.text == "Associated Press"
        assert clean_byline_text("Associated Press") == "Associated Press"

    def test_collective_job_title_is_org_credit(self):
        assert clean_byline_text_with_reason("Staff").outcome is BylineOutcome.DROPPED_ORG_CREDIT


class TestRedundancy:
    @pytest.mark.parametrize(
        "byline, site_name, expected",
        [
            ("Joe Wee", "SIMPLYFOUND.COM | BY: Joe Wee", True),
            ("Example News", "Example News", True),
            ("Jane Doe", "Example News", False),
            ("Joe", None, False),
            (None, "Example News", False),
        ],
    )
    def test_is_byline_redundant_with_site_name(self, byline, site_name, expected):
        assert is_byline_redundant_with_site_name(byline, site_name) is expected

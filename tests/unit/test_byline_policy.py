"""
Tests for byline confidence tiers and the override decision.
"""

import pytest

from readerview.metadata.byline_policy import (
    BylineCandidate,
    BylineConfidence,
    should_override_byline,
    should_prefer_caps_standfirst,
)

pytestmark = pytest.mark.unit


class TestBylineConfidence:
    def test_tiers_are_ordered(self):
        assert BylineConfidence.LOW < BylineConfidence.MEDIUM < BylineConfidence.HIGH
        assert sorted([BylineConfidence.HIGH, BylineConfidence.LOW, BylineConfidence.MEDIUM]) == [
            BylineConfidence.LOW,
            BylineConfidence.MEDIUM,
            BylineConfidence.HIGH,
        ]

    def test_candidate_is_immutable(self):
        candidate = BylineCandidate("Jane Doe", BylineConfidence.HIGH)
        with pytest.raises(AttributeError):
            candidate.text = "John Doe"


class TestShouldOverrideByline:
    @pytest.mark.parametrize(
        "existing, candidate, confidence, expected",
        [
            # equal values never override
            ("Jane Doe", "jane doe", BylineConfidence.HIGH, False),
            # datelines and organisation credits give way to people
            ("CAIRO", "By Erin Cunningham", BylineConfidence.HIGH, True),
            ("AFP", "Par Sébastien Farcis", BylineConfidence.LOW, True),
            ("Reuters", "Associated Press", BylineConfidence.HIGH, False),
            # all-caps names only win at high confidence
            ("Jane Doe", "JOHN SMITH", BylineConfidence.HIGH, True),
            ("Jane Doe", "JOHN SMITH", BylineConfidence.MEDIUM, False),
            # extensions must add real words
            ("Jane Doe", "Jane Doe and John Smith", BylineConfidence.MEDIUM, True),
            ("Jane Doe", "By Jane Doe", BylineConfidence.MEDIUM, False),
            ("Jane Doe", "Jane Doe, March 3, 2024", BylineConfidence.MEDIUM, False),
            # unrelated values keep the metadata
            ("Meta Author", "Document Author", BylineConfidence.HIGH, False),
        ],
    )
    def test_override_decision(self, existing, candidate, confidence, expected):
        assert should_override_byline(existing, candidate, confidence) is expected


class TestCapsStandfirst:
    def test_caps_name_replaces_mixed_case(self):
        assert should_prefer_caps_standfirst("Jane Smith", "JOE HILDEBRAND") is True

    def test_existing_caps_name_is_kept(self):
        assert should_prefer_caps_standfirst("JOHN SMITH", "JOE HILDEBRAND") is False

    def test_same_value(self):
        assert should_prefer_caps_standfirst("Joe Hildebrand", "JOE HILDEBRAND") is False

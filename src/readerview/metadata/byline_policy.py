"""
Byline arbitration between metadata values and bylines found in the page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..utils.text import MONTH_KEYWORDS, looks_like_caps_author, looks_like_dateline, looks_like_org_credit


class BylineConfidence(Enum):
    """How strongly the page markup marks a byline as one."""

    HIGH = 3  # rel/itemprop author, explicit "byline" class or id, standfirst caps
    MEDIUM = 2  # author-ish class or id
    LOW = 1  # address blocks and free-text "By ..." lines

    def __lt__(self, other: BylineConfidence) -> bool:
        if not isinstance(other, BylineConfidence):
            return NotImplemented
        return self.value < other.value


@dataclass(frozen=True)
class BylineCandidate:
    """A byline read from the page together with its confidence tier."""

    text: str
    confidence: BylineConfidence


_REMAINDER_PUNCTUATION_RE = re.compile(r"[|\-_,.–—()\[\]{}\"']")
_FILLER_TOKENS = {"by", "updated", "at", "am", "pm"}


def should_override_byline(existing: str, candidate: str, confidence: BylineConfidence) -> bool:
    """
    Decide whether ``candidate`` (from the page) replaces ``existing`` (from metadata).

    The page wins when the metadata value is an organisation credit or a
    dateline and the candidate is not, when a high-confidence candidate is an
    all-caps name and the existing value is not, or when the candidate
    contains the existing value plus some real extra text (not just "By",
    a date or a time).
    """
    existing_clean = existing.strip()
    candidate_clean = candidate.strip()

    if candidate_clean.lower() == existing_clean.lower():
        return False

    if looks_like_org_credit(existing_clean) and not looks_like_org_credit(candidate_clean):
        return True

    if looks_like_dateline(existing_clean) and not looks_like_dateline(candidate_clean):
        return True

    if (
        confidence is BylineConfidence.HIGH
        and looks_like_caps_author(candidate_clean)
        and not looks_like_caps_author(existing_clean)
    ):
        return True

    existing_lower = existing_clean.lower()
    candidate_lower = candidate_clean.lower()
    if " ".join(existing_lower.split()) not in " ".join(candidate_lower.split()):
        return False

    index = candidate_lower.find(existing_lower)
    if index >= 0:
        remainder = candidate_lower[:index] + candidate_lower[index + len(existing_lower) :]
    else:
        remainder = candidate_lower

    tokens = [
        token
        for token in _REMAINDER_PUNCTUATION_RE.sub(" ", remainder).split()
        if not token.isdigit() and token not in _FILLER_TOKENS and token not in MONTH_KEYWORDS
    ]
    return bool(tokens)


def should_prefer_caps_standfirst(existing: str, candidate: str) -> bool:
    """An all-caps standfirst name replaces anything that is not already an all-caps name."""
    existing_clean = existing.strip()
    candidate_clean = candidate.strip()
    if candidate_clean.lower() == existing_clean.lower():
        return False
    if looks_like_caps_author(existing_clean):
        return False
    return looks_like_caps_author(candidate_clean)

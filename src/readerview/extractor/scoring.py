"""
Content scoring primitives.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, List, Optional, Tuple

from bs4 import Tag

from ..constants import BYLINE_RE, COMMAS_RE, NEGATIVE_RE, POSITIVE_RE, TAG_SCORE_BONUS
from ..dom import attr_text, get_inner_text

MIN_PARAGRAPH_LENGTH = 25
MAX_LENGTH_BONUS = 3
CLASS_WEIGHT = 25


class ScoreTable:
    """
    Content scores keyed by element identity.

    BeautifulSoup tags compare equal when their markup is equal, so the table
    keys on ``id(tag)`` and keeps the tag alive alongside its score. Scores are
    clamped so they stay finite and non-negative.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, List] = {}

    def __contains__(self, node: Tag) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[Tag, float]]:
        for node, score in self._entries.values():
            yield node, score

    def get(self, node: Tag) -> Optional[float]:
        entry = self._entries.get(id(node))
        return entry[1] if entry is not None else None

    def score(self, node: Tag) -> float:
        value = self.get(node)
        return value if value is not None else 0.0

    def set(self, node: Tag, score: float) -> None:
        if not math.isfinite(score) or score < 0:
            score = 0.0
        entry = self._entries.get(id(node))
        if entry is None:
            self._entries[id(node)] = [node, score]
        else:
            entry[1] = score

    def add(self, node: Tag, delta: float) -> None:
        self.set(node, self.score(node) + delta)

    def ranked(self) -> List[Tuple[Tag, float]]:
        """Entries sorted by score, highest first; ties keep insertion order."""
        return sorted(self, key=lambda item: -item[1])


def get_class_weight(node: Tag) -> int:
    """+/-25 for each of ``class`` and ``id`` matching the positive or negative vocabularies."""
    weight = 0
    for value in (attr_text(node, "class"), attr_text(node, "id")):
        if not value:
            continue
        if NEGATIVE_RE.search(value):
            weight -= CLASS_WEIGHT
        if POSITIVE_RE.search(value):
            weight += CLASS_WEIGHT
    return weight


def initial_score(node: Tag, weight_classes: bool = True) -> float:
    """Tag-type bonus plus, when enabled, the class weight."""
    score = float(TAG_SCORE_BONUS.get(node.name, 0))
    if weight_classes:
        score += get_class_weight(node)
    return score


def paragraph_score(text: str) -> float:
    """One point, plus one per comma, plus one per 100 characters (capped at three)."""
    score = 1.0
    score += len(COMMAS_RE.findall(text))
    score += min(len(text) // 100, MAX_LENGTH_BONUS)
    return score


def ancestor_divider(level: int) -> int:
    """Parent gets the full score, grandparent half, and further ancestors decay by ``level * 3``."""
    if level == 0:
        return 1
    if level == 1:
        return 2
    return level * 3


def is_valid_byline(node: Tag, match_string: str) -> bool:
    """Byline-marked element (rel/itemprop/class/id) with a short, non-empty text."""
    rel = attr_text(node, "rel").split()
    if "author" in rel or "author" in attr_text(node, "itemprop") or BYLINE_RE.search(match_string):
        length = len(get_inner_text(node))
        return 0 < length < 100
    return False

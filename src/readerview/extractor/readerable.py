"""
Quick check for whether a page is worth running the full extractor on.
"""

from __future__ import annotations

import math
from typing import Optional

from ..config import ReaderableOptions
from ..constants import MAYBE_CANDIDATE_RE, UNLIKELY_CANDIDATES_RE
from ..dom import is_probably_visible, match_string, parse_html

READERABLE_TAGS = ("p", "pre", "article")


def is_probably_readerable(html: str, options: Optional[ReaderableOptions] = None) -> bool:
    """
    Return True when ``html`` probably holds an article.

    Visible ``p``, ``pre`` and ``article`` blocks longer than
    ``min_content_length`` each add ``sqrt(length - min_content_length)``
    to a running score; the page is readerable once that score exceeds
    ``min_score``. Blocks that look like comments or sidebars are skipped,
    as are paragraphs inside list items.
    """
    options = options or ReaderableOptions()
    soup = parse_html(html)

    score = 0.0
    for node in soup.find_all(READERABLE_TAGS):
        if not is_probably_visible(node):
            continue

        candidate_string = match_string(node)
        if UNLIKELY_CANDIDATES_RE.search(candidate_string) and not MAYBE_CANDIDATE_RE.search(candidate_string):
            continue
        if node.name == "p" and node.find_parent("li") is not None:
            continue

        text_length = len(node.get_text().strip())
        if text_length < options.min_content_length:
            continue

        score += math.sqrt(text_length - options.min_content_length)
        if score > options.min_score:
            return True

    return False

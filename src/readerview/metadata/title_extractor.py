"""
Title cleanup for the document ``<title>``.
"""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup

from ..constants import (
    NORMALIZE_RE,
    TITLE_HIERARCHICAL_SEPARATOR_RE,
    TITLE_LEADING_SEGMENT_RE,
    TITLE_SEPARATOR_RE,
)
from ..utils.text import word_count

MIN_PLAUSIBLE_TITLE_LENGTH = 15
MAX_PLAUSIBLE_TITLE_LENGTH = 150


def _single_h1_text(soup: BeautifulSoup) -> Optional[str]:
    headings = soup.find_all("h1")
    if len(headings) == 1:
        return NORMALIZE_RE.sub(" ", headings[0].get_text().strip()) or None
    return None


def extract_title_from_document(soup: BeautifulSoup) -> Optional[str]:
    """
    Return the document title with the site name trimmed off.

    "Article Title | Site" style titles keep the part before the last
    separator, "Site: Article Title" keeps the part after the colon, and
    implausibly short or long titles fall back to the only ``<h1>``. When
    cleanup leaves four words or fewer the original title is kept, unless the
    title only dropped one hierarchical segment ("Section / Page").
    """
    title_tag = soup.find("title")
    original = title_tag.get_text().strip() if title_tag is not None else ""
    if not original:
        return _single_h1_text(soup)

    current = original
    had_hierarchical_separators = False

    separators = list(TITLE_SEPARATOR_RE.finditer(original))
    if separators:
        had_hierarchical_separators = bool(TITLE_HIERARCHICAL_SEPARATOR_RE.search(original))
        current = original[: separators[-1].start()]
        if word_count(current) < 3:
            current = TITLE_LEADING_SEGMENT_RE.sub("", original, count=1)
    elif ": " in current:
        headings = soup.find_all(("h1", "h2"))
        if not any(heading.get_text().strip() == current.strip() for heading in headings):
            after_last = current[current.rfind(":") + 1 :].strip()
            if word_count(after_last) >= 3:
                current = after_last
            else:
                first_colon = current.find(":")
                if word_count(current[:first_colon]) > 5:
                    current = original
                else:
                    current = current[first_colon + 1 :].strip()
    elif len(current) > MAX_PLAUSIBLE_TITLE_LENGTH or len(current) < MIN_PLAUSIBLE_TITLE_LENGTH:
        current = _single_h1_text(soup) or current

    current = NORMALIZE_RE.sub(" ", current.strip())

    current_words = word_count(current)
    if current_words <= 4:
        original_words = word_count(TITLE_SEPARATOR_RE.sub(" ", original))
        if not had_hierarchical_separators or current_words != original_words - 1:
            current = original

    return current

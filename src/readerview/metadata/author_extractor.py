"""
Author Extractor - byline detection in the page markup

Walks a cascade of increasingly loose signals (rel/itemprop author, byline
classes, address blocks, free-text "By ..." lines) and returns the first
convincing byline with a confidence tier for the metadata fusion step.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ..dom import attr_text, is_text, match_string
from ..extractor.scoring import is_valid_byline
from ..utils.text import (
    JOB_KEYWORDS,
    BylineOutcome,
    clean_byline_text_with_reason,
    looks_like_author_name,
    looks_like_byline,
    looks_like_caps_author,
    looks_like_dateline,
    word_count,
)
from .byline_policy import BylineCandidate, BylineConfidence

logger = logging.getLogger(__name__)

# Containers whose author mentions are not the article byline.
IGNORABLE_CONTEXT_KEYWORDS: Tuple[str, ...] = (
    "post-footer",
    "entry-footer",
    "article-footer",
    "section-footer",
    "postmeta",
    "meta-footer",
    "footer",
    "profile",
    "sidebar",
    "widget",
    "comment",
    "bio",
    "related-post",
    "user-bylines",
    "byline__body",
    "byline__title",
    "post-info",
    "entry-byline",
    "entry-author",
    "assetauthor",
    "contentpromo",
    "promo",
    "asset-author",
    "videopromo",
    "poponscroll",
    "most-popular",
    "popular-stories",
    "videoslide",
    "video-container",
    "card-box",
    "article-view-box",
    "cardbox",
    "article-content",
    "story-info",
)

# Multi-author cards; these disqualify even elements that carry a byline class.
AUTHOR_CARD_KEYWORDS: Tuple[str, ...] = ("user-bylines", "byline__body", "byline__title")

# Promotional and recirculation modules.
NOISE_CONTEXT_KEYWORDS: Tuple[str, ...] = (
    "videopromo",
    "videoslide",
    "video-slide",
    "video-module",
    "poponscroll",
    "contentpromo",
    "promo",
    "popular",
    "most-popular",
    "popular-stories",
    "more-stories",
    "related",
    "recirc",
    "recommend",
    "newsletter",
    "signup",
    "asset",
    "social",
    "share",
    "gallery",
    "slideshow",
    "indepth",
    "indepth-module",
    "hot_stats",
    "hot-stats",
    "trending-badge",
    "views",
)

BYLINE_KEYWORDS: Tuple[str, ...] = ("byline", "author", "writer", "credit")
AUTHOR_INFO_KEYWORDS: Tuple[str, ...] = ("authorinfo", "author-info")
STANDFIRST_KEYWORDS: Tuple[str, ...] = ("standfirst",)
SOCIAL_HOSTS: Tuple[str, ...] = ("twitter.com", "facebook.com", "linkedin.com")

BYLINE_SELECTORS: Tuple[str, ...] = (
    ".byline",
    ".pb-byline",
    ".author",
    ".by",
    ".writer",
    ".article-author",
    ".post-author",
    ".entry-author",
    "#byline",
    "#author",
    "[class*='author']",
    "[class*='byline']",
)
STANDFIRST_SELECTORS: Tuple[str, ...] = ("em.byline", "[class*='byline']")

CONTEXT_MAX_DEPTH = 16
MAX_STANDFIRST_LENGTH = 80
MAX_BYLINE_LENGTH = 100
MAX_LOOSE_BYLINE_LENGTH = 120
# Blocks with much more raw text than this cannot shrink into a byline.
MAX_RAW_TEXT_LENGTH = 400

_NAME_SEPARATORS = str.maketrans({ch: " " for ch in "\u00a0\u200b\r\n.,–—-|:;/()"})


def _class_and_id(node: Tag) -> str:
    return f"{attr_text(node, 'class')} {attr_text(node, 'id')}".lower()


def ancestor_has_keyword(node: Tag, keywords: Iterable[str], max_depth: int) -> bool:
    """Whether ``node`` or one of its ancestors up to ``max_depth`` levels has a keyword in its class or id."""
    keywords = tuple(keywords)
    current: Optional[Tag] = node
    depth = 0
    while isinstance(current, Tag) and not isinstance(current, BeautifulSoup):
        class_id = _class_and_id(current)
        if any(keyword in class_id for keyword in keywords):
            return True
        if depth >= max_depth:
            break
        depth += 1
        current = current.parent
    return False


def is_ignorable_context(node: Tag) -> bool:
    """Footers, profiles, sidebars, comments and similar containers."""
    return ancestor_has_keyword(node, IGNORABLE_CONTEXT_KEYWORDS, CONTEXT_MAX_DEPTH)


def is_noise_context(node: Tag) -> bool:
    """Promos, recirculation, newsletter and sharing modules."""
    return ancestor_has_keyword(node, NOISE_CONTEXT_KEYWORDS, CONTEXT_MAX_DEPTH)


def has_byline_keyword(node: Tag) -> bool:
    class_id = _class_and_id(node)
    return any(keyword in class_id for keyword in BYLINE_KEYWORDS)


def has_explicit_byline_marker(node: Tag) -> bool:
    return "byline" in _class_and_id(node)


def build_byline_text(node: Tag) -> str:
    """Text of ``node`` with ``<br>`` turned into newlines."""
    parts: List[str] = []

    def ends_with_newline() -> bool:
        return bool(parts) and parts[-1].endswith("\n")

    for child in node.descendants:
        if is_text(child):
            text = str(child)
            if ends_with_newline():
                if text.startswith("\n"):
                    text = text[1:]
                text = _strip_intermediate_newline(text)
            parts.append(text)
        elif isinstance(child, Tag) and child.name == "br":
            parts.append("\n")

    return "".join(parts)


def _strip_intermediate_newline(text: str) -> str:
    """Drop the first newline when only horizontal whitespace precedes it."""
    index = 0
    while index < len(text) and text[index].isspace() and text[index] != "\n":
        index += 1
    if index < len(text) and text[index] == "\n":
        return text[:index] + text[index + 1 :]
    return text


def collect_child_author_names(node: Tag) -> List[str]:
    """Names in ``itemprop=name`` children and author-looking links, deduplicated."""
    names: List[str] = []

    def push(candidate: str) -> None:
        if all(existing.lower() != candidate.lower() for existing in names):
            names.append(candidate)

    for child in node.select("[itemprop~='name']"):
        text = child.get_text().strip()
        if text:
            push(text)

    for anchor in node.find_all("a"):
        text = anchor.get_text().strip()
        if not text or "@" in text or not looks_like_author_name(text):
            continue
        href = attr_text(anchor, "href").lower()
        if href.startswith("mailto:") or any(host in href for host in SOCIAL_HOSTS):
            continue
        push(text)

    return names


def _has_semantic_name(node: Tag) -> bool:
    if "name" in attr_text(node, "itemprop").lower().split():
        return True
    return node.select_one("[itemprop~='name']") is not None


def should_prefer_child_names(node: Tag, raw_text: str, names: List[str]) -> bool:
    """
    Use the child names instead of the raw text when the rest of the raw text
    is empty, a job title, or a lone "by" next to a semantic name.
    """
    if not names:
        return False
    if ancestor_has_keyword(node, AUTHOR_INFO_KEYWORDS, 4):
        return True
    if "author" in attr_text(node, "section").lower():
        return True

    normalized = raw_text.lower()
    for name in names:
        normalized = normalized.replace(name.lower(), " ")
    tokens = normalized.translate(_NAME_SEPARATORS).split()

    if not tokens:
        return True
    if any(token in JOB_KEYWORDS for token in tokens):
        return True
    return _has_semantic_name(node) and all(token == "by" for token in tokens)


def collect_byline_candidate_text(node: Tag) -> str:
    raw_text = build_byline_text(node)
    names = collect_child_author_names(node)
    if names and should_prefer_child_names(node, raw_text, names):
        return ", ".join(names)
    return raw_text


class AuthorExtractor:
    """
    Multi-strategy byline detection over the page markup.

    Strategies run from most to least explicit; the first priority candidate
    (an all-caps name or a "By ..." phrase) wins, otherwise the first accepted
    candidate is returned. An organisation credit found through an explicit
    author marker ends the search with no result.
    """

    def extract(self, soup: BeautifulSoup) -> Optional[BylineCandidate]:
        standfirst = self.extract_standfirst_caps(soup)
        if standfirst is not None:
            return BylineCandidate(standfirst, BylineConfidence.HIGH)

        for selector in ("a[rel~='author']", "[itemprop~='author']"):
            found, candidate = self._from_author_markers(soup, selector)
            if found:
                return candidate

        fallback: Optional[BylineCandidate] = None
        strategies = (
            self._from_byline_classes,
            self._from_keyword_attributes,
            self._from_address_blocks,
            self._from_free_text,
        )
        for strategy in strategies:
            found, candidate, fallback = strategy(soup, fallback)
            if found:
                return candidate

        if fallback is not None:
            logger.debug(f"Using fallback byline candidate: {fallback.text!r}")
        return fallback

    # --- Standfirst caps ---

    def extract_standfirst_caps(self, soup: BeautifulSoup) -> Optional[str]:
        """An all-caps name marked as byline inside a standfirst block."""
        for selector in STANDFIRST_SELECTORS:
            for node in soup.select(selector):
                if not ancestor_has_keyword(node, STANDFIRST_KEYWORDS, 5):
                    continue
                if is_ignorable_context(node) or is_noise_context(node):
                    continue
                text = collect_byline_candidate_text(node).strip()
                if not text or len(text) > MAX_STANDFIRST_LENGTH or not looks_like_caps_author(text):
                    continue
                cleaned = clean_byline_text_with_reason(text)
                if cleaned.outcome is BylineOutcome.ACCEPTED:
                    return cleaned.text
        return None

    # --- rel / itemprop author ---

    def _from_author_markers(self, soup: BeautifulSoup, selector: str) -> Tuple[bool, Optional[BylineCandidate]]:
        for node in soup.select(selector):
            if is_ignorable_context(node) or is_noise_context(node):
                continue

            parent_text = self._parent_byline_text(node)
            if parent_text is not None:
                return True, BylineCandidate(parent_text, BylineConfidence.HIGH)

            text = collect_byline_candidate_text(node).strip()
            if not text:
                continue
            cleaned = clean_byline_text_with_reason(text)
            if cleaned.outcome is BylineOutcome.ACCEPTED:
                return True, BylineCandidate(cleaned.text, BylineConfidence.HIGH)
            if cleaned.outcome is BylineOutcome.DROPPED_ORG_CREDIT:
                return True, None
        return False, None

    def _parent_byline_text(self, node: Tag) -> Optional[str]:
        parent = node.parent
        if not isinstance(parent, Tag) or isinstance(parent, BeautifulSoup):
            return None
        if is_ignorable_context(parent) or is_noise_context(parent) or not has_byline_keyword(parent):
            return None
        cleaned = clean_byline_text_with_reason(collect_byline_candidate_text(parent).strip())
        return cleaned.text if cleaned.outcome is BylineOutcome.ACCEPTED else None

    # --- Class and id driven strategies ---

    def _from_byline_classes(self, soup: BeautifulSoup, fallback: Optional[BylineCandidate]):
        for selector in BYLINE_SELECTORS:
            for node in soup.select(selector):
                if has_byline_keyword(node):
                    if ancestor_has_keyword(node, AUTHOR_CARD_KEYWORDS, CONTEXT_MAX_DEPTH):
                        continue
                elif is_ignorable_context(node) or is_noise_context(node):
                    continue

                text = self._candidate_text(node, MAX_BYLINE_LENGTH)
                if text is None:
                    continue
                text_is_caps = looks_like_caps_author(text)
                if not (is_valid_byline(node, match_string(node)) or looks_like_byline(text) or text_is_caps):
                    continue

                confidence = BylineConfidence.HIGH if has_explicit_byline_marker(node) else BylineConfidence.MEDIUM
                cleaned = clean_byline_text_with_reason(text)
                if cleaned.outcome is BylineOutcome.DROPPED_ORG_CREDIT:
                    return True, None, fallback
                if cleaned.outcome is BylineOutcome.ACCEPTED:
                    candidate = BylineCandidate(cleaned.text, confidence)
                    if self._is_priority(candidate, text_is_caps):
                        return True, candidate, fallback
                    fallback = fallback or candidate
        return False, None, fallback

    def _from_keyword_attributes(self, soup: BeautifulSoup, fallback: Optional[BylineCandidate]):
        for node in soup.select("[class], [id]"):
            class_id = _class_and_id(node)
            if not any(keyword in class_id for keyword in ("byline", "author", "credit")):
                continue
            if is_ignorable_context(node) or is_noise_context(node):
                continue

            text = self._candidate_text(node, MAX_LOOSE_BYLINE_LENGTH)
            if text is None:
                continue
            text_is_caps = looks_like_caps_author(text)
            if not (is_valid_byline(node, match_string(node)) or looks_like_byline(text) or text_is_caps):
                continue

            found, candidate, fallback = self._offer(text, text_is_caps, BylineConfidence.MEDIUM, fallback)
            if found:
                return True, candidate, fallback
        return False, None, fallback

    def _from_address_blocks(self, soup: BeautifulSoup, fallback: Optional[BylineCandidate]):
        for node in soup.find_all("address"):
            if is_ignorable_context(node) or is_noise_context(node):
                continue

            text = self._candidate_text(node, MAX_BYLINE_LENGTH)
            if text is None:
                continue
            text_is_caps = looks_like_caps_author(text)
            if not (looks_like_byline(text) or is_valid_byline(node, match_string(node)) or text_is_caps):
                continue

            found, candidate, fallback = self._offer(text, text_is_caps, BylineConfidence.LOW, fallback)
            if found:
                return True, candidate, fallback
        return False, None, fallback

    def _from_free_text(self, soup: BeautifulSoup, fallback: Optional[BylineCandidate]):
        for node in soup.find_all(("p", "div", "span")):
            if is_ignorable_context(node) or is_noise_context(node):
                continue

            text = self._candidate_text(node, MAX_LOOSE_BYLINE_LENGTH)
            if text is None or looks_like_dateline(text):
                continue
            text_is_caps = looks_like_caps_author(text) and 2 <= word_count(text) <= 4
            if not (looks_like_byline(text) or text_is_caps):
                continue

            cleaned = clean_byline_text_with_reason(text)
            if cleaned.outcome is BylineOutcome.DROPPED_ORG_CREDIT:
                return True, None, fallback
            if cleaned.outcome is BylineOutcome.ACCEPTED:
                candidate = BylineCandidate(cleaned.text, BylineConfidence.LOW)
                if self._is_priority(candidate, text_is_caps):
                    return True, candidate, fallback
                fallback = fallback or candidate
        return False, None, fallback

    # --- Helpers ---

    @staticmethod
    def _candidate_text(node: Tag, limit: int) -> Optional[str]:
        if len(node.get_text()) > MAX_RAW_TEXT_LENGTH:
            return None
        text = collect_byline_candidate_text(node).strip()
        if not text or len(text) > limit:
            return None
        return text

    @staticmethod
    def _is_priority(candidate: BylineCandidate, raw_caps: bool) -> bool:
        return raw_caps or looks_like_byline(candidate.text)

    def _offer(
        self,
        text: str,
        text_is_caps: bool,
        confidence: BylineConfidence,
        fallback: Optional[BylineCandidate],
    ) -> Tuple[bool, Optional[BylineCandidate], Optional[BylineCandidate]]:
        """Clean ``text``; organisation credits are skipped rather than ending the search."""
        cleaned = clean_byline_text_with_reason(text)
        if cleaned.outcome is BylineOutcome.ACCEPTED:
            candidate = BylineCandidate(cleaned.text, confidence)
            if self._is_priority(candidate, text_is_caps):
                return True, candidate, fallback
            fallback = fallback or candidate
        return False, None, fallback

"""
Main Metadata Extractor - fusion of JSON-LD, meta tags and the page markup

JSON-LD wins over meta tags, meta tags win over the ``<title>`` heuristic,
and a byline found in the page can replace a metadata byline that looks
like an organisation credit, a dateline or a truncated name.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from bs4 import BeautifulSoup

from ..constants import (
    ARTICLE_AUTHOR_META_KEYS,
    BYLINE_META_KEYS,
    EXCERPT_META_KEYS,
    PUBLISHED_TIME_META_KEYS,
    SITE_NAME_META_KEYS,
    TITLE_META_KEYS,
)
from ..models import Metadata
from ..utils.text import (
    clean_byline_text,
    is_byline_redundant_with_site_name,
    is_url,
    looks_like_bracket_menu,
    unescape_html_entities,
)
from .author_extractor import AuthorExtractor
from .byline_policy import should_override_byline, should_prefer_caps_standfirst
from .structured_data_parser import JsonLdParser, MetaTagParser
from .title_extractor import extract_title_from_document

logger = logging.getLogger(__name__)


def _first(values: Dict[str, str], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = values.get(key)
        if value:
            return value
    return None


def _unescape(value: Optional[str]) -> Optional[str]:
    return unescape_html_entities(value) if value is not None else None


def extract_language(soup: BeautifulSoup) -> Optional[str]:
    """``<html lang>``, then a Content-Language meta tag, then ``meta[name=lang|language]``."""
    html_tag = soup.find("html")
    if html_tag is not None:
        lang = str(html_tag.get("lang") or "").strip()
        if lang:
            return lang

    for meta in soup.find_all("meta"):
        if str(meta.get("http-equiv") or "").lower() == "content-language":
            content = str(meta.get("content") or "").strip()
            if content:
                return content

    for meta in soup.find_all("meta"):
        if str(meta.get("name") or "").lower() in ("lang", "language"):
            content = str(meta.get("content") or "").strip()
            if content:
                return content

    return None


class MetadataExtractor:
    """
    Resolves title, byline, excerpt, site name, publication time and
    language for one document.
    """

    def __init__(self, disable_json_ld: bool = False) -> None:
        self.disable_json_ld = disable_json_ld
        self.json_ld_parser = JsonLdParser()
        self.meta_parser = MetaTagParser()
        self.author_extractor = AuthorExtractor()

    def extract(self, soup: BeautifulSoup) -> Metadata:
        json_ld = Metadata() if self.disable_json_ld else self.json_ld_parser.parse(soup)
        values = self.meta_parser.parse(soup)

        metadata = Metadata()
        metadata.title = json_ld.title or _first(values, TITLE_META_KEYS) or extract_title_from_document(soup)

        article_author = _first(values, ARTICLE_AUTHOR_META_KEYS)
        if article_author is not None and is_url(article_author):
            article_author = None

        dom_byline = self.author_extractor.extract(soup)
        byline = json_ld.byline or _first(values, BYLINE_META_KEYS) or article_author
        if dom_byline is not None:
            if byline is None or should_override_byline(byline, dom_byline.text, dom_byline.confidence):
                byline = dom_byline.text

        metadata.excerpt = json_ld.excerpt or _first(values, EXCERPT_META_KEYS)
        metadata.site_name = json_ld.site_name or _first(values, SITE_NAME_META_KEYS)
        metadata.published_time = json_ld.published_time or _first(values, PUBLISHED_TIME_META_KEYS)
        metadata.lang = extract_language(soup)

        metadata.title = _unescape(metadata.title)
        metadata.byline = clean_byline_text(unescape_html_entities(byline)) if byline else None
        metadata.excerpt = self._clean_excerpt(metadata.excerpt)
        metadata.site_name = _unescape(metadata.site_name)
        metadata.published_time = _unescape(metadata.published_time)

        # Cleaning can turn the metadata value into something the page byline beats.
        if metadata.byline and dom_byline is not None:
            if should_override_byline(metadata.byline, dom_byline.text, dom_byline.confidence):
                metadata.byline = clean_byline_text(dom_byline.text) or dom_byline.text

        caps_byline = self.author_extractor.extract_standfirst_caps(soup)
        if caps_byline is not None:
            if metadata.byline is None or should_prefer_caps_standfirst(metadata.byline, caps_byline):
                metadata.byline = caps_byline

        if is_byline_redundant_with_site_name(metadata.byline, metadata.site_name):
            logger.debug(f"Dropping byline {metadata.byline!r}: repeats site name {metadata.site_name!r}")
            metadata.byline = None

        return metadata

    @staticmethod
    def _clean_excerpt(excerpt: Optional[str]) -> Optional[str]:
        if excerpt is None:
            return None
        excerpt = unescape_html_entities(excerpt)
        if not excerpt.strip() or looks_like_bracket_menu(excerpt.strip()):
            return None
        return excerpt

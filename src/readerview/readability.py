"""
Readability - article extraction pipeline.

Resolves metadata from the original document, then preprocesses, selects the
article body through the retry ladder, cleans it and builds the ``Article``.
"""

from __future__ import annotations

from typing import Optional

import structlog
from bs4 import BeautifulSoup, Tag

from .config import ReadabilityOptions
from .dom import attr_text, get_link_density, parse_html
from .exceptions import InvalidDocumentError, NoContentFoundError, ReadabilityError, validate_base_url
from .extractor.cleaner import clean_article_content, clean_article_content_light
from .extractor.post_processor import prep_article
from .extractor.preprocess import prep_document
from .extractor.readerable import is_probably_readerable
from .extractor.selector import CandidateSelector
from .metadata import MetadataExtractor
from .models import Article, Metadata
from .utils.text import looks_like_bracket_menu, looks_like_byline, normalize_whitespace, truncate_at_word_boundary

MIN_EXCERPT_PARAGRAPH_LENGTH = 25
MIN_EXCERPT_TEXT_PARAGRAPH_LENGTH = 80
MIN_EXCERPT_TEXT_LENGTH = 40
MAX_EXCERPT_LENGTH = 300
EXCERPT_MAX_LINK_DENSITY = 0.8

EXCERPT_NOISE_KEYWORDS = (
    "hatnote",
    "shortdescription",
    "metadata",
    "navbox",
    "dablink",
    "noprint",
    "mwe-math-element",
    "mw-empty-elt",
)
EXCERPT_NOISE_PREFIXES = ("see also", "coordinates", "navigation menu", "external links", "further reading")


def _is_excerpt_noise(paragraph: Tag, text: str) -> bool:
    """Hatnotes, navigation boxes and link lists that make poor excerpts."""
    class_id = f"{attr_text(paragraph, 'class')} {attr_text(paragraph, 'id')}".lower()
    if any(keyword in class_id for keyword in EXCERPT_NOISE_KEYWORDS):
        return True
    if attr_text(paragraph, "role").lower() == "note":
        return True
    if text.lower().startswith(EXCERPT_NOISE_PREFIXES):
        return True
    return get_link_density(paragraph) > EXCERPT_MAX_LINK_DENSITY


def excerpt_from_html(html: str) -> Optional[str]:
    """The first substantial paragraph that is not a menu, note or byline."""
    for paragraph in parse_html(html).find_all("p"):
        text = paragraph.get_text().strip()
        if len(text) < MIN_EXCERPT_PARAGRAPH_LENGTH or looks_like_bracket_menu(text):
            continue
        if _is_excerpt_noise(paragraph, text):
            continue
        class_id = f"{attr_text(paragraph, 'class')} {attr_text(paragraph, 'id')}".lower()
        if looks_like_byline(text) or "byline" in class_id or "author" in class_id:
            continue
        return text
    return None


def excerpt_from_text(text: str) -> Optional[str]:
    """The first paragraph of at least 80 characters, else the text itself when long enough."""
    cleaned = text.strip()
    if not cleaned:
        return None

    for paragraph in cleaned.split("\n\n"):
        paragraph = normalize_whitespace(paragraph)
        if len(paragraph) < MIN_EXCERPT_TEXT_PARAGRAPH_LENGTH or looks_like_bracket_menu(paragraph):
            continue
        return truncate_at_word_boundary(paragraph, MAX_EXCERPT_LENGTH)

    cleaned = normalize_whitespace(cleaned)
    if looks_like_bracket_menu(cleaned) or len(cleaned) <= MIN_EXCERPT_TEXT_LENGTH:
        return None
    return truncate_at_word_boundary(cleaned, MAX_EXCERPT_LENGTH)


class Readability:
    """
    Extracts the readable article from one HTML document.

    Args:
        html: The document to read.
        url: Base URL used to absolutize links and media sources.
        options: Extraction options; defaults are used when omitted.

    Raises:
        InvalidUrlError: If ``url`` is given but malformed.
    """

    def __init__(self, html: str, url: Optional[str] = None, options: Optional[ReadabilityOptions] = None) -> None:
        self.html = html or ""
        self.base_url = validate_base_url(url)
        self.options = options or ReadabilityOptions()
        self.logger = structlog.get_logger(__name__).bind(component="Readability", url=self.base_url)

    def parse(self) -> Optional[Article]:
        """Return the article, or None when no readable content was found."""
        try:
            return self.parse_or_raise()
        except ReadabilityError as e:
            if self.options.debug:
                self.logger.debug("Extraction failed", error_type=type(e).__name__, error=str(e))
            return None

    def parse_or_raise(self) -> Article:
        """
        Return the article.

        Raises:
            InvalidDocumentError: If the document has no root element.
            ParseError: If the HTML parser rejected the markup.
            MaxElementsExceededError: If the document is larger than ``max_elems_to_parse``.
            NoContentFoundError: If every rung of the retry ladder came up empty.
        """
        original = parse_html(self.html)
        if original.find("html") is None:
            raise InvalidDocumentError("Document has no root element")
        metadata = MetadataExtractor(disable_json_ld=self.options.disable_json_ld).extract(original)

        selector = CandidateSelector(self.options, metadata.title)
        selection = selector.select(prep_document(self.html))
        if selection is None:
            raise NoContentFoundError("No readable content found")

        raw_content = selection.html
        content = clean_article_content_light(raw_content, self.base_url, self.options)
        content = prep_article(content, self.options)
        content = clean_article_content(content, self.base_url, self.options)

        text_content = parse_html(content).get_text()
        if not text_content.strip():
            raise NoContentFoundError("Cleaning removed all content")

        direction = selection.direction or self._document_direction(original)
        article = self._build_article(metadata, content, raw_content, text_content, direction)

        if self.options.debug:
            self.logger.debug(
                "Article extracted",
                rung=selection.rung.value,
                length=article.length,
                has_byline=article.byline is not None,
            )
        return article

    @staticmethod
    def _document_direction(soup: BeautifulSoup) -> Optional[str]:
        html_tag = soup.find("html")
        if html_tag is None:
            return None
        return attr_text(html_tag, "dir") or None

    @staticmethod
    def _build_article(
        metadata: Metadata, content: str, raw_content: str, text_content: str, direction: Optional[str]
    ) -> Article:
        excerpt = metadata.excerpt or excerpt_from_html(content) or excerpt_from_text(text_content)
        return Article(
            title=metadata.title,
            content=content,
            raw_content=raw_content,
            text_content=text_content,
            length=len(text_content),
            excerpt=excerpt,
            byline=metadata.byline,
            dir=direction,
            site_name=metadata.site_name,
            lang=metadata.lang,
            published_time=metadata.published_time,
        )


def extract(html: str, url: Optional[str] = None, options: Optional[ReadabilityOptions] = None) -> Optional[Article]:
    """Extract the article from ``html`` in one call. See ``Readability``."""
    return Readability(html, url, options).parse()


__all__ = ["Readability", "extract", "excerpt_from_html", "excerpt_from_text", "is_probably_readerable"]

"""
Structured Data Parser - JSON-LD and meta tags

Reads schema.org JSON-LD blocks and OpenGraph, Twitter Card, Dublin Core
and Parsely meta tags into plain values for the metadata fusion step.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ..constants import JSON_LD_ARTICLE_TYPES_RE, META_NAME_RE, META_PROPERTY_RE, SCHEMA_ORG_CONTEXT_RE
from ..exceptions import JsonLdError
from ..models import Metadata

logger = logging.getLogger(__name__)


def _is_article_type(value: Any) -> bool:
    if isinstance(value, str):
        return bool(JSON_LD_ARTICLE_TYPES_RE.match(value))
    if isinstance(value, list):
        return any(isinstance(item, str) and JSON_LD_ARTICLE_TYPES_RE.match(item) for item in value)
    return False


def _has_schema_context(context: Any) -> bool:
    if isinstance(context, str):
        return bool(SCHEMA_ORG_CONTEXT_RE.match(context))
    if isinstance(context, dict):
        vocab = context.get("@vocab")
        return isinstance(vocab, str) and bool(SCHEMA_ORG_CONTEXT_RE.match(vocab))
    if isinstance(context, list):
        return any(_has_schema_context(item) for item in context)
    return False


def _string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return _string(value.get("name"))
    return None


class JsonLdParser:
    """Parser for schema.org JSON-LD article metadata."""

    @staticmethod
    def load(raw: str) -> Any:
        """Decode one JSON-LD block, tolerating CDATA wrappers."""
        text = raw.strip()
        if text.startswith("<![CDATA["):
            text = text[len("<![CDATA[") :]
        if text.endswith("]]>"):
            text = text[: -len("]]>")]
        try:
            return json.loads(text.strip())
        except ValueError as e:
            raise JsonLdError(f"Invalid JSON-LD: {e}") from e

    @staticmethod
    def find_article(data: Any) -> Optional[Dict[str, Any]]:
        """Locate the article object in a decoded block, or None when there is none."""
        if isinstance(data, list):
            data = next((item for item in data if isinstance(item, dict) and _is_article_type(item.get("@type"))), None)
        if not isinstance(data, dict):
            return None
        if not _has_schema_context(data.get("@context")):
            return None

        if "@type" not in data and isinstance(data.get("@graph"), list):
            for item in data["@graph"]:
                if isinstance(item, dict) and _is_article_type(item.get("@type")):
                    data = item
                    break

        if not _is_article_type(data.get("@type")):
            return None
        return data

    @staticmethod
    def author_of(article: Dict[str, Any]) -> Optional[str]:
        author = article.get("author")
        if isinstance(author, str):
            return _string(author)
        if isinstance(author, dict):
            return _name_of(author)
        if isinstance(author, list):
            names: List[str] = []
            for item in author:
                name = _string(item) if isinstance(item, str) else _name_of(item)
                if name:
                    names.append(name)
            return ", ".join(names) if names else None
        return None

    @staticmethod
    def title_of(article: Dict[str, Any]) -> Optional[str]:
        """
        ``name`` is used unless it merely repeats the publisher name, in which
        case ``headline`` is the article title.
        """
        name = _string(article.get("name"))
        headline = _string(article.get("headline"))
        publisher_name = _name_of(article.get("publisher"))
        if name and publisher_name and name == publisher_name:
            return headline
        return name or headline

    def parse(self, soup: BeautifulSoup) -> Metadata:
        """Read every JSON-LD block; the first block providing a field wins."""
        metadata = Metadata()

        for script in soup.find_all("script", type="application/ld+json"):
            try:
                data = self.load(script.string or "")
            except JsonLdError as e:
                logger.debug(f"Skipping JSON-LD block: {e}")
                continue

            article = self.find_article(data)
            if article is None:
                continue

            metadata.merge_missing(
                Metadata(
                    title=self.title_of(article),
                    byline=self.author_of(article),
                    excerpt=_string(article.get("description")),
                    site_name=_name_of(article.get("publisher")),
                    published_time=_string(article.get("datePublished")),
                )
            )

        return metadata


class MetaTagParser:
    """Parser for OpenGraph, Twitter Card, Dublin Core and Parsely meta tags."""

    @staticmethod
    def parse(soup: BeautifulSoup) -> Dict[str, str]:
        """
        Collect meta values keyed by normalized name (``og:title``, ``author``,
        ``parsely-pub-date`` ...). The first tag for a key wins.
        """
        values: Dict[str, str] = {}

        for meta in soup.find_all("meta"):
            content = meta.get("content")
            if not content or not str(content).strip():
                continue
            content = str(content).strip()

            matched = False
            prop = meta.get("property")
            if prop:
                for part in str(prop).split():
                    match = META_PROPERTY_RE.search(part)
                    if match:
                        key = "".join(match.group(0).lower().split())
                        values.setdefault(key, content)
                        matched = True

            name = meta.get("name")
            if not matched and name and META_NAME_RE.match(str(name)):
                key = "".join(str(name).lower().split()).replace(".", ":")
                values.setdefault(key, content)

        return values

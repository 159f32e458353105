"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class Metadata:
    """Article metadata resolved from JSON-LD, meta tags and the DOM."""

    title: Optional[str] = None
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None
    lang: Optional[str] = None

    def merge_missing(self, other: Metadata) -> None:
        """Fill fields that are still empty from ``other``."""
        for name in ("title", "byline", "excerpt", "site_name", "published_time", "lang"):
            if getattr(self, name) is None and getattr(other, name) is not None:
                setattr(self, name, getattr(other, name))


@dataclass(slots=True, frozen=True)
class Article:
    """The readable article extracted from a document."""

    title: Optional[str]
    content: Optional[str]
    raw_content: Optional[str]
    text_content: Optional[str]
    length: int
    excerpt: Optional[str] = None
    byline: Optional[str] = None
    dir: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    published_time: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the result."""
        expected = len(self.text_content) if self.text_content else 0
        if self.length != expected:
            raise ValueError(f"length {self.length} does not match text_content ({expected} characters)")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

"""
Protocols for pluggable article extraction strategies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import Article


@runtime_checkable
class Extractor(Protocol):
    """Pluggable HTML-to-Article strategy."""

    name: str

    async def extract(self, html: str, *, url: str | None = None) -> Article | None:
        """Extract the article from an HTML string.

        Args:
            html: HTML content to extract from
            url: Optional base URL for resolving relative links

        Returns:
            The extracted Article, or None when the page has no readable content
        """
        ...

"""
Async adapter around the synchronous Readability pipeline.
"""

from __future__ import annotations

import asyncio

import structlog

from ..config import ReadabilityOptions
from ..models import Article
from ..readability import Readability
from .protocols import Extractor

logger = structlog.get_logger(__name__)


class ReadabilityExtractor(Extractor):
    """Runs extraction in the default thread pool so event loops stay responsive."""

    name = "readability"

    def __init__(self, options: ReadabilityOptions | None = None) -> None:
        self.options = options or ReadabilityOptions()

    async def extract(self, html: str, *, url: str | None = None) -> Article | None:
        """Extract the article from ``html``.

        Args:
            html: HTML content to extract from
            url: Optional base URL for resolving relative links

        Returns:
            The extracted Article, or None when nothing readable was found

        Raises:
            InvalidUrlError: If ``url`` is malformed
        """
        if not html.strip():
            logger.debug("Empty HTML, nothing to extract", url=url)
            return None

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._extract_sync, html, url)

    def _extract_sync(self, html: str, url: str | None) -> Article | None:
        return Readability(html, url, self.options).parse()

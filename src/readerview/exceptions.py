"""
Error taxonomy for readerview.

Construction-time problems (a bad base URL) are raised immediately. Errors
raised while extracting are caught by ``Readability.parse`` and turned into
``None``; ``Readability.parse_or_raise`` lets them through.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")


class ReadabilityError(Exception):
    """Base class for every error raised by readerview."""

    pass


class ParseError(ReadabilityError):
    """The HTML could not be turned into a tree."""

    pass


class InvalidUrlError(ReadabilityError, ValueError):
    """Raised when the base URL is not a syntactically valid URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid base URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class InvalidDocumentError(ReadabilityError):
    """The document has no usable structure (for example no root element)."""

    pass


class JsonLdError(ReadabilityError):
    """A JSON-LD block could not be decoded."""

    pass


class MaxElementsExceededError(ReadabilityError):
    """The document holds more elements than ``max_elems_to_parse`` allows."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Aborting parsing document; {count} elements found (limit {limit})")
        self.count = count
        self.limit = limit


class NoContentFoundError(ReadabilityError):
    """Every rung of the retry ladder failed to find enough content."""

    pass


def validate_base_url(url: Optional[str]) -> Optional[str]:
    """
    Check that ``url`` is a usable base URL.

    Returns:
        The URL stripped of surrounding whitespace, or None when no URL was given.

    Raises:
        InvalidUrlError: If the URL is malformed.
    """
    if url is None:
        return None

    candidate = url.strip()
    if not candidate:
        raise InvalidUrlError(url, "empty URL")
    if len(candidate) > MAX_URL_LENGTH:
        raise InvalidUrlError(url, f"exceeds maximum length of {MAX_URL_LENGTH}")
    if any(ch.isspace() for ch in candidate):
        raise InvalidUrlError(url, "contains whitespace")

    try:
        parsed = urlparse(candidate)
        # Accessing the port validates it.
        _ = parsed.port
    except ValueError as e:
        raise InvalidUrlError(url, str(e)) from e

    if not parsed.scheme or not _SCHEME_RE.match(parsed.scheme):
        raise InvalidUrlError(url, "missing or invalid scheme")
    if not parsed.netloc and parsed.scheme.lower() != "file":
        raise InvalidUrlError(url, "missing host")

    return candidate

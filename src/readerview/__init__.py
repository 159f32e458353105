"""
readerview - Readability-style article extraction for HTML documents.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ReadabilityOptions, ReaderableOptions, Settings
from .exceptions import (
    InvalidDocumentError,
    InvalidUrlError,
    JsonLdError,
    MaxElementsExceededError,
    NoContentFoundError,
    ParseError,
    ReadabilityError,
)
from .models import Article, Metadata
from .readability import Readability, extract, is_probably_readerable
from .extractor.readability_extractor import ReadabilityExtractor

__all__ = [
    "__version__",
    "Article",
    "InvalidDocumentError",
    "InvalidUrlError",
    "JsonLdError",
    "MaxElementsExceededError",
    "Metadata",
    "NoContentFoundError",
    "ParseError",
    "Readability",
    "ReadabilityError",
    "ReadabilityExtractor",
    "ReadabilityOptions",
    "ReaderableOptions",
    "Settings",
    "extract",
    "is_probably_readerable",
]

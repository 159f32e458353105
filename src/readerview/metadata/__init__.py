"""
Metadata extraction: JSON-LD, meta tags, bylines in the page and title cleanup.
"""

from .author_extractor import AuthorExtractor
from .byline_policy import BylineCandidate, BylineConfidence, should_override_byline
from .metadata_extractor import MetadataExtractor, extract_language
from .structured_data_parser import JsonLdParser, MetaTagParser
from .title_extractor import extract_title_from_document

__all__ = [
    "AuthorExtractor",
    "BylineCandidate",
    "BylineConfidence",
    "JsonLdParser",
    "MetaTagParser",
    "MetadataExtractor",
    "extract_language",
    "extract_title_from_document",
    "should_override_byline",
]

"""Utility modules for readerview."""

from .text import (
    BylineOutcome,
    CleanedByline,
    clean_byline_text,
    clean_byline_text_with_reason,
    is_byline_redundant_with_site_name,
    is_url,
    looks_like_author_name,
    looks_like_bracket_menu,
    looks_like_byline,
    looks_like_caps_author,
    looks_like_dateline,
    looks_like_org_credit,
    unescape_html_entities,
)

__all__ = [
    "BylineOutcome",
    "CleanedByline",
    "clean_byline_text",
    "clean_byline_text_with_reason",
    "is_byline_redundant_with_site_name",
    "is_url",
    "looks_like_author_name",
    "looks_like_bracket_menu",
    "looks_like_byline",
    "looks_like_caps_author",
    "looks_like_dateline",
    "looks_like_org_credit",
    "unescape_html_entities",
]

"""
Rule tables shared by the extraction heuristics.

Every vocabulary is kept as plain data and compiled once at import time. The
compiled patterns are never mutated, so they can be shared between threads.
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Iterable, Pattern, Tuple


def keyword_pattern(keywords: Iterable[str], flags: int = re.IGNORECASE) -> Pattern[str]:
    """Compile a list of regex fragments into a single alternation."""
    return re.compile("|".join(keywords), flags)


# --- Candidate admission vocabularies ---

UNLIKELY_CANDIDATE_KEYWORDS: Tuple[str, ...] = (
    "-ad-",
    "ai2html",
    "banner",
    "breadcrumbs",
    "combx",
    "comment",
    "community",
    "cover-wrap",
    "disqus",
    "extra",
    "footer",
    "gdpr",
    "header",
    "legends",
    "menu",
    "related",
    "remark",
    "replies",
    "rss",
    "shoutbox",
    "sidebar",
    "skyscraper",
    "social",
    "sponsor",
    "supplemental",
    "ad-break",
    "agegate",
    "pagination",
    "pager",
    "popup",
    "yom-remote",
)

MAYBE_CANDIDATE_KEYWORDS: Tuple[str, ...] = (
    "and",
    "article",
    "body",
    "column",
    "content",
    "main",
    "mathjax",
    "shadow",
)

POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "article",
    "body",
    "content",
    "entry",
    "hentry",
    "h-entry",
    "main",
    "page",
    "pagination",
    "post",
    "text",
    "blog",
    "story",
)

NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "-ad-",
    "hidden",
    "^hid$",
    " hid$",
    " hid ",
    "^hid ",
    "banner",
    "combx",
    "comment",
    "com-",
    "contact",
    "footer",
    "gdpr",
    "masthead",
    "media",
    "meta",
    "outbrain",
    "promo",
    "related",
    "scroll",
    "share",
    "shoutbox",
    "sidebar",
    "skyscraper",
    "sponsor",
    "shopping",
    "tags",
    "widget",
)

BYLINE_KEYWORDS: Tuple[str, ...] = ("byline", "author", "dateline", "writtenby", "p-author")

UNLIKELY_CANDIDATES_RE = keyword_pattern(UNLIKELY_CANDIDATE_KEYWORDS)
MAYBE_CANDIDATE_RE = keyword_pattern(MAYBE_CANDIDATE_KEYWORDS)
POSITIVE_RE = keyword_pattern(POSITIVE_KEYWORDS)
NEGATIVE_RE = keyword_pattern(NEGATIVE_KEYWORDS)
BYLINE_RE = keyword_pattern(BYLINE_KEYWORDS)

UNLIKELY_ROLES: FrozenSet[str] = frozenset(
    {"menu", "menubar", "complementary", "navigation", "alert", "alertdialog", "dialog"}
)

# --- Cleaning vocabularies ---

SHARE_ELEMENTS_RE = re.compile(r"(\b|_)(share|sharedaddy)(\b|_)", re.IGNORECASE)

JUNK_KEYWORDS: Tuple[str, ...] = (
    "share",
    "sharedaddy",
    "social-share",
    "share-tools",
    "related",
    "recirc",
    "recommend",
    "more-stories",
    "outbrain",
    "taboola",
    "newsletter",
    "signup",
    "subscribe",
    "promo",
    "sponsor",
    "advert",
    "ad-slot",
    "ad-container",
    "cookie",
)
JUNK_RE = re.compile(r"(?:\b|_)(?:" + "|".join(JUNK_KEYWORDS) + r")(?:\b|_)", re.IGNORECASE)

FORM_TAGS: Tuple[str, ...] = ("form", "fieldset", "input", "textarea", "select", "button")

DEFAULT_VIDEO_RE = re.compile(
    r"//(www\.)?((dailymotion|youtube|youtube-nocookie|player\.vimeo|v\.qq)\.com"
    r"|(archive|upload\.wikimedia)\.org|player\.twitch\.tv)",
    re.IGNORECASE,
)

EMBED_TAGS: Tuple[str, ...] = ("object", "embed", "iframe")

AD_WORDS_RE = re.compile(
    r"^(ad(vertising|vertisement)?|pub(licité)?|werb(ung)?|广告|Реклама|Anuncio)$",
    re.IGNORECASE,
)
LOADING_WORDS_RE = re.compile(
    r"^((loading|正在加载|Загрузка|chargement|cargando)(…|\.\.\.)?)$",
    re.IGNORECASE,
)

PRESENTATIONAL_ATTRIBUTES: Tuple[str, ...] = (
    "align",
    "background",
    "bgcolor",
    "border",
    "cellpadding",
    "cellspacing",
    "frame",
    "hspace",
    "rules",
    "style",
    "valign",
    "vspace",
)
DEPRECATED_SIZE_ATTRIBUTE_ELEMS: FrozenSet[str] = frozenset({"table", "th", "td", "hr", "pre"})

# --- Tag tables ---

DEFAULT_TAGS_TO_SCORE: Tuple[str, ...] = ("section", "h2", "h3", "h4", "h5", "h6", "p", "td", "pre")

TAG_SCORE_BONUS: Dict[str, int] = {
    "article": 5,
    "div": 5,
    "section": 3,
    "pre": 3,
    "td": 3,
    "blockquote": 3,
    "address": -3,
    "ol": -3,
    "ul": -3,
    "dl": -3,
    "dd": -3,
    "dt": -3,
    "li": -3,
    "form": -3,
    "nav": -5,
    "aside": -5,
    "h1": -5,
    "h2": -5,
    "h3": -5,
    "h4": -5,
    "h5": -5,
    "h6": -5,
    "th": -5,
}

DIV_TO_P_ELEMS: Tuple[str, ...] = ("blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul")

ALTER_TO_DIV_EXCEPTIONS: FrozenSet[str] = frozenset({"div", "article", "section", "p", "ol", "ul"})

PHRASING_ELEMS: FrozenSet[str] = frozenset(
    {
        "abbr",
        "audio",
        "b",
        "bdo",
        "br",
        "button",
        "cite",
        "code",
        "data",
        "datalist",
        "dfn",
        "em",
        "embed",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "math",
        "meter",
        "noscript",
        "object",
        "output",
        "progress",
        "q",
        "ruby",
        "samp",
        "script",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "textarea",
        "time",
        "var",
        "wbr",
    }
)

HEADING_TAGS: Tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")

MEDIA_TAGS: FrozenSet[str] = frozenset(
    {"img", "picture", "video", "audio", "source", "iframe", "embed", "object", "svg", "math", "canvas"}
)

# Void or self-describing elements that are never treated as empty leaves.
NON_EMPTY_LEAF_TAGS: FrozenSet[str] = MEDIA_TAGS | frozenset({"br", "hr", "td", "th", "tr", "col", "colgroup"})

TEXTISH_TAGS: Tuple[str, ...] = ("span", "li", "td") + DIV_TO_P_ELEMS

# --- Text patterns ---

COMMAS_RE = re.compile("[,،﹐︐︑⹁⸴⸲，]")
NORMALIZE_RE = re.compile(r"\s{2,}")
WHITESPACE_RE = re.compile(r"^\s*$")
HASH_URL_RE = re.compile(r"^#.+")
SRCSET_URL_RE = re.compile(r"(\S+)(\s+[\d.]+[xw])?(\s*(?:,|$))")
B64_DATA_URL_RE = re.compile(r"^data:\s*([^\s;,]+)\s*;\s*base64\s*,", re.IGNORECASE)
IMAGE_URL_RE = re.compile(r"\.(jpg|jpeg|png|webp|gif|avif)", re.IGNORECASE)
SENTENCE_END_RE = re.compile(r"\.( |$)")
TOKENIZE_RE = re.compile(r"\W+")

DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
VISIBILITY_HIDDEN_RE = re.compile(r"visibility\s*:\s*hidden", re.IGNORECASE)

# --- Title heuristics ---

TITLE_SEPARATORS: Tuple[str, ...] = ("|", "-", "–", "—", "\\", "/", ">", "»")
HIERARCHICAL_SEPARATORS: Tuple[str, ...] = ("\\", "/", ">", "»")

TITLE_SEPARATOR_RE = re.compile(r"\s(" + "|".join(re.escape(s) for s in TITLE_SEPARATORS) + r")\s")
TITLE_HIERARCHICAL_SEPARATOR_RE = re.compile(
    r"\s(" + "|".join(re.escape(s) for s in HIERARCHICAL_SEPARATORS) + r")\s"
)
_SEPARATOR_CLASS = re.escape("".join(TITLE_SEPARATORS))
TITLE_LEADING_SEGMENT_RE = re.compile(r"^[^" + _SEPARATOR_CLASS + r"]*[" + _SEPARATOR_CLASS + r"]")

# --- JSON-LD ---

SCHEMA_ORG_CONTEXT_RE = re.compile(r"^https?://schema\.org/?$")

JSON_LD_ARTICLE_TYPES: Tuple[str, ...] = (
    "Article",
    "AdvertiserContentArticle",
    "NewsArticle",
    "AnalysisNewsArticle",
    "AskPublicNewsArticle",
    "BackgroundNewsArticle",
    "OpinionNewsArticle",
    "ReportageNewsArticle",
    "ReviewNewsArticle",
    "Report",
    "SatiricalArticle",
    "ScholarlyArticle",
    "MedicalScholarlyArticle",
    "SocialMediaPosting",
    "BlogPosting",
    "LiveBlogPosting",
    "DiscussionForumPosting",
    "TechArticle",
    "APIReference",
)
JSON_LD_ARTICLE_TYPES_RE = re.compile(r"^(?:" + "|".join(JSON_LD_ARTICLE_TYPES) + r")$")

# --- Meta tags ---

META_PROPERTY_RE = re.compile(
    r"\s*(article|dc|dcterm|og|twitter)\s*:\s*(author|creator|description|published_time|title|site_name)\s*",
    re.IGNORECASE,
)
META_NAME_RE = re.compile(
    r"^\s*(?:(?:article|dc|dcterm|og|twitter|parsely|weibo:(?:article|webpage))\s*[-.:]\s*)?"
    r"(author|author_name|creator|pub-date|description|title|site_name)\s*$",
    re.IGNORECASE,
)

TITLE_META_KEYS: Tuple[str, ...] = (
    "dc:title",
    "dcterm:title",
    "og:title",
    "weibo:article:title",
    "weibo:webpage:title",
    "title",
    "twitter:title",
    "parsely-title",
)
BYLINE_META_KEYS: Tuple[str, ...] = ("dc:creator", "dcterm:creator", "author", "parsely-author")
ARTICLE_AUTHOR_META_KEYS: Tuple[str, ...] = ("article:author", "article:author_name")
EXCERPT_META_KEYS: Tuple[str, ...] = (
    "dc:description",
    "dcterm:description",
    "og:description",
    "weibo:article:description",
    "weibo:webpage:description",
    "description",
    "twitter:description",
)
SITE_NAME_META_KEYS: Tuple[str, ...] = ("og:site_name",)
PUBLISHED_TIME_META_KEYS: Tuple[str, ...] = ("article:published_time", "parsely-pub-date")

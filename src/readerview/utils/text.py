"""
Text heuristics used by the byline, excerpt and title logic.

Every function here works on plain strings, never on the tree, so each rule
can be tested on its own.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

# Wire services and outlets that appear as credits rather than people.
WIRE_SERVICES = {
    "associated press",
    "the associated press",
    "ap",
    "reuters",
    "thomson reuters",
    "bloomberg",
    "bloomberg news",
    "afp",
    "agence france-presse",
    "agence france presse",
    "dpa",
    "efe",
    "ansa",
    "xinhua",
    "upi",
    "united press international",
    "pa",
    "press association",
    "cnn",
    "cnn wire",
    "bbc",
    "bbc news",
    "npr",
    "pbs",
    "abc news",
    "cbs news",
    "nbc news",
    "fox news",
    "usa today",
    "the new york times",
    "new york times",
    "the washington post",
    "washington post",
    "the guardian",
    "politico",
    "mcclatchy",
    "gannett",
    "tribune news service",
    "kyodo",
    "yonhap",
}

# Job descriptors that may trail or lead a name without being part of it.
JOB_KEYWORDS = {
    "reporter",
    "editor",
    "writer",
    "staff",
    "senior",
    "technologist",
    "correspondent",
    "columnist",
    "analyst",
    "producer",
    "anchor",
    "bureau",
    "desk",
    "spokesman",
    "spokeswoman",
    "spokesperson",
    "contributor",
    "team",
    "author",
    "chief",
    "political",
    "science",
    "sports",
    "business",
    "national",
    "foreign",
    "contributing",
    "special",
    "freelance",
}

# Collective descriptors, which mean an all-descriptor credit names an organisation.
COLLECTIVE_JOB_KEYWORDS = {"staff", "team", "desk", "bureau"}

# Tokens that show an all-caps string is a counter or a menu, not a name.
CAPS_NOISE_TOKENS = {
    "views",
    "view",
    "votes",
    "vote",
    "post",
    "posts",
    "yes",
    "no",
    "hot",
    "stats",
    "trending",
    "share",
    "sections",
}

# Words that are never author names on their own.
COMMON_NON_NAMES = {
    "admin",
    "administrator",
    "author",
    "editor",
    "writer",
    "staff",
    "team",
    "news",
    "press",
    "media",
    "content",
    "article",
    "post",
    "blog",
    "website",
    "page",
    "home",
    "about",
    "contact",
    "privacy",
    "share",
    "comments",
    "read more",
}

NAME_PARTICLES = {"de", "da", "del", "della", "di", "du", "van", "von", "der", "den", "la", "le", "bin", "al", "y", "e"}

MONTH_KEYWORDS = {
    "jan",
    "january",
    "feb",
    "february",
    "mar",
    "march",
    "apr",
    "april",
    "may",
    "jun",
    "june",
    "jul",
    "july",
    "aug",
    "august",
    "sep",
    "sept",
    "september",
    "oct",
    "october",
    "nov",
    "november",
    "dec",
    "december",
}

_WHITESPACE_RE = re.compile(r"\s+")
_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)+$")
_DOMAIN_RE = re.compile(r"^[\w-]+(\.[\w-]+)*\.(com|org|net|co\.uk|news|info|io)$", re.IGNORECASE)
_TOKEN_SPLIT_RE = re.compile(r"[^\w]+")

BYLINE_PREFIX_RE = re.compile(
    r"^\s*(?:by|par|von|por|door|av|af|written\s+by|posted\s+by|words\s+by|story\s+by|reported\s+by)\b\s*:?\s*(?P<rest>.+)$",
    re.IGNORECASE | re.DOTALL,
)
_DECORATED_PREFIX_RE = re.compile(
    r"^\s*(?:(?:written|posted|words|story|reported)\s+by\s*:?|by\s*:|authors?\s*:)\s*",
    re.IGNORECASE,
)
_TRAILING_TIMESTAMP_RE = re.compile(
    r"\s+(?:updated|published|posted|last\s+modified)\b.*$",
    re.IGNORECASE | re.DOTALL,
)
_DATE_PATTERNS = [
    re.compile(
        r"(January|February|March|April|May|June|July|August|September|October|November|December)\s+\d{1,2},?\s+\d{4}",
        re.IGNORECASE,
    ),
    re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"),
    re.compile(r"\d{4}[/\-]\d{1,2}[/\-]\d{1,2}"),
    re.compile(r"\d{1,2}\s+(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}", re.IGNORECASE),
    re.compile(r"\d{1,2}:\d{2}(:\d{2})?\s*(?:AM|PM)?", re.IGNORECASE),
]
_SEGMENT_SEPARATOR_RE = re.compile(r"\s*[,|–—]\s*|\s+-\s+")
_ORG_SUFFIX_RE = re.compile(
    r"^(?P<head>.*?)\s*\b(?:staff(?:\s+reports?)?|news\s+services?|wire\s+services?|wire\s+reports?"
    r"|newsroom|news\s+desk|editorial\s+board|editors|press\s+association)$",
    re.IGNORECASE,
)
_DATELINE_DASHES = ("—", "–", " - ", "--")
_BRACKET_SEGMENT_RE = re.compile(r"\[[^\[\]]{1,30}\]")
_BRACKET_FILLER_RE = re.compile(r"[\s|·•,\-–—/]+")

EDGE_PUNCTUATION = " \t\r\n|,;:-–—·•"


class BylineOutcome(Enum):
    """How a byline string fared in cleaning."""

    ACCEPTED = "accepted"
    DROPPED_ORG_CREDIT = "dropped_org_credit"
    DROPPED = "dropped"


@dataclass(frozen=True)
class CleanedByline:
    outcome: BylineOutcome
    text: Optional[str] = None


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def word_count(text: str) -> int:
    return len(text.split())


def unescape_html_entities(text: str) -> str:
    """Decode named and numeric character references such as ``&amp;`` or ``&#8217;``."""
    return html.unescape(text)


def is_url(text: str) -> bool:
    """True when ``text`` is a single absolute URL."""
    candidate = text.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return False
    if parsed.scheme in ("http", "https", "ftp"):
        return bool(parsed.netloc)
    return parsed.scheme == "mailto" and bool(parsed.path)


def tokenize(text: str) -> List[str]:
    return [token for token in _TOKEN_SPLIT_RE.split(text.lower()) if token]


def looks_like_byline(text: str) -> bool:
    """Phrasing such as "By Jane Doe" or "Par Sébastien Farcis"."""
    if not text or len(text) > 100:
        return False
    match = BYLINE_PREFIX_RE.match(normalize_whitespace(text))
    if not match:
        return False
    rest = match.group("rest").strip(EDGE_PUNCTUATION)
    if not rest or word_count(rest) > 8:
        return False
    return rest[0].isupper()


def looks_like_caps_author(text: str) -> bool:
    """An all-caps author name such as "JOE HILDEBRAND"."""
    stripped = text.strip()
    if not any(ch.isspace() for ch in stripped):
        return False
    letters = [ch for ch in stripped if ch.isalpha()]
    if len(letters) < 3:
        return False
    uppercase = sum(1 for ch in letters if ch.isupper())
    if uppercase / len(letters) < 0.8:
        return False
    return not any(token in CAPS_NOISE_TOKENS for token in tokenize(stripped))


def looks_like_dateline(text: str) -> bool:
    """
    A location credit rather than a person, e.g. "CAIRO", "CAIRO —" or
    "WASHINGTON, D.C. -".

    A multi-word capitalised place without a trailing dash is ambiguous with an
    all-caps name and is not treated as a dateline.
    """
    stripped = normalize_whitespace(text)
    if not stripped:
        return False

    head = stripped
    has_dash = False
    for dash in _DATELINE_DASHES:
        index = stripped.find(dash)
        if index >= 0:
            head = stripped[:index]
            has_dash = True
            break

    head = head.strip(EDGE_PUNCTUATION + "()")
    if not head or len(head) > 40:
        return False

    place = head.split(",")[0].strip()
    letters = [ch for ch in place if ch.isalpha()]
    if len(letters) < 3 or any(ch.islower() for ch in letters):
        return False
    if has_dash:
        return True
    return word_count(place) == 1


def looks_like_author_name(text: str) -> bool:
    """Two to five capitalised words with no digits, e.g. "Nicolas Perriault"."""
    candidate = normalize_whitespace(text)
    if not candidate or len(candidate) > 60:
        return False
    if candidate.lower() in COMMON_NON_NAMES or any(ch.isdigit() for ch in candidate):
        return False
    words = candidate.split()
    if not 2 <= len(words) <= 5:
        return False
    for word in words:
        if word.lower() in NAME_PARTICLES:
            continue
        if not re.match(r"^[^\W\d_][\w.'\-]*$", word):
            return False
        if not word[0].isupper():
            return False
    return True


def looks_like_org_credit(text: str) -> bool:
    """Wire services, outlets and desk credits ("AFP", "Herald Staff", "example.com")."""
    normalized = normalize_whitespace(text).strip(EDGE_PUNCTUATION)
    if not normalized:
        return False
    stripped = _DECORATED_PREFIX_RE.sub("", normalized)
    stripped = re.sub(r"^by\s+", "", stripped, flags=re.IGNORECASE).strip(EDGE_PUNCTUATION).strip(".")
    lowered = stripped.lower()

    if lowered in WIRE_SERVICES:
        return True
    if _DOMAIN_RE.match(lowered) and word_count(lowered) == 1:
        return True

    match = _ORG_SUFFIX_RE.match(lowered)
    if match:
        head = stripped[: match.end("head")].strip(EDGE_PUNCTUATION)
        return not looks_like_author_name(head)
    return False


def looks_like_bracket_menu(text: str) -> bool:
    """Bracketed link menus such as "[edit] [hide]" that are not prose."""
    segments = _BRACKET_SEGMENT_RE.findall(text)
    if not segments:
        return False
    remainder = _BRACKET_FILLER_RE.sub("", _BRACKET_SEGMENT_RE.sub("", text))
    return len(remainder) <= 10


def is_job_descriptor(text: str) -> bool:
    tokens = tokenize(text)
    return bool(tokens) and all(token in JOB_KEYWORDS for token in tokens)


def _strip_trailing_job_segments(text: str) -> str:
    while True:
        separators = list(_SEGMENT_SEPARATOR_RE.finditer(text))
        if not separators:
            return text
        last = separators[-1]
        tail = text[last.end() :]
        if not is_job_descriptor(tail) or not text[: last.start()].strip():
            return text
        text = text[: last.start()]


def _strip_leading_job_tokens(text: str) -> str:
    words = text.split()
    while len(words) > 2 and words[0].strip(EDGE_PUNCTUATION).lower() in JOB_KEYWORDS:
        words = words[1:]
    return " ".join(words)


def _strip_timestamps(text: str) -> str:
    text = _TRAILING_TIMESTAMP_RE.sub("", text)
    for pattern in _DATE_PATTERNS:
        text = pattern.sub("", text)
    text = re.sub(r"\s+(?:on|at)$", "", text.strip(), flags=re.IGNORECASE)
    return text


def clean_byline_text_with_reason(text: Optional[str]) -> CleanedByline:
    """
    Normalise a byline and classify it.

    Leading decorations ("Written by", "By:", "Author:") and leading or
    trailing job titles are removed, timestamps are dropped and whitespace is
    collapsed. A plain leading "By" is part of the credit and is kept.
    """
    if not text:
        return CleanedByline(BylineOutcome.DROPPED)

    cleaned = normalize_whitespace(unescape_html_entities(text)).strip(EDGE_PUNCTUATION)
    if not cleaned or len(cleaned) > 200:
        return CleanedByline(BylineOutcome.DROPPED)
    if is_url(cleaned) or _EMAIL_RE.match(cleaned):
        return CleanedByline(BylineOutcome.DROPPED)

    cleaned = _DECORATED_PREFIX_RE.sub("", cleaned)
    cleaned = _strip_timestamps(cleaned)
    cleaned = normalize_whitespace(cleaned).strip(EDGE_PUNCTUATION)
    cleaned = _strip_trailing_job_segments(cleaned)
    cleaned = _strip_leading_job_tokens(cleaned).strip(EDGE_PUNCTUATION)

    if not cleaned or not any(ch.isalpha() for ch in cleaned):
        return CleanedByline(BylineOutcome.DROPPED)

    if is_job_descriptor(cleaned):
        if any(token in COLLECTIVE_JOB_KEYWORDS for token in tokenize(cleaned)):
            return CleanedByline(BylineOutcome.DROPPED_ORG_CREDIT, cleaned)
        return CleanedByline(BylineOutcome.DROPPED)

    if looks_like_org_credit(cleaned):
        return CleanedByline(BylineOutcome.DROPPED_ORG_CREDIT, cleaned)

    return CleanedByline(BylineOutcome.ACCEPTED, cleaned)


def clean_byline_text(text: Optional[str]) -> Optional[str]:
    """
    Cleaned byline, or None when nothing usable is left.

    Organisation credits are returned as-is: with no better source they are
    still the right attribution.
    """
    result = clean_byline_text_with_reason(text)
    if result.outcome is BylineOutcome.DROPPED:
        return None
    return result.text


def is_byline_redundant_with_site_name(byline: Optional[str], site_name: Optional[str]) -> bool:
    """True when the byline repeats (part of) the site name, e.g. "Joe Wee" in "SIMPLYFOUND.COM | BY: Joe Wee"."""
    if not byline or not site_name:
        return False
    byline_tokens = tokenize(byline)
    site_tokens = tokenize(site_name)
    if not byline_tokens or not site_tokens:
        return False
    if byline_tokens == site_tokens:
        return True
    size = len(byline_tokens)
    return any(site_tokens[i : i + size] == byline_tokens for i in range(len(site_tokens) - size + 1))


def truncate_at_word_boundary(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, backing off to the last space."""
    if len(text) <= limit:
        return text
    cut = text[:limit]
    space = cut.rfind(" ")
    if space > 0:
        cut = cut[:space]
    return cut.strip()

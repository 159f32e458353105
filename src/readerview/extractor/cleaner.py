"""
Light and deep cleaning passes over the selected article.

Both passes take and return HTML so that each one is a pure transformation.
Neither pass removes the chain of elements holding the majority of the text.
"""

from __future__ import annotations

from typing import Optional, Pattern, Set, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..config import ReadabilityOptions
from ..constants import (
    DEFAULT_VIDEO_RE,
    EMBED_TAGS,
    FORM_TAGS,
    JUNK_RE,
    MEDIA_TAGS,
    NON_EMPTY_LEAF_TAGS,
    SRCSET_URL_RE,
)
from ..dom import (
    attr_text,
    first_element_child,
    get_inner_text,
    get_link_density,
    get_next_node,
    has_single_tag_inside_element,
    inner_html,
    is_element_without_content,
    is_probably_visible,
    is_text,
    majority_text_path,
    match_string,
    parse_html,
    remove_and_get_next,
)

JUNK_LINK_DENSITY = 0.5
URL_MEDIA_TAGS = ("img", "picture", "figure", "video", "audio", "source", "iframe")


def parse_fragment(html: str) -> Tuple[BeautifulSoup, Optional[Tag]]:
    """Parse an article fragment and return the element wrapping it."""
    soup = parse_html(html)
    return soup, soup.body


def is_allowed_video(node: Tag, pattern: Optional[Pattern[str]] = None) -> bool:
    """Whether an embed points at an allowed video host."""
    pattern = pattern or DEFAULT_VIDEO_RE
    for value in node.attrs.values():
        if pattern.search(value if isinstance(value, str) else " ".join(value)):
            return True
    return node.name == "object" and bool(pattern.search(inner_html(node)))


class ContentCleaner:
    """Removes clutter from an extracted article."""

    def __init__(self, options: Optional[ReadabilityOptions] = None, base_url: Optional[str] = None) -> None:
        self.options = options or ReadabilityOptions()
        self.base_url = base_url
        self.video_pattern = self.options.allowed_video_regex or DEFAULT_VIDEO_RE

    def clean_light(self, html: str) -> str:
        """Drop junk, hidden elements and forms; absolutize URLs; keep only allowed embeds."""
        soup, root = parse_fragment(html)
        if root is None:
            return ""
        protected = majority_text_path(root)

        self.remove_hidden(root, protected)
        self.remove_forms(root, protected)
        self.remove_junk(root, protected)
        self.enforce_video_allow_list(root, protected)
        self.fix_relative_urls(root)
        self.remove_empty_leaves(root, protected)
        return inner_html(root)

    def clean_deep(self, html: str) -> str:
        """Drop junk again, strip classes and ids, collapse redundant wrappers."""
        soup, root = parse_fragment(html)
        if root is None:
            return ""
        protected = majority_text_path(root)

        self.remove_junk(root, protected)
        self.strip_identifiers(root)
        self.collapse_wrappers(root, protected)
        self.remove_empty_leaves(root, protected)
        return inner_html(root)

    # --- Individual steps ---

    @staticmethod
    def _remove(node: Tag, protected: Set[int]) -> bool:
        if node.decomposed or id(node) in protected:
            return False
        node.decompose()
        return True

    def remove_hidden(self, root: Tag, protected: Set[int]) -> None:
        for node in root.find_all(True):
            if not node.decomposed and not is_probably_visible(node):
                self._remove(node, protected)

    def remove_forms(self, root: Tag, protected: Set[int]) -> None:
        for node in root.find_all(FORM_TAGS):
            self._remove(node, protected)

    def remove_junk(self, root: Tag, protected: Set[int]) -> None:
        """Share widgets, related-content blocks and promos that are short or link-heavy."""
        for node in root.find_all(True):
            if node.decomposed or not JUNK_RE.search(match_string(node)):
                continue
            if (
                len(get_inner_text(node)) < self.options.char_threshold
                or get_link_density(node) > JUNK_LINK_DENSITY
            ):
                self._remove(node, protected)

    def enforce_video_allow_list(self, root: Tag, protected: Set[int]) -> None:
        for node in root.find_all(EMBED_TAGS):
            if node.decomposed or is_allowed_video(node, self.video_pattern):
                continue
            self._remove(node, protected)

    def fix_relative_urls(self, root: Tag) -> None:
        """Rewrite ``href``, ``src``, ``poster`` and ``srcset`` against the base URL."""
        if not self.base_url:
            return
        base_url = self.base_url

        for link in root.find_all("a", href=True):
            href = attr_text(link, "href").strip()
            if href.lower().startswith("javascript:"):
                if len(link.contents) == 1 and is_text(link.contents[0]):
                    link.replace_with(link.get_text())
                else:
                    link.name = "span"
                    del link["href"]
            elif href and not href.startswith("#"):
                link["href"] = urljoin(base_url, href)

        for media in root.find_all(URL_MEDIA_TAGS):
            for name in ("src", "poster"):
                value = attr_text(media, name).strip()
                if value:
                    media[name] = urljoin(base_url, value)
            srcset = attr_text(media, "srcset")
            if srcset:
                media["srcset"] = SRCSET_URL_RE.sub(
                    lambda m: urljoin(base_url, m.group(1)) + (m.group(2) or "") + m.group(3),
                    srcset,
                )

    def remove_empty_leaves(self, root: Tag, protected: Set[int]) -> None:
        """Remove elements left with neither text nor media."""
        for node in reversed(root.find_all(True)):
            if node.decomposed or node.name in NON_EMPTY_LEAF_TAGS:
                continue
            if node.get_text().strip():
                continue
            if node.find(list(MEDIA_TAGS)) is not None:
                continue
            self._remove(node, protected)

    def strip_identifiers(self, root: Tag) -> None:
        """Strip class attributes (except preserved ones) and ids (except readability markers)."""
        if self.options.keep_classes:
            return
        preserve = set(self.options.classes_to_preserve)
        for node in root.find_all(True):
            classes = node.get("class")
            if classes is not None:
                if isinstance(classes, str):
                    classes = classes.split()
                kept = [name for name in classes if name in preserve]
                if kept:
                    node["class"] = kept
                else:
                    del node["class"]
            if node.has_attr("id") and not attr_text(node, "id").startswith("readability-"):
                del node["id"]

    def collapse_wrappers(self, root: Tag, protected: Set[int]) -> None:
        """Replace ``div``/``section`` elements whose only child is another ``div``/``section``."""
        node = first_element_child(root)
        while node is not None:
            if node.name in ("div", "section") and not attr_text(node, "id").startswith("readability"):
                if is_element_without_content(node) and id(node) not in protected:
                    node = remove_and_get_next(node, root=root)
                    continue
                if has_single_tag_inside_element(node, "div") or has_single_tag_inside_element(node, "section"):
                    child = first_element_child(node)
                    for name, value in node.attrs.items():
                        child[name] = value
                    node.replace_with(child)
                    node = child
                    continue
            node = get_next_node(node, root=root)


def clean_article_content_light(
    html: str, base_url: Optional[str] = None, options: Optional[ReadabilityOptions] = None
) -> str:
    return ContentCleaner(options, base_url).clean_light(html)


def clean_article_content(
    html: str, base_url: Optional[str] = None, options: Optional[ReadabilityOptions] = None
) -> str:
    return ContentCleaner(options, base_url).clean_deep(html)

"""
Article post-processing.

Runs between the light and deep cleaning passes: strips presentational
attributes, recovers lazy-loaded images, and conditionally removes
containers that look like navigation, advertising or forms.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Set, Tuple

from bs4 import Tag

from ..config import ReadabilityOptions
from ..constants import (
    AD_WORDS_RE,
    B64_DATA_URL_RE,
    DEPRECATED_SIZE_ATTRIBUTE_ELEMS,
    EMBED_TAGS,
    HEADING_TAGS,
    IMAGE_URL_RE,
    LOADING_WORDS_RE,
    PRESENTATIONAL_ATTRIBUTES,
    SHARE_ELEMENTS_RE,
    TEXTISH_TAGS,
)
from ..dom import (
    attr_text,
    element_children,
    get_char_count,
    get_inner_text,
    get_link_density,
    get_text_density,
    has_ancestor_tag,
    inner_html,
    is_phrasing_content,
    is_whitespace,
    majority_text_path,
    match_string,
    new_tag,
    parse_html,
)
from .cleaner import is_allowed_video
from .scoring import get_class_weight
from .selector import PAGE_ID

SRCSET_CANDIDATE_RE = re.compile(r"\.(jpg|jpeg|png|webp)\s+\d", re.IGNORECASE)
SRC_CANDIDATE_RE = re.compile(r"^\s*\S+\.(jpg|jpeg|png|webp)\S*\s*$", re.IGNORECASE)

# Base64 payloads shorter than this are placeholders, not real images.
MIN_B64_IMAGE_LENGTH = 133
MAX_COMMAS_FOR_CLEANING = 10
LIST_TEXT_RATIO = 0.9


def get_row_and_column_count(table: Tag) -> Tuple[int, int]:
    rows = 0
    columns = 0
    for tr in table.find_all("tr"):
        rows += _span(tr, "rowspan")
        columns_in_row = sum(_span(cell, "colspan") for cell in tr.find_all("td"))
        columns = max(columns, columns_in_row)
    return rows, columns


def _span(node: Tag, name: str) -> int:
    try:
        return max(int(attr_text(node, name) or 1), 1)
    except ValueError:
        return 1


def is_data_table(table: Tag) -> bool:
    """Heuristic: does ``table`` hold tabular data rather than page layout?"""
    if attr_text(table, "role") == "presentation":
        return False
    if attr_text(table, "datatable") == "0":
        return False
    if table.has_attr("summary"):
        return True

    caption = table.find("caption")
    if caption is not None and caption.contents:
        return True
    if table.find(("col", "colgroup", "tfoot", "thead", "th")) is not None:
        return True
    if table.find("table") is not None:
        return False

    rows, columns = get_row_and_column_count(table)
    if rows == 1 or columns == 1:
        return False
    if rows >= 10 or columns > 4:
        return True
    return rows * columns > 10


class ArticlePostProcessor:
    """Prepares an extracted article for display."""

    def __init__(self, options: Optional[ReadabilityOptions] = None) -> None:
        self.options = options or ReadabilityOptions()
        self.video_pattern = self.options.allowed_video_regex
        self.data_tables: Dict[int, Tag] = {}
        self.protected: Set[int] = set()

    def process(self, html: str) -> str:
        soup = parse_html(html)
        root = soup.body
        if root is None:
            return ""
        self.protected = majority_text_path(root)
        article = root.find(id=PAGE_ID) or root

        self.clean_styles(article)
        self.mark_data_tables(article)
        self.fix_lazy_images(article)

        self.clean_conditionally(article, "form")
        self.clean_conditionally(article, "fieldset")
        for tag in ("object", "embed", "footer", "link", "aside"):
            self.clean(article, tag)

        # Share widgets only count when they are nested below a top-level block.
        for top_level in element_children(article):
            self.remove_share_elements(top_level)

        for tag in ("iframe", "input", "textarea", "select", "button"):
            self.clean(article, tag)
        self.clean_headers(article)

        for tag in ("table", "ul", "div"):
            self.clean_conditionally(article, tag)

        for h1 in article.find_all("h1"):
            h1.name = "h2"

        self.remove_empty_paragraphs(article)
        self.remove_breaks_before_paragraphs(article)
        self.unwrap_single_cell_tables(article)
        return inner_html(root)

    def _remove(self, node: Tag) -> bool:
        if node.decomposed or id(node) in self.protected:
            return False
        node.decompose()
        return True

    # --- Attribute and image fixes ---

    def clean_styles(self, node: Tag) -> None:
        """Remove presentational attributes everywhere except inside ``svg``."""
        svg_parts: Set[int] = set()
        for svg in node.find_all("svg"):
            svg_parts.add(id(svg))
            svg_parts.update(id(descendant) for descendant in svg.descendants)

        for elem in [node, *node.find_all(True)]:
            if elem.name == "svg" or id(elem) in svg_parts:
                continue
            for name in PRESENTATIONAL_ATTRIBUTES:
                if elem.has_attr(name):
                    del elem[name]
            if elem.name in DEPRECATED_SIZE_ATTRIBUTE_ELEMS:
                for name in ("width", "height"):
                    if elem.has_attr(name):
                        del elem[name]

    def mark_data_tables(self, root: Tag) -> None:
        for table in root.find_all("table"):
            if is_data_table(table):
                self.data_tables[id(table)] = table

    def _is_marked_data_table(self, node: Tag) -> bool:
        return self.data_tables.get(id(node)) is node

    def fix_lazy_images(self, root: Tag) -> None:
        """Move image URLs out of ``data-*`` attributes into ``src``/``srcset``."""
        for elem in root.find_all(("img", "picture", "figure")):
            src = attr_text(elem, "src")
            match = B64_DATA_URL_RE.match(src) if src else None
            if match:
                # SVG placeholders can be meaningful even when tiny.
                if match.group(1) == "image/svg+xml":
                    continue
                has_other_image = any(
                    name != "src" and IMAGE_URL_RE.search(attr_text(elem, name)) for name in list(elem.attrs)
                )
                if has_other_image and len(src) - match.end() < MIN_B64_IMAGE_LENGTH:
                    del elem["src"]

            if (elem.get("src") or elem.get("srcset")) and "lazy" not in attr_text(elem, "class").lower():
                continue

            for name in list(elem.attrs):
                if name in ("src", "srcset", "alt"):
                    continue
                value = attr_text(elem, name)
                copy_to = None
                if SRCSET_CANDIDATE_RE.search(value):
                    copy_to = "srcset"
                elif SRC_CANDIDATE_RE.match(value):
                    copy_to = "src"
                if copy_to is None:
                    continue
                if elem.name in ("img", "picture"):
                    elem[copy_to] = value
                elif elem.name == "figure" and elem.find(("img", "picture")) is None:
                    img = new_tag(elem, "img")
                    img[copy_to] = value
                    elem.append(img)

    # --- Removal passes ---

    def clean(self, root: Tag, tag: str) -> None:
        """Remove every ``tag`` element, keeping embeds that point at allowed video hosts."""
        is_embed = tag in EMBED_TAGS
        for node in root.find_all(tag):
            if node.decomposed:
                continue
            if is_embed and is_allowed_video(node, self.video_pattern):
                continue
            self._remove(node)

    def remove_share_elements(self, container: Tag) -> None:
        for node in container.find_all(True):
            if node.decomposed:
                continue
            if SHARE_ELEMENTS_RE.search(match_string(node)) and len(node.get_text()) < self.options.char_threshold:
                self._remove(node)

    def clean_headers(self, root: Tag) -> None:
        for header in root.find_all(("h1", "h2")):
            if not header.decomposed and get_class_weight(header) < 0:
                self._remove(header)

    def clean_conditionally(self, root: Tag, tag: str) -> None:
        # Innermost first so nested containers are judged before their parents.
        for node in reversed(root.find_all(tag)):
            if not node.decomposed and self._should_remove(node):
                self._remove(node)

    def _should_remove(self, node: Tag) -> bool:
        tag = node.name
        is_list = tag in ("ul", "ol")
        if not is_list:
            list_length = sum(len(get_inner_text(li)) for li in node.find_all("li"))
            text_length = len(node.get_text())
            is_list = bool(text_length) and list_length / text_length > LIST_TEXT_RATIO

        if tag == "table" and self._is_marked_data_table(node):
            return False
        if has_ancestor_tag(node, "table", -1, self._is_marked_data_table):
            return False
        if has_ancestor_tag(node, "code", -1):
            return False
        if any(self._is_marked_data_table(table) for table in node.find_all("table")):
            return False

        weight = get_class_weight(node)
        if weight < 0:
            return True
        if get_char_count(node) >= MAX_COMMAS_FOR_CLEANING:
            return False

        paragraphs = len(node.find_all("p"))
        images = len(node.find_all("img"))
        list_items = len(node.find_all("li")) - 100
        inputs = len(node.find_all("input"))
        heading_density = get_text_density(node, list(HEADING_TAGS))

        embed_count = 0
        for embed in node.find_all(list(EMBED_TAGS)):
            if is_allowed_video(embed, self.video_pattern):
                return False
            embed_count += 1

        inner_text = get_inner_text(node)
        if AD_WORDS_RE.search(inner_text) or LOADING_WORDS_RE.search(inner_text):
            return True

        content_length = len(inner_text)
        link_density = get_link_density(node)
        text_density = get_text_density(node, list(TEXTISH_TAGS))
        is_figure_child = has_ancestor_tag(node, "figure")
        modifier = self.options.link_density_modifier

        have_to_remove = (
            (not is_figure_child and images > 1 and paragraphs / images < 0.5)
            or (not is_list and list_items > paragraphs)
            or (inputs > paragraphs // 3)
            or (
                not is_list
                and not is_figure_child
                and heading_density < 0.9
                and content_length < 25
                and (images == 0 or images > 2)
                and link_density > 0
            )
            or (not is_list and weight < 25 and link_density > 0.2 + modifier)
            or (weight >= 25 and link_density > 0.5 + modifier)
            or (embed_count == 1 and content_length < 75)
            or embed_count > 1
            or (images == 0 and text_density == 0)
        )

        # Simple lists of images survive when every item holds one image.
        if is_list and have_to_remove:
            for child in element_children(node):
                if len(element_children(child)) > 1:
                    return have_to_remove
            if images == len(node.find_all("li")):
                return False

        return have_to_remove

    # --- Final tidy-up ---

    def remove_empty_paragraphs(self, root: Tag) -> None:
        for paragraph in root.find_all("p"):
            if paragraph.decomposed:
                continue
            if paragraph.find(("img", "embed", "object", "iframe")) is not None:
                continue
            if not paragraph.get_text().strip():
                self._remove(paragraph)

    def remove_breaks_before_paragraphs(self, root: Tag) -> None:
        for br in root.find_all("br"):
            sibling = br.next_sibling
            while sibling is not None and is_whitespace(sibling) and not isinstance(sibling, Tag):
                sibling = sibling.next_sibling
            if isinstance(sibling, Tag) and sibling.name == "p":
                br.decompose()

    def unwrap_single_cell_tables(self, root: Tag) -> None:
        """Replace a table with one row and one cell by the cell's content."""
        for table in root.find_all("table"):
            if table.decomposed or id(table) in self.protected:
                continue
            tbody = table.find("tbody", recursive=False) or table
            rows = element_children(tbody)
            if len(rows) != 1 or rows[0].name != "tr":
                continue
            cells = element_children(rows[0])
            if len(cells) != 1 or cells[0].name != "td":
                continue
            cell = cells[0].extract()
            cell.name = "p" if all(is_phrasing_content(child) for child in cell.children) else "div"
            table.replace_with(cell)


def prep_article(html: str, options: Optional[ReadabilityOptions] = None) -> str:
    """Run the post-processing pipeline over ``html`` and return the result."""
    return ArticlePostProcessor(options).process(html)

"""
Structural preprocessing that runs before candidate scoring.
"""

from __future__ import annotations

from typing import Optional

from bs4 import Comment, Tag
from bs4.element import PageElement

from ..dom import is_phrasing_content, is_text, is_whitespace, new_tag, parse_html

NON_CONTENT_TAGS = ("script", "style", "noscript")


def prep_document(html: str) -> str:
    """
    Return a normalized copy of ``html`` ready to be scored.

    Scripts, styles, noscript blocks and comments are removed, runs of
    ``<br>`` elements become paragraph boundaries and ``<font>`` becomes
    ``<span>``. The input string is never touched; callers re-parse the result.
    """
    soup = parse_html(html)

    for node in soup.find_all(NON_CONTENT_TAGS):
        if not node.decomposed:
            node.decompose()

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    body = soup.body
    if body is not None:
        replace_brs(body)

    for font in soup.find_all("font"):
        font.name = "span"

    return str(soup)


def _next_significant(node: Optional[PageElement]) -> Optional[PageElement]:
    """Skip whitespace-only text nodes."""
    while node is not None and is_text(node) and not str(node).strip():
        node = node.next_sibling
    return node


def _is_br(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag) and node.name == "br"


def replace_brs(root: Tag) -> None:
    """
    Turn two or more consecutive ``<br>`` elements into a ``<p>``.

    ``<div>foo<br>bar<br> <br><br>abc</div>`` becomes
    ``<div>foo<br>bar<p>abc</p></div>``.
    """
    for br in root.find_all("br"):
        if br.decomposed or br.parent is None:
            continue

        replaced = False
        following = _next_significant(br.next_sibling)
        while _is_br(following):
            replaced = True
            after = following.next_sibling
            following.decompose()
            following = _next_significant(after)

        if not replaced:
            continue

        paragraph = new_tag(br, "p")
        br.replace_with(paragraph)

        current = paragraph.next_sibling
        while current is not None:
            if _is_br(current) and _is_br(_next_significant(current.next_sibling)):
                break
            if not is_phrasing_content(current):
                break
            after = current.next_sibling
            paragraph.append(current)
            current = after

        while paragraph.contents and is_whitespace(paragraph.contents[-1]):
            paragraph.contents[-1].extract()

        if isinstance(paragraph.parent, Tag) and paragraph.parent.name == "p":
            paragraph.parent.name = "div"

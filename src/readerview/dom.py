"""
Tree helpers over BeautifulSoup.

These functions wrap the traversal and text queries the heuristics need:
inner text, link density, depth-first walking that tolerates removal of the
current node, ancestor lookups and phrasing-content tests.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Set

from bs4 import BeautifulSoup, Comment, NavigableString, ParserRejectedMarkup, Tag
from bs4.element import PageElement, PreformattedString

from .constants import (
    COMMAS_RE,
    DISPLAY_NONE_RE,
    DIV_TO_P_ELEMS,
    HASH_URL_RE,
    NORMALIZE_RE,
    PHRASING_ELEMS,
    TOKENIZE_RE,
    VISIBILITY_HIDDEN_RE,
)
from .exceptions import ParseError

HTML_PARSER = "lxml"


def parse_html(html: str) -> BeautifulSoup:
    """Parse a document (or fragment) with the lenient lxml HTML parser."""
    try:
        return BeautifulSoup(html or "", HTML_PARSER)
    except ParserRejectedMarkup as e:
        raise ParseError(f"Markup rejected by the HTML parser: {e}") from e


def is_text(node: Optional[PageElement]) -> bool:
    """True for plain text nodes (comments, doctypes and CDATA are excluded)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def attr_text(node: Tag, name: str) -> str:
    """Read an attribute as a string, joining multi-valued attributes such as ``class``."""
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def match_string(node: Tag) -> str:
    """The ``class`` and ``id`` of ``node`` joined the way the vocabularies expect."""
    return f"{attr_text(node, 'class')} {attr_text(node, 'id')}"


def get_inner_text(node: PageElement, normalize: bool = True) -> str:
    """Text content of ``node``, trimmed and optionally with whitespace runs collapsed."""
    if is_text(node):
        text = str(node)
    elif isinstance(node, Tag):
        text = node.get_text()
    else:
        return ""
    text = text.strip()
    if normalize:
        return NORMALIZE_RE.sub(" ", text)
    return text


def get_char_count(node: Tag, pattern=COMMAS_RE) -> int:
    """Number of separator characters (commas by default) in the text of ``node``."""
    return len(pattern.findall(get_inner_text(node)))


def get_link_density(node: Tag) -> float:
    """
    Fraction of the text of ``node`` that sits inside anchors.

    Same-page hash links count for less than real links.
    """
    text_length = len(get_inner_text(node))
    if text_length == 0:
        return 0.0

    link_length = 0.0
    for link in node.find_all("a"):
        href = attr_text(link, "href")
        coefficient = 0.3 if href and HASH_URL_RE.match(href) else 1.0
        link_length += len(get_inner_text(link)) * coefficient

    return link_length / text_length


def get_text_density(node: Tag, tags) -> float:
    """Share of the text of ``node`` contained in descendants named in ``tags``."""
    text_length = len(get_inner_text(node, normalize=True))
    if text_length == 0:
        return 0.0
    children_length = sum(len(get_inner_text(child, normalize=True)) for child in node.find_all(tags))
    return children_length / text_length


def element_children(node: Tag) -> List[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


def first_element_child(node: Tag) -> Optional[Tag]:
    for child in node.children:
        if isinstance(child, Tag):
            return child
    return None


def next_element_sibling(node: PageElement) -> Optional[Tag]:
    sibling = node.next_sibling
    while sibling is not None and not isinstance(sibling, Tag):
        sibling = sibling.next_sibling
    return sibling


def get_next_node(node: Tag, ignore_self_and_kids: bool = False, root: Optional[Tag] = None) -> Optional[Tag]:
    """
    Depth-first successor of ``node``.

    With ``ignore_self_and_kids`` the subtree of ``node`` is skipped, which is
    what callers need right before removing ``node``. When ``root`` is given
    the walk never leaves its subtree.
    """
    if not ignore_self_and_kids:
        child = first_element_child(node)
        if child is not None:
            return child

    current: Optional[Tag] = node
    while current is not None and current is not root:
        sibling = next_element_sibling(current)
        if sibling is not None:
            return sibling
        current = current.parent
    return None


def remove_and_get_next(node: Tag, root: Optional[Tag] = None) -> Optional[Tag]:
    next_node = get_next_node(node, ignore_self_and_kids=True, root=root)
    node.decompose()
    return next_node


def count_elements(soup: Tag) -> int:
    return len(soup.find_all(True))


def get_node_ancestors(node: Tag, max_depth: int = 0) -> List[Tag]:
    """Ancestors of ``node``, nearest first, stopping at ``max_depth`` when it is positive."""
    ancestors: List[Tag] = []
    parent = node.parent
    while parent is not None and not isinstance(parent, BeautifulSoup):
        ancestors.append(parent)
        if max_depth and len(ancestors) == max_depth:
            break
        parent = parent.parent
    return ancestors


def has_ancestor_tag(
    node: Tag,
    tag_name: str,
    max_depth: int = 3,
    predicate: Optional[Callable[[Tag], bool]] = None,
) -> bool:
    """Whether an ancestor named ``tag_name`` exists within ``max_depth`` levels (negative means unlimited)."""
    depth = 0
    parent = node.parent
    while parent is not None and not isinstance(parent, BeautifulSoup):
        if max_depth > 0 and depth > max_depth:
            return False
        if parent.name == tag_name and (predicate is None or predicate(parent)):
            return True
        parent = parent.parent
        depth += 1
    return False


def is_whitespace(node: PageElement) -> bool:
    if is_text(node):
        return not str(node).strip()
    return isinstance(node, Tag) and node.name == "br"


def is_phrasing_content(node: PageElement) -> bool:
    """Inline content that may be wrapped into a paragraph."""
    if is_text(node):
        return True
    if not isinstance(node, Tag):
        # Comments and other markup declarations are inert.
        return isinstance(node, Comment)
    if node.name in PHRASING_ELEMS:
        return True
    if node.name in ("a", "del", "ins"):
        return all(is_phrasing_content(child) for child in node.children)
    return False


def is_element_without_content(node: Tag) -> bool:
    """No text, and no element children other than ``br``/``hr``."""
    if node.get_text().strip():
        return False
    children = element_children(node)
    return not children or all(child.name in ("br", "hr") for child in children)


def has_single_tag_inside_element(node: Tag, tag_name: str) -> bool:
    """Exactly one element child named ``tag_name`` and no text of its own."""
    children = element_children(node)
    if len(children) != 1 or children[0].name != tag_name:
        return False
    return not any(is_text(child) and str(child).strip() for child in node.children)


def has_child_block_element(node: Tag) -> bool:
    return node.find(DIV_TO_P_ELEMS) is not None


def is_probably_visible(node: Tag) -> bool:
    style = attr_text(node, "style")
    if style and (DISPLAY_NONE_RE.search(style) or VISIBILITY_HIDDEN_RE.search(style)):
        return False
    if node.has_attr("hidden"):
        return False
    if attr_text(node, "aria-hidden").lower() == "true" and "fallback-image" not in attr_text(node, "class"):
        return False
    return True


def text_similarity(text_a: str, text_b: str) -> float:
    """Share of the tokens of ``text_b`` that also occur in ``text_a`` (weighted by length)."""
    tokens_a = [t for t in TOKENIZE_RE.split(text_a.lower()) if t]
    tokens_b = [t for t in TOKENIZE_RE.split(text_b.lower()) if t]
    if not tokens_a or not tokens_b:
        return 0.0
    unique_b = [t for t in tokens_b if t not in tokens_a]
    distance = len(" ".join(unique_b)) / len(" ".join(tokens_b))
    return 1.0 - distance


def new_tag(node: Tag, name: str) -> Tag:
    """Create an element owned by the same document as ``node``."""
    soup: Optional[PageElement] = node
    while soup is not None and not isinstance(soup, BeautifulSoup):
        soup = soup.parent
    if soup is None:
        soup = BeautifulSoup("", HTML_PARSER)
    return soup.new_tag(name)


def inner_html(node: Tag) -> str:
    return node.decode_contents()


def majority_text_path(root: Tag) -> Set[int]:
    """
    Identities of ``root`` and of the chain of descendants that each hold
    more than half of the text of ``root``.

    The deepest element of the chain is the one that directly contains most of
    the article; cleaners must never remove any element on this path.
    """
    protected = {id(root)}
    total = len(get_inner_text(root))
    if total == 0:
        return protected

    current = root
    while True:
        holder = None
        for child in element_children(current):
            if len(get_inner_text(child)) * 2 > total:
                holder = child
                break
        if holder is None:
            return protected
        protected.add(id(holder))
        current = holder

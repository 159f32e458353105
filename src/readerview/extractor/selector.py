"""
Candidate selection: find the element most likely to hold the article body.

Selection runs as a retry ladder. Each rung re-parses the preprocessed HTML
and applies its own admission rules; the first rung whose merged content
reaches ``char_threshold`` and holds at least one paragraph of prose wins.
Rung results never depend on the threshold, so a lower threshold can only
make an earlier rung succeed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from ..config import ReadabilityOptions
from ..constants import (
    ALTER_TO_DIV_EXCEPTIONS,
    DEFAULT_TAGS_TO_SCORE,
    HEADING_TAGS,
    MAYBE_CANDIDATE_RE,
    SENTENCE_END_RE,
    UNLIKELY_CANDIDATES_RE,
    UNLIKELY_ROLES,
)
from ..dom import (
    attr_text,
    count_elements,
    element_children,
    first_element_child,
    get_inner_text,
    get_link_density,
    get_next_node,
    get_node_ancestors,
    has_ancestor_tag,
    has_child_block_element,
    has_single_tag_inside_element,
    inner_html,
    is_element_without_content,
    is_phrasing_content,
    is_probably_visible,
    is_whitespace,
    match_string,
    new_tag,
    parse_html,
    remove_and_get_next,
    text_similarity,
)
from ..exceptions import MaxElementsExceededError
from .scoring import ScoreTable, ancestor_divider, initial_score, is_valid_byline, paragraph_score

MIN_SCORED_TEXT_LENGTH = 25
MAX_SCORED_ANCESTORS = 5
LINK_DENSITY_CEILING = 0.5
ALTERNATIVE_SCORE_RATIO = 0.75
MIN_SHARED_ALTERNATIVES = 3
TITLE_SIMILARITY_THRESHOLD = 0.75
CONTENT_ID = "readability-content"
PAGE_ID = "readability-page-1"


class RetryRung(Enum):
    """States of the retry ladder."""

    STRICT = "strict"
    RELAXED = "relaxed"
    BODY_FALLBACK = "body_fallback"
    EXHAUSTED = "exhausted"

    @property
    def next(self) -> RetryRung:
        return _NEXT_RUNG[self]


_NEXT_RUNG = {
    RetryRung.STRICT: RetryRung.RELAXED,
    RetryRung.RELAXED: RetryRung.BODY_FALLBACK,
    RetryRung.BODY_FALLBACK: RetryRung.EXHAUSTED,
    RetryRung.EXHAUSTED: RetryRung.EXHAUSTED,
}


@dataclass(frozen=True)
class AdmissionRules:
    """What a rung filters and how it scores."""

    strip_unlikely: bool
    weight_classes: bool
    use_body: bool = False


RUNG_RULES = {
    RetryRung.STRICT: AdmissionRules(strip_unlikely=True, weight_classes=True),
    RetryRung.RELAXED: AdmissionRules(strip_unlikely=False, weight_classes=False),
    RetryRung.BODY_FALLBACK: AdmissionRules(strip_unlikely=False, weight_classes=False, use_body=True),
}


@dataclass
class Selection:
    """The merged content container chosen by one rung."""

    content: Tag
    rung: RetryRung
    text_length: int
    direction: Optional[str] = None
    has_prose: bool = False

    @property
    def html(self) -> str:
        return inner_html(self.content)


def _inside_body(node: Optional[Tag]) -> bool:
    return (
        isinstance(node, Tag)
        and not isinstance(node, BeautifulSoup)
        and node.name not in ("body", "html")
    )


class CandidateSelector:
    """Scores the tree and resolves the best content container."""

    def __init__(self, options: Optional[ReadabilityOptions] = None, article_title: Optional[str] = None) -> None:
        self.options = options or ReadabilityOptions()
        self.article_title = article_title
        self.logger = structlog.get_logger(__name__).bind(component="CandidateSelector")

    def select(self, html: str) -> Optional[Selection]:
        """
        Walk the ladder over the preprocessed ``html``.

        Returns:
            The first selection that holds prose and reaches ``char_threshold``,
            or None once the ladder is exhausted.

        Raises:
            MaxElementsExceededError: If the document is larger than
                ``max_elems_to_parse`` allows.
        """
        soup = parse_html(html)
        limit = self.options.max_elems_to_parse
        if limit:
            count = count_elements(soup)
            if count > limit:
                raise MaxElementsExceededError(count, limit)

        rung = RetryRung.STRICT
        while rung is not RetryRung.EXHAUSTED:
            selection = self.attempt(html, rung, soup=soup)
            soup = None
            if selection is not None and _meets_threshold(selection, self.options.char_threshold):
                self._debug("rung_succeeded", rung=rung.value, text_length=selection.text_length)
                return selection
            self._debug(
                "rung_failed",
                rung=rung.value,
                text_length=selection.text_length if selection else 0,
                char_threshold=self.options.char_threshold,
            )
            rung = rung.next

        return None

    def attempt(self, html: str, rung: RetryRung, soup: Optional[BeautifulSoup] = None) -> Optional[Selection]:
        """Run a single rung on a fresh tree built from ``html``."""
        if rung is RetryRung.EXHAUSTED:
            return None
        if soup is None:
            soup = parse_html(html)
        rules = RUNG_RULES[rung]
        if soup.body is None:
            return None
        if rules.use_body:
            return self._select_body(soup, rung)
        return self._grab_article(soup, rung, rules)

    def _debug(self, event: str, **kwargs) -> None:
        if self.options.debug:
            self.logger.debug(event, **kwargs)

    # --- Walking and scoring ---

    def _collect_elements_to_score(self, soup: BeautifulSoup, rules: AdmissionRules) -> List[Tag]:
        elements_to_score: List[Tag] = []
        byline_removed = False
        should_remove_title_header = True

        node: Optional[Tag] = soup.html
        while node is not None:
            if node.name == "head":
                node = get_next_node(node, ignore_self_and_kids=True)
                continue
            if node.name in ("html", "body"):
                node = get_next_node(node)
                continue

            node_match = match_string(node)

            if not is_probably_visible(node):
                node = remove_and_get_next(node)
                continue

            if attr_text(node, "aria-modal") == "true" and attr_text(node, "role") == "dialog":
                node = remove_and_get_next(node)
                continue

            if not byline_removed and is_valid_byline(node, node_match):
                byline_removed = True
                node = remove_and_get_next(node)
                continue

            if should_remove_title_header and self._header_duplicates_title(node):
                should_remove_title_header = False
                node = remove_and_get_next(node)
                continue

            if rules.strip_unlikely:
                if (
                    UNLIKELY_CANDIDATES_RE.search(node_match)
                    and not MAYBE_CANDIDATE_RE.search(node_match)
                    and not has_ancestor_tag(node, "table")
                    and not has_ancestor_tag(node, "code")
                    and node.name != "a"
                ):
                    node = remove_and_get_next(node)
                    continue
                if attr_text(node, "role") in UNLIKELY_ROLES:
                    node = remove_and_get_next(node)
                    continue

            if node.name in ("div", "section", "header") + HEADING_TAGS and is_element_without_content(node):
                node = remove_and_get_next(node)
                continue

            if node.name in DEFAULT_TAGS_TO_SCORE:
                elements_to_score.append(node)

            if node.name == "div":
                _wrap_phrasing_runs(node)
                if has_single_tag_inside_element(node, "p") and get_link_density(node) < 0.25:
                    paragraph = first_element_child(node)
                    node.replace_with(paragraph)
                    node = paragraph
                    elements_to_score.append(node)
                elif not has_child_block_element(node):
                    node.name = "p"
                    elements_to_score.append(node)

            node = get_next_node(node)

        return elements_to_score

    def _header_duplicates_title(self, node: Tag) -> bool:
        if node.name not in ("h1", "h2") or not self.article_title:
            return False
        heading = get_inner_text(node, normalize=False)
        return text_similarity(self.article_title, heading) > TITLE_SIMILARITY_THRESHOLD

    def _score_elements(self, elements_to_score: List[Tag], rules: AdmissionRules) -> ScoreTable:
        candidates = ScoreTable()
        for element in elements_to_score:
            if element.decomposed or element.parent is None:
                continue
            text = get_inner_text(element)
            if len(text) < MIN_SCORED_TEXT_LENGTH:
                continue
            ancestors = get_node_ancestors(element, MAX_SCORED_ANCESTORS)
            if not ancestors:
                continue

            content_score = paragraph_score(text)
            for level, ancestor in enumerate(ancestors):
                # <html> has the document as parent and is never a candidate.
                if ancestor.parent is None or isinstance(ancestor.parent, BeautifulSoup):
                    continue
                if ancestor not in candidates:
                    candidates.set(ancestor, initial_score(ancestor, rules.weight_classes))
                candidates.add(ancestor, content_score / ancestor_divider(level))

        for candidate, score in list(candidates):
            candidates.set(candidate, score * (1 - get_link_density(candidate)))

        return candidates

    def _top_candidates(self, candidates: ScoreTable) -> List[Tuple[Tag, float]]:
        top = candidates.ranked()[: self.options.nb_top_candidates]
        ceiling = LINK_DENSITY_CEILING + self.options.link_density_modifier
        sparse = [item for item in top if get_link_density(item[0]) <= ceiling]
        dense = [item for item in top if get_link_density(item[0]) > ceiling]
        return sparse + dense

    # --- Resolving the top candidate ---

    def _promote_shared_ancestor(
        self, top_candidate: Tag, top: List[Tuple[Tag, float]], candidates: ScoreTable
    ) -> Tag:
        top_score = candidates.score(top_candidate)
        alternative_ancestors = []
        for node, score in top[1:]:
            if top_score > 0 and score / top_score >= ALTERNATIVE_SCORE_RATIO:
                alternative_ancestors.append({id(a) for a in get_node_ancestors(node)})

        if len(alternative_ancestors) >= MIN_SHARED_ALTERNATIVES:
            parent = top_candidate.parent
            while _inside_body(parent):
                shared = sum(1 for ancestors in alternative_ancestors if id(parent) in ancestors)
                if shared >= MIN_SHARED_ALTERNATIVES:
                    return parent
                parent = parent.parent
        return top_candidate

    def _climb_scoring_parents(self, top_candidate: Tag, candidates: ScoreTable) -> Tag:
        """Prefer a parent whose score beats the candidate, as long as scores do not collapse on the way up."""
        last_score = candidates.score(top_candidate)
        score_threshold = last_score / 3
        parent = top_candidate.parent
        while _inside_body(parent):
            if parent not in candidates:
                parent = parent.parent
                continue
            parent_score = candidates.score(parent)
            if parent_score < score_threshold:
                break
            if parent_score > last_score:
                return parent
            last_score = parent_score
            parent = parent.parent
        return top_candidate

    @staticmethod
    def _climb_lone_children(top_candidate: Tag) -> Tag:
        parent = top_candidate.parent
        while _inside_body(parent) and len(element_children(parent)) == 1:
            top_candidate = parent
            parent = top_candidate.parent
        return top_candidate

    def _grab_article(self, soup: BeautifulSoup, rung: RetryRung, rules: AdmissionRules) -> Optional[Selection]:
        elements_to_score = self._collect_elements_to_score(soup, rules)
        body = soup.body
        if body is None:
            return None

        candidates = self._score_elements(elements_to_score, rules)
        top = self._top_candidates(candidates)

        top_candidate: Optional[Tag] = top[0][0] if top else None
        if top_candidate is None or top_candidate.name == "body":
            top_candidate = new_tag(body, "div")
            for child in list(body.contents):
                top_candidate.append(child)
            body.append(top_candidate)
            candidates.set(top_candidate, initial_score(top_candidate, rules.weight_classes))
        else:
            top_candidate = self._promote_shared_ancestor(top_candidate, top, candidates)
            if top_candidate not in candidates:
                candidates.set(top_candidate, initial_score(top_candidate, rules.weight_classes))
            top_candidate = self._climb_scoring_parents(top_candidate, candidates)
            top_candidate = self._climb_lone_children(top_candidate)
            if top_candidate not in candidates:
                candidates.set(top_candidate, initial_score(top_candidate, rules.weight_classes))

        direction = _direction_of(top_candidate)
        article_content = self._merge_siblings(top_candidate, candidates)
        _wrap_in_page(article_content)

        self._debug(
            "candidate_selected",
            rung=rung.value,
            tag=top_candidate.name,
            score=candidates.score(top_candidate),
            candidates=len(candidates),
        )
        return Selection(
            content=article_content,
            rung=rung,
            text_length=len(get_inner_text(article_content)),
            direction=direction,
            has_prose=_has_prose_block(article_content),
        )

    def _merge_siblings(self, top_candidate: Tag, candidates: ScoreTable) -> Tag:
        """Gather the top candidate and the siblings that look like part of the same article."""
        article_content = new_tag(top_candidate, "div")
        article_content["id"] = CONTENT_ID

        top_score = candidates.score(top_candidate)
        sibling_threshold = max(10.0, top_score * 0.2)
        top_class = attr_text(top_candidate, "class")
        parent = top_candidate.parent
        siblings = element_children(parent) if isinstance(parent, Tag) else [top_candidate]

        for sibling in siblings:
            append = sibling is top_candidate
            if not append:
                bonus = top_score * 0.2 if top_class and attr_text(sibling, "class") == top_class else 0.0
                sibling_score = candidates.get(sibling)
                if sibling_score is not None and sibling_score + bonus >= sibling_threshold:
                    append = True
                elif sibling.name == "p":
                    link_density = get_link_density(sibling)
                    content = get_inner_text(sibling)
                    length = len(content)
                    if length > 80 and link_density < 0.25:
                        append = True
                    elif 0 < length < 80 and link_density == 0 and SENTENCE_END_RE.search(content):
                        append = True

            if append:
                if sibling.name not in ALTER_TO_DIV_EXCEPTIONS:
                    sibling.name = "div"
                article_content.append(sibling)

        return article_content

    def _select_body(self, soup: BeautifulSoup, rung: RetryRung) -> Optional[Selection]:
        body = soup.body
        for node in body.find_all(True):
            if not node.decomposed and not is_probably_visible(node):
                node.decompose()

        article_content = new_tag(body, "div")
        article_content["id"] = CONTENT_ID
        for child in list(body.contents):
            article_content.append(child)
        _wrap_in_page(article_content)

        self._debug("body_fallback", rung=rung.value)
        return Selection(
            content=article_content,
            rung=rung,
            text_length=len(get_inner_text(article_content)),
            direction=attr_text(body, "dir") or (attr_text(soup.html, "dir") if soup.html else "") or None,
            has_prose=_has_prose_block(article_content),
        )


def _meets_threshold(selection: Selection, char_threshold: int) -> bool:
    return selection.has_prose and selection.text_length >= char_threshold


def _has_prose_block(root: Tag) -> bool:
    """Whether some paragraph-like block under ``root`` holds a scoreable amount of text."""
    for node in root.find_all(DEFAULT_TAGS_TO_SCORE + ("div",)):
        if node.name in ("div", "section") and has_child_block_element(node):
            continue
        if len(get_inner_text(node)) >= MIN_SCORED_TEXT_LENGTH:
            return True
    return False


def _wrap_phrasing_runs(node: Tag) -> None:
    """Wrap runs of inline content inside a mixed ``<div>`` into paragraphs."""
    paragraph: Optional[Tag] = None
    child = node.contents[0] if node.contents else None
    while child is not None:
        next_sibling = child.next_sibling
        if is_phrasing_content(child):
            if paragraph is not None:
                paragraph.append(child)
            elif not is_whitespace(child):
                paragraph = new_tag(node, "p")
                child.replace_with(paragraph)
                paragraph.append(child)
        elif paragraph is not None:
            while paragraph.contents and is_whitespace(paragraph.contents[-1]):
                paragraph.contents[-1].extract()
            paragraph = None
        child = next_sibling


def _wrap_in_page(article_content: Tag) -> None:
    page = new_tag(article_content, "div")
    page["id"] = PAGE_ID
    page["class"] = ["page"]
    for child in list(article_content.contents):
        page.append(child)
    article_content.append(page)


def _direction_of(top_candidate: Tag) -> Optional[str]:
    """The ``dir`` of the candidate, its parent or the nearest ancestor declaring one."""
    chain = [top_candidate]
    if isinstance(top_candidate.parent, Tag):
        chain.append(top_candidate.parent)
        chain.extend(get_node_ancestors(top_candidate.parent))
    for node in chain:
        direction = attr_text(node, "dir")
        if direction:
            return direction
    return None


def grab_article(
    html: str, options: Optional[ReadabilityOptions] = None, article_title: Optional[str] = None
) -> Optional[Selection]:
    """Convenience wrapper around ``CandidateSelector.select``."""
    return CandidateSelector(options, article_title).select(html)

"""
Unit tests for candidate selection and the retry ladder.
"""

import pytest

from readerview.config import ReadabilityOptions
from readerview.dom import get_inner_text, parse_html
from readerview.exceptions import MaxElementsExceededError
from readerview.extractor.preprocess import prep_document
from readerview.extractor.selector import (
    CONTENT_ID,
    PAGE_ID,
    CandidateSelector,
    RetryRung,
    Selection,
    grab_article,
)

pytestmark = pytest.mark.unit

TITLE = "Council approves riverside park plan"


class TestRetryRung:
    def test_ladder_order(self):
        assert RetryRung.STRICT.next is RetryRung.RELAXED
        assert RetryRung.RELAXED.next is RetryRung.BODY_FALLBACK
        assert RetryRung.BODY_FALLBACK.next is RetryRung.EXHAUSTED
        assert RetryRung.EXHAUSTED.next is RetryRung.EXHAUSTED


class TestCandidateSelector:
    """Test the CandidateSelector class."""

    def test_strict_rung_finds_article(self, article_page):
        selection = CandidateSelector().select(prep_document(article_page))

        assert isinstance(selection, Selection)
        assert selection.rung is RetryRung.STRICT
        assert selection.content["id"] == CONTENT_ID
        assert selection.text_length >= 500

        text = get_inner_text(selection.content)
        assert "riverside park" in text
        assert "About us" not in text
        assert "Home" not in text

    def test_output_is_wrapped_in_page(self, article_page):
        selection = CandidateSelector().select(prep_document(article_page))
        page = parse_html(selection.html).find(id=PAGE_ID)

        assert page is not None
        assert page["class"] == ["page"]

    def test_title_header_is_removed(self, article_page):
        with_title = CandidateSelector(article_title=TITLE).select(prep_document(article_page))
        without_title = CandidateSelector().select(prep_document(article_page))

        assert TITLE not in get_inner_text(with_title.content)
        assert TITLE in get_inner_text(without_title.content)

    def test_byline_is_removed(self, page_factory, paragraphs_html):
        html = page_factory(f'<article><p class="byline">By Jane Doe</p>{paragraphs_html}</article>')
        selection = CandidateSelector().select(prep_document(html))

        assert "Jane Doe" not in get_inner_text(selection.content)

    def test_relaxed_rung_keeps_unlikely_containers(self, page_factory, paragraphs_html):
        html = page_factory(f'<div class="comment-area">{paragraphs_html}</div>')
        selection = CandidateSelector().select(prep_document(html))

        assert selection.rung is RetryRung.RELAXED
        assert "riverside park" in get_inner_text(selection.content)

    def test_strict_attempt_drops_unlikely_containers(self, page_factory, paragraphs_html):
        html = page_factory(f'<div class="comment-area">{paragraphs_html}</div>')
        selection = CandidateSelector().attempt(prep_document(html), RetryRung.STRICT)

        assert selection is not None
        assert "riverside park" not in get_inner_text(selection.content)

    def test_body_fallback_attempt(self, page_factory):
        html = page_factory('<p>Visible text</p><p style="display:none">Hidden text</p>')
        selection = CandidateSelector().attempt(prep_document(html), RetryRung.BODY_FALLBACK)

        assert selection.rung is RetryRung.BODY_FALLBACK
        text = get_inner_text(selection.content)
        assert "Visible text" in text
        assert "Hidden text" not in text

    def test_exhausted_attempt_returns_none(self, article_page):
        assert CandidateSelector().attempt(prep_document(article_page), RetryRung.EXHAUSTED) is None

    def test_short_document_exhausts_ladder(self, page_factory):
        html = page_factory("<p>Hello</p><p>World</p>")
        assert CandidateSelector().select(prep_document(html)) is None

    def test_single_word_paragraphs_are_not_prose(self, page_factory):
        html = page_factory("".join(f"<p>word{index}</p>" for index in range(150)))
        selection = CandidateSelector().attempt(prep_document(html), RetryRung.BODY_FALLBACK)

        assert selection.text_length >= 500
        assert selection.has_prose is False
        assert CandidateSelector().select(prep_document(html)) is None

    def test_direction_is_taken_from_ancestors(self, page_factory, paragraphs_html):
        html = page_factory(f'<div dir="rtl"><article>{paragraphs_html}</article></div>')
        selection = CandidateSelector().select(prep_document(html))

        assert selection.direction == "rtl"

    def test_element_ceiling(self, article_page):
        options = ReadabilityOptions(max_elems_to_parse=3)

        with pytest.raises(MaxElementsExceededError) as exc_info:
            CandidateSelector(options).select(prep_document(article_page))

        assert exc_info.value.limit == 3
        assert exc_info.value.count > 3

    def test_unlimited_element_ceiling(self, article_page):
        options = ReadabilityOptions(max_elems_to_parse=0)
        assert CandidateSelector(options).select(prep_document(article_page)) is not None

    def test_grab_article_wrapper(self, article_page):
        selection = grab_article(prep_document(article_page), ReadabilityOptions(), TITLE)
        assert selection.rung is RetryRung.STRICT

    def test_selection_is_deterministic(self, article_page):
        first = CandidateSelector().select(prep_document(article_page))
        second = CandidateSelector().select(prep_document(article_page))

        assert first.html == second.html
        assert first.rung is second.rung

"""
End-to-end tests of the extraction pipeline on whole documents.
"""

import json

import pytest

from readerview import Readability, ReadabilityOptions, extract, is_probably_readerable
from readerview.config import ReaderableOptions
from readerview.exceptions import (
    InvalidDocumentError,
    InvalidUrlError,
    MaxElementsExceededError,
    NoContentFoundError,
)

pytestmark = pytest.mark.integration

BASE_URL = "https://example.com/news/park"

# 259 characters: sqrt(259 - 140) is just under 11, so two of these pass the default check.
READERABLE_PARAGRAPH = ("abcd " * 52).strip()


def story(paragraphs_html: str, before: str = "") -> str:
    return f'<article class="story">{before}{paragraphs_html}</article>'


class TestParse:
    def test_plain_article(self, article_page):
        article = Readability(article_page, url=BASE_URL).parse()

        assert article is not None
        assert article.title == "Council approves riverside park plan"
        assert article.lang == "en"
        assert article.dir is None
        assert article.length == len(article.text_content)
        assert "city council met on Tuesday" in article.text_content
        assert "About us" not in article.text_content
        assert 'id="readability-page-1"' in article.content
        assert 'class="story"' not in article.content

    def test_excerpt_falls_back_to_first_paragraph(self, article_page):
        article = extract(article_page)
        assert article.excerpt.startswith("The city council met on Tuesday evening")

    def test_meta_description_is_the_excerpt(self, page_factory, paragraphs_html):
        html = page_factory(
            story(paragraphs_html),
            head='<title>Park plan</title><meta name="description" content="The council approved the plan.">',
        )
        assert extract(html).excerpt == "The council approved the plan."

    def test_relative_links_are_absolutized(self, page_factory, paragraphs_html):
        extra = (
            '<p>The full plan, including maps of every phase and the budget tables, is published '
            'on the <a href="/plans/riverside.pdf">city website</a> for anyone who wants to read it.</p>'
        )
        article = extract(page_factory(story(paragraphs_html + extra)), url=BASE_URL)

        assert 'href="https://example.com/plans/riverside.pdf"' in article.content

    def test_dateline_meta_author_loses_to_page_byline(self, page_factory, paragraphs_html):
        html = page_factory(
            story(paragraphs_html, before='<p class="byline">By Erin Cunningham</p>'),
            head='<title>Park plan</title><meta name="author" content="CAIRO">',
        )
        assert extract(html).byline == "By Erin Cunningham"

    def test_json_ld_takes_priority(self, page_factory, paragraphs_html):
        json_ld = {
            "@context": "https://schema.org",
            "@type": "NewsArticle",
            "headline": "Riverside park wins approval",
            "author": {"@type": "Person", "name": "Jane Roe"},
            "datePublished": "2024-05-01T08:00:00Z",
        }
        head = (
            f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
            '<meta property="og:title" content="OG title"><title>Document title</title>'
        )
        article = extract(page_factory(story(paragraphs_html), head=head))

        assert article.title == "Riverside park wins approval"
        assert article.byline == "Jane Roe"
        assert article.published_time == "2024-05-01T08:00:00Z"

        options = ReadabilityOptions(disable_json_ld=True)
        no_json_ld = extract(page_factory(story(paragraphs_html), head=head), options=options)
        assert no_json_ld.title == "OG title"

    def test_direction(self, page_factory, paragraphs_html):
        html = page_factory(story(paragraphs_html), html_attrs='lang="ar" dir="rtl"')
        article = extract(html)

        assert article.dir == "rtl"
        assert article.lang == "ar"

    def test_to_dict(self, article_page):
        data = extract(article_page).to_dict()

        assert set(data) == {
            "title",
            "content",
            "raw_content",
            "text_content",
            "length",
            "excerpt",
            "byline",
            "dir",
            "site_name",
            "lang",
            "published_time",
        }
        assert data["length"] == len(data["text_content"])


class TestNoContent:
    @pytest.mark.parametrize("html", ["", "word", "<html></html>", "<html><body><p>Hello</p></body></html>"])
    def test_returns_none(self, html):
        assert Readability(html).parse() is None

    def test_parse_or_raise(self):
        with pytest.raises(NoContentFoundError):
            Readability("<html><body><p>Hello</p></body></html>").parse_or_raise()

    def test_deeply_nested_article(self, page_factory, paragraphs_html):
        depth = 1000
        html = page_factory("<div>" * depth + paragraphs_html + "</div>" * depth)
        article = Readability(html).parse()

        assert article is not None
        assert "riverside park" in article.text_content

    def test_single_word_paragraphs(self, page_factory):
        html = page_factory("".join(f"<p>word{index}</p>" for index in range(150)))

        assert Readability(html).parse() is None
        with pytest.raises(NoContentFoundError):
            Readability(html).parse_or_raise()

    def test_empty_document_is_invalid(self):
        with pytest.raises(InvalidDocumentError):
            Readability("").parse_or_raise()

    def test_element_limit(self, article_page):
        reader = Readability(article_page, options=ReadabilityOptions(max_elems_to_parse=3))

        assert reader.parse() is None
        with pytest.raises(MaxElementsExceededError):
            reader.parse_or_raise()

    @pytest.mark.parametrize("url", ["example.com/page", "https://", "http://exa mple.com"])
    def test_invalid_url_raises_at_construction(self, article_page, url):
        with pytest.raises(InvalidUrlError):
            Readability(article_page, url=url)


class TestIsProbablyReaderable:
    def test_two_long_paragraphs(self, page_factory):
        html = page_factory(f"<p>{READERABLE_PARAGRAPH}</p><p>{READERABLE_PARAGRAPH}</p>")
        assert is_probably_readerable(html) is True

    def test_one_long_paragraph(self, page_factory):
        assert is_probably_readerable(page_factory(f"<p>{READERABLE_PARAGRAPH}</p>")) is False

    def test_hidden_paragraph_is_ignored(self, page_factory):
        html = page_factory(f'<p>{READERABLE_PARAGRAPH}</p><p style="display: none">{READERABLE_PARAGRAPH}</p>')
        assert is_probably_readerable(html) is False

    def test_thresholds_are_configurable(self, page_factory):
        html = page_factory(f"<p>{READERABLE_PARAGRAPH}</p>")
        assert is_probably_readerable(html, ReaderableOptions(min_score=10)) is True

    def test_article_page(self, article_page):
        assert is_probably_readerable(article_page) is True

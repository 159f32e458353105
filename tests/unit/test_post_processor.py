"""
Unit tests for article post-processing.
"""

import pytest

from readerview.config import ReadabilityOptions
from readerview.dom import parse_html
from readerview.extractor.post_processor import (
    ArticlePostProcessor,
    get_row_and_column_count,
    is_data_table,
    prep_article,
)

pytestmark = pytest.mark.unit

LONG_TEXT = (
    "The riverside park plan was approved after a long debate in which residents, engineers, and "
    "council members argued about costs, traffic, and the wetlands at the northern end of the site. "
    "Construction is expected to begin in the spring and continue for two years."
)


def process(inner: str, options: ReadabilityOptions = None):
    html = f'<div id="readability-page-1" class="page"><p>{LONG_TEXT}</p>{inner}</div>'
    return parse_html(prep_article(html, options))


class TestAttributes:
    def test_presentational_attributes_are_removed(self):
        soup = process('<p style="color: red" align="center">Styled paragraph text.</p>')
        styled = soup.find_all("p")[1]

        assert not styled.has_attr("style")
        assert not styled.has_attr("align")

    def test_svg_is_left_alone(self):
        soup = process('<p>Figure <svg style="fill: red"><rect width="5"></rect></svg></p>')
        assert soup.find("svg")["style"] == "fill: red"

    def test_svg_descendants_are_left_alone(self):
        soup = process('<p>Figure <svg><g style="stroke: blue"><rect></rect></g></svg></p>')
        assert soup.find("g")["style"] == "stroke: blue"

    def test_deeply_nested_markup(self):
        depth = 1000
        inner = "<div>" * depth + f'<p style="color: red">{LONG_TEXT}</p>' + "</div>" * depth
        soup = process(inner)

        assert soup.find(style=True) is None
        assert "riverside park plan" in soup.get_text()

    def test_lazy_image_data_src(self):
        soup = process('<img data-src="photo.jpg" alt="A photo">')
        assert soup.img["src"] == "photo.jpg"

    def test_lazy_image_replaces_base64_placeholder(self):
        soup = process('<img src="data:image/gif;base64,R0lGOD" data-src="real.jpg">')
        assert soup.img["src"] == "real.jpg"

    def test_lazy_figure_gets_image(self):
        soup = process('<figure data-src="picture.png"><figcaption>Caption text</figcaption></figure>')
        assert soup.figure.img["src"] == "picture.png"


class TestRemoval:
    def test_clean_removes_asides_and_controls(self):
        soup = process("<aside>Related stories</aside><footer>Footer text</footer><button>Subscribe</button>")

        assert soup.find("aside") is None
        assert soup.find("footer") is None
        assert soup.find("button") is None

    def test_allowed_video_embed_survives(self):
        soup = process('<iframe src="https://www.youtube.com/embed/abc"></iframe>')
        assert soup.find("iframe") is not None

    def test_share_elements_inside_blocks(self):
        soup = process('<div><p>Some text</p><div class="share-buttons">Share on Twitter</div></div>')
        assert "Share on Twitter" not in soup.get_text()

    def test_negative_headers_are_removed(self):
        soup = process('<h2 class="comment-title">Comments</h2><h1>Next section</h1>')

        assert "Comments" not in soup.get_text()
        assert soup.find("h1") is None
        assert soup.find("h2").get_text() == "Next section"

    def test_link_list_div_is_removed(self):
        soup = process('<div><a href="/1">One</a> <a href="/2">Two</a></div>')
        assert soup.find("a") is None

    def test_advertisement_div_is_removed(self):
        soup = process("<div>Advertisement</div>")
        assert "Advertisement" not in soup.get_text()

    def test_layout_table_of_links_is_removed(self):
        soup = process('<table><tr><td><a href="/a">Link one</a></td><td><a href="/b">Link two</a></td></tr></table>')
        assert soup.find("table") is None

    def test_data_table_survives(self):
        soup = process(
            '<table summary="Results"><tr><td><a href="/a">A</a></td><td><a href="/b">B</a></td></tr></table>'
        )
        assert soup.find("table") is not None

    def test_page_container_is_never_removed(self):
        html = '<div id="readability-page-1" class="page"><a href="/x">Only a link here</a></div>'
        soup = parse_html(prep_article(html))

        assert soup.find(id="readability-page-1") is not None


class TestTidyUp:
    def test_empty_paragraphs_are_removed(self):
        soup = process("<p>   </p><p><img src='x.jpg'></p>")
        paragraphs = soup.find_all("p")

        assert len(paragraphs) == 2
        assert paragraphs[1].img is not None

    def test_break_before_paragraph_is_removed(self):
        soup = process("<br> <p>Second paragraph of text.</p>")
        assert soup.find("br") is None

    def test_single_cell_table_is_unwrapped(self):
        soup = process("<table><tr><td>Just one cell of text here.</td></tr></table>")

        assert soup.find("table") is None
        assert any(p.get_text() == "Just one cell of text here." for p in soup.find_all("p"))

    def test_processor_instance(self):
        processor = ArticlePostProcessor(ReadabilityOptions())
        result = processor.process(f'<div id="readability-page-1" class="page"><p>{LONG_TEXT}</p></div>')

        assert "riverside park" in result

    def test_empty_input(self):
        assert prep_article("") == ""


class TestDataTables:
    @pytest.mark.parametrize(
        "markup, expected",
        [
            ('<table role="presentation"><tr><th>a</th></tr></table>', False),
            ('<table datatable="0"><tr><th>a</th></tr></table>', False),
            ('<table summary="x"><tr><td>a</td></tr></table>', True),
            ("<table><caption>Totals</caption><tr><td>a</td></tr></table>", True),
            ("<table><thead><tr><th>h</th></tr></thead></table>", True),
            ("<table><tr><td>a</td><td>b</td></tr></table>", False),
            ("<table>" + "<tr><td>a</td><td>b</td></tr>" * 10 + "</table>", True),
            ("<table>" + "<tr><td>a</td><td>b</td><td>c</td><td>d</td></tr>" * 3 + "</table>", True),
        ],
    )
    def test_is_data_table(self, markup, expected):
        assert is_data_table(parse_html(markup).table) is expected

    def test_row_and_column_count_honours_spans(self):
        soup = parse_html('<table><tr rowspan="2"><td colspan="3">a</td></tr><tr><td>b</td></tr></table>')
        assert get_row_and_column_count(soup.table) == (3, 3)

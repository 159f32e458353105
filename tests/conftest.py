"""
Test configuration for readerview.

Provides article fixtures shared by the unit and integration suites.
"""

from typing import Callable, List

import pytest

from readerview.config import ReadabilityOptions

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Article Fixtures
# ============================================================================

PARAGRAPHS: List[str] = [
    "The city council met on Tuesday evening to debate the long-delayed plan for the riverside park, "
    "which has been discussed, revised, and postponed for nearly a decade. Residents packed the hall, "
    "and many of them had prepared statements, maps, and petitions to present to the members.",
    "Supporters argued that the park would bring families, visitors, and small businesses back to a "
    "neighbourhood that has struggled since the factories closed. Opponents worried about costs, "
    "traffic, and the loss of parking spaces along the water, which local shops depend on.",
    "After four hours of testimony, the council voted six to three to approve the first phase of the "
    "project. Construction is expected to begin in the spring, weather permitting, and the first "
    "section of the walking trail should open to the public before the end of next year.",
    "City engineers said the design had been updated to protect the wetlands at the northern end of "
    "the site, and that the budget now includes money for flood barriers, lighting, and benches. "
    "The mayor called the vote a turning point for the city and thanked the volunteers.",
]


def article_body(paragraphs: List[str] = PARAGRAPHS) -> str:
    return "\n".join(f"<p>{text}</p>" for text in paragraphs)


def make_page(
    body: str = "",
    head: str = "<title>Council approves riverside park plan</title>",
    html_attrs: str = 'lang="en"',
) -> str:
    """Build a complete page around ``body``; the default body is a plain news article."""
    if not body:
        body = (
            '<div id="nav"><a href="/">Home</a> <a href="/news">News</a></div>'
            f'<article class="story"><h1>Council approves riverside park plan</h1>{article_body()}</article>'
            '<div class="footer"><a href="/about">About us</a></div>'
        )
    return f"<!DOCTYPE html><html {html_attrs}><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def page_factory() -> Callable[..., str]:
    return make_page


@pytest.fixture
def article_page() -> str:
    return make_page()


@pytest.fixture
def paragraphs_html() -> str:
    """Four long paragraphs, roughly 1100 characters of prose."""
    return article_body()


@pytest.fixture
def low_threshold_options() -> ReadabilityOptions:
    """Options that accept short test articles on the first rung."""
    return ReadabilityOptions(char_threshold=100)

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SENTENCE = "The quick brown fox jumps over the lazy dog, again and again."


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def _paragraph(sentences: int = 5) -> str:
    return " ".join([SENTENCE] * sentences)


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def listing_html() -> str:
    return _read_fixture("listing.html")


@pytest.fixture
def minimal_article_html() -> str:
    return _read_fixture("minimal_article.html")


@pytest.fixture
def nav_and_article_html() -> str:
    """A five-link sidebar nav next to an article of at least 1200 characters."""
    links = "".join(f'<a href="/section-{i}">Section {i}</a>' for i in range(5))
    paragraphs = "".join(f"<p>{_paragraph()}</p>" for _ in range(5))
    return (
        "<html><head><title>Fixed scenario</title></head><body>"
        f'<nav class="nav sidebar">{links}</nav>'
        f"<article>{paragraphs}</article>"
        "</body></html>"
    )


@pytest.fixture(autouse=True)
def _clear_plugins():
    from webclip.plugins import clear_plugins

    clear_plugins()
    yield
    clear_plugins()

"""Tests for the main-content cascade: readability, plugins, selectors, raw text."""

from __future__ import annotations

import logging
from unittest.mock import patch

from bs4 import BeautifulSoup

from webclip.extractors.main_content import (
    ContentResult,
    extract_main_content,
    prepare_document,
    selector_extract,
)
from webclip.plugins import register_extractor


class _DocsPlugin:
    name = "docs"
    priority = 10

    def can_extract(self, html: str, url: str) -> bool:
        return "docs.example.com" in url

    def extract(self, html: str, url: str) -> str | None:
        return "<p>Plugin content</p>"


class _BrokenPlugin:
    name = "broken"
    priority = 99

    def can_extract(self, html: str, url: str) -> bool:
        return True

    def extract(self, html: str, url: str) -> str | None:
        raise RuntimeError("boom")


class TestReadabilityTier:
    def test_article_uses_readability(self, article_html):
        result = extract_main_content(article_html, "https://example.com/blog/post")
        assert isinstance(result, ContentResult)
        assert result.method == "readability"
        assert result.title == "Understanding Python Generators"
        assert result.byline == "Jane Smith"
        assert "FOOTER-MARKER" not in result.text

    def test_short_page_still_extracted(self, minimal_article_html):
        result = extract_main_content(minimal_article_html)
        assert result.method == "readability"
        assert "keeping notes short" in result.text

    def test_excerpt_is_trimmed(self, article_html):
        result = extract_main_content(article_html)
        assert len(result.excerpt) <= 200
        assert result.excerpt == result.excerpt.strip()

    def test_title_truncated(self):
        html = f"<html><head><title>{'Long words ' * 40}</title></head><body><p>Hello world.</p></body></html>"
        result = extract_main_content(html)
        assert len(result.title) <= 200

    def test_source_soup_untouched(self, article_html):
        soup = BeautifulSoup(article_html, "lxml")
        extract_main_content(soup)
        assert soup.find("script") is not None
        assert soup.find(class_="sidebar") is not None


class TestFallbackTiers:
    def test_listing_falls_back_to_selector(self, listing_html):
        result = extract_main_content(listing_html)
        assert result.method == "selector"
        assert "first post in the archive" in result.text
        assert "Tags" not in result.text

    def test_readability_failure_logged_and_skipped(self, article_html, caplog):
        with patch(
            "webclip.extractors.main_content.Readability.parse",
            side_effect=RuntimeError("engine exploded"),
        ), caplog.at_level(logging.WARNING, logger="webclip.extractors.main_content"):
            result = extract_main_content(article_html)
        assert result.method == "selector"
        assert "engine exploded" in caplog.text

    def test_plugin_used_before_selector(self, article_html):
        register_extractor(_DocsPlugin())
        with patch("webclip.extractors.main_content._try_readability", return_value=None):
            result = extract_main_content(article_html, "https://docs.example.com/page")
        assert result.method == "docs"
        assert result.html == "<p>Plugin content</p>"
        assert result.text == "Plugin content"

    def test_plugin_skipped_for_other_urls(self, article_html):
        register_extractor(_DocsPlugin())
        with patch("webclip.extractors.main_content._try_readability", return_value=None):
            result = extract_main_content(article_html, "https://example.com/post")
        assert result.method == "selector"

    def test_broken_plugin_does_not_abort(self, article_html, caplog):
        register_extractor(_BrokenPlugin())
        register_extractor(_DocsPlugin())
        with patch("webclip.extractors.main_content._try_readability", return_value=None), \
             caplog.at_level(logging.WARNING):
            result = extract_main_content(article_html, "https://docs.example.com/page")
        assert result.method == "docs"
        assert "broken" in caplog.text

    def test_raw_text_last_resort(self, article_html):
        with patch("webclip.extractors.main_content._try_readability", return_value=None), \
             patch("webclip.extractors.main_content.selector_extract", return_value=None):
            result = extract_main_content(article_html)
        assert result.method == "raw_text"
        assert result.html.startswith("<p>")
        assert "  " not in result.text
        assert "Generators are one" in result.text

    def test_raw_text_escapes_markup(self):
        html = "<html><body><p>1 &lt; 2</p></body></html>"
        with patch("webclip.extractors.main_content._try_readability", return_value=None), \
             patch("webclip.extractors.main_content.selector_extract", return_value=None):
            result = extract_main_content(html)
        assert result.html == "<p>1 &lt; 2</p>"

    def test_empty_document(self):
        result = extract_main_content("")
        assert result.method == "raw_text"
        assert result.html == ""
        assert result.title == "Untitled"


class TestSelectorExtract:
    def test_picks_article_container(self, article_html):
        soup = prepare_document(article_html)
        container = selector_extract(soup)
        assert container.name == "article"
        assert container.find("h1") is not None

    def test_strips_unwanted(self):
        body = "<p>" + "Body text. " * 30 + "</p>"
        soup = prepare_document(
            f"<html><body><nav>Menu</nav>{body}<footer>Foot</footer></body></html>",
        )
        container = selector_extract(soup)
        assert container.name == "body"
        assert container.find("nav") is None
        assert container.find("footer") is None

    def test_source_soup_not_modified(self, article_html):
        soup = prepare_document(article_html)
        selector_extract(soup)
        assert soup.find("aside") is not None


class TestPrepareDocument:
    def test_removes_scripts_and_consent(self):
        soup = prepare_document(
            "<html><body><script>x</script>"
            '<div id="onetrust-banner-sdk">Accept cookies</div>'
            '<div class="cookieyes-banner">We use cookies</div>'
            "<p>Keep</p></body></html>",
        )
        assert soup.find("script") is None
        assert "cookies" not in soup.get_text()
        assert soup.find("p").get_text() == "Keep"

"""Tests for the readability engine and its retry controller."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup
from pydantic import ValidationError

from webclip.extractors.readability import AttemptState, Readability, extract_article
from webclip.items import ExtractionResult
from webclip.settings import ReadabilityOptions

HUNDRED_CHARS = "word " * 19 + "words"


class TestFixedScenario:
    def test_nav_removed_and_article_kept(self, nav_and_article_html):
        result = extract_article(nav_and_article_html, char_threshold=500)
        assert isinstance(result, ExtractionResult)
        assert len(result.text_content) >= 1200
        assert "<nav" not in result.content
        assert "Section 0" not in result.text_content

    def test_strict_attempt_succeeds(self, nav_and_article_html):
        engine = Readability(nav_and_article_html, char_threshold=500)
        engine.parse()
        assert engine.state is AttemptState.SUCCESS
        assert engine.attempts == ()


class TestRetryController:
    def test_best_attempt_returned_when_threshold_never_met(self):
        assert len(HUNDRED_CHARS) == 100
        engine = Readability(f"<html><body><p>{HUNDRED_CHARS}</p></body></html>", char_threshold=500)
        result = engine.parse()
        assert result is not None
        assert result.length == 100
        assert result.text_content == HUNDRED_CHARS
        assert engine.state is AttemptState.EXHAUSTED
        assert [a.strip_unlikely for a in engine.attempts] == [True, False]
        assert [a.length for a in engine.attempts] == [100, 100]

    def test_relaxed_attempt_recovers_pruned_content(self):
        text = " ".join(["Recovered text, kept on the relaxed pass."] * 15)
        html = f'<html><body><div class="extra"><p>{text}</p></div></body></html>'
        engine = Readability(html, char_threshold=500)
        result = engine.parse()
        assert engine.state is AttemptState.SUCCESS
        assert len(engine.attempts) == 1
        assert engine.attempts[0].strip_unlikely is True
        assert engine.attempts[0].length == 0
        assert "Recovered text" in result.text_content

    def test_empty_document_returns_none(self):
        engine = Readability("<html><body></body></html>")
        assert engine.parse() is None
        assert engine.state is AttemptState.EXHAUSTED

    def test_no_body_returns_none(self):
        assert extract_article(BeautifulSoup("", "lxml")) is None

    def test_threshold_respected(self, minimal_article_html):
        low = Readability(minimal_article_html, char_threshold=50)
        low.parse()
        assert low.state is AttemptState.SUCCESS

        high = Readability(minimal_article_html, char_threshold=5000)
        high.parse()
        assert high.state is AttemptState.EXHAUSTED

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            Readability("<p>x</p>", char_threshold=-1)


class TestParse:
    def test_hello_world(self):
        result = extract_article("<html><body><p>Hello world.</p></body></html>", char_threshold=5)
        assert result is not None
        assert result.text_content.strip() == "Hello world."
        assert result.length == len(result.text_content)

    def test_article_fixture(self, article_html):
        result = extract_article(article_html)
        assert result is not None
        assert result.title == "Understanding Python Generators"
        assert result.byline == "Jane Smith"
        assert result.site_name == "Example Blog"
        assert result.dir == "ltr"
        assert "lazily" in result.text_content
        assert "FOOTER-MARKER" not in result.text_content
        assert "SIDEBAR-COMMENT-MARKER" not in result.text_content
        assert "Related posts" not in result.text_content

    def test_content_is_cleaned(self, article_html):
        result = extract_article(article_html)
        assert "<h1" not in result.content
        assert "<script" not in result.content
        assert "analytics" not in result.text_content
        assert 'class="post"' not in result.content

    def test_excerpt(self, article_html):
        result = extract_article(article_html)
        assert len(result.excerpt) <= 200
        assert result.excerpt == result.text_content[:200]
        assert "By Jane Smith on March 15, 2024" in " ".join(result.excerpt.split())

    def test_excerpt_keeps_raw_whitespace(self):
        result = extract_article(
            "<html><body><div><p>\nHello   world.</p></div></body></html>", char_threshold=5,
        )
        assert result.excerpt == result.text_content[:200]
        assert "Hello   world." in result.excerpt

    def test_deeply_nested_wrappers(self):
        soup = BeautifulSoup("<html><body></body></html>", "lxml")
        parent = soup.body
        for _ in range(600):
            div = soup.new_tag("div")
            parent.append(div)
            parent = div
        paragraph = soup.new_tag("p")
        paragraph.string = HUNDRED_CHARS * 7
        parent.append(paragraph)
        result = extract_article(soup, char_threshold=100)
        assert result is not None
        assert result.length >= 700

    def test_classes_to_preserve(self, article_html):
        result = extract_article(article_html, classes_to_preserve=["language-python"])
        assert 'class="language-python"' in result.content

    def test_result_is_frozen(self, article_html):
        result = extract_article(article_html)
        with pytest.raises(ValidationError):
            result.title = "changed"

    def test_options_object(self, nav_and_article_html):
        options = ReadabilityOptions(char_threshold=5000)
        engine = Readability(nav_and_article_html, options)
        result = engine.parse()
        assert engine.state is AttemptState.EXHAUSTED
        assert len(result.text_content) >= 1200

    def test_keyword_overrides_options(self, nav_and_article_html):
        options = ReadabilityOptions(char_threshold=5000)
        engine = Readability(nav_and_article_html, options, char_threshold=10)
        engine.parse()
        assert engine.state is AttemptState.SUCCESS

    def test_passed_tree_is_modified_in_place(self, article_html):
        soup = BeautifulSoup(article_html, "lxml")
        Readability(soup).parse()
        assert soup.find("script") is None

"""Tests for candidate collection: pruning, div normalisation, scorable elements."""

from __future__ import annotations

from bs4 import BeautifulSoup

from webclip.extractors.candidates import (
    collect_candidates,
    is_unlikely_candidate,
    normalize_div,
)
from webclip.extractors.weights import ReadabilityPatterns

LONG = "A sentence that is comfortably longer than twenty-five characters."


def _body(html: str):
    return BeautifulSoup(f"<html><body>{html}</body></html>", "lxml").body


class TestIsUnlikelyCandidate:
    def test_sidebar_is_unlikely(self):
        body = _body('<div class="sidebar">x</div>')
        assert is_unlikely_candidate(body.div)

    def test_maybe_keyword_rescues(self):
        body = _body('<div class="sidebar main-column">x</div>')
        assert not is_unlikely_candidate(body.div)

    def test_body_and_anchor_protected(self):
        body = BeautifulSoup(
            '<html><body class="comments"><a class="menu" href="/">x</a></body></html>', "lxml",
        ).body
        assert not is_unlikely_candidate(body)
        assert not is_unlikely_candidate(body.a)

    def test_inside_table_kept(self):
        body = _body('<table><tr><td><div class="footer">x</div></td></tr></table>')
        assert not is_unlikely_candidate(body.find("div"))

    def test_inside_code_kept(self):
        body = _body('<code><span class="comment"># note</span></code>')
        assert not is_unlikely_candidate(body.find("span"))

    def test_custom_patterns(self):
        patterns = ReadabilityPatterns.extended(unlikely=("werbung",))
        body = _body('<div class="werbung">x</div>')
        assert is_unlikely_candidate(body.div, patterns)
        assert not is_unlikely_candidate(body.div)


class TestNormalizeDiv:
    def test_unwraps_single_paragraph(self):
        body = _body(f'<div id="wrap"><p id="p">{LONG}</p></div>')
        node, action = normalize_div(body.find(id="wrap"))
        assert action == "unwrapped"
        assert node.get("id") == "p"
        assert node.parent is body

    def test_keeps_div_with_loose_text(self):
        body = _body(f'<div id="wrap">intro <p>{LONG}</p></div>')
        node, action = normalize_div(body.find(id="wrap"))
        # has block children, so neither unwrapped nor retagged
        assert action is None
        assert node.name == "div"

    def test_link_heavy_wrapper_not_unwrapped(self):
        body = _body('<div id="wrap"><p><a href="/x">All link text here</a></p></div>')
        node, action = normalize_div(body.find(id="wrap"))
        assert action is None
        assert node.get("id") == "wrap"

    def test_retags_inline_only_div(self):
        body = _body('<div id="d">Some <b>inline</b> text</div>')
        node, action = normalize_div(body.find(id="d"))
        assert action == "retagged"
        assert node.name == "p"
        assert node is body.find(id="d")


class TestCollectCandidates:
    def test_gathers_scorable_tags(self):
        body = _body(
            f"<p>{LONG}</p><pre>code</pre><table><tr><td>cell</td></tr></table><span>x</span>",
        )
        result = collect_candidates(body)
        assert [el.name for el in result.elements_to_score] == ["p", "pre", "td"]

    def test_prunes_unlikely_when_strict(self):
        body = _body(f'<div class="sidebar"><p>{LONG}</p></div><p id="keep">{LONG}</p>')
        result = collect_candidates(body, strip_unlikely=True)
        assert result.pruned == 1
        assert body.find(class_="sidebar") is None
        assert [el.get("id") for el in result.elements_to_score] == ["keep"]

    def test_relaxed_pass_keeps_unlikely(self):
        body = _body(f'<div class="sidebar"><span>{LONG}</span><p>{LONG}</p></div>')
        result = collect_candidates(body, strip_unlikely=False)
        assert result.pruned == 0
        assert body.find(class_="sidebar") is not None
        assert len(result.elements_to_score) == 1

    def test_never_prunes_root(self):
        body = BeautifulSoup(
            f'<html><body><div class="comments" id="root"><p>{LONG}</p></div></body></html>',
            "lxml",
        ).find(id="root")
        result = collect_candidates(body)
        assert result.pruned == 0
        assert body.parent is not None

    def test_nested_wrappers_unwrap_in_one_pass(self):
        body = _body(f'<div id="outer"><div id="inner"><p id="p">{LONG}</p></div></div>')
        result = collect_candidates(body)
        assert result.unwrapped == 2
        assert body.find("div") is None
        assert [el.get("id") for el in result.elements_to_score] == ["p"]

    def test_retagged_div_is_scored(self):
        body = _body(f"<div>{LONG}</div>")
        result = collect_candidates(body)
        assert result.retagged == 1
        assert [el.name for el in result.elements_to_score] == ["p"]

    def test_normalisation_is_idempotent(self):
        html = (
            f'<div id="a"><div><div>{LONG}</div></div></div>'
            f'<div id="b"><p>{LONG}</p><div>inline <i>only</i></div></div>'
            f'<div id="c"><div><p>{LONG}</p></div></div>'
        )
        body = _body(html)
        collect_candidates(body, strip_unlikely=False)
        once = str(body)
        second = collect_candidates(body, strip_unlikely=False)
        assert str(body) == once
        assert second.unwrapped == 0
        assert second.retagged == 0


class TestDeepNesting:
    DEPTH = 600

    def _nested(self, depth: int):
        soup = BeautifulSoup("<html><body></body></html>", "lxml")
        parent = soup.body
        for _ in range(depth):
            div = soup.new_tag("div")
            parent.append(div)
            parent = div
        paragraph = soup.new_tag("p", attrs={"id": "p"})
        paragraph.string = LONG * 10
        parent.append(paragraph)
        return soup

    def test_deep_wrapper_chain_unwraps(self):
        soup = self._nested(self.DEPTH)
        result = collect_candidates(soup.body)
        assert result.unwrapped == self.DEPTH
        assert soup.body.find("div") is None
        assert [el.get("id") for el in result.elements_to_score] == ["p"]

    def test_chain_ending_in_inline_div(self):
        body = _body("<div id='outer'><div><div>Only <b>inline</b> text</div></div></div>")
        result = collect_candidates(body)
        assert result.unwrapped == 2
        assert result.retagged == 1
        assert body.find("div") is None
        assert [el.name for el in result.elements_to_score] == ["p"]

    def test_link_heavy_chain_kept(self):
        body = _body('<div id="outer"><div><p><a href="/x">All link text here</a></p></div></div>')
        node, action = normalize_div(body.find(id="outer"))
        assert action is None
        assert node.get("id") == "outer"

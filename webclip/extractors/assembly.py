"""Top-candidate selection and content-region assembly."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from webclip.extractors.dom import (
    class_string,
    element_children,
    inner_text,
    parent_element,
    set_node_tag,
)
from webclip.extractors.scoring import ScoreTable
from webclip.extractors.weights import link_density

logger = logging.getLogger(__name__)

TOP_CANDIDATE_COUNT = 5
CONTENT_CONTAINER_ID = "readability-content"

_SIBLING_THRESHOLD_FLOOR = 10
_SIBLING_SCORE_RATIO = 0.2
_SIBLING_MIN_LONG_LENGTH = 80
_SIBLING_MAX_LINK_DENSITY = 0.25
_SENTENCE_END_RE = re.compile(r"\.( |$)")


@dataclass
class Region:
    """The assembled content container and the node it was built around."""

    container: Tag
    top_candidate: Tag
    synthesized: bool = False


def select_top_candidates(
    candidates: list[Tag],
    table: ScoreTable,
    limit: int = TOP_CANDIDATE_COUNT,
) -> list[Tag]:
    """Apply the one-time link-density discount and keep the best *limit*.

    Every candidate's stored score is replaced by its discounted score.
    Ties keep first-touch order.
    """
    top: list[Tag] = []
    for candidate in candidates:
        score = table.score(candidate) * (1 - link_density(candidate))
        table.set(candidate, score)

        for position in range(limit):
            if position >= len(top) or score > table.score(top[position]):
                top.insert(position, candidate)
                if len(top) > limit:
                    top.pop()
                break
    return top


def _synthesize_top_candidate(soup: BeautifulSoup, page: Tag, table: ScoreTable) -> Tag:
    """Move every child of *page* into a fresh ``<div>`` appended to *page*."""
    wrapper = soup.new_tag("div")
    for child in list(page.contents):
        wrapper.append(child.extract())
    page.append(wrapper)
    table.initialize(wrapper)
    return wrapper


def _sibling_qualifies(
    sibling: Tag,
    top_candidate: Tag,
    table: ScoreTable,
    threshold: float,
) -> bool:
    top_score = table.score(top_candidate)
    top_class = class_string(top_candidate)

    bonus = 0.0
    if top_class and class_string(sibling) == top_class:
        bonus += top_score * _SIBLING_SCORE_RATIO

    sibling_score = table.get(sibling)
    if sibling_score is not None and sibling_score + bonus >= threshold:
        return True

    if sibling.name != "p":
        return False

    density = link_density(sibling)
    text = inner_text(sibling)
    length = len(text)
    if length > _SIBLING_MIN_LONG_LENGTH and density < _SIBLING_MAX_LINK_DENSITY:
        return True
    return (
        0 < length < _SIBLING_MIN_LONG_LENGTH
        and density == 0
        and _SENTENCE_END_RE.search(text) is not None
    )


def assemble_region(
    soup: BeautifulSoup,
    page: Tag,
    candidates: list[Tag],
    table: ScoreTable,
) -> Region:
    """Build the content container around the best candidate.

    If no candidate won, or ``<body>`` itself did, all of *page*'s children
    are wrapped in a synthesized ``<div>`` which becomes the top candidate.
    """
    top_candidates = select_top_candidates(candidates, table)
    top_candidate = top_candidates[0] if top_candidates else None

    synthesized = False
    if top_candidate is None or top_candidate.name == "body":
        top_candidate = _synthesize_top_candidate(soup, page, table)
        synthesized = True

    logger.debug(
        "Top candidate <%s class=%r> score=%.2f%s",
        top_candidate.name,
        class_string(top_candidate),
        table.score(top_candidate),
        " (synthesized)" if synthesized else "",
    )

    container = soup.new_tag("div", attrs={"id": CONTENT_CONTAINER_ID})
    threshold = max(
        _SIBLING_THRESHOLD_FLOOR,
        table.score(top_candidate) * _SIBLING_SCORE_RATIO,
    )

    parent = parent_element(top_candidate)
    siblings = element_children(parent) if parent is not None else [top_candidate]

    for sibling in siblings:
        if sibling is not top_candidate and not _sibling_qualifies(
            sibling, top_candidate, table, threshold,
        ):
            continue
        if sibling.name not in ("div", "p"):
            set_node_tag(sibling, "div")
        container.append(sibling.extract())

    return Region(container=container, top_candidate=top_candidate, synthesized=synthesized)

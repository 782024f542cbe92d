"""Content scoring and ancestor propagation.

Scores live in a :class:`ScoreTable` keyed by element identity instead of on
the tags themselves, so a borrowed tree is never decorated with extra
attributes.  A table lasts for one extraction attempt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from bs4 import Tag

from webclip.extractors.dom import ancestors, inner_text, parent_element
from webclip.extractors.weights import DEFAULT_PATTERNS, ReadabilityPatterns, class_id_weight

logger = logging.getLogger(__name__)

MIN_PARAGRAPH_LENGTH = 25
MAX_ANCESTOR_DEPTH = 5

_TAG_BASE_SCORES: dict[str, int] = {
    "div": 5,
    "pre": 3, "td": 3, "blockquote": 3,
    "address": -3, "ol": -3, "ul": -3, "dl": -3, "dd": -3, "dt": -3,
    "li": -3, "form": -3,
    "h1": -5, "h2": -5, "h3": -5, "h4": -5, "h5": -5, "h6": -5, "th": -5,
}


class ScoreTable:
    """Side map from element to its accumulated content score."""

    def __init__(self, patterns: ReadabilityPatterns = DEFAULT_PATTERNS) -> None:
        self._patterns = patterns
        # id(tag) -> (tag, score); holding the tag keeps its id from being reused
        self._entries: dict[int, tuple[Tag, float]] = {}

    def __contains__(self, node: object) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tag]:
        return (tag for tag, _ in self._entries.values())

    def initialize(self, node: Tag) -> float:
        """Seed *node*'s score from its tag and class/id weight."""
        score = float(_TAG_BASE_SCORES.get(node.name, 0) + class_id_weight(node, self._patterns))
        self._entries[id(node)] = (node, score)
        return score

    def get(self, node: Tag, default: float | None = None) -> float | None:
        entry = self._entries.get(id(node))
        return entry[1] if entry is not None else default

    def score(self, node: Tag) -> float:
        entry = self._entries.get(id(node))
        if entry is None:
            raise KeyError(f"<{node.name}> has no content score")
        return entry[1]

    def add(self, node: Tag, amount: float) -> float:
        tag, score = self._entries[id(node)]
        score += amount
        self._entries[id(node)] = (tag, score)
        return score

    def set(self, node: Tag, score: float) -> None:
        self._entries[id(node)] = (node, score)


def paragraph_score(text: str) -> float:
    """Local score of a paragraph: 1 + comma segments + one per 100 chars (max 3)."""
    return 1 + len(text.split(",")) + min(len(text) // 100, 3)


def score_divider(level: int) -> int:
    if level == 0:
        return 1
    if level == 1:
        return 2
    return level * 3


def score_elements(elements: list[Tag], table: ScoreTable) -> list[Tag]:
    """Propagate each element's local score to its ancestors.

    Ancestors are initialised (and registered as candidates) the first time
    they are touched.  Returns the candidates in first-touch order.
    """
    candidates: list[Tag] = []

    for element in elements:
        if parent_element(element) is None:
            continue

        text = inner_text(element)
        if len(text) < MIN_PARAGRAPH_LENGTH:
            continue

        lineage = list(ancestors(element, MAX_ANCESTOR_DEPTH))
        if not lineage:
            continue

        content_score = paragraph_score(text)

        for level, ancestor in enumerate(lineage):
            # The document root element (<html>) never competes
            if parent_element(ancestor) is None:
                continue
            if ancestor not in table:
                table.initialize(ancestor)
                candidates.append(ancestor)
            table.add(ancestor, content_score / score_divider(level))

    logger.debug("Scored %d elements into %d candidates", len(elements), len(candidates))
    return candidates

"""Candidate collection: the single forward pass that prepares a page for scoring.

While walking the page root in pre-order the collector

1. prunes "unlikely candidates" (comment threads, sidebars, footers, ...)
   when ``strip_unlikely`` is set,
2. normalises ``<div>`` elements, unwrapping a div around a lone paragraph
   and retagging a div without block children to ``<p>``,
3. gathers every ``<p>``, ``<td>`` and ``<pre>`` for the scorer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import Tag

from webclip.extractors.dom import (
    element_children,
    has_ancestor_tag,
    is_text,
    next_node,
    remove_and_advance,
    set_node_tag,
)
from webclip.extractors.weights import (
    DEFAULT_PATTERNS,
    ReadabilityPatterns,
    link_density,
    match_string,
)

logger = logging.getLogger(__name__)

# A div holding any of these is a layout container, not a paragraph
DIV_TO_P_ELEMS: frozenset[str] = frozenset(
    {"blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul"},
)

TAGS_TO_SCORE: frozenset[str] = frozenset({"p", "td", "pre"})

_PROTECTED_TAGS: frozenset[str] = frozenset({"body", "a"})

_UNWRAP_MAX_LINK_DENSITY = 0.25


@dataclass
class CollectionResult:
    elements_to_score: list[Tag] = field(default_factory=list)
    pruned: int = 0
    unwrapped: int = 0
    retagged: int = 0


def is_unlikely_candidate(node: Tag, patterns: ReadabilityPatterns = DEFAULT_PATTERNS) -> bool:
    """Return True if *node* looks like page chrome and may be pruned."""
    if node.name in _PROTECTED_TAGS:
        return False
    matched = match_string(node)
    if not patterns.unlikely_candidates.search(matched):
        return False
    if patterns.maybe_candidate.search(matched):
        return False
    return not (has_ancestor_tag(node, "table") or has_ancestor_tag(node, "code"))


def has_child_block_element(element: Tag) -> bool:
    return any(
        isinstance(node, Tag) and node.name in DIV_TO_P_ELEMS
        for node in element.descendants
    )


def _only_child(div: Tag) -> Tag | None:
    """Return *div*'s single element child when it holds no loose text."""
    children = element_children(div)
    if len(children) != 1:
        return None
    if any(is_text(node) and node.strip() for node in div.children):
        return None
    return children[0]


def _unwraps(div: Tag) -> bool:
    """True if *div* only wraps something that ends up as a ``<p>``.

    Children are judged by what they normalise into so that one pass reaches
    the same tree as repeated passes would.  A chain of single-child divs is
    followed down to its innermost element; every level of the chain holds
    the same text, so link density is measured once.
    """
    node = _only_child(div)
    if node is None or link_density(div) >= _UNWRAP_MAX_LINK_DENSITY:
        return False

    while node.name == "div":
        child = _only_child(node)
        if child is None or child.name not in DIV_TO_P_ELEMS:
            return not has_child_block_element(node)
        node = child
    return node.name == "p"


def normalize_div(node: Tag) -> tuple[Tag, str | None]:
    """Unwrap or retag a ``<div>``; return the node to continue from and the action.

    An unwrapped div is replaced by its only child, which may itself still be
    a div awaiting normalisation.
    """
    if _unwraps(node):
        child = element_children(node)[0].extract()
        node.replace_with(child)
        return child, "unwrapped"
    if not has_child_block_element(node):
        return set_node_tag(node, "p"), "retagged"
    return node, None


def collect_candidates(
    root: Tag,
    *,
    strip_unlikely: bool = True,
    patterns: ReadabilityPatterns = DEFAULT_PATTERNS,
) -> CollectionResult:
    """Walk *root* once, pruning and normalising in place.

    Returns the elements to score along with counters for logging.  The root
    itself is never pruned or normalised.
    """
    result = CollectionResult()
    node: Tag | None = root

    while node is not None:
        if node is not root:
            if strip_unlikely and is_unlikely_candidate(node, patterns):
                logger.debug("Removing unlikely candidate <%s> %r", node.name, match_string(node))
                result.pruned += 1
                node = remove_and_advance(node, root=root)
                continue

            while node.name == "div":
                node, action = normalize_div(node)
                if action == "unwrapped":
                    result.unwrapped += 1
                    continue
                if action == "retagged":
                    result.retagged += 1
                break

        if node.name in TAGS_TO_SCORE:
            result.elements_to_score.append(node)

        node = next_node(node, root=root)

    return result

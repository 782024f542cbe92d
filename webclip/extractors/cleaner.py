"""Post-assembly cleanup of the content region."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import Tag

from webclip.extractors.dom import inner_text, remove_tags
from webclip.extractors.weights import (
    DEFAULT_PATTERNS,
    ReadabilityPatterns,
    class_id_weight,
    link_density,
)

logger = logging.getLogger(__name__)

CONDITIONALLY_CLEANED_TAGS: tuple[str, ...] = ("table", "ul", "div")
DISALLOWED_TAGS: tuple[str, ...] = ("iframe", "input", "textarea", "select", "button")

CLASSES_ALWAYS_PRESERVED: tuple[str, ...] = ("page",)

PRESENTATIONAL_ATTRIBUTES: tuple[str, ...] = (
    "align", "background", "bgcolor", "border", "cellpadding", "cellspacing",
    "frame", "hspace", "rules", "style", "valign", "vspace",
)
DEPRECATED_SIZE_ATTRIBUTE_ELEMS: frozenset[str] = frozenset({"table", "th", "td", "hr", "pre"})

_MAX_LINK_DENSITY = 0.5
_MIN_TEXT_LENGTH = 25


def clean_conditionally(
    region: Tag,
    tag_name: str,
    *,
    keep: Tag | None = None,
    patterns: ReadabilityPatterns = DEFAULT_PATTERNS,
) -> int:
    """Drop low-value *tag_name* descendants of *region*; return how many.

    A node goes when its class/id weight is negative, when more than half
    its text is link text, or when it holds under 25 characters of text.
    *keep* is never removed.
    """
    removed = 0
    for node in reversed(region.find_all(tag_name)):
        if node is keep or node.parent is None:
            continue
        if class_id_weight(node, patterns) < 0:
            node.decompose()
            removed += 1
            continue
        if link_density(node) > _MAX_LINK_DENSITY or len(inner_text(node)) < _MIN_TEXT_LENGTH:
            node.decompose()
            removed += 1
    return removed


def clean_region(
    region: Tag,
    *,
    keep: Tag | None = None,
    patterns: ReadabilityPatterns = DEFAULT_PATTERNS,
) -> None:
    """Conditionally clean tables, lists and divs, then drop form controls and ``<h1>``."""
    for tag_name in CONDITIONALLY_CLEANED_TAGS:
        removed = clean_conditionally(region, tag_name, keep=keep, patterns=patterns)
        if removed:
            logger.debug("Cleaned %d <%s> nodes", removed, tag_name)
    remove_tags(region, DISALLOWED_TAGS)
    remove_tags(region, ("h1",))


def clean_classes(region: Tag, classes_to_preserve: Iterable[str] = ()) -> None:
    """Reduce every ``class`` attribute to the preserved class names."""
    preserved = set(CLASSES_ALWAYS_PRESERVED) | set(classes_to_preserve)
    for node in [region, *region.find_all(True)]:
        value = node.get("class")
        if value is None:
            continue
        names = value if isinstance(value, list) else str(value).split()
        kept = [name for name in names if name in preserved]
        if kept:
            node["class"] = kept
        else:
            del node["class"]


def clean_styles(region: Tag) -> None:
    """Strip presentational attributes, and legacy sizes from table-ish tags."""
    for node in [region, *region.find_all(True)]:
        for attr in PRESENTATIONAL_ATTRIBUTES:
            if attr in node.attrs:
                del node[attr]
        if node.name in DEPRECATED_SIZE_ATTRIBUTE_ELEMS:
            for attr in ("width", "height"):
                if attr in node.attrs:
                    del node[attr]

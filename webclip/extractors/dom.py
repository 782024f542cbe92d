"""DOM traversal primitives shared by every readability pass.

All walkers operate on element nodes only (``bs4.Tag``); text and comment
nodes are skipped for structural traversal but counted by :func:`inner_text`.
Element identity is always checked with ``is`` because bs4 compares tags
structurally with ``==``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

_NORMALIZE_RE = re.compile(r"\s{2,}")


def is_element(node: object) -> bool:
    """Return True for real elements (the BeautifulSoup document is not one)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: object) -> bool:
    """Return True for text nodes; comments, CDATA and doctypes are excluded."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def element_children(node: Tag) -> list[Tag]:
    return [c for c in node.children if isinstance(c, Tag)]


def first_element_child(node: Tag) -> Tag | None:
    for child in node.children:
        if isinstance(child, Tag):
            return child
    return None


def next_element_sibling(node: Tag) -> Tag | None:
    sibling = node.next_sibling
    while sibling is not None and not isinstance(sibling, Tag):
        sibling = sibling.next_sibling
    return sibling


def parent_element(node: Tag) -> Tag | None:
    parent = node.parent
    return parent if is_element(parent) else None


# ---------------------------------------------------------------------------
# Pre-order walking
# ---------------------------------------------------------------------------

def next_node(node: Tag, skip_children: bool = False, root: Tag | None = None) -> Tag | None:
    """Return the pre-order successor of *node*, or None at the end.

    Descends into the first element child unless *skip_children*.  Otherwise
    moves to the next sibling, or climbs to the nearest ancestor that has one.
    When *root* is given the walk never leaves its subtree.
    """
    if not skip_children:
        child = first_element_child(node)
        if child is not None:
            return child

    current: Tag | None = node
    while current is not None and current is not root:
        sibling = next_element_sibling(current)
        if sibling is not None:
            return sibling
        current = parent_element(current)
    return None


def remove_and_advance(node: Tag, root: Tag | None = None) -> Tag | None:
    """Detach *node* and return the node traversal should visit next.

    The successor is computed as if *node* had been skipped without being
    entered, so a single forward pass can prune while it walks.
    """
    following = next_node(node, skip_children=True, root=root)
    node.extract()
    return following


def ancestors(node: Tag, max_depth: int = 0) -> Iterator[Tag]:
    """Yield up to *max_depth* parent elements, nearest first (0 = unbounded)."""
    depth = 0
    parent = parent_element(node)
    while parent is not None:
        yield parent
        depth += 1
        if max_depth and depth >= max_depth:
            return
        parent = parent_element(parent)


def has_ancestor_tag(
    node: Tag,
    tag_name: str,
    max_depth: int = 3,
    predicate: Callable[[Tag], bool] | None = None,
) -> bool:
    """Return True if an ancestor within *max_depth* levels is a *tag_name*.

    A *max_depth* of 0 or less searches all the way to the document root.
    """
    tag_name = tag_name.lower()
    for depth, ancestor in enumerate(ancestors(node)):
        if max_depth > 0 and depth > max_depth:
            return False
        if ancestor.name == tag_name and (predicate is None or predicate(ancestor)):
            return True
    return False


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def text_content(node: Tag) -> str:
    """Concatenated text of every text node below *node* (comments excluded)."""
    return "".join(str(s) for s in node.descendants if is_text(s))


def inner_text(node: Tag, normalize_spaces: bool = True) -> str:
    """Trimmed text content, with runs of whitespace collapsed by default."""
    text = text_content(node).strip()
    if normalize_spaces:
        return _NORMALIZE_RE.sub(" ", text)
    return text


def class_string(node: Tag) -> str:
    """Return the ``class`` attribute as a single space-joined string."""
    value = node.get("class")
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def id_string(node: Tag) -> str:
    value = node.get("id")
    return str(value) if value else ""


# ---------------------------------------------------------------------------
# Mutation helpers
# ---------------------------------------------------------------------------

def set_node_tag(node: Tag, tag_name: str) -> Tag:
    """Rename *node* in place, keeping children, attributes and identity."""
    node.name = tag_name.lower()
    return node


def remove_nodes(nodes: list[Tag], predicate: Callable[[Tag], bool] | None = None) -> int:
    """Remove every attached node in *nodes* (last first); return the count."""
    removed = 0
    for node in reversed(nodes):
        if node.parent is None:
            continue
        if predicate is None or predicate(node):
            node.decompose()
            removed += 1
    return removed


def remove_tags(root: Tag, tag_names: tuple[str, ...] | list[str]) -> int:
    return remove_nodes(root.find_all(list(tag_names)))

"""Extraction sub-package: the readability engine and its helpers.

The engine itself lives in :mod:`webclip.extractors.readability`; the
caller-facing cascade in :mod:`webclip.extractors.main_content`.  Only the
settings-free helpers are re-exported here so that :mod:`webclip.settings`
can import :mod:`webclip.extractors.weights` without a cycle.
"""

from .markdown import html_to_markdown, render_clip
from .metadata import extract_metadata
from .title import get_article_title
from .weights import DEFAULT_PATTERNS, ReadabilityPatterns

__all__ = [
    "DEFAULT_PATTERNS",
    "ReadabilityPatterns",
    "extract_metadata",
    "get_article_title",
    "html_to_markdown",
    "render_clip",
]

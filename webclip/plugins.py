"""webclip.plugins - extension point for custom main-content extractors.

Usage::

    from webclip import register_extractor

    class DocsExtractor:
        name = "docs"
        priority = 10

        def can_extract(self, html: str, url: str) -> bool:
            return "docs.example.com" in url

        def extract(self, html: str, url: str) -> str | None:
            ...

    register_extractor(DocsExtractor())

Registered extractors run when the readability engine finds nothing, before
the selector fallback.  The contract is a ``runtime_checkable`` ``Protocol``
so tests can use ``isinstance()`` without inheriting from a base class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExtractorPlugin(Protocol):
    """Custom main-content extractor, tried after the readability engine."""

    name: str
    priority: int  # Higher = tried first among registered plugins

    def can_extract(self, html: str, url: str) -> bool:
        """Return True if this plugin can extract content from *html*."""
        ...

    def extract(self, html: str, url: str) -> str | None:
        """Return an HTML fragment with the main content, or None to skip."""
        ...


_extractors: list[ExtractorPlugin] = []


def register_extractor(plugin: ExtractorPlugin) -> None:
    """Register a custom :class:`ExtractorPlugin`."""
    if not isinstance(plugin, ExtractorPlugin):
        raise TypeError(f"{plugin!r} does not implement ExtractorPlugin")
    _extractors.append(plugin)


def get_extractors() -> list[ExtractorPlugin]:
    """Return all registered extractor plugins."""
    return list(_extractors)


def clear_plugins() -> None:
    """Remove all registered plugins. Primarily for use in tests."""
    _extractors.clear()

"""Main content extraction with a degrading cascade.

Tier 1: readability engine   (scoring + sibling assembly, see readability.py)
Tier 2: extractor plugins    (registered via webclip.plugins)
Tier 3: selector fallback    (common article containers, else stripped <body>)
Tier 4: raw text             (always succeeds)
"""

from __future__ import annotations

import copy
import logging
from html import escape
from typing import NamedTuple

from bs4 import BeautifulSoup, Tag

from webclip.extractors.dom import inner_text, remove_tags
from webclip.extractors.readability import Readability
from webclip.extractors.title import fallback_title, get_article_title, truncate_title
from webclip.settings import (
    CLASSES_TO_PRESERVE,
    EXCERPT_LENGTH,
    FALLBACK_MIN_TEXT,
    TITLE_MAX_LENGTH,
    WRAPPER_CHAR_THRESHOLD,
    ReadabilityOptions,
)

logger = logging.getLogger(__name__)

# Tried in order by the selector fallback
_CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    '[role="main"]',
    "main",
    ".post-content",
    ".article-content",
    ".entry-content",
    ".content",
    "#content",
    ".post",
    ".article",
)

# Stripped from the selector fallback's container
_UNWANTED_SELECTORS: tuple[str, ...] = (
    "script", "style", "noscript", "iframe",
    "nav", "header", "footer", "aside",
    ".sidebar", ".navigation", ".menu", ".comments",
    ".advertisement", ".ad", ".social-share",
    '[role="navigation"]', '[role="banner"]',
)

_NON_CONTENT_TAGS: tuple[str, ...] = ("script", "style", "noscript", "template")

# ---------------------------------------------------------------------------
# Cookie-consent / GDPR overlay removal
# ---------------------------------------------------------------------------

# CSS selectors for known cookie-consent widgets
_COOKIE_CONSENT_SELECTORS: tuple[str, ...] = (
    ".cky-consent-container", "#cookie-law-info-bar",
    "#CybotCookiebotDialog",
    "#onetrust-consent-sdk", "#onetrust-banner-sdk",
    "#cmplz-cookiebanner-container", "#BorlabsCookieBox",
    ".cookie-banner", ".cookie-notice", ".cookie-consent",
    "#cookie-notice", "#cookie-banner", ".gdpr-banner",
    "[aria-label='cookieconsent']",
)

_CONSENT_WIDGET_KEYWORDS: tuple[str, ...] = (
    "cookieyes", "cookiebot", "onetrust", "complianz", "cookie-consent",
    "gdpr-consent",
)


def _strip_cookie_consent(soup: BeautifulSoup) -> None:
    """Remove cookie-consent / GDPR overlay elements from *soup* in-place."""
    for selector in _COOKIE_CONSENT_SELECTORS:
        for el in soup.select(selector):
            if not el.decomposed:
                el.decompose()

    for el in list(soup.find_all(True)):
        if el.decomposed or el.name in ("html", "body"):
            continue
        combined = (
            " ".join(el.get("class") or []) + " " + str(el.get("id") or "")
        ).lower()
        if any(kw in combined for kw in _CONSENT_WIDGET_KEYWORDS):
            el.decompose()


def prepare_document(html: str | BeautifulSoup) -> BeautifulSoup:
    """Return a private, script-free copy of *html* ready for extraction."""
    soup = copy.copy(html) if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "lxml")
    remove_tags(soup, _NON_CONTENT_TAGS)
    _strip_cookie_consent(soup)
    return soup


class ContentResult(NamedTuple):
    html: str
    text: str
    title: str
    method: str
    byline: str | None = None
    site_name: str | None = None
    dir: str | None = None

    @property
    def excerpt(self) -> str:
        return self.text[:EXCERPT_LENGTH].strip()


def _collapse(text: str) -> str:
    return " ".join(text.split())


# ---------------------------------------------------------------------------
# Tier 1: readability engine
# ---------------------------------------------------------------------------

def _try_readability(soup: BeautifulSoup, options: ReadabilityOptions) -> ContentResult | None:
    try:
        article = Readability(copy.copy(soup), options).parse()
    except Exception as exc:
        logger.warning("readability failed: %s", exc)
        return None
    if article is None or not article.content.strip():
        return None
    return ContentResult(
        html=article.content,
        text=article.text_content,
        title=article.title,
        method="readability",
        byline=article.byline,
        site_name=article.site_name,
        dir=article.dir,
    )


# ---------------------------------------------------------------------------
# Tier 2: extractor plugins
# ---------------------------------------------------------------------------

def _try_plugins(html: str, url: str) -> tuple[str, str] | None:
    from webclip.plugins import get_extractors

    for plugin in sorted(get_extractors(), key=lambda p: p.priority, reverse=True):
        try:
            if not plugin.can_extract(html, url):
                continue
            plugin_html = plugin.extract(html, url)
        except Exception as exc:
            logger.warning("Extractor plugin %s failed: %s", plugin.name, exc)
            continue
        if plugin_html and plugin_html.strip():
            return plugin_html, plugin.name
    return None


# ---------------------------------------------------------------------------
# Tier 3: selector fallback
# ---------------------------------------------------------------------------

def selector_extract(soup: BeautifulSoup) -> Tag | None:
    """Return a cleaned copy of the first substantial article container.

    Falls back to ``<body>`` when no selector matches a container holding
    more than ``FALLBACK_MIN_TEXT`` characters.  Returns None when the
    document has no body either.
    """
    container: Tag | None = None
    for selector in _CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if isinstance(element, Tag) and len(element.get_text().strip()) > FALLBACK_MIN_TEXT:
            container = element
            break

    if container is None:
        container = soup.body
    if container is None:
        return None

    clone = copy.copy(container)
    for selector in _UNWANTED_SELECTORS:
        for el in clone.select(selector):
            if not el.decomposed:
                el.decompose()
    return clone


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_main_content(
    html: str | BeautifulSoup,
    url: str = "",
    *,
    char_threshold: int = WRAPPER_CHAR_THRESHOLD,
    classes_to_preserve: tuple[str, ...] | list[str] = CLASSES_TO_PRESERVE,
    options: ReadabilityOptions | None = None,
) -> ContentResult:
    """Extract the main content from *html*, degrading until something works.

    Never raises for malformed input.  The returned ``method`` is one of
    ``"readability"``, a plugin name, ``"selector"`` or ``"raw_text"``.
    """
    if options is None:
        options = ReadabilityOptions(
            char_threshold=char_threshold,
            classes_to_preserve=tuple(classes_to_preserve),
        )

    soup = prepare_document(html)
    raw_html = html if isinstance(html, str) else str(html)

    result = _try_readability(soup, options)
    if result is not None:
        title = result.title or fallback_title(soup)
        return result._replace(title=truncate_title(title, TITLE_MAX_LENGTH))

    title = truncate_title(get_article_title(soup) or fallback_title(soup), TITLE_MAX_LENGTH)

    plugin_result = _try_plugins(raw_html, url)
    if plugin_result is not None:
        plugin_html, name = plugin_result
        text = BeautifulSoup(plugin_html, "lxml").get_text()
        logger.debug("Plugin %s extracted %d chars from %s", name, len(text), url)
        return ContentResult(html=plugin_html, text=text, title=title, method=name)

    logger.debug("Using selector fallback for %s", url)
    container = selector_extract(soup)
    if container is not None:
        text = container.get_text()
        if text.strip():
            return ContentResult(
                html=container.decode_contents(),
                text=text,
                title=title,
                method="selector",
            )

    logger.debug("Using raw text fallback for %s", url)
    text = _collapse(inner_text(soup))
    body = f"<p>{escape(text, quote=False)}</p>" if text else ""
    return ContentResult(html=body, text=text, title=title, method="raw_text")

"""Page metadata: byline, site name, text direction and publication date.

Priority chain for each field (highest → lowest):
    byline     rel=author → .author → .byline → article:author → meta author → JSON-LD
    site_name  og:site_name → JSON-LD publisher
    published  JSON-LD → article:published_time → meta pubdate → <time datetime>
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import dateparser
from bs4 import BeautifulSoup, Tag

from webclip.extractors.dom import inner_text

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ISO_CLEANUP_RE = re.compile(r"\s+")

_BYLINE_SELECTORS: tuple[str, ...] = (
    '[rel="author"]',
    ".author",
    ".byline",
    '[property="article:author"]',
    '[name="author"]',
)

_MAX_BYLINE_LENGTH = 100

_ARTICLE_TYPES: frozenset[str] = frozenset(
    {
        "article",
        "blogposting",
        "newsarticle",
        "techarticle",
        "scholarlyarticle",
        "liveblogposting",
        "reportage",
    },
)


def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _first(*values: Any) -> Any:
    """Return the first non-empty, non-None value."""
    for v in values:
        if v:
            return v
    return None


def _meta(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if isinstance(tag, Tag):
        content = _safe_str(tag.get("content")).strip()
        return content or None
    return None


def _parse_date(raw: str | None) -> str | None:
    """Parse a date string to ISO 8601.

    Returns None on failure or when the year falls outside 1990-2099
    (catches epoch defaults like 1970-01-01 and far-future typos).
    """
    if not raw:
        return None
    raw = _ISO_CLEANUP_RE.sub(" ", raw.strip())
    try:
        parsed = dateparser.parse(
            raw,
            settings={
                "RETURN_AS_TIMEZONE_AWARE": True,
                "PREFER_DAY_OF_MONTH": "first",
                "PREFER_LOCALE_DATE_ORDER": False,
            },
        )
    except Exception as exc:
        logger.debug("Date parse failed for %r: %s", raw, exc)
        return None
    if parsed is None or not (1990 <= parsed.year <= 2099):
        return None
    return parsed.isoformat()


# ---------------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------------

def extract_jsonld(soup: BeautifulSoup) -> dict:
    """Return the most article-like JSON-LD node on the page, or ``{}``."""
    result: dict = {}

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            raw = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        nodes: list = []
        if isinstance(raw, list):
            nodes = raw
        elif isinstance(raw, dict):
            nodes = raw.get("@graph", [raw])

        for node in nodes:
            if not isinstance(node, dict):
                continue
            dtype = str(node.get("@type", "")).lower()
            if dtype not in _ARTICLE_TYPES and dtype not in {"webpage", "website"}:
                continue
            if dtype in _ARTICLE_TYPES or not result:
                result = node

    return result


def _author_from_jsonld(node: dict) -> str | None:
    author = node.get("author")
    if isinstance(author, dict):
        return author.get("name")
    if isinstance(author, list) and author:
        first = author[0]
        if isinstance(first, dict):
            return first.get("name")
        return str(first)
    if isinstance(author, str):
        return author
    return None


# ---------------------------------------------------------------------------
# Individual fields
# ---------------------------------------------------------------------------

def extract_byline(soup: BeautifulSoup, jsonld: dict | None = None) -> str | None:
    """Return the author line of the page, or None."""
    for selector in _BYLINE_SELECTORS:
        element = soup.select_one(selector)
        if not isinstance(element, Tag):
            continue
        text = inner_text(element) or _safe_str(element.get("content")).strip()
        if text and len(text) <= _MAX_BYLINE_LENGTH:
            return _ISO_CLEANUP_RE.sub(" ", text)

    author = _author_from_jsonld(jsonld if jsonld is not None else extract_jsonld(soup))
    return author.strip() if author else None


def extract_site_name(soup: BeautifulSoup, jsonld: dict | None = None) -> str | None:
    jsonld = jsonld if jsonld is not None else extract_jsonld(soup)
    publisher = jsonld.get("publisher")
    publisher_name = publisher.get("name") if isinstance(publisher, dict) else None
    return _first(_meta(soup, property="og:site_name"), publisher_name)


def extract_dir(soup: BeautifulSoup) -> str | None:
    """Text direction declared on ``<html>`` or ``<body>``."""
    for name in ("html", "body"):
        tag = soup.find(name)
        if isinstance(tag, Tag):
            value = _safe_str(tag.get("dir")).strip().lower()
            if value:
                return value
    return None


def _extract_time_datetime(soup: BeautifulSoup) -> str | None:
    """Return the datetime attribute of the first <time> element, if any."""
    time_tag = soup.find("time")
    if isinstance(time_tag, Tag):
        return _safe_str(time_tag.get("datetime")).strip() or None
    return None


def extract_published_at(soup: BeautifulSoup, jsonld: dict | None = None) -> str | None:
    jsonld = jsonld if jsonld is not None else extract_jsonld(soup)
    return _parse_date(
        _first(
            jsonld.get("datePublished"),
            _meta(soup, property="article:published_time"),
            _meta(soup, name="pubdate"),
            _extract_time_datetime(soup),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_metadata(soup: BeautifulSoup) -> dict:
    """Collect every metadata field from an already parsed page.

    Returns a dict with keys:
        byline, site_name, dir, published_at, description
    """
    jsonld = extract_jsonld(soup)
    description = _first(
        jsonld.get("description"),
        _meta(soup, property="og:description"),
        _meta(soup, name="description"),
    )
    return {
        "byline": extract_byline(soup, jsonld),
        "site_name": extract_site_name(soup, jsonld),
        "dir": extract_dir(soup),
        "published_at": extract_published_at(soup, jsonld),
        "description": str(description).strip() if description else None,
    }

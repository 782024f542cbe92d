"""Convert extracted HTML to Markdown and render clip documents."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

from markdownify import MarkdownConverter

logger = logging.getLogger(__name__)

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)

DEFAULT_TEMPLATE = """---
title: "{{title}}"
url: "{{url}}"
date: {{date}}
tags:
{{tags}}
---

{{excerpt}}

## Content

{{content}}"""

MAX_TEMPLATE_LENGTH = 5000


class ClipMarkdownConverter(MarkdownConverter):
    """markdownify converter that drops scripts, highlights <mark> and skips empty links."""

    def convert_script(self, el: Any, text: str, *args: Any, **kwargs: Any) -> str:
        return ""

    convert_style = convert_script
    convert_noscript = convert_script

    def convert_mark(self, el: Any, text: str, *args: Any, **kwargs: Any) -> str:
        return f"=={text}==" if text.strip() else text

    def convert_a(self, el: Any, text: str, *args: Any, **kwargs: Any) -> str:
        # Links with neither text nor an image carry nothing readable
        if not text.strip() and el.find("img") is None:
            return ""
        return super().convert_a(el, text, *args, **kwargs)


def html_to_markdown(html: str) -> str:
    """Convert *html* to clean Markdown.

    Uses markdownify with ATX headings, ``-`` bullets and fenced code.
    Post-processes to:
    - Remove excessive blank lines (>2 consecutive)
    - Strip trailing whitespace from lines
    """
    if not html or not html.strip():
        return ""

    try:
        md = ClipMarkdownConverter(
            heading_style="ATX",
            bullets="-",
            code_language_callback=_detect_lang,
            sub_symbol="~",
            sup_symbol="^",
            strip=["nav", "header", "footer"],
        ).convert(html)
    except Exception as exc:
        # Graceful fallback: strip tags and return plain text
        logger.warning("Markdown conversion failed: %s", exc)
        from bs4 import BeautifulSoup

        md = BeautifulSoup(html, "lxml").get_text(separator="\n")

    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip()


def _detect_lang(el: object) -> str:
    """Extract a ``language-*`` hint from a ``<pre>`` or its ``<code>`` child."""
    candidates = [el]
    find = getattr(el, "find", None)
    if find is not None:
        code = find("code")
        if code is not None:
            candidates.append(code)
    for node in candidates:
        getter = getattr(node, "get", None)
        classes = (getter("class") if getter else None) or []
        for cls in classes:
            if isinstance(cls, str) and cls.startswith("language-"):
                return cls[len("language-"):]
    return ""


# ---------------------------------------------------------------------------
# Clip templates
# ---------------------------------------------------------------------------

def _escape_yaml(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


def _format_date(value: str | None) -> str:
    if value:
        try:
            return datetime.fromisoformat(value).date().isoformat()
        except ValueError:
            logger.debug("Unparseable clip timestamp %r", value)
    return datetime.now(UTC).date().isoformat()


def _format_tags(tags: list[str] | None) -> str:
    if not tags:
        return ""
    return "\n".join(f"  - {tag}" for tag in tags)


def render_clip(template: str | None, data: Any) -> str:
    """Fill ``{{placeholder}}`` slots of *template* from *data*.

    *data* is a :class:`~webclip.items.WebClip` or a plain dict with the same
    keys.  Unknown placeholders are left untouched.
    """
    template = template or DEFAULT_TEMPLATE
    if len(template) > MAX_TEMPLATE_LENGTH:
        raise ValueError(f"template longer than {MAX_TEMPLATE_LENGTH} characters")

    fields = data if isinstance(data, dict) else data.model_dump()
    clipped_at = fields.get("clipped_at") or datetime.now(UTC).isoformat()
    content = fields.get("content_markdown") or fields.get("content") or ""

    values = {
        "title": _escape_yaml(fields.get("title") or ""),
        "url": _escape_yaml(fields.get("url") or ""),
        "domain": fields.get("domain") or "",
        "date": _format_date(clipped_at),
        "datetime": clipped_at,
        "tags": _format_tags(fields.get("tags")),
        "excerpt": fields.get("excerpt") or "",
        "content": content,
    }

    result = template
    for key, value in values.items():
        result = result.replace("{{" + key + "}}", value)
    return result

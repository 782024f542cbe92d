"""Article title heuristics.

:func:`get_article_title` cleans up the document ``<title>``: site names
after a separator are dropped, "Section: Headline" titles are reduced to the
headline, and absurdly short or long titles defer to a lone ``<h1>``.

:func:`fallback_title` is the simpler chain used when the readability
engine produced nothing.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from webclip.extractors.dom import inner_text, text_content

_SEPARATOR_RE = re.compile(r" [|\-\\/>»] ")
_HIERARCHICAL_SEPARATOR_RE = re.compile(r" [\\/>»] ")
_BEFORE_LAST_SEPARATOR_RE = re.compile(r"(.*)[|\-\\/>»] .*")
_AFTER_FIRST_SEPARATOR_RE = re.compile(r"[^|\-\\/>»]*[|\-\\/>»](.*)")
_SEPARATOR_CHARS_RE = re.compile(r"[|\-\\/>»]+")
_WORD_SPLIT_RE = re.compile(r"\s+")
_NORMALIZE_RE = re.compile(r"\s{2,}")
_FALLBACK_SUFFIX_RE = re.compile(r"[|\-–—]")

MIN_TITLE_LENGTH = 15
MAX_TITLE_LENGTH = 150
UNTITLED = "Untitled"


def word_count(text: str) -> int:
    # Splitting untrimmed text counts leading/trailing whitespace as a word
    return len(_WORD_SPLIT_RE.split(text))


def document_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    if not isinstance(title_tag, Tag):
        return ""
    return text_content(title_tag).strip()


def _headings(soup: BeautifulSoup) -> list[Tag]:
    return [h for h in soup.find_all(["h1", "h2"]) if isinstance(h, Tag)]


def get_article_title(soup: BeautifulSoup) -> str:
    """Return the most likely article title for *soup* (may be empty)."""
    orig_title = document_title(soup)
    cur_title = orig_title

    dropped_suffix = False
    had_hierarchical_separator = False

    if _SEPARATOR_RE.search(cur_title):
        had_hierarchical_separator = bool(_HIERARCHICAL_SEPARATOR_RE.search(cur_title))
        cur_title = _BEFORE_LAST_SEPARATOR_RE.sub(r"\1", orig_title)
        dropped_suffix = True

        # Too little left: take everything after the first separator instead
        if word_count(cur_title) < 3:
            cur_title = _AFTER_FIRST_SEPARATOR_RE.sub(r"\1", orig_title)
            dropped_suffix = False

    elif ": " in cur_title:
        trimmed = cur_title.strip()
        if not any(text_content(h).strip() == trimmed for h in _headings(soup)):
            cur_title = orig_title[orig_title.rfind(":") + 1:]

            if word_count(cur_title) < 3:
                cur_title = orig_title[orig_title.find(":") + 1:]
            elif word_count(orig_title[:orig_title.find(":")]) > 5:
                cur_title = orig_title

    elif len(cur_title) > MAX_TITLE_LENGTH or len(cur_title) < MIN_TITLE_LENGTH:
        h1s = soup.find_all("h1")
        if len(h1s) == 1 and isinstance(h1s[0], Tag):
            cur_title = inner_text(h1s[0])

    cur_title = _NORMALIZE_RE.sub(" ", cur_title.strip())

    # A very short result is only trusted when separator removal explains it
    cur_word_count = word_count(cur_title)
    if cur_word_count <= 4:
        if had_hierarchical_separator:
            explained = (
                cur_word_count == word_count(_SEPARATOR_CHARS_RE.sub("", orig_title)) - 1
            )
        else:
            explained = dropped_suffix
        if not explained:
            cur_title = orig_title

    return cur_title


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if isinstance(tag, Tag):
        content = tag.get("content")
        if isinstance(content, str):
            return content.strip()
    return ""


def fallback_title(soup: BeautifulSoup) -> str:
    """First non-empty of ``<h1>``, ``og:title``, ``twitter:title`` and ``<title>``."""
    h1 = soup.find("h1")
    if isinstance(h1, Tag):
        text = inner_text(h1)
        if text:
            return text

    for attrs in ({"property": "og:title"}, {"name": "twitter:title"}):
        content = _meta_content(soup, **attrs)
        if content:
            return _NORMALIZE_RE.sub(" ", content)

    title = _FALLBACK_SUFFIX_RE.split(document_title(soup))[0].strip()
    return _NORMALIZE_RE.sub(" ", title) or UNTITLED


def truncate_title(title: str, limit: int = 200) -> str:
    return title[:limit]

"""Class/id weighting and link density.

Both heuristics are reused by every stage of the readability pipeline: the
class/id weight nudges an element's score by what its markup claims to be,
and link density penalises navigation-like regions regardless of their tag.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bs4 import Tag

from webclip.extractors.dom import class_string, id_string, inner_text

# ---------------------------------------------------------------------------
# Keyword sets
# ---------------------------------------------------------------------------

UNLIKELY_CANDIDATE_KEYWORDS: tuple[str, ...] = (
    "-ad-", "ai2html", "banner", "breadcrumbs", "combx", "comment",
    "community", "cover-wrap", "disqus", "extra", "footer", "gdpr", "header",
    "legends", "menu", "related", "remark", "replies", "rss", "shoutbox",
    "sidebar", "skyscraper", "social", "sponsor", "supplemental", "ad-break",
    "agegate", "pagination", "pager", "popup", "yom-hierarchical-nav",
    "yom-remote",
)

MAYBE_CANDIDATE_KEYWORDS: tuple[str, ...] = (
    "and", "article", "body", "column", "content", "main", "shadow",
)

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "article", "body", "content", "entry", "hentry", "h-entry", "main", "page",
    "pagination", "post", "text", "blog", "story",
)

# ``hid`` only counts as a whole word; the anchored variants are kept verbatim.
NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "hidden", "^hid$", " hid$", " hid ", "^hid ", "banner", "combx", "comment",
    "com-", "contact", "foot", "footer", "footnote", "gdpr", "masthead",
    "media", "meta", "outbrain", "promo", "related", "scroll", "share",
    "shoutbox", "sidebar", "skyscraper", "sponsor", "shopping", "tags", "tool",
    "widget",
)

_HASH_URL_RE = re.compile(r"^#.+")

CLASS_WEIGHT = 25
HASH_LINK_COEFFICIENT = 0.3


def _compile(keywords: tuple[str, ...], *, raw: bool = False) -> re.Pattern[str]:
    parts = keywords if raw else tuple(re.escape(k) for k in keywords)
    return re.compile("|".join(parts), re.IGNORECASE)


@dataclass(frozen=True)
class ReadabilityPatterns:
    """Regexes that decide what class/id strings look like content or chrome.

    The defaults are tuned for English-language news and blog markup.  Sites
    using other naming conventions can pass their own patterns, or extend the
    defaults with :meth:`extended`.
    """

    unlikely_candidates: re.Pattern[str] = field(
        default_factory=lambda: _compile(UNLIKELY_CANDIDATE_KEYWORDS),
    )
    maybe_candidate: re.Pattern[str] = field(
        default_factory=lambda: _compile(MAYBE_CANDIDATE_KEYWORDS),
    )
    positive: re.Pattern[str] = field(
        default_factory=lambda: _compile(POSITIVE_KEYWORDS),
    )
    negative: re.Pattern[str] = field(
        default_factory=lambda: _compile(NEGATIVE_KEYWORDS, raw=True),
    )

    @classmethod
    def extended(
        cls,
        *,
        unlikely: tuple[str, ...] = (),
        maybe: tuple[str, ...] = (),
        positive: tuple[str, ...] = (),
        negative: tuple[str, ...] = (),
    ) -> ReadabilityPatterns:
        """Return the default patterns with extra literal keywords appended."""
        return cls(
            unlikely_candidates=_compile(UNLIKELY_CANDIDATE_KEYWORDS + tuple(unlikely)),
            maybe_candidate=_compile(MAYBE_CANDIDATE_KEYWORDS + tuple(maybe)),
            positive=_compile(POSITIVE_KEYWORDS + tuple(positive)),
            negative=_compile(
                NEGATIVE_KEYWORDS + tuple(re.escape(k) for k in negative), raw=True,
            ),
        )


DEFAULT_PATTERNS = ReadabilityPatterns()


def match_string(element: Tag) -> str:
    """The ``class id`` string tested against the candidate patterns."""
    return f"{class_string(element)} {id_string(element)}"


def class_id_weight(element: Tag, patterns: ReadabilityPatterns = DEFAULT_PATTERNS) -> int:
    """Return the class/id weight of *element*, between -50 and +50.

    The class and the id are judged independently; each contributes -25 when
    it matches the negative pattern and +25 when it matches the positive one.
    """
    weight = 0
    for value in (class_string(element), id_string(element)):
        if not value:
            continue
        if patterns.negative.search(value):
            weight -= CLASS_WEIGHT
        if patterns.positive.search(value):
            weight += CLASS_WEIGHT
    return weight


def link_density(element: Tag) -> float:
    """Fraction of *element*'s text that sits inside links, in ``[0, 1]``.

    In-page fragment links (``href="#..."``) only count for 30 % of their text.
    Returns 0 when the element has no text.
    """
    text_length = len(inner_text(element))
    if text_length == 0:
        return 0.0

    link_length = 0.0
    for anchor in element.find_all("a"):
        href = anchor.get("href")
        coefficient = (
            HASH_LINK_COEFFICIENT
            if isinstance(href, str) and _HASH_URL_RE.match(href)
            else 1.0
        )
        link_length += len(inner_text(anchor)) * coefficient

    return min(link_length / text_length, 1.0)

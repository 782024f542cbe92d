"""Readability engine: heuristic extraction of the main content of a page.

Usage::

    from bs4 import BeautifulSoup
    from webclip.extractors.readability import Readability

    soup = BeautifulSoup(html, "lxml")
    article = Readability(soup).parse()
    if article is not None:
        print(article.title, article.length)

The engine is destructive: it prunes, unwraps and retags nodes of the tree it
is given, so pass it a tree you own (an HTML string is parsed afresh).

Each attempt runs collect → score → assemble → clean on a clone of the page
taken before the first attempt.  The first attempt prunes unlikely
candidates; if it yields less text than ``char_threshold`` a relaxed attempt
runs without pruning.  When neither clears the threshold the longest attempt
is returned.
"""

from __future__ import annotations

import copy
import enum
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from webclip.extractors.assembly import assemble_region
from webclip.extractors.candidates import collect_candidates
from webclip.extractors.cleaner import clean_classes, clean_region, clean_styles
from webclip.extractors.dom import inner_text, remove_tags, text_content
from webclip.extractors.metadata import extract_byline, extract_dir, extract_site_name
from webclip.extractors.scoring import ScoreTable, score_elements
from webclip.extractors.title import get_article_title
from webclip.items import ExtractionResult
from webclip.settings import EXCERPT_LENGTH, ReadabilityOptions

logger = logging.getLogger(__name__)

_UNSCORABLE_TAGS: tuple[str, ...] = ("script", "noscript", "style")


class AttemptState(enum.Enum):
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Attempt:
    """One strict or relaxed pass and the text length it produced."""

    content: Tag
    length: int
    strip_unlikely: bool


class Readability:
    """Extract the readable content of a single document.

    Args:
        doc:     A BeautifulSoup document (mutated in place) or an HTML string.
        options: :class:`~webclip.settings.ReadabilityOptions`; the
                 ``char_threshold`` / ``classes_to_preserve`` keywords are
                 shortcuts that override the corresponding option.
    """

    def __init__(
        self,
        doc: BeautifulSoup | str,
        options: ReadabilityOptions | None = None,
        *,
        char_threshold: int | None = None,
        classes_to_preserve: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        if isinstance(doc, str):
            doc = BeautifulSoup(doc, "lxml")
        self._doc = doc
        options = options or ReadabilityOptions()
        if char_threshold is not None or classes_to_preserve is not None:
            options = ReadabilityOptions(
                char_threshold=(
                    options.char_threshold if char_threshold is None else char_threshold
                ),
                classes_to_preserve=(
                    options.classes_to_preserve
                    if classes_to_preserve is None
                    else tuple(classes_to_preserve)
                ),
                patterns=options.patterns,
            )
        self._options = options
        self._attempts: list[Attempt] = []
        self.state: AttemptState | None = None

    @property
    def attempts(self) -> tuple[Attempt, ...]:
        return tuple(self._attempts)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, page: Tag | None = None) -> ExtractionResult | None:
        """Run the extraction and return the result, or None if nothing was found."""
        byline = extract_byline(self._doc)
        site_name = extract_site_name(self._doc)
        text_dir = extract_dir(self._doc)

        remove_tags(self._doc, _UNSCORABLE_TAGS)
        title = get_article_title(self._doc)

        content = self.grab_article(page)
        if content is None:
            return None

        clean_classes(content, self._options.classes_to_preserve)
        clean_styles(content)

        text = text_content(content)
        return ExtractionResult(
            title=title,
            content=content.decode_contents(),
            text_content=text,
            length=len(text),
            excerpt=text[:EXCERPT_LENGTH],
            byline=byline,
            dir=text_dir,
            site_name=site_name,
        )

    def grab_article(self, page: Tag | None = None) -> Tag | None:
        """Return the assembled content container, or None for an empty document."""
        page = page if page is not None else self._doc.body
        if page is None:
            logger.debug("No <body> to extract from")
            return None

        snapshot = copy.copy(page)
        strip_unlikely = True

        while True:
            self.state = AttemptState.ATTEMPTING
            region = self._run_attempt(page, strip_unlikely)
            length = len(inner_text(region))
            logger.debug(
                "Attempt (strip_unlikely=%s) produced %d chars (threshold %d)",
                strip_unlikely, length, self._options.char_threshold,
            )

            if length >= self._options.char_threshold:
                self.state = AttemptState.SUCCESS
                return region

            self._attempts.append(Attempt(region, length, strip_unlikely))
            self._restore(page, snapshot)

            if not strip_unlikely:
                break
            strip_unlikely = False
            self.state = AttemptState.RETRYING

        self.state = AttemptState.EXHAUSTED
        best = sorted(self._attempts, key=lambda a: a.length, reverse=True)[0]
        if best.length == 0:
            logger.debug("Every attempt came back empty")
            return None
        logger.debug("Falling back to best attempt with %d chars", best.length)
        return best.content

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_attempt(self, page: Tag, strip_unlikely: bool) -> Tag:
        patterns = self._options.patterns
        collected = collect_candidates(page, strip_unlikely=strip_unlikely, patterns=patterns)
        logger.debug(
            "Collected %d elements (pruned=%d unwrapped=%d retagged=%d)",
            len(collected.elements_to_score),
            collected.pruned,
            collected.unwrapped,
            collected.retagged,
        )

        table = ScoreTable(patterns)
        candidates = score_elements(collected.elements_to_score, table)
        region = assemble_region(self._doc, page, candidates, table)
        clean_region(region.container, keep=region.top_candidate, patterns=patterns)
        return region.container

    @staticmethod
    def _restore(page: Tag, snapshot: Tag) -> None:
        """Replace *page*'s children with a fresh clone of the snapshot's."""
        page.clear()
        fresh = copy.copy(snapshot)
        for child in list(fresh.contents):
            page.append(child.extract())


def extract_article(
    html: BeautifulSoup | str,
    *,
    char_threshold: int | None = None,
    classes_to_preserve: tuple[str, ...] | list[str] | None = None,
    options: ReadabilityOptions | None = None,
) -> ExtractionResult | None:
    """Functional shortcut for ``Readability(html, ...).parse()``."""
    return Readability(
        html,
        options,
        char_threshold=char_threshold,
        classes_to_preserve=classes_to_preserve,
    ).parse()

"""webclip.query - clip a single page from HTML or a URL.

Basic usage::

    from webclip import fetch

    clip = fetch("https://example.com/blog/some-post")
    print(clip.title)
    print(clip.byline)
    print(clip.content_markdown)

    # As a plain dict
    data = clip.model_dump()

Pre-fetched HTML::

    from webclip import extract

    clip = extract(html, url="https://example.com/blog/post")
"""

from __future__ import annotations

import gzip
import logging
import random
import time
import urllib.error
import urllib.request
import zlib
from datetime import UTC, datetime
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from webclip import settings
from webclip.extractors.main_content import extract_main_content
from webclip.extractors.markdown import html_to_markdown
from webclip.extractors.metadata import extract_metadata
from webclip.items import WebClip

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
        body   -- decoded error body, when the server sent one
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


def _decode_response_body(raw: bytes, headers: object | None, url: str) -> str:
    encoding = ""
    charset = "utf-8"
    if headers is not None:
        encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        charset = headers.get_content_charset("utf-8") or "utf-8"

    try:
        if encoding == "gzip":
            raw = gzip.decompress(raw)
        elif encoding in ("deflate", "zlib"):
            raw = zlib.decompress(raw)
    except (OSError, zlib.error) as exc:
        raise FetchError(f"{encoding} decompression failed for {url}: {exc}", url=url) from exc

    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Low-level HTTP fetch
# ---------------------------------------------------------------------------

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def _retry_delay(attempt: int, retry_after: int = 0) -> float:
    return max(retry_after, 2 ** attempt) + random.uniform(0, 1)


def fetch_html(
    url: str,
    *,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
    max_retries: int = settings.RETRY_TIMES,
) -> str:
    """Fetch *url* and return the response body as a decoded string.

    Retries up to *max_retries* times with jittered exponential backoff on
    transient errors (429, 500, 502, 503, 504, and network-level failures).

    Raises:
        FetchError: On HTTP errors, connection failures, or invalid URLs.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or settings.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
        },
    )

    last_exc: FetchError | None = None
    for attempt in range(max_retries + 1):
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return _decode_response_body(resp.read(), resp.headers, url)

        except urllib.error.HTTPError as exc:
            body_text = ""
            try:
                raw = exc.read()
                if raw:
                    body_text = _decode_response_body(raw, exc.headers, url)
            except (OSError, FetchError):
                body_text = ""
            error = FetchError(
                f"HTTP {exc.code} fetching {url}: {exc.reason}",
                url=url,
                status=exc.code,
                body=body_text,
            )
            if exc.code in _RETRY_CODES and attempt < max_retries:
                # Honour Retry-After (RFC 7231 §7.1.3) on 429 / 503
                ra_header = exc.headers.get("Retry-After", "") if exc.headers else ""
                retry_after = int(ra_header) if ra_header and ra_header.strip().isdigit() else 0
                delay = _retry_delay(attempt, retry_after)
                logger.debug(
                    "HTTP %d for %s, retrying in %.1fs (attempt %d/%d)",
                    exc.code, url, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                last_exc = error
                continue
            raise error from exc

        except urllib.error.URLError as exc:
            error = FetchError(f"URL error fetching {url}: {exc.reason}", url=url)
            if attempt < max_retries:
                delay = _retry_delay(attempt)
                logger.debug(
                    "URL error for %s, retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc.reason,
                )
                time.sleep(delay)
                last_exc = error
                continue
            raise error from exc

        except OSError as exc:
            error = FetchError(f"Network error fetching {url}: {exc}", url=url)
            if attempt < max_retries:
                delay = _retry_delay(attempt)
                logger.debug(
                    "Network error for %s, retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc,
                )
                time.sleep(delay)
                last_exc = error
                continue
            raise error from exc

    raise last_exc or FetchError(f"All retries exhausted for {url}", url=url)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _reading_time(word_count: int) -> int:
    if word_count <= 0:
        return 0
    return max(1, round(word_count / settings.WORDS_PER_MINUTE))


def extract(
    html: str,
    *,
    url: str = "",
    char_threshold: int = settings.WRAPPER_CHAR_THRESHOLD,
    classes_to_preserve: tuple[str, ...] | list[str] = settings.CLASSES_TO_PRESERVE,
) -> WebClip:
    """Clip *html* into a :class:`~webclip.items.WebClip` without network access.

    Fields that cannot be extracted are ``None`` or empty; this function
    does not raise for malformed HTML.
    """
    soup = BeautifulSoup(html, "lxml")
    meta = extract_metadata(soup)

    result = extract_main_content(
        soup,
        url=url,
        char_threshold=char_threshold,
        classes_to_preserve=classes_to_preserve,
    )
    content_md = html_to_markdown(result.html)
    word_count = len(result.text.split())

    return WebClip(
        url=url,
        domain=urlparse(url).netloc.lower() if url else "",
        title=result.title,
        byline=result.byline or meta["byline"],
        site_name=result.site_name or meta["site_name"],
        dir=result.dir or meta["dir"],
        published_at=meta["published_at"],
        description=meta["description"],
        content_html=result.html,
        content_markdown=content_md,
        text_content=result.text,
        excerpt=result.excerpt,
        length=len(result.text),
        word_count=word_count,
        reading_time_minutes=_reading_time(word_count),
        extraction_method=result.method,
        clipped_at=datetime.now(UTC).isoformat(),
    )


def fetch(
    url: str,
    *,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
    max_retries: int = settings.RETRY_TIMES,
    char_threshold: int = settings.WRAPPER_CHAR_THRESHOLD,
    classes_to_preserve: tuple[str, ...] | list[str] = settings.CLASSES_TO_PRESERVE,
) -> WebClip:
    """Fetch *url* and clip it.

    Raises:
        FetchError: When the page cannot be downloaded.
    """
    html = fetch_html(url, timeout=timeout, user_agent=user_agent, max_retries=max_retries)
    logger.debug("Fetched %d bytes from %s", len(html), url)
    return extract(
        html,
        url=url,
        char_threshold=char_threshold,
        classes_to_preserve=classes_to_preserve,
    )

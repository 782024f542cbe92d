"""Project defaults for webclip.

Every value can be overridden through a ``WEBCLIP_*`` environment variable,
read once at import time.  Per-call options (see
:class:`~webclip.settings.ReadabilityOptions`) take precedence over both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from webclip.extractors.weights import DEFAULT_PATTERNS, ReadabilityPatterns


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


# ---------------------------------------------------------------------------
# Readability engine
# ---------------------------------------------------------------------------
# Minimum text length for an attempt to count as a success
CHAR_THRESHOLD = _env_int("WEBCLIP_CHAR_THRESHOLD", 500)

# Threshold used by the caller-facing clip wrapper (short pages are common)
WRAPPER_CHAR_THRESHOLD = _env_int("WEBCLIP_WRAPPER_CHAR_THRESHOLD", 100)

CLASSES_TO_PRESERVE = _env_list("WEBCLIP_CLASSES_TO_PRESERVE", ("highlight", "code", "pre"))

# ---------------------------------------------------------------------------
# Output shaping
# ---------------------------------------------------------------------------
TITLE_MAX_LENGTH = _env_int("WEBCLIP_TITLE_MAX_LENGTH", 200)
EXCERPT_LENGTH = _env_int("WEBCLIP_EXCERPT_LENGTH", 200)

# Selector fallback only accepts containers holding more text than this
FALLBACK_MIN_TEXT = _env_int("WEBCLIP_FALLBACK_MIN_TEXT", 200)

WORDS_PER_MINUTE = 200

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
DOWNLOAD_TIMEOUT = _env_int("WEBCLIP_TIMEOUT", 30)
RETRY_TIMES = _env_int("WEBCLIP_RETRY_TIMES", 3)
USER_AGENT = os.getenv(
    "WEBCLIP_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36",
)


@dataclass
class ReadabilityOptions:
    """Per-call knobs for :class:`~webclip.extractors.readability.Readability`."""

    char_threshold: int = CHAR_THRESHOLD
    classes_to_preserve: tuple[str, ...] = ()
    patterns: ReadabilityPatterns = field(default=DEFAULT_PATTERNS)

    def __post_init__(self) -> None:
        if self.char_threshold < 0:
            raise ValueError(f"char_threshold must be >= 0, got {self.char_threshold}")
        self.classes_to_preserve = tuple(self.classes_to_preserve)

    @classmethod
    def from_env(cls) -> ReadabilityOptions:
        return cls(char_threshold=CHAR_THRESHOLD, classes_to_preserve=CLASSES_TO_PRESERVE)

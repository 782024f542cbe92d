"""Pydantic models for extraction output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Readability engine output
# ---------------------------------------------------------------------------

class ExtractionResult(BaseModel):
    """What the readability engine returns for a page.  Immutable."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str = ""            # serialized HTML of the content region
    text_content: str = ""
    length: int = 0
    excerpt: str = ""
    byline: str | None = None
    dir: str | None = None
    site_name: str | None = None


# ---------------------------------------------------------------------------
# Caller-facing clip
# ---------------------------------------------------------------------------

class WebClip(BaseModel):
    """A clipped page: cleaned content plus the metadata worth keeping."""

    # Identity
    url: str = ""
    domain: str = ""

    # Metadata
    title: str = ""
    byline: str | None = None
    site_name: str | None = None
    dir: str | None = None
    published_at: str | None = None
    description: str | None = None

    # Content
    content_html: str = ""
    content_markdown: str = ""
    text_content: str = ""
    excerpt: str = ""

    # Stats
    length: int = 0
    word_count: int = 0
    reading_time_minutes: int = 0

    # Provenance
    extraction_method: str = "readability"  # readability|selector|raw_text|<plugin>
    clipped_at: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    def to_markdown_document(self, template: str | None = None) -> str:
        """Render this clip through the Markdown clip template."""
        from webclip.extractors.markdown import render_clip

        return render_clip(template, self)

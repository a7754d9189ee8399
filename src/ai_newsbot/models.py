"""Data models for posts and pipeline runs."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SourceConfig(BaseModel):
    """Configuration for a subreddit feed."""

    name: str
    url: str
    enabled: bool = True


class Item(BaseModel):
    """A post moving through the pipeline.

    ``source_id`` is the only deduplication key. An item becomes ready for
    publishing once it carries a translation (``translated_title`` or
    ``translated_body``), and is never published again after ``published_at``
    is set.
    """

    source_id: str
    title: str
    body: str = ""
    media_refs: list[str] = Field(default_factory=list)
    translated_title: str = ""
    translated_body: str = ""
    published_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("source_id", "title", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Any:
        """Clean up text fields."""
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def is_ready(self) -> bool:
        """Translated and not yet published."""
        return bool(self.translated_title or self.translated_body) and self.published_at is None

    def with_translation(self, translated_body: str, translated_title: str = "") -> "Item":
        """Return a copy carrying the translated body and title."""
        return self.model_copy(
            update={"translated_body": translated_body, "translated_title": translated_title}
        )


class PipelineStats(BaseModel):
    """Statistics from a pipeline run."""

    items_collected: int = 0
    items_already_seen: int = 0
    items_ingested: int = 0
    items_skipped: int = 0
    items_ready: int = 0
    items_published: int = 0
    publish_failures: int = 0
    errors: list[str] = Field(default_factory=list)
    duration_seconds: float = 0.0

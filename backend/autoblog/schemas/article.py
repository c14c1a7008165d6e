"""Pydantic v2 schemas for article snapshots read from the content store.

Repositories convert ORM rows into these snapshots so the linking analyzer
works on plain, typed data:
- ArticleSnapshot: full article as seen by the analyzer (tags normalized)
- SlugAndTitle: minimal target lookup used when building link markup
- ArticleSummary: compact API representation of an article
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_tags(value: Any) -> list[str]:
    """Normalize stored tags into a list of strings.

    Tags may arrive as a native list or as a JSON-encoded string written by
    older clients. Anything that does not decode to a list (None, invalid
    JSON, a JSON object) becomes an empty list. Never raises.
    """
    if not value:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, list | tuple):
        return []
    return [tag for tag in value if isinstance(tag, str)]


class ArticleSnapshot(BaseModel):
    """Read-only view of an article for link analysis."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="Article UUID")
    org_id: str = Field(..., description="Owning organization")
    cluster_id: str | None = Field(None, description="Topic cluster, if any")
    title: str = Field("", description="Article title")
    slug: str = Field("", description="URL slug")
    content: str = Field("", description="HTML body")
    tags: list[str] = Field(default_factory=list, description="Normalized tags")
    word_count: int = Field(0, ge=0, description="Body word count")
    status: str = Field(..., description="Publishing status")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return coerce_tags(value)

    @field_validator("word_count", mode="before")
    @classmethod
    def _default_word_count(cls, value: Any) -> Any:
        return value or 0

    @field_validator("content", "title", "slug", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return value or ""


class SlugAndTitle(BaseModel):
    """Target article fields needed to build a link."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    slug: str
    title: str


class ArticleSummary(BaseModel):
    """Compact article representation for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Article UUID")
    title: str = Field(..., description="Article title")
    slug: str = Field(..., description="URL slug")
    cluster_id: str | None = Field(None, description="Topic cluster, if any")
    status: str = Field(..., description="Publishing status")
    word_count: int = Field(0, description="Body word count")

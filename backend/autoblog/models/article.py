"""Article model for generated blog content.

Articles are produced by the article generator and pushed to the CMS by the
publisher. The internal linking analyzer reads them and only ever writes
back the content column (plus updated_at) when links are applied.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autoblog.core.database import Base

if TYPE_CHECKING:
    from autoblog.models.internal_link import InternalLink


class ArticleStatus(str, Enum):
    """Publishing lifecycle status of an article."""

    DRAFT = "draft"
    REVIEW = "review"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


# Statuses the linking analyzer treats as link sources/targets
LINKABLE_STATUSES: tuple[str, ...] = (
    ArticleStatus.PUBLISHED.value,
    ArticleStatus.SCHEDULED.value,
    ArticleStatus.DRAFT.value,
)


class Article(Base):
    """Article model.

    Attributes:
        id: UUID primary key
        org_id: Owning organization (tenant)
        cluster_id: Optional topic cluster the article belongs to
        title: Article title
        slug: URL slug used to build the public blog path
        content: HTML body
        tags: JSON list of tags (legacy rows may hold a JSON-encoded string)
        word_count: Number of words in the body
        status: 'draft', 'review', 'scheduled', 'published' or 'archived'
        created_at: Timestamp when record was created
        updated_at: Timestamp when record was last updated
    """

    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    org_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    cluster_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    tags: Mapped[Any] = mapped_column(
        JSONB,
        nullable=True,
    )

    word_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ArticleStatus.DRAFT.value,
        server_default=text("'draft'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    # Composite index for org_id + status queries
    __table_args__ = (Index("ix_articles_org_id_status", "org_id", "status"),)

    # Relationships
    outbound_links: Mapped[list["InternalLink"]] = relationship(
        "InternalLink",
        foreign_keys="InternalLink.source_article_id",
        back_populates="source_article",
        passive_deletes=True,
    )

    inbound_links: Mapped[list["InternalLink"]] = relationship(
        "InternalLink",
        foreign_keys="InternalLink.target_article_id",
        back_populates="target_article",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Article(id={self.id!r}, org_id={self.org_id!r}, "
            f"title={self.title!r}, status={self.status!r})>"
        )

"""InternalLink model for storing article-to-article internal links.

The InternalLink model represents a directed edge between two Articles:
- source_article_id: The article containing the link
- target_article_id: The article being linked to
- anchor_text: The visible text of the link
- link_type: How the two articles relate (pillar/cluster, related, contextual)
- status: Lifecycle status (suggested → applied | rejected)

Only 'applied' links take part in graph, orphan and density computations.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autoblog.core.database import Base

if TYPE_CHECKING:
    from autoblog.models.article import Article


class LinkType(str, Enum):
    """How the source and target articles relate."""

    PILLAR_TO_CLUSTER = "pillar_to_cluster"
    CLUSTER_TO_PILLAR = "cluster_to_pillar"
    RELATED = "related"
    CONTEXTUAL = "contextual"


class LinkStatus(str, Enum):
    """Lifecycle status of an internal link."""

    SUGGESTED = "suggested"
    APPLIED = "applied"
    REJECTED = "rejected"


class InternalLink(Base):
    """InternalLink model for storing article-to-article internal links.

    Attributes:
        id: UUID primary key
        source_article_id: Reference to the article containing the link
        target_article_id: Reference to the article being linked to
        anchor_text: The visible text of the link
        link_type: 'pillar_to_cluster', 'cluster_to_pillar', 'related' or 'contextual'
        position_in_content: Optional character offset in content
        status: 'suggested', 'applied' or 'rejected'
        created_at: Timestamp when record was created
    """

    __tablename__ = "internal_links"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    source_article_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    target_article_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    anchor_text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    link_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    position_in_content: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LinkStatus.SUGGESTED.value,
        server_default=text("'suggested'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    __table_args__ = (
        Index("ix_internal_links_target_article_id_status", "target_article_id", "status"),
    )

    # Relationships
    source_article: Mapped["Article"] = relationship(
        "Article",
        foreign_keys=[source_article_id],
        back_populates="outbound_links",
    )

    target_article: Mapped["Article"] = relationship(
        "Article",
        foreign_keys=[target_article_id],
        back_populates="inbound_links",
    )

    def __repr__(self) -> str:
        return (
            f"<InternalLink(id={self.id!r}, source={self.source_article_id!r}, "
            f"target={self.target_article_id!r}, status={self.status!r})>"
        )

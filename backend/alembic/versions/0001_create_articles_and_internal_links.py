"""Create articles and internal_links tables.

Internal Linking:
- articles: Generated blog content scoped by organization and topic cluster
- internal_links: Directed edge table for article-to-article links
- Tracks anchor text, link type, and lifecycle status

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create articles and internal_links tables."""
    op.create_table(
        "articles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("org_id", sa.String(length=64), nullable=False),
        sa.Column("cluster_id", sa.String(length=64), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("tags", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("word_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'draft'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_articles_org_id"), "articles", ["org_id"], unique=False)
    op.create_index(
        op.f("ix_articles_cluster_id"), "articles", ["cluster_id"], unique=False
    )
    op.create_index(
        "ix_articles_org_id_status", "articles", ["org_id", "status"], unique=False
    )

    op.create_table(
        "internal_links",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "source_article_id",
            postgresql.UUID(as_uuid=False),
            nullable=False,
        ),
        sa.Column(
            "target_article_id",
            postgresql.UUID(as_uuid=False),
            nullable=False,
        ),
        sa.Column("anchor_text", sa.Text(), nullable=False),
        sa.Column("link_type", sa.String(length=20), nullable=False),
        sa.Column("position_in_content", sa.Integer(), nullable=True),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'suggested'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["source_article_id"],
            ["articles.id"],
            name="fk_internal_links_source_article_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_article_id"],
            ["articles.id"],
            name="fk_internal_links_target_article_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_internal_links_source_article_id"),
        "internal_links",
        ["source_article_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_internal_links_target_article_id"),
        "internal_links",
        ["target_article_id"],
        unique=False,
    )
    op.create_index(
        "ix_internal_links_target_article_id_status",
        "internal_links",
        ["target_article_id", "status"],
        unique=False,
    )


def downgrade() -> None:
    """Drop internal_links and articles tables."""
    op.drop_index(
        "ix_internal_links_target_article_id_status", table_name="internal_links"
    )
    op.drop_index(
        op.f("ix_internal_links_target_article_id"), table_name="internal_links"
    )
    op.drop_index(
        op.f("ix_internal_links_source_article_id"), table_name="internal_links"
    )
    op.drop_table("internal_links")
    op.drop_index("ix_articles_org_id_status", table_name="articles")
    op.drop_index(op.f("ix_articles_cluster_id"), table_name="articles")
    op.drop_index(op.f("ix_articles_org_id"), table_name="articles")
    op.drop_table("articles")

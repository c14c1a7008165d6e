"""InternalLinkRepository: queries and inserts for internal link rows."""

from sqlalchemy import select

from autoblog.models.article import Article
from autoblog.models.internal_link import InternalLink, LinkStatus
from autoblog.repositories.base import BaseRepository, is_valid_id
from autoblog.schemas.internal_link import InternalLinkSnapshot, NewInternalLink


class InternalLinkRepository(BaseRepository):
    """Repository for InternalLink queries used by internal linking."""

    TABLE_NAME = "internal_links"

    async def list_applied_links(self, org_id: str) -> list[InternalLinkSnapshot]:
        """List applied links whose source article belongs to the organization.

        Args:
            org_id: Organization that owns the source articles

        Returns:
            List of InternalLinkSnapshot in insertion order
        """
        async with self._operation("list_applied_links", org_id=org_id):
            result = await self.session.execute(
                select(InternalLink)
                .join(Article, InternalLink.source_article_id == Article.id)
                .where(
                    Article.org_id == org_id,
                    InternalLink.status == LinkStatus.APPLIED.value,
                )
                .order_by(InternalLink.created_at, InternalLink.id)
            )
            rows = result.scalars().all()

        return [InternalLinkSnapshot.model_validate(row) for row in rows]

    async def list_links_from_source(
        self, article_id: str
    ) -> list[InternalLinkSnapshot]:
        """List every link row (any status) whose source is the given article.

        Args:
            article_id: UUID of the source article

        Returns:
            List of InternalLinkSnapshot
        """
        if not is_valid_id(article_id):
            return []

        async with self._operation("list_links_from_source", article_id=article_id):
            result = await self.session.execute(
                select(InternalLink)
                .where(InternalLink.source_article_id == article_id)
                .order_by(InternalLink.created_at, InternalLink.id)
            )
            rows = result.scalars().all()

        return [InternalLinkSnapshot.model_validate(row) for row in rows]

    async def insert_link(self, link: NewInternalLink) -> InternalLinkSnapshot:
        """Insert a new internal link row.

        Args:
            link: Validated link to persist

        Returns:
            InternalLinkSnapshot of the created row
        """
        async with self._operation(
            "insert_link",
            source_article_id=link.source_article_id,
            target_article_id=link.target_article_id,
        ):
            row = InternalLink(**link.model_dump())
            self.session.add(row)
            await self.session.flush()
            await self.session.refresh(row)

        return InternalLinkSnapshot.model_validate(row)

"""ArticleRepository: read access to articles plus content write-back.

Handles all database operations the linking analyzer needs on Article
entities. Rows are returned as ArticleSnapshot objects, with tags already
normalized, so callers never hold live ORM state.
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select, update

from autoblog.models.article import Article
from autoblog.repositories.base import BaseRepository, is_valid_id
from autoblog.schemas.article import ArticleSnapshot, SlugAndTitle


class ArticleRepository(BaseRepository):
    """Repository for Article queries used by internal linking."""

    TABLE_NAME = "articles"

    async def list_articles(
        self, org_id: str, statuses: Sequence[str]
    ) -> list[ArticleSnapshot]:
        """List an organization's articles in the given statuses, newest first.

        Args:
            org_id: Organization to scope the query to
            statuses: Article statuses to include

        Returns:
            List of ArticleSnapshot (empty if the org has no matching articles)
        """
        async with self._operation(
            "list_articles", org_id=org_id, statuses=list(statuses)
        ):
            result = await self.session.execute(
                select(Article)
                .where(Article.org_id == org_id, Article.status.in_(list(statuses)))
                .order_by(Article.created_at.desc(), Article.id)
            )
            rows = result.scalars().all()

        return [ArticleSnapshot.model_validate(row) for row in rows]

    async def get_article(self, article_id: str) -> ArticleSnapshot | None:
        """Get an article by ID.

        Args:
            article_id: UUID of the article

        Returns:
            ArticleSnapshot if found, None otherwise (including malformed ids)
        """
        if not is_valid_id(article_id):
            return None

        async with self._operation("get_article", article_id=article_id):
            result = await self.session.execute(
                select(Article).where(Article.id == article_id)
            )
            row = result.scalar_one_or_none()

        return ArticleSnapshot.model_validate(row) if row is not None else None

    async def get_slug_and_title(
        self, article_id: str, org_id: str | None = None
    ) -> SlugAndTitle | None:
        """Look up the slug and title of a link target.

        Args:
            article_id: UUID of the target article
            org_id: When given, only match articles in this organization

        Returns:
            SlugAndTitle if found, None otherwise
        """
        if not is_valid_id(article_id):
            return None

        async with self._operation(
            "get_slug_and_title", article_id=article_id, org_id=org_id
        ):
            stmt = select(Article.slug, Article.title).where(Article.id == article_id)
            if org_id is not None:
                stmt = stmt.where(Article.org_id == org_id)
            result = await self.session.execute(stmt)
            row = result.first()

        if row is None:
            return None
        return SlugAndTitle(slug=row.slug, title=row.title)

    async def update_article_content(
        self, article_id: str, content: str, updated_at: datetime
    ) -> None:
        """Persist new article content.

        Args:
            article_id: UUID of the article to update
            content: Replacement HTML content
            updated_at: Timestamp to record as the last update
        """
        async with self._operation("update_article_content", article_id=article_id):
            await self.session.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(content=content, updated_at=updated_at)
            )
            await self.session.flush()

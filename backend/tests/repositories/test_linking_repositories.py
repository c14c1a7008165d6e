"""Tests for ArticleRepository and InternalLinkRepository.

Tests cover:
- Org and status scoping, newest-first ordering
- Tag normalization at the store boundary (legacy JSON-string tags)
- Target lookup scoped to an organization
- Content write-back
- Applied-link listing scoped by source article org
- Link insertion
- Store error mapping: unreachable store -> StoreUnavailableError
- Malformed ids: treated as missing rows, never as store outages
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from autoblog.repositories.article import ArticleRepository
from autoblog.repositories.base import StoreUnavailableError
from autoblog.repositories.internal_link import InternalLinkRepository
from autoblog.schemas.internal_link import NewInternalLink

# ---------------------------------------------------------------------------
# ArticleRepository
# ---------------------------------------------------------------------------


class TestArticleRepository:
    async def test_list_articles_scoped_and_newest_first(
        self, db_session: AsyncSession, make_article
    ) -> None:
        older = await make_article(title="Older")
        newer = await make_article(title="Newer", status="draft")
        await make_article(status="archived")
        await make_article(org_id="org-2")

        repo = ArticleRepository(db_session)
        articles = await repo.list_articles("org-1", ["published", "draft"])

        assert [a.id for a in articles] == [newer.id, older.id]

    async def test_list_articles_empty_org(self, db_session: AsyncSession) -> None:
        repo = ArticleRepository(db_session)
        assert await repo.list_articles("nobody", ["published"]) == []

    async def test_native_tags_kept(
        self, db_session: AsyncSession, make_article
    ) -> None:
        article = await make_article(tags=["seo", "saas"])

        snapshot = await ArticleRepository(db_session).get_article(article.id)

        assert snapshot is not None
        assert snapshot.tags == ["seo", "saas"]

    async def test_json_string_tags_normalized(
        self, db_session: AsyncSession, make_article
    ) -> None:
        article = await make_article(tags='["seo", "growth"]')

        snapshot = await ArticleRepository(db_session).get_article(article.id)

        assert snapshot is not None
        assert snapshot.tags == ["seo", "growth"]

    @pytest.mark.parametrize("raw_tags", [None, "not json", '{"a": 1}', ""])
    async def test_unparseable_tags_become_empty(
        self, db_session: AsyncSession, make_article, raw_tags
    ) -> None:
        article = await make_article(tags=raw_tags)

        snapshot = await ArticleRepository(db_session).get_article(article.id)

        assert snapshot is not None
        assert snapshot.tags == []

    async def test_get_article_missing(self, db_session: AsyncSession) -> None:
        assert await ArticleRepository(db_session).get_article("missing") is None

    async def test_get_slug_and_title(
        self, db_session: AsyncSession, make_article
    ) -> None:
        article = await make_article(slug="seo-basics", title="SEO Basics")

        target = await ArticleRepository(db_session).get_slug_and_title(article.id)

        assert target is not None
        assert (target.slug, target.title) == ("seo-basics", "SEO Basics")

    async def test_get_slug_and_title_scoped_to_org(
        self, db_session: AsyncSession, make_article
    ) -> None:
        article = await make_article(org_id="org-2")
        repo = ArticleRepository(db_session)

        assert await repo.get_slug_and_title(article.id, org_id="org-1") is None
        assert await repo.get_slug_and_title(article.id, org_id="org-2") is not None

    async def test_update_article_content(
        self, db_session: AsyncSession, make_article
    ) -> None:
        article = await make_article(content="<p>old</p>")
        repo = ArticleRepository(db_session)
        updated_at = datetime(2025, 1, 1, tzinfo=UTC)

        await repo.update_article_content(article.id, "<p>new</p>", updated_at)

        snapshot = await repo.get_article(article.id)
        assert snapshot is not None
        assert snapshot.content == "<p>new</p>"


# ---------------------------------------------------------------------------
# InternalLinkRepository
# ---------------------------------------------------------------------------


class TestInternalLinkRepository:
    async def test_list_applied_links_scoped_by_source_org(
        self, db_session: AsyncSession, make_article, make_link
    ) -> None:
        a = await make_article()
        b = await make_article()
        foreign = await make_article(org_id="org-2")
        applied = await make_link(a, b)
        await make_link(b, a, status="suggested")
        await make_link(a, b, status="rejected")
        await make_link(foreign, a)

        links = await InternalLinkRepository(db_session).list_applied_links("org-1")

        assert [link.id for link in links] == [applied.id]

    async def test_list_links_from_source_any_status(
        self, db_session: AsyncSession, make_article, make_link
    ) -> None:
        a = await make_article()
        b = await make_article()
        c = await make_article()
        await make_link(a, b)
        await make_link(a, c, status="rejected")
        await make_link(b, a)

        links = await InternalLinkRepository(db_session).list_links_from_source(a.id)

        assert {link.target_article_id for link in links} == {b.id, c.id}
        assert {link.status for link in links} == {"applied", "rejected"}

    async def test_insert_link(
        self, db_session: AsyncSession, make_article
    ) -> None:
        a = await make_article()
        b = await make_article()
        repo = InternalLinkRepository(db_session)

        created = await repo.insert_link(
            NewInternalLink(
                source_article_id=a.id,
                target_article_id=b.id,
                anchor_text="seo basics",
                link_type="related",
                position_in_content=12,
            )
        )

        assert created.id
        assert created.status == "applied"
        assert created.position_in_content == 12
        assert [link.id for link in await repo.list_applied_links("org-1")] == [
            created.id
        ]


# ---------------------------------------------------------------------------
# Store error mapping
# ---------------------------------------------------------------------------


def _failing_session(error: Exception) -> MagicMock:
    session = MagicMock(spec=AsyncSession)
    session.execute = AsyncMock(side_effect=error)
    return session


class TestStoreErrors:
    async def test_operational_error_maps_to_store_unavailable(self) -> None:
        error = OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
        repo = ArticleRepository(_failing_session(error))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await repo.list_articles("org-1", ["published"])

        assert exc_info.value.table == "articles"
        assert exc_info.value.operation == "list_articles"
        assert exc_info.value.__cause__ is error

    async def test_timeout_maps_to_store_unavailable(self) -> None:
        repo = InternalLinkRepository(_failing_session(TimeoutError()))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await repo.list_applied_links("org-1")

        assert exc_info.value.table == "internal_links"

    async def test_other_database_errors_propagate(self) -> None:
        error = IntegrityError("UPDATE articles", {}, Exception("constraint"))
        repo = ArticleRepository(_failing_session(error))

        with pytest.raises(IntegrityError):
            await repo.update_article_content("a", "<p></p>", datetime.now(UTC))


# ---------------------------------------------------------------------------
# Malformed ids
# ---------------------------------------------------------------------------


def _invalid_uuid_error() -> InterfaceError:
    return InterfaceError(
        "SELECT articles.slug, articles.title FROM articles WHERE articles.id = $1",
        {},
        Exception("invalid input for query argument $1: 'not-a-uuid' (invalid UUID)"),
    )


class TestMalformedIds:
    async def test_get_article_returns_none(self) -> None:
        session = _failing_session(_invalid_uuid_error())

        assert await ArticleRepository(session).get_article("not-a-uuid") is None
        session.execute.assert_not_awaited()

    async def test_get_slug_and_title_returns_none(self) -> None:
        session = _failing_session(_invalid_uuid_error())
        repo = ArticleRepository(session)

        assert await repo.get_slug_and_title("not-a-uuid", org_id="org-1") is None
        session.execute.assert_not_awaited()

    async def test_list_links_from_source_returns_empty(self) -> None:
        session = _failing_session(_invalid_uuid_error())
        repo = InternalLinkRepository(session)

        assert await repo.list_links_from_source("not-a-uuid") == []
        session.execute.assert_not_awaited()

    async def test_well_formed_id_still_queries(self) -> None:
        session = _failing_session(_invalid_uuid_error())
        repo = ArticleRepository(session)

        with pytest.raises(StoreUnavailableError):
            await repo.get_article("8f14e45f-ceea-467f-a9f6-3b0c3c6f1d2e")

"""Internal linking API router.

REST endpoints for analyzing an organization's link graph, listing orphan
content and linking stats, suggesting links for an article, and applying
links to article content.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from autoblog.core.database import get_session
from autoblog.core.logging import get_logger
from autoblog.repositories.article import ArticleRepository
from autoblog.repositories.internal_link import InternalLinkRepository
from autoblog.schemas.article import ArticleSummary
from autoblog.schemas.internal_link import (
    ApplyLinksRequest,
    ApplyLinksResponse,
    ApplyOutcomeResponse,
    ArticleLinkSuggestionResponse,
    LinkAnalysisResponse,
    LinkingStatsResponse,
    SuggestionSummary,
    TopLinkedArticle,
)
from autoblog.services.internal_linking import InternalLinkingService

logger = get_logger(__name__)

router = APIRouter(tags=["Internal Links"])

# Number of suggestions returned inline with the org-wide analysis
TOP_SUGGESTIONS_IN_RESPONSE = 10


def get_linking_service(
    db: AsyncSession = Depends(get_session),
) -> InternalLinkingService:
    """Build an InternalLinkingService bound to the request's session."""
    return InternalLinkingService(ArticleRepository(db), InternalLinkRepository(db))


@router.post(
    "/orgs/{org_id}/internal-links/analyze",
    response_model=LinkAnalysisResponse,
)
async def analyze_links(
    org_id: str,
    service: InternalLinkingService = Depends(get_linking_service),
) -> LinkAnalysisResponse:
    """Analyze the organization's internal link graph.

    Returns orphan/well-linked counts, the density score and the top
    suggestions. Returns 503 if the store is unreachable.
    """
    result = await service.analyze_internal_links(org_id)

    return LinkAnalysisResponse(
        orphan_count=len(result.orphan_articles),
        well_linked_count=len(result.well_linked_articles),
        suggestions_count=len(result.suggestions),
        link_density_score=result.link_density_score,
        top_suggestions=[
            SuggestionSummary(
                source_id=s.source_article.id,
                source_title=s.source_article.title,
                target_id=s.target_article.id,
                target_title=s.target_article.title,
                anchor=s.suggested_anchor,
                relevance=s.relevance_score,
                type=s.link_type.value,
            )
            for s in result.suggestions[:TOP_SUGGESTIONS_IN_RESPONSE]
        ],
    )


@router.get(
    "/orgs/{org_id}/internal-links/stats",
    response_model=LinkingStatsResponse,
)
async def get_linking_stats(
    org_id: str,
    service: InternalLinkingService = Depends(get_linking_service),
) -> LinkingStatsResponse:
    """Get internal linking KPIs for the dashboard."""
    stats = await service.get_internal_linking_stats(org_id)

    return LinkingStatsResponse(
        total_links=stats.total_links,
        avg_links_per_article=stats.avg_links_per_article,
        orphan_count=stats.orphan_count,
        top_linked_articles=[
            TopLinkedArticle(
                article_id=entry.article.id,
                title=entry.article.title,
                inbound_count=entry.inbound_count,
            )
            for entry in stats.top_linked_articles
        ],
    )


@router.get(
    "/orgs/{org_id}/internal-links/orphans",
    response_model=list[ArticleSummary],
)
async def list_orphan_articles(
    org_id: str,
    service: InternalLinkingService = Depends(get_linking_service),
) -> list[ArticleSummary]:
    """List published articles with no applied inbound links."""
    orphans = await service.detect_orphan_content(org_id)
    return [ArticleSummary.model_validate(a, from_attributes=True) for a in orphans]


@router.get(
    "/articles/{article_id}/link-suggestions",
    response_model=list[ArticleLinkSuggestionResponse],
)
async def get_article_link_suggestions(
    article_id: str,
    service: InternalLinkingService = Depends(get_linking_service),
) -> list[ArticleLinkSuggestionResponse]:
    """Suggest up to 10 outbound links for an article.

    An unknown article yields an empty list.
    """
    suggestions = await service.get_article_link_suggestions(article_id)

    return [
        ArticleLinkSuggestionResponse(
            target_id=s.target_article.id,
            target_title=s.target_article.title,
            anchor=s.suggested_anchor,
            relevance=s.relevance_score,
            type=s.link_type.value,
        )
        for s in suggestions
    ]


@router.post(
    "/articles/{article_id}/apply-links",
    response_model=ApplyLinksResponse,
)
async def apply_links(
    article_id: str,
    body: ApplyLinksRequest,
    service: InternalLinkingService = Depends(get_linking_service),
) -> ApplyLinksResponse:
    """Apply internal links to an article's content.

    A missing source article is reported with success=false rather than an
    error status. Instructions whose target is missing or whose anchor text
    is not found are skipped and reported in `outcomes`.
    """
    result = await service.apply_internal_links(article_id, body.links)

    return ApplyLinksResponse(
        success=result.success,
        applied_count=result.applied_count,
        updated_content=result.updated_content,
        outcomes=[
            ApplyOutcomeResponse(
                target_article_id=r.instruction.target_article_id,
                anchor_text=r.instruction.anchor_text,
                outcome=r.outcome.value,
            )
            for r in result.results
        ],
    )

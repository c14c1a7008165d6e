"""Schemas layer - Pydantic models for store snapshots and API payloads."""

from autoblog.schemas.article import (
    ArticleSnapshot,
    ArticleSummary,
    SlugAndTitle,
    coerce_tags,
)
from autoblog.schemas.internal_link import (
    ApplyLinksRequest,
    ApplyLinksResponse,
    ApplyOutcomeResponse,
    ArticleLinkSuggestionResponse,
    InternalLinkSnapshot,
    LinkAnalysisResponse,
    LinkingStatsResponse,
    LinkInstruction,
    NewInternalLink,
    SuggestionSummary,
    TopLinkedArticle,
)

__all__ = [
    "ApplyLinksRequest",
    "ApplyLinksResponse",
    "ApplyOutcomeResponse",
    "ArticleLinkSuggestionResponse",
    "ArticleSnapshot",
    "ArticleSummary",
    "InternalLinkSnapshot",
    "LinkAnalysisResponse",
    "LinkInstruction",
    "LinkingStatsResponse",
    "NewInternalLink",
    "SlugAndTitle",
    "SuggestionSummary",
    "TopLinkedArticle",
    "coerce_tags",
]

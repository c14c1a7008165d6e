"""Pydantic v2 schemas for the Internal Linking store and API endpoints.

Store-side schemas:
- InternalLinkSnapshot: link row as read from the link store
- NewInternalLink: link row to insert (no self-links)

API schemas:
- LinkInstruction / ApplyLinksRequest / ApplyLinksResponse: apply links to content
- SuggestionSummary / LinkAnalysisResponse: org-wide link analysis
- ArticleLinkSuggestionResponse: per-article suggestions
- TopLinkedArticle / LinkingStatsResponse: dashboard KPIs
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

LinkTypeLiteral = Literal[
    "pillar_to_cluster", "cluster_to_pillar", "related", "contextual"
]
LinkStatusLiteral = Literal["suggested", "applied", "rejected"]
ApplyOutcomeLiteral = Literal[
    "applied", "skipped_not_found", "skipped_no_match", "skipped_self_link"
]


# =============================================================================
# STORE SCHEMAS
# =============================================================================


class InternalLinkSnapshot(BaseModel):
    """Read-only view of an internal link row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="InternalLink UUID")
    source_article_id: str = Field(..., description="Source article UUID")
    target_article_id: str = Field(..., description="Target article UUID")
    anchor_text: str = Field(..., description="Visible link text")
    link_type: str = Field(..., description="Relationship between the articles")
    status: str = Field(..., description="suggested, applied or rejected")
    position_in_content: int | None = Field(
        None, description="Character offset of the link in the source content"
    )
    created_at: datetime | None = Field(None, description="Creation timestamp")


class NewInternalLink(BaseModel):
    """Internal link row to be persisted."""

    source_article_id: str
    target_article_id: str
    anchor_text: str = Field(..., min_length=1)
    link_type: LinkTypeLiteral
    status: LinkStatusLiteral = "applied"
    position_in_content: int | None = None

    @model_validator(mode="after")
    def _reject_self_link(self) -> "NewInternalLink":
        if self.source_article_id == self.target_article_id:
            raise ValueError("An article cannot link to itself")
        return self


# =============================================================================
# APPLY LINKS
# =============================================================================


class LinkInstruction(BaseModel):
    """One link to apply to the source article's content.

    Accepts both snake_case and the camelCase keys sent by the dashboard.
    """

    model_config = ConfigDict(populate_by_name=True)

    target_article_id: str = Field(
        ..., alias="targetArticleId", description="Article to link to"
    )
    anchor_text: str = Field(
        ...,
        alias="anchorText",
        min_length=1,
        description="Text in the source content to turn into the link",
    )
    link_type: LinkTypeLiteral = Field(
        "contextual", alias="linkType", description="Relationship type to record"
    )


class ApplyLinksRequest(BaseModel):
    """Request body for applying internal links to an article."""

    links: list[LinkInstruction] = Field(
        ..., description="Links to apply, in order; later links see earlier edits"
    )


class ApplyOutcomeResponse(BaseModel):
    """Outcome of a single link instruction."""

    target_article_id: str
    anchor_text: str
    outcome: ApplyOutcomeLiteral


class ApplyLinksResponse(BaseModel):
    """Result of applying internal links."""

    success: bool = Field(..., description="False when the source article was not found")
    applied_count: int = Field(..., description="Number of links written into the content")
    updated_content: str = Field(..., description="Final article content")
    outcomes: list[ApplyOutcomeResponse] = Field(
        default_factory=list, description="Per-instruction outcomes, in request order"
    )


# =============================================================================
# ANALYSIS / SUGGESTIONS
# =============================================================================


class SuggestionSummary(BaseModel):
    """Compact suggestion used in the org-wide analysis response."""

    source_id: str
    source_title: str
    target_id: str
    target_title: str
    anchor: str
    relevance: int
    type: LinkTypeLiteral


class LinkAnalysisResponse(BaseModel):
    """Org-wide internal link analysis."""

    orphan_count: int = Field(..., description="Linkable articles with no inbound links")
    well_linked_count: int = Field(..., description="Articles with 3+ inbound links")
    suggestions_count: int = Field(..., description="Total suggestions generated (max 50)")
    link_density_score: int = Field(..., ge=0, le=100, description="Density score 0-100")
    top_suggestions: list[SuggestionSummary] = Field(
        default_factory=list, description="Ten highest-ranked suggestions"
    )


class ArticleLinkSuggestionResponse(BaseModel):
    """Suggested outbound link for a single article."""

    target_id: str
    target_title: str
    anchor: str
    relevance: int
    type: LinkTypeLiteral


# =============================================================================
# STATS
# =============================================================================


class TopLinkedArticle(BaseModel):
    """Published article ranked by inbound applied links."""

    article_id: str
    title: str
    inbound_count: int


class LinkingStatsResponse(BaseModel):
    """Internal linking KPIs for the dashboard."""

    total_links: int
    avg_links_per_article: float
    orphan_count: int
    top_linked_articles: list[TopLinkedArticle] = Field(default_factory=list)

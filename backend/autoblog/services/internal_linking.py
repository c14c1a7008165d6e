"""Internal linking service: link graph analysis, suggestions, and link application.

The analyzer works on one organization's article set at a time and rebuilds
its graph from the stores on every call:
- Graph builder: inbound/outbound adjacency from applied InternalLink rows
- Classifier: orphan (no inbound links) and well-linked (3+ inbound) articles
- Suggestion engine: pillar <-> cluster links plus tag-overlap 'related' links
- Per-article variant: ranked outbound suggestions for a single article
- Link applier: rewrites anchor text occurrences into <a> tags and records links
- Stats: org-wide KPIs (total links, average per article, orphans, top linked)

Stores are injected (ArticleStore / LinkStore), so the pure scoring functions
can be exercised without a database and the service can run against any
store implementation.

The link applier performs a read-modify-write on article content and is not
safe for concurrent calls against the same article; callers must serialize
edits per article.
"""

import html
import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from autoblog.core.config import get_settings
from autoblog.core.logging import get_logger
from autoblog.models.article import LINKABLE_STATUSES, ArticleStatus
from autoblog.models.internal_link import LinkStatus, LinkType
from autoblog.schemas.article import ArticleSnapshot, SlugAndTitle
from autoblog.schemas.internal_link import (
    InternalLinkSnapshot,
    LinkInstruction,
    NewInternalLink,
)

logger = get_logger(__name__)

# Result limits
MAX_ANALYSIS_SUGGESTIONS = 50
MAX_ARTICLE_SUGGESTIONS = 10
TOP_LINKED_LIMIT = 5

# Inbound links needed for an article to count as well linked
WELL_LINKED_THRESHOLD = 3

# Cluster pass scores
PILLAR_TO_CLUSTER_SCORE = 90
CLUSTER_TO_PILLAR_SCORE = 85

# Cross-cluster 'related' scores
RELATED_TAG_OVERLAP_THRESHOLD = 2
RELATED_BASE_SCORE = 50
RELATED_SCORE_PER_TAG = 10
RELATED_MAX_SCORE = 80

# Per-article scores
ARTICLE_BASE_SCORE = 30
ARTICLE_SCORE_PER_TAG = 15
SAME_CLUSTER_BOOST = 30
SAME_CLUSTER_MAX_SCORE = 95
PILLAR_WORD_COUNT_RATIO = 1.3
MIN_RELEVANCE_SCORE = 30
MAX_RELEVANCE_SCORE = 100

# 10% of all possible directed pairs linked scores 100
DENSITY_TARGET_RATIO = 0.1

# Anchor text derived from titles
MAX_ANCHOR_LENGTH = 50
TRUNCATED_ANCHOR_LENGTH = 47

_YEAR_SUFFIX = re.compile(r"\s*\(\d{4}\)\s*$")
_COLON_SUFFIX = re.compile(r":\s*[^:]+$")
_HYPHEN_SUFFIX = re.compile(r"\s*-\s*[^-]+$")
_OPENING_ANCHOR_TAG = re.compile(r"<a[^>]*>\Z", re.IGNORECASE)


# =============================================================================
# STORE INTERFACES
# =============================================================================


class ArticleStore(Protocol):
    """Article queries the analyzer depends on."""

    async def list_articles(
        self, org_id: str, statuses: Sequence[str]
    ) -> list[ArticleSnapshot]: ...

    async def get_article(self, article_id: str) -> ArticleSnapshot | None: ...

    async def get_slug_and_title(
        self, article_id: str, org_id: str | None = None
    ) -> SlugAndTitle | None: ...

    async def update_article_content(
        self, article_id: str, content: str, updated_at: datetime
    ) -> None: ...


class LinkStore(Protocol):
    """Internal link queries the analyzer depends on."""

    async def list_applied_links(self, org_id: str) -> list[InternalLinkSnapshot]: ...

    async def list_links_from_source(
        self, article_id: str
    ) -> list[InternalLinkSnapshot]: ...

    async def insert_link(self, link: NewInternalLink) -> InternalLinkSnapshot: ...


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class LinkSuggestion:
    """A candidate link that is not yet present in the graph."""

    source_article: ArticleSnapshot
    target_article: ArticleSnapshot
    suggested_anchor: str
    relevance_score: int
    link_type: LinkType


@dataclass
class LinkGraph:
    """Directed adjacency built from applied links."""

    outbound: dict[str, set[str]] = field(default_factory=dict)
    inbound: dict[str, set[str]] = field(default_factory=dict)

    def inbound_degree(self, article_id: str) -> int:
        return len(self.inbound.get(article_id, ()))

    def has_link(self, source_id: str, target_id: str) -> bool:
        return target_id in self.outbound.get(source_id, ())


@dataclass
class LinkAnalysisResult:
    """Org-wide link analysis report."""

    orphan_articles: list[ArticleSnapshot]
    well_linked_articles: list[ArticleSnapshot]
    suggestions: list[LinkSuggestion]
    link_density_score: int


class ApplyOutcome(str, Enum):
    """What happened to a single link instruction."""

    APPLIED = "applied"
    SKIPPED_NOT_FOUND = "skipped_not_found"
    SKIPPED_NO_MATCH = "skipped_no_match"
    SKIPPED_SELF_LINK = "skipped_self_link"


@dataclass(frozen=True)
class InstructionResult:
    """Outcome of one link instruction, with the match offset when applied."""

    instruction: LinkInstruction
    outcome: ApplyOutcome
    position: int | None = None


@dataclass
class ApplyLinksResult:
    """Result of applying a batch of link instructions to one article."""

    success: bool
    applied_count: int
    updated_content: str
    results: list[InstructionResult] = field(default_factory=list)


@dataclass(frozen=True)
class LinkedArticleCount:
    """Published article with its applied inbound link count."""

    article: ArticleSnapshot
    inbound_count: int


@dataclass
class LinkingStats:
    """Internal linking KPIs for an organization."""

    total_links: int
    avg_links_per_article: float
    orphan_count: int
    top_linked_articles: list[LinkedArticleCount]


# =============================================================================
# PURE HELPERS
# =============================================================================


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def extract_anchor_from_title(title: str) -> str:
    """Derive link anchor text from an article title.

    Drops a trailing "(2024)"-style year, then a trailing ": subtitle", then a
    trailing " - suffix", and truncates anything over 50 characters.
    """
    anchor = _YEAR_SUFFIX.sub("", title, count=1)
    anchor = _COLON_SUFFIX.sub("", anchor, count=1)
    anchor = _HYPHEN_SUFFIX.sub("", anchor, count=1)
    anchor = anchor.strip()

    if len(anchor) > MAX_ANCHOR_LENGTH:
        anchor = anchor[:TRUNCATED_ANCHOR_LENGTH] + "..."

    return anchor


def tag_overlap(a: ArticleSnapshot, b: ArticleSnapshot) -> int:
    """Number of distinct tags the two articles share."""
    return len(set(a.tags) & set(b.tags))


def build_link_graph(links: Iterable[InternalLinkSnapshot]) -> LinkGraph:
    """Build outbound/inbound adjacency maps from link rows."""
    graph = LinkGraph()
    for link in links:
        graph.outbound.setdefault(link.source_article_id, set()).add(
            link.target_article_id
        )
        graph.inbound.setdefault(link.target_article_id, set()).add(
            link.source_article_id
        )
    return graph


def classify_articles(
    articles: Sequence[ArticleSnapshot], graph: LinkGraph
) -> tuple[list[ArticleSnapshot], list[ArticleSnapshot]]:
    """Split articles into orphans (no inbound) and well-linked (3+ inbound).

    Articles with one or two inbound links appear in neither list.
    """
    orphans = [a for a in articles if graph.inbound_degree(a.id) == 0]
    well_linked = [
        a for a in articles if graph.inbound_degree(a.id) >= WELL_LINKED_THRESHOLD
    ]
    return orphans, well_linked


def calculate_link_density(article_count: int, link_count: int) -> int:
    """Score 0-100 of applied links against all possible directed pairs."""
    total_possible = article_count * (article_count - 1)
    if total_possible <= 0:
        return 0
    score = _round_half_up(link_count / (total_possible * DENSITY_TARGET_RATIO) * 100)
    return min(100, score)


def find_pillar(members: Sequence[ArticleSnapshot]) -> ArticleSnapshot:
    """Longest article in a cluster; the first one wins a tie."""
    return max(members, key=lambda a: a.word_count)


def _without_inbound(
    articles: Sequence[ArticleSnapshot], links: Iterable[InternalLinkSnapshot]
) -> list[ArticleSnapshot]:
    targets = {link.target_article_id for link in links}
    return [a for a in articles if a.id not in targets]


def _group_by_cluster(
    articles: Sequence[ArticleSnapshot],
) -> dict[str, list[ArticleSnapshot]]:
    clusters: dict[str, list[ArticleSnapshot]] = {}
    for article in articles:
        if article.cluster_id:
            clusters.setdefault(article.cluster_id, []).append(article)
    return clusters


def _rank(suggestions: list[LinkSuggestion], limit: int) -> list[LinkSuggestion]:
    # sorted() is stable with reverse=True, so equal scores keep generation order
    ranked = sorted(suggestions, key=lambda s: s.relevance_score, reverse=True)
    return ranked[:limit]


def generate_link_suggestions(
    articles: Sequence[ArticleSnapshot], graph: LinkGraph
) -> list[LinkSuggestion]:
    """Rank candidate links for an org's article set.

    Cluster pass: every non-pillar member gets pillar->member (90) and
    member->pillar (85) unless that applied link already exists.

    Cross-cluster pass: each pair outside a shared cluster, unlinked in both
    directions, sharing 2+ tags gets 'related' links both ways scored
    min(80, 50 + overlap*10).

    Returns at most 50 suggestions, highest score first.
    """
    suggestions: list[LinkSuggestion] = []

    for members in _group_by_cluster(articles).values():
        pillar = find_pillar(members)
        for article in members:
            if article.id == pillar.id:
                continue

            if not graph.has_link(pillar.id, article.id):
                suggestions.append(
                    LinkSuggestion(
                        source_article=pillar,
                        target_article=article,
                        suggested_anchor=extract_anchor_from_title(article.title),
                        relevance_score=PILLAR_TO_CLUSTER_SCORE,
                        link_type=LinkType.PILLAR_TO_CLUSTER,
                    )
                )

            if not graph.has_link(article.id, pillar.id):
                suggestions.append(
                    LinkSuggestion(
                        source_article=article,
                        target_article=pillar,
                        suggested_anchor=extract_anchor_from_title(pillar.title),
                        relevance_score=CLUSTER_TO_PILLAR_SCORE,
                        link_type=LinkType.CLUSTER_TO_PILLAR,
                    )
                )

    for i, first in enumerate(articles):
        for second in articles[i + 1 :]:
            if graph.has_link(first.id, second.id) or graph.has_link(
                second.id, first.id
            ):
                continue
            if first.cluster_id and first.cluster_id == second.cluster_id:
                continue

            overlap = tag_overlap(first, second)
            if overlap < RELATED_TAG_OVERLAP_THRESHOLD:
                continue

            score = min(RELATED_MAX_SCORE, RELATED_BASE_SCORE + overlap * RELATED_SCORE_PER_TAG)
            suggestions.append(
                LinkSuggestion(
                    source_article=first,
                    target_article=second,
                    suggested_anchor=extract_anchor_from_title(second.title),
                    relevance_score=score,
                    link_type=LinkType.RELATED,
                )
            )
            suggestions.append(
                LinkSuggestion(
                    source_article=second,
                    target_article=first,
                    suggested_anchor=extract_anchor_from_title(first.title),
                    relevance_score=score,
                    link_type=LinkType.RELATED,
                )
            )

    return _rank(suggestions, MAX_ANALYSIS_SUGGESTIONS)


def score_article_suggestions(
    source: ArticleSnapshot,
    candidates: Iterable[ArticleSnapshot],
    existing_target_ids: set[str],
) -> list[LinkSuggestion]:
    """Rank outbound link candidates for a single source article.

    Base score is 30 + overlap*15. Same-cluster targets are boosted to
    min(95, base + 30) and typed by word count ratio; otherwise 2+ shared
    tags make a 'related' link and anything else is 'contextual'.

    Returns at most 10 suggestions, highest score first.
    """
    suggestions: list[LinkSuggestion] = []

    for target in candidates:
        if target.id == source.id or target.id in existing_target_ids:
            continue

        overlap = tag_overlap(source, target)
        link_type = LinkType.CONTEXTUAL
        score = ARTICLE_BASE_SCORE + overlap * ARTICLE_SCORE_PER_TAG

        if source.cluster_id and source.cluster_id == target.cluster_id:
            score = min(SAME_CLUSTER_MAX_SCORE, score + SAME_CLUSTER_BOOST)
            if source.word_count > target.word_count * PILLAR_WORD_COUNT_RATIO:
                link_type = LinkType.PILLAR_TO_CLUSTER
            elif target.word_count > source.word_count * PILLAR_WORD_COUNT_RATIO:
                link_type = LinkType.CLUSTER_TO_PILLAR
            else:
                link_type = LinkType.RELATED
        elif overlap >= RELATED_TAG_OVERLAP_THRESHOLD:
            link_type = LinkType.RELATED

        if score < MIN_RELEVANCE_SCORE:
            continue

        suggestions.append(
            LinkSuggestion(
                source_article=source,
                target_article=target,
                suggested_anchor=extract_anchor_from_title(target.title),
                relevance_score=min(MAX_RELEVANCE_SCORE, score),
                link_type=link_type,
            )
        )

    return _rank(suggestions, MAX_ARTICLE_SUGGESTIONS)


def build_link_html(
    target: SlugAndTitle, anchor_text: str, path_prefix: str = "/blog"
) -> str:
    """Build the <a> tag for a link to the target article's blog page."""
    href = f"{path_prefix.rstrip('/')}/{target.slug}"
    return (
        f'<a href="{html.escape(href, quote=True)}" '
        f'title="{html.escape(target.title, quote=True)}">{anchor_text}</a>'
    )


def _follows_opening_anchor(content: str, index: int) -> bool:
    # An opening tag ending at index spans back no further than the previous ">"
    if index == 0 or content[index - 1] != ">":
        return False
    tag_start = content.rfind(">", 0, index - 1) + 1
    return _OPENING_ANCHOR_TAG.search(content, tag_start, index) is not None


def find_anchor_position(content: str, anchor_text: str) -> tuple[int, int] | None:
    """Locate the first linkable occurrence of anchor_text in HTML content.

    The match is whole-word and case-insensitive, must not sit directly
    after an opening <a ...> tag, and must not be followed by </a> before
    the next tag starts (i.e. it is not already link text).

    Returns:
        (start, end) offsets of the match, or None if there is none
    """
    pattern = re.compile(
        rf"\b{re.escape(anchor_text)}\b(?![^<]*</a>)", re.IGNORECASE
    )
    pos = 0
    while True:
        match = pattern.search(content, pos)
        if match is None:
            return None
        if not _follows_opening_anchor(content, match.start()):
            return match.span()
        pos = match.start() + 1


def apply_link_to_content(
    content: str, anchor_text: str, link_html: str
) -> tuple[str, int | None]:
    """Replace the first linkable occurrence of anchor_text with link_html.

    Returns:
        Tuple of (updated_content, match_offset) if applied, or
        (original_content, None) if no linkable occurrence exists.
    """
    span = find_anchor_position(content, anchor_text)
    if span is None:
        return content, None
    start, end = span
    return content[:start] + link_html + content[end:], start


# =============================================================================
# SERVICE
# =============================================================================


class InternalLinkingService:
    """Runs the internal linking analyzer against injected stores."""

    def __init__(
        self,
        article_store: ArticleStore,
        link_store: LinkStore,
        *,
        blog_path_prefix: str | None = None,
    ) -> None:
        self.articles = article_store
        self.links = link_store
        self.blog_path_prefix = (
            blog_path_prefix
            if blog_path_prefix is not None
            else get_settings().blog_path_prefix
        )

    async def analyze_internal_links(self, org_id: str) -> LinkAnalysisResult:
        """Analyze the org's link graph and suggest missing links.

        Raises:
            StoreUnavailableError: If a store cannot be reached
        """
        articles = await self.articles.list_articles(org_id, LINKABLE_STATUSES)
        links = await self.links.list_applied_links(org_id)

        graph = build_link_graph(links)
        orphans, well_linked = classify_articles(articles, graph)
        suggestions = generate_link_suggestions(articles, graph)
        density = calculate_link_density(len(articles), len(links))

        logger.info(
            "Analyzed internal links",
            extra={
                "org_id": org_id,
                "article_count": len(articles),
                "link_count": len(links),
                "orphan_count": len(orphans),
                "well_linked_count": len(well_linked),
                "suggestion_count": len(suggestions),
                "link_density_score": density,
            },
        )

        return LinkAnalysisResult(
            orphan_articles=orphans,
            well_linked_articles=well_linked,
            suggestions=suggestions,
            link_density_score=density,
        )

    async def get_article_link_suggestions(
        self, article_id: str
    ) -> list[LinkSuggestion]:
        """Suggest up to 10 outbound links for one article.

        Returns an empty list if the article does not exist.
        """
        source = await self.articles.get_article(article_id)
        if source is None:
            logger.info(
                "Link suggestions requested for missing article",
                extra={"article_id": article_id},
            )
            return []

        candidates = await self.articles.list_articles(source.org_id, LINKABLE_STATUSES)
        existing = await self.links.list_links_from_source(article_id)
        existing_target_ids = {link.target_article_id for link in existing}

        suggestions = score_article_suggestions(source, candidates, existing_target_ids)

        logger.debug(
            "Generated article link suggestions",
            extra={
                "article_id": article_id,
                "candidate_count": len(candidates),
                "suggestion_count": len(suggestions),
            },
        )
        return suggestions

    async def apply_internal_links(
        self, article_id: str, instructions: Sequence[LinkInstruction]
    ) -> ApplyLinksResult:
        """Write links into an article's content, one instruction at a time.

        Each instruction sees the content produced by the previous ones. A
        missing target or an anchor that cannot be found skips only that
        instruction. Content is persisted once, and only if a link was applied.

        Returns:
            ApplyLinksResult with success=False if the article does not exist
        """
        source = await self.articles.get_article(article_id)
        if source is None:
            logger.warning(
                "Cannot apply links, article not found",
                extra={"article_id": article_id},
            )
            return ApplyLinksResult(success=False, applied_count=0, updated_content="")

        content = source.content
        results: list[InstructionResult] = []
        for instruction in instructions:
            content, result = await self._apply_instruction(source, content, instruction)
            results.append(result)

        applied_count = sum(1 for r in results if r.outcome is ApplyOutcome.APPLIED)
        if applied_count > 0:
            await self.articles.update_article_content(
                article_id, content, datetime.now(UTC)
            )

        logger.info(
            "Applied internal links",
            extra={
                "article_id": article_id,
                "requested_count": len(instructions),
                "applied_count": applied_count,
            },
        )

        return ApplyLinksResult(
            success=True,
            applied_count=applied_count,
            updated_content=content,
            results=results,
        )

    async def _apply_instruction(
        self,
        source: ArticleSnapshot,
        content: str,
        instruction: LinkInstruction,
    ) -> tuple[str, InstructionResult]:
        if instruction.target_article_id == source.id:
            return content, InstructionResult(instruction, ApplyOutcome.SKIPPED_SELF_LINK)

        target = await self.articles.get_slug_and_title(
            instruction.target_article_id, org_id=source.org_id
        )
        if target is None:
            logger.debug(
                "Link target not found, skipping",
                extra={
                    "article_id": source.id,
                    "target_article_id": instruction.target_article_id,
                },
            )
            return content, InstructionResult(instruction, ApplyOutcome.SKIPPED_NOT_FOUND)

        link_html = build_link_html(target, instruction.anchor_text, self.blog_path_prefix)
        updated, position = apply_link_to_content(content, instruction.anchor_text, link_html)
        if position is None:
            logger.debug(
                "Anchor text not found in content, skipping",
                extra={
                    "article_id": source.id,
                    "anchor_text": instruction.anchor_text,
                },
            )
            return content, InstructionResult(instruction, ApplyOutcome.SKIPPED_NO_MATCH)

        await self.links.insert_link(
            NewInternalLink(
                source_article_id=source.id,
                target_article_id=instruction.target_article_id,
                anchor_text=instruction.anchor_text,
                link_type=instruction.link_type,
                status=LinkStatus.APPLIED.value,
                position_in_content=position,
            )
        )
        return updated, InstructionResult(instruction, ApplyOutcome.APPLIED, position)

    async def detect_orphan_content(self, org_id: str) -> list[ArticleSnapshot]:
        """Published articles with no applied inbound links, in store order."""
        published = await self.articles.list_articles(
            org_id, [ArticleStatus.PUBLISHED.value]
        )
        links = await self.links.list_applied_links(org_id)
        return _without_inbound(published, links)

    async def get_internal_linking_stats(self, org_id: str) -> LinkingStats:
        """Compute dashboard linking KPIs for an organization."""
        published = await self.articles.list_articles(
            org_id, [ArticleStatus.PUBLISHED.value]
        )
        links = await self.links.list_applied_links(org_id)
        orphans = _without_inbound(published, links)

        total_links = len(links)
        avg_links = _round_half_up(total_links / max(1, len(published)) * 10) / 10

        inbound = Counter(link.target_article_id for link in links)
        ranked = sorted(published, key=lambda a: inbound[a.id], reverse=True)
        top_linked = [
            LinkedArticleCount(article=a, inbound_count=inbound[a.id])
            for a in ranked[:TOP_LINKED_LIMIT]
        ]

        return LinkingStats(
            total_links=total_links,
            avg_links_per_article=avg_links,
            orphan_count=len(orphans),
            top_linked_articles=top_linked,
        )

"""Services layer - Business logic.

Services sit between the API routers and the repositories.
"""

from autoblog.services.internal_linking import (
    ApplyLinksResult,
    ApplyOutcome,
    InternalLinkingService,
    LinkAnalysisResult,
    LinkingStats,
    LinkSuggestion,
)

__all__ = [
    "ApplyLinksResult",
    "ApplyOutcome",
    "InternalLinkingService",
    "LinkAnalysisResult",
    "LinkSuggestion",
    "LinkingStats",
]

"""Models layer - SQLAlchemy ORM models.

Models define the database schema and relationships.
All models inherit from the Base class defined in core.database.
"""

from autoblog.core.database import Base
from autoblog.models.article import LINKABLE_STATUSES, Article, ArticleStatus
from autoblog.models.internal_link import InternalLink, LinkStatus, LinkType

__all__ = [
    "Base",
    "Article",
    "ArticleStatus",
    "InternalLink",
    "LINKABLE_STATUSES",
    "LinkStatus",
    "LinkType",
]

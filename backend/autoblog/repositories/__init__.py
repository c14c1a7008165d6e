"""Repositories layer - Data access and persistence.

Repositories handle all database operations using SQLAlchemy.
They abstract the database implementation from the service layer.
"""

from autoblog.repositories.article import ArticleRepository
from autoblog.repositories.base import StoreError, StoreUnavailableError
from autoblog.repositories.internal_link import InternalLinkRepository

__all__ = [
    "ArticleRepository",
    "InternalLinkRepository",
    "StoreError",
    "StoreUnavailableError",
]

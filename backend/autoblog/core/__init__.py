"""Core utilities and configuration."""

from autoblog.core.config import Settings, get_settings
from autoblog.core.database import Base, db_manager, get_session
from autoblog.core.logging import db_logger, get_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "db_manager",
    "get_session",
    # Logging
    "db_logger",
    "get_logger",
    "setup_logging",
]

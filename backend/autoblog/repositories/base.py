"""Shared repository plumbing: timing, logging and store error mapping.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with entity IDs
- Log unreachable stores at ERROR level and raise StoreUnavailableError
- Log other database errors with table and operation context, then re-raise
- Add timing logs for operations >1 second
"""

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from autoblog.core.logging import db_logger, get_logger

logger = get_logger(__name__)

# Errors meaning the backing store could not be reached (connection refused,
# dropped connection, pool exhausted, command timeout).
STORE_UNAVAILABLE_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    OSError,
)


def is_valid_id(value: str) -> bool:
    """Check that an id can be bound to a UUID primary key column.

    Malformed ids can never match a row, and binding one to a UUID column
    fails in the driver before the query is sent.
    """
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


class StoreError(Exception):
    """Base exception for store access errors."""

    pass


class StoreUnavailableError(StoreError):
    """Raised when a query or write cannot reach its backing store."""

    def __init__(self, table: str, operation: str):
        self.table = table
        self.operation = operation
        super().__init__(f"Store unavailable during {operation} on {table}")


class BaseRepository:
    """Base class for repositories bound to one AsyncSession."""

    TABLE_NAME = ""
    SLOW_OPERATION_THRESHOLD_MS = 1000  # 1 second

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session for database operations
        """
        self.session = session

    @asynccontextmanager
    async def _operation(self, operation: str, **context: Any) -> AsyncIterator[None]:
        """Wrap a store call with timing, logging and error mapping.

        Raises:
            StoreUnavailableError: If the store could not be reached
            SQLAlchemyError: On any other database error
        """
        start_time = time.monotonic()
        logger.debug(
            f"{operation} started",
            extra={"table": self.TABLE_NAME, **context},
        )

        try:
            yield
        except STORE_UNAVAILABLE_ERRORS as e:
            db_logger.store_unavailable(e, table=self.TABLE_NAME, operation=operation)
            raise StoreUnavailableError(self.TABLE_NAME, operation) from e
        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"{operation} {context}",
            )
            raise

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.debug(
            f"{operation} completed",
            extra={
                "table": self.TABLE_NAME,
                "duration_ms": round(duration_ms, 2),
                **context,
            },
        )

        if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
            db_logger.slow_query(
                query=f"{operation} on {self.TABLE_NAME}",
                duration_ms=duration_ms,
                table=self.TABLE_NAME,
            )

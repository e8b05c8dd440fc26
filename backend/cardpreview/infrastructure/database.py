"""Database Session Manager — async read-only sessions over the upstream card store.

Invariants:
    - Sessions are read-only: never committed, always closed
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    OperationalError, DBAPIError, SQLAlchemyError, TimeoutError as PoolTimeoutError,
)
from sqlalchemy import text

from cardpreview.core.errors import DatabaseError

logger = logging.getLogger(__name__)


def _operation_for(exc: SQLAlchemyError) -> tuple[str, str]:
    """Map a SQLAlchemy exception to (operation, safe message)."""
    if isinstance(exc, PoolTimeoutError):
        return "connect", "Connection pool exhausted"
    if isinstance(exc, OperationalError):
        return "execute", "Connection or operational error"
    if isinstance(exc, DBAPIError):
        return "query", "Database driver error"
    return "unknown", "Database operation failed"


class DatabaseSessionManager:
    """Manages async database sessions with pooling and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 10, max_overflow: int = 5,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a read-only session; store failures surface as DatabaseError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            operation, message = _operation_for(e)
            logger.error(f"DB {operation} error: {e}")
            raise DatabaseError(message, operation) from e
        finally:
            await session.rollback()
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness check)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session

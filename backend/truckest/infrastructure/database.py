"""Database Session Manager — lazily-initialized async connection pool with rollback and health checks.

Invariants:
    - At most one DatabaseSessionManager per process (module-level singleton)
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - An unusable DATABASE_URL (missing driver, bad URL) means "no database":
      get_db raises DatabaseUnavailableError (501), optional callers get None
    - Same for a configured server that refuses connections: the first
      connection is checked out before the route runs

Design Decisions:
    - Lazy init on first use: the API still serves static catalogue data and
      VIN lookups when no database is configured
    - expire_on_commit=False: prevents lazy-load issues in async context
    - SQLAlchemy errors are re-raised untouched; the global handler maps them
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from truckest.config import get_settings
from truckest.core.errors import DatabaseUnavailableError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error, transaction rolled back: {e}")
            raise
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized lazily, or explicitly via init_db)
db_manager: DatabaseSessionManager | None = None
_init_failed = False


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager, _init_failed
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    _init_failed = False
    return db_manager


def get_db_manager() -> DatabaseSessionManager | None:
    """Return the process-wide manager, creating it from settings on first use."""
    global _init_failed
    if db_manager is not None:
        return db_manager
    if _init_failed:
        return None
    settings = get_settings()
    if not settings.database_url:
        _init_failed = True
        return None
    try:
        return init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    except (ArgumentError, NoSuchModuleError, ImportError) as e:
        logger.error(f"Database unavailable, running without persistence: {e}")
        _init_failed = True
        return None


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def _connect(session: AsyncSession) -> bool:
    """Check out a connection up front so an unreachable server is caught here."""
    try:
        await session.connection()
        return True
    except (OSError, SQLAlchemyError) as e:
        logger.error(f"Database unreachable: {e}")
        return False


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions. 501 when no database."""
    manager = get_db_manager()
    if manager is None:
        raise DatabaseUnavailableError()
    async with manager.session() as session:
        if not await _connect(session):
            raise DatabaseUnavailableError()
        yield session


async def get_optional_db() -> AsyncGenerator[AsyncSession | None, None]:
    """FastAPI dependency for routes that degrade gracefully without a database."""
    manager = get_db_manager()
    if manager is None:
        yield None
        return
    async with manager.session() as session:
        if not await _connect(session):
            yield None
            return
        yield session

"""Standalone Session Factory — async sessions outside the FastAPI request cycle.

Invariants:
    - Caller owns the returned engine and must dispose it
    - Meant for scripts (truckest.seed) and migrations, not for request handling
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def create_session_factory(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an engine and a session factory bound to it."""
    engine = create_async_engine(database_url, echo=False)
    return engine, async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

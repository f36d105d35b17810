"""Database configuration and session management.

Provides the async SQLAlchemy engine and session factory used by the
SQL document store. The engine is created on first use so that the
in-memory backend never needs a database driver.
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from storefront.infrastructure.config import settings

# Base class for models
Base = declarative_base()


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Get (or create) the async engine for a database URL.

    Args:
        database_url: Database URL, defaults to the configured one.

    Returns:
        Cached AsyncEngine.
    """
    return create_async_engine(
        database_url or settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


def get_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Build a session factory bound to an engine.

    Args:
        engine: Engine to bind, defaults to the configured one.

    Returns:
        Session factory.
    """
    return async_sessionmaker(
        engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create database tables if they don't exist."""
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


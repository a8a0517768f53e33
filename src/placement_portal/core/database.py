"""
Database Configuration

Async SQLAlchemy engine and session factory.

There is no module-level engine: the engine is created once in the
application lifespan, stored on ``app.state`` and handed explicitly to the
components that need it (request sessions through ``get_db``, background
jobs at registration time).
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from placement_portal.core.config import Settings
from placement_portal.core.errors import FatalConfigError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide async engine (connection pool)."""
    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine, create_tables: bool = False) -> None:
    """
    Verify the database is reachable.

    Called on application startup. In development the tables are created
    directly from the models; other environments rely on Alembic revisions.

    Raises:
        FatalConfigError: If the database cannot be reached
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_tables:
                # Import models so they register on Base.metadata
                from placement_portal.modules import models  # noqa: F401

                await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        raise FatalConfigError(f"Cannot reach database: {e}") from e


async def close_db(engine: AsyncEngine | None) -> None:
    """Dispose of the connection pool."""
    if engine is not None:
        await engine.dispose()
        logger.info("Database connection pool closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Usage:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        yield session

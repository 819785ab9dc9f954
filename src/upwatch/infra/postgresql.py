"""Database engine and session management.

The engine and its pool are process-wide: created once in the application
lifespan and disposed at shutdown. Request handlers receive their own
``AsyncSession`` through ``get_session``.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from upwatch.app.config import get_settings
from upwatch.core.logging_schema import LogEvent

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    """Pool options per backend (SQLite shares one connection)."""
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    settings = get_settings()
    return {
        "pool_size": settings.database.pool_size,
        "max_overflow": settings.database.max_overflow,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


async def init_db(
    database_url: str | None = None, create_tables: bool = False
) -> AsyncEngine:
    """Initialize the engine and session factory.

    Args:
        database_url: Override for ``DATABASE_URL`` (used by tests)
        create_tables: Create tables from SQLModel metadata. Production
            schemas are managed by Alembic, so this defaults to False.
    """
    global _engine, _session_factory

    settings = get_settings()
    url = database_url or settings.database.url

    _engine = create_async_engine(
        url, echo=settings.database.echo, **_engine_options(url)
    )
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    try:
        async with _engine.begin() as conn:
            if create_tables:
                await conn.run_sync(SQLModel.metadata.create_all)
            await conn.execute(text("SELECT 1"))
        logger.info(
            "Database connected",
            extra={"event": LogEvent.DB_CONNECTED, "database": url.split("@")[-1]},
        )
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={
                "event": LogEvent.DB_ERROR,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        )
        raise

    return _engine


async def close_db() -> None:
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with get_session_factory()() as session:
        yield session


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run the enclosed statements as one all-or-nothing unit.

    Commits when the block exits normally. Any exception rolls back every
    statement issued inside the block and is re-raised unchanged.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise

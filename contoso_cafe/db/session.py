"""Database engine and session management.

Provides async database connections using SQLModel and aiosqlite.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from contoso_cafe.config import get_settings

# Engine created lazily on first use
_engine: AsyncEngine | None = None


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, making sure a SQLite file's directory exists."""
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        db_path = database_url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(database_url, echo=echo, future=True)


def get_engine() -> AsyncEngine:
    """Get or create the application's async database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine_for(settings.database_url, echo=settings.debug)
    return _engine


def get_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """Get async session factory."""
    return async_sessionmaker(
        engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables.

    Called during application startup when the sql storage backend is used.
    """
    # Import models to register them with SQLModel
    from contoso_cafe.db import models  # noqa: F401

    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db() -> None:
    """Close database connections.

    Called during application shutdown.
    """
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


@asynccontextmanager
async def get_session_context(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Context manager for an async session that commits on success.

    Usage:
        async with get_session_context() as session:
            ...
    """
    async_session = get_session_factory(engine)
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

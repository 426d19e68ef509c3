"""Database configuration and session management."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from sdrs.config.settings import Environment, Settings, get_settings
from sdrs.db.models.base import Base

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create an async engine configured from settings.

    Pool sizing only applies to server databases; tests run without pooling.
    """
    kwargs: dict[str, Any] = {"echo": settings.DEBUG}
    if settings.ENVIRONMENT == Environment.TEST:
        kwargs["poolclass"] = NullPool
    elif not settings.is_sqlite:
        kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
        kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
    return create_async_engine(settings.DATABASE_URL, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine() -> AsyncEngine:
    """Get the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = create_engine_from_settings(get_settings())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the process-wide session factory, creating it on first use."""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
    return _session_factory


async def init_db(create_schema: bool = False) -> None:
    """Initialize the database connection pool.

    Called during application startup to verify connectivity before
    accepting requests.

    Args:
        create_schema: Create missing tables from model metadata. Only meant
            for local SQLite databases; other deployments run the migrations.
    """
    async with get_engine().begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_schema:
            await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections and forget the cached engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def configure_db(settings: Settings) -> None:
    """Build the process-wide engine and session factory from explicit settings.

    Replaces any engine created earlier without disposing it; call close_db()
    first when reconfiguring a running process.
    """
    global _engine, _session_factory
    _engine = create_engine_from_settings(settings)
    _session_factory = create_session_factory(_engine)

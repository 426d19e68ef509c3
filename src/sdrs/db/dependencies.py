"""FastAPI dependencies for database access."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sdrs.db.config import get_session_factory


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency returning the session factory DAOs open their sessions from.

    Tests override this to point DAOs at an in-memory database.
    """
    return get_session_factory()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to inject a request-scoped database session.

    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session_factory()() as session:
        yield session

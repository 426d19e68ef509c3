"""Pytest fixtures for SDRS tests."""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from sdrs.config.settings import Environment, Settings
from sdrs.db.models.base import Base
from sdrs.db.models.retention_rule import RetentionRule, RetentionRuleType
from sdrs.db.repositories.retention_rule import RetentionRuleRepository


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    Tests that call setup_logging() modify global state; this keeps them
    from leaking into other tests.
    """
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests."""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ENVIRONMENT=Environment.TEST,
        DEBUG=True,
        log_level="DEBUG",
    )


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test.

    StaticPool keeps every session on the same connection so they all see
    the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def rule_dao(session_factory: async_sessionmaker[AsyncSession]) -> RetentionRuleRepository:
    """Retention rule DAO on the test database."""
    return RetentionRuleRepository(session_factory)


RuleFactory = Callable[..., Awaitable[RetentionRule]]


@pytest.fixture
def make_rule(session_factory: async_sessionmaker[AsyncSession]) -> RuleFactory:
    """Insert a retention rule directly, bypassing the DAO."""

    async def _make_rule(
        project_id: str = "project-a",
        data_storage_name: str | None = "gs://bucket-a",
        rule_type: RetentionRuleType = RetentionRuleType.DATASET,
        is_active: bool = True,
        retention_period_in_days: int = 30,
        dataset_name: str | None = "dataset",
    ) -> RetentionRule:
        rule = RetentionRule(
            project_id=project_id,
            data_storage_name=data_storage_name,
            type=rule_type.value,
            is_active=is_active,
            retention_period_in_days=retention_period_in_days,
            dataset_name=dataset_name,
            version=1,
        )
        async with session_factory() as session:
            session.add(rule)
            await session.commit()
            await session.refresh(rule)
        return rule

    return _make_rule


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def test_app(
    test_settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """FastAPI application wired to the test database."""
    from sdrs.api.app import create_app
    from sdrs.db.dependencies import get_db, get_db_session_factory

    app = create_app(settings=test_settings)

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session_factory] = lambda: session_factory
    app.dependency_overrides[get_db] = _get_db
    return app


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client calling the test application in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client

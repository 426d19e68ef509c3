"""FastAPI dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sdrs.config.settings import Settings, get_settings
from sdrs.db.dependencies import get_db, get_db_session_factory
from sdrs.db.repositories.protocol import RetentionRuleDao
from sdrs.db.repositories.retention_rule import RetentionRuleRepository

__all__ = [
    "get_app_settings",
    "get_db",
    "get_retention_rule_dao",
]


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_retention_rule_dao(
    session_factory: Annotated[
        async_sessionmaker[AsyncSession], Depends(get_db_session_factory)
    ],
) -> RetentionRuleDao:
    """Retention rule DAO bound to the application's session factory."""
    return RetentionRuleRepository(session_factory)

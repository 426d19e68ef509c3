"""Health check endpoints."""

import time
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sdrs.api.schemas.health import (
    ComponentHealth,
    HealthDetailResponse,
    HealthResponse,
    HealthStatus,
)
from sdrs.db.dependencies import get_db

router = APIRouter(tags=["health"])

APP_VERSION = "0.1.0"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Liveness check; 200 whenever the application is running."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=APP_VERSION,
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/health/db",
    response_model=HealthDetailResponse,
    summary="Database health check",
)
async def health_db(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HealthDetailResponse:
    """Database connectivity check with latency."""
    db_health = await _check_database(db)
    return HealthDetailResponse(
        status=db_health.status,
        version=APP_VERSION,
        timestamp=datetime.now(UTC),
        database=db_health,
    )


async def _check_database(db: AsyncSession) -> ComponentHealth:
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Database connection failed: {str(e)[:100]}",
            latency_ms=round(latency_ms, 2),
        )

    latency_ms = (time.perf_counter() - start) * 1000
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Database connection successful",
        latency_ms=round(latency_ms, 2),
    )

"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from sdrs.api.middleware import (
    CorrelationRequestMiddleware,
    CorrelationResponseMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from sdrs.api.routers import health_router, v1_router
from sdrs.api.routers.health import APP_VERSION
from sdrs.config.settings import Environment, Settings, get_settings
from sdrs.config.validation import validate_or_raise
from sdrs.core.logging import setup_logging

logger = structlog.get_logger("sdrs.api")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application

    Example:
        # Run with uvicorn
        uvicorn sdrs.api.app:create_app --factory
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="SDRS API",
        description="Storage data retention rule service",
        version=APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_lifespan,
    )

    app.state.settings = settings

    _configure_middleware(app)
    _configure_routers(app)

    return app


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager: logging, config checks and database pool."""
    from sdrs.db.config import close_db, configure_db, init_db

    settings: Settings = app.state.settings

    setup_logging(
        log_level=settings.log_level,
        json_format=settings.ENVIRONMENT == Environment.PRODUCTION,
        environment=settings.ENVIRONMENT,
    )
    validate_or_raise(settings)
    logger.info("Starting SDRS API...", environment=settings.ENVIRONMENT.value)

    configure_db(settings)
    await init_db(
        create_schema=settings.is_sqlite and settings.ENVIRONMENT != Environment.PRODUCTION
    )
    logger.info("Database connection pool initialized")

    try:
        yield
    finally:
        logger.info("Shutting down SDRS API...")
        await close_db()
        logger.info("Database connections closed")


def _configure_middleware(app: FastAPI) -> None:
    """Configure middleware stack.

    Middleware order (outermost to innermost execution):
    1. CorrelationResponseMiddleware - Adds correlation-uuid header, including on error responses
    2. CorrelationRequestMiddleware - Stashes the correlation UUID and sets RequestContext
    3. RequestLoggingMiddleware - Logs every request with its correlation id
    4. ErrorHandlingMiddleware - Converts exceptions to HTTP responses

    Starlette runs the last added middleware outermost, so they are added in
    reverse order.
    """
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationRequestMiddleware)
    app.add_middleware(CorrelationResponseMiddleware)


def _configure_routers(app: FastAPI) -> None:
    """Configure API routers."""
    app.include_router(health_router)
    app.include_router(v1_router)


# Usage: uvicorn sdrs.api.app:app
app = create_app()

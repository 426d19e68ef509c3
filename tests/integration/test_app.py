"""Integration tests for the application factory."""

import json
import logging

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from sdrs.api.app import create_app
from sdrs.api.middleware import (
    CorrelationRequestMiddleware,
    CorrelationResponseMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from sdrs.config.settings import Environment, Settings


class TestCreateApp:
    """Tests for create_app()."""

    def test_stores_settings_on_state(self, test_settings: Settings):
        """Test the settings passed in are exposed on app.state."""
        app = create_app(settings=test_settings)

        assert app.state.settings is test_settings

    def test_middleware_order(self, test_settings: Settings):
        """Test the response filter wraps every other middleware."""
        app = create_app(settings=test_settings)

        classes = [m.cls for m in app.user_middleware]
        assert classes == [
            CorrelationResponseMiddleware,
            CorrelationRequestMiddleware,
            RequestLoggingMiddleware,
            ErrorHandlingMiddleware,
        ]

    def test_routes_registered(self, test_settings: Settings):
        """Test health and rule routes are mounted."""
        app = create_app(settings=test_settings)

        paths = {route.path for route in app.routes}
        assert "/health" in paths
        assert "/health/db" in paths
        assert "/v1/retention-rules" in paths
        assert "/v1/retention-rules/projects/{project_id}/datasets" in paths


@pytest.mark.asyncio
class TestApiDocs:
    """OpenAPI docs are only served in debug mode."""

    async def test_docs_enabled_in_debug(self, test_settings: Settings):
        app = create_app(settings=test_settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/openapi.json")

        assert response.status_code == 200

    async def test_docs_disabled_without_debug(self):
        settings = Settings(
            DATABASE_URL="sqlite+aiosqlite:///:memory:",
            ENVIRONMENT=Environment.TEST,
            DEBUG=False,
        )
        app = create_app(settings=settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/openapi.json")

        assert response.status_code == 404


@pytest.mark.asyncio
class TestLifespan:
    """Startup configures the process from the app's own settings."""

    async def test_logging_follows_app_settings(self):
        """Test log level and renderer come from the settings passed to create_app."""
        settings = Settings(
            DATABASE_URL="sqlite+aiosqlite:///:memory:",
            ENVIRONMENT=Environment.PRODUCTION,
            log_level="WARNING",
        )
        app = create_app(settings=settings)

        async with app.router.lifespan_context(app):
            root = logging.getLogger()
            formatter = root.handlers[0].formatter

            assert root.level == logging.WARNING
            assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)

    async def test_entries_tagged_with_app_environment(self, capsys):
        """Test log entries carry the environment of the app's settings."""
        settings = Settings(
            DATABASE_URL="sqlite+aiosqlite:///:memory:",
            ENVIRONMENT=Environment.PRODUCTION,
            log_level="INFO",
        )
        app = create_app(settings=settings)

        async with app.router.lifespan_context(app):
            structlog.get_logger("sdrs.test").info("started_in_lifespan")

        lines = [
            json.loads(line)
            for line in capsys.readouterr().out.splitlines()
            if "started_in_lifespan" in line
        ]
        assert lines[0]["environment"] == "production"

"""Error handling middleware for mapping exceptions to HTTP responses."""

from datetime import UTC, datetime
from typing import Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from sdrs.api.middleware.correlation import get_correlation_uuid
from sdrs.api.schemas.errors import APIError, ErrorCode
from sdrs.config.settings import get_settings
from sdrs.core.exceptions import (
    ContextNotSetError,
    DuplicateRuleError,
    MultipleRecordsFoundError,
    RecordNotFoundError,
)

logger = structlog.get_logger("sdrs.api.errors")


# Exception to HTTP status/error code mapping
# Format: Exception -> (status_code, error_code)
EXCEPTION_MAP: dict[type[Exception], tuple[int, str]] = {
    RecordNotFoundError: (404, ErrorCode.NOT_FOUND.value),
    DuplicateRuleError: (409, ErrorCode.DUPLICATE_RULE.value),
    MultipleRecordsFoundError: (409, ErrorCode.MULTIPLE_RECORDS.value),
    ValidationError: (422, ErrorCode.VALIDATION_ERROR.value),
    ContextNotSetError: (500, ErrorCode.INTERNAL_ERROR.value),
}


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware that catches exceptions and returns standardized error responses.

    Maps domain exceptions to HTTP status codes and formats all errors using
    the APIError schema.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and handle any exceptions."""
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert exception to JSON error response."""
        status_code, error_code, message, details = self._map_exception(exc)

        if status_code >= 500:
            logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
        else:
            logger.warning("request_failed", error_code=error_code, detail=message)

        error = APIError(
            error_code=error_code,
            message=message,
            details=details,
            correlation_uuid=get_correlation_uuid(request) or "unknown",
            timestamp=datetime.now(UTC),
        )

        return JSONResponse(
            status_code=status_code,
            content=error.model_dump(mode="json"),
        )

    def _map_exception(
        self, exc: Exception
    ) -> tuple[int, str, str, dict | None]:
        """Map exception to (status_code, error_code, message, details)."""
        for exc_type, (status_code, error_code) in EXCEPTION_MAP.items():
            if isinstance(exc, exc_type):
                message, details = self._describe(exc)
                return status_code, error_code, message, details

        return (
            500,
            ErrorCode.INTERNAL_ERROR.value,
            "Internal server error",
            {"type": type(exc).__name__} if get_settings().DEBUG else None,
        )

    def _describe(self, exc: Exception) -> tuple[str, dict | None]:
        """Client-facing message and details for a mapped exception."""
        if isinstance(exc, RecordNotFoundError):
            return str(exc), {"model": exc.model, "key": str(exc.key)}

        if isinstance(exc, DuplicateRuleError):
            return str(exc), {
                "project_id": exc.project_id,
                "data_storage_name": exc.data_storage_name,
                "type": exc.rule_type,
            }

        if isinstance(exc, MultipleRecordsFoundError):
            return str(exc), {"model": exc.model}

        if isinstance(exc, ValidationError):
            return "Request validation failed", {
                "errors": exc.errors(include_url=False, include_context=False)
            }

        if isinstance(exc, ContextNotSetError):
            return "Internal server error: context not initialized", None

        return str(exc), None

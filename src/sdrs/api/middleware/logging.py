"""Request logging middleware."""

import time
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sdrs.api.middleware.correlation import get_correlation_uuid
from sdrs.core.logging import log_request_end

logger = structlog.get_logger("sdrs.api.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one structured line per HTTP request.

    5xx responses are logged at error level, 4xx at warning, the rest at info.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and log the response."""
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        log_request_end(
            logger,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            correlation_id=get_correlation_uuid(request),
            client_ip=self._get_client_ip(request),
        )
        return response

    def _get_client_ip(self, request: Request) -> str | None:
        """Extract client IP from request, considering proxy headers."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First IP in the chain is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return None

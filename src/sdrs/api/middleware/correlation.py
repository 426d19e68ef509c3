"""Correlation id propagation between requests, logs and responses.

Two filters cooperate through the request state:

- CorrelationRequestMiddleware stores a correlation UUID on the request under
  ``ContextProperty.CORRELATION_UUID`` and enters a RequestContext so log
  entries emitted while handling the request carry it.
- CorrelationResponseMiddleware copies that value into the ``correlation-uuid``
  response header.
"""

from typing import Callable
from uuid import UUID

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sdrs.core.context import ContextProperty, create_context, request_context
from sdrs.core.logging import LogContext

CORRELATION_HEADER = "correlation-uuid"


def get_correlation_uuid(request: Request) -> str | None:
    """Read the correlation value stashed on the request, if any."""
    value = getattr(request.state, ContextProperty.CORRELATION_UUID.value, None)
    return None if value is None else str(value)


def add_correlation_header(request: Request, response: Response) -> Response:
    """Append the request's correlation value to the response headers.

    The header is always added; it is empty when no value was stashed.
    """
    response.headers.append(CORRELATION_HEADER, get_correlation_uuid(request) or "")
    return response


class CorrelationRequestMiddleware(BaseHTTPMiddleware):
    """Stashes a correlation UUID on every inbound request.

    An incoming ``correlation-uuid`` header is reused when it holds a valid
    UUID, so callers can correlate across services; otherwise a new UUID4 is
    generated.

    Sets:
        request.state.correlation_uuid: The correlation UUID (as a string)
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request within a RequestContext."""
        ctx = create_context(
            correlation_id=self._parse_incoming(request.headers.get(CORRELATION_HEADER)),
            method=request.method,
            path=request.url.path,
        )
        correlation_uuid = str(ctx.correlation_id)
        setattr(request.state, ContextProperty.CORRELATION_UUID.value, correlation_uuid)

        with request_context(ctx), LogContext(correlation_id=correlation_uuid):
            return await call_next(request)

    def _parse_incoming(self, value: str | None) -> UUID | None:
        """Parse a caller-supplied correlation id, ignoring malformed ones."""
        if not value:
            return None
        try:
            return UUID(value.strip())
        except ValueError:
            return None


class CorrelationResponseMiddleware(BaseHTTPMiddleware):
    """Includes the correlation-uuid in the response headers."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Add the correlation-uuid to the outgoing response."""
        response = await call_next(request)
        return add_correlation_header(request, response)

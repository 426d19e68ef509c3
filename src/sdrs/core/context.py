"""Request context propagated through the request lifecycle.

The correlation identifier of the current request lives in a ContextVar so
that loggers and services can reach it without threading it through every
call.

Usage:
    from sdrs.core.context import create_context, request_context, get_current_context

    ctx = create_context(method="GET", path="/v1/retention-rules")

    with request_context(ctx):
        current = get_current_context()
        logger.info("handling", correlation_id=str(current.correlation_id))
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from sdrs.core.exceptions import ContextNotSetError


class ContextProperty(str, Enum):
    """Well-known keys stored on the request state by the correlation filters."""

    CORRELATION_UUID = "correlation_uuid"


class RequestContext(BaseModel):
    """Context for a single request/operation."""

    correlation_id: UUID = Field(default_factory=uuid4)
    method: str | None = None
    path: str | None = None
    initiated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}


# =============================================================================
# Context Variable Management
# =============================================================================

_request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def get_current_context() -> RequestContext:
    """Get the current request context.

    Raises:
        ContextNotSetError: If no context is set in the current execution context
    """
    ctx = _request_context.get()
    if ctx is None:
        raise ContextNotSetError(
            "No request context is set. Use request_context() context manager."
        )
    return ctx


def get_current_context_or_none() -> RequestContext | None:
    """Get the current request context, or None if not set."""
    return _request_context.get()


def set_context(ctx: RequestContext) -> Token[RequestContext | None]:
    """Set the request context and return a token for restoration.

    This is a low-level API. Prefer using the request_context() context manager.
    """
    return _request_context.set(ctx)


def reset_context(token: Token[RequestContext | None]) -> None:
    """Reset the context to its previous value using a token."""
    _request_context.reset(token)


@contextmanager
def request_context(ctx: RequestContext):
    """Context manager for setting request context.

    Works for both sync and async code because contextvars are
    automatically propagated to async tasks.

    Args:
        ctx: The context to set for the duration of the block

    Yields:
        The context that was set
    """
    token = set_context(ctx)
    try:
        yield ctx
    finally:
        reset_context(token)


def create_context(
    *,
    correlation_id: UUID | None = None,
    method: str | None = None,
    path: str | None = None,
) -> RequestContext:
    """Create a RequestContext, generating a correlation id when none is given."""
    return RequestContext(
        correlation_id=correlation_id or uuid4(),
        method=method,
        path=path,
    )

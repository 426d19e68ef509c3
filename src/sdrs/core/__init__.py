"""Core services and utilities for SDRS."""

from .context import (
    ContextProperty,
    RequestContext,
    create_context,
    get_current_context,
    get_current_context_or_none,
    request_context,
    reset_context,
    set_context,
)
from .exceptions import (
    ContextNotSetError,
    DaoError,
    DuplicateRuleError,
    MultipleRecordsFoundError,
    RecordNotFoundError,
)

__all__ = [
    # Context
    "ContextProperty",
    "RequestContext",
    "create_context",
    "get_current_context",
    "get_current_context_or_none",
    "request_context",
    "reset_context",
    "set_context",
    # Exceptions
    "ContextNotSetError",
    "DaoError",
    "DuplicateRuleError",
    "MultipleRecordsFoundError",
    "RecordNotFoundError",
]

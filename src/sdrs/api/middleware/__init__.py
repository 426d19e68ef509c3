"""API middleware components."""

from .correlation import CorrelationRequestMiddleware, CorrelationResponseMiddleware
from .errors import ErrorHandlingMiddleware
from .logging import RequestLoggingMiddleware

__all__ = [
    "CorrelationRequestMiddleware",
    "CorrelationResponseMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
]

"""API schemas for request/response validation."""

from .errors import APIError, ErrorCode
from .health import ComponentHealth, HealthDetailResponse, HealthResponse, HealthStatus
from .retention_rule import (
    ProjectIdsResponse,
    RetentionRuleCreateRequest,
    RetentionRuleResponse,
    SoftDeleteResponse,
)

__all__ = [
    # Error schemas
    "APIError",
    "ErrorCode",
    # Health schemas
    "ComponentHealth",
    "HealthStatus",
    "HealthResponse",
    "HealthDetailResponse",
    # Retention rule schemas
    "ProjectIdsResponse",
    "RetentionRuleCreateRequest",
    "RetentionRuleResponse",
    "SoftDeleteResponse",
]

"""Error response schemas for API."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Request errors
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"

    # Data errors
    DUPLICATE_RULE = "duplicate_rule"
    MULTIPLE_RECORDS = "multiple_records"

    # System errors
    INTERNAL_ERROR = "internal_error"


class APIError(BaseModel):
    """Standardized API error response format."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Additional error context"
    )
    correlation_uuid: str = Field(..., description="Correlation id of the failed request")
    timestamp: datetime = Field(..., description="When the error occurred")

    model_config = {"json_schema_extra": {"example": {
        "error_code": "not_found",
        "message": "RetentionRule not found: my-project/gs://my-bucket",
        "details": {"key": "my-project/gs://my-bucket"},
        "correlation_uuid": "5f0c7a3e-2b8d-4c55-9d0e-1b7a4f7e9c21",
        "timestamp": "2026-01-30T12:00:00Z",
    }}}

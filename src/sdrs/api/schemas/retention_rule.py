"""Retention rule request/response schemas."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from sdrs.db.models.retention_rule import RetentionRule, RetentionRuleType

STORAGE_PREFIX = "gs://"


class RetentionRuleCreateRequest(BaseModel):
    """Request body for creating a retention rule.

    Dataset and default rules need a project; dataset rules also need a gs://
    storage location. Global rules default to the configured global project id.
    """

    type: RetentionRuleType = RetentionRuleType.DATASET
    project_id: str | None = Field(default=None, min_length=1, max_length=256)
    data_storage_name: str | None = Field(default=None, max_length=256)
    dataset_name: str | None = Field(default=None, max_length=256)
    retention_period_in_days: int = Field(..., ge=0)
    user: str | None = Field(default=None, max_length=256)

    @model_validator(mode="after")
    def validate_business_key(self) -> Self:
        """Require the business key fields non-global rules are looked up by."""
        if self.type != RetentionRuleType.GLOBAL and not self.project_id:
            raise ValueError(f"project_id is required for {self.type.value} rules")
        if self.type == RetentionRuleType.DATASET:
            if not self.data_storage_name or not self.data_storage_name.startswith(
                STORAGE_PREFIX
            ):
                raise ValueError(
                    f"data_storage_name must start with '{STORAGE_PREFIX}' for DATASET rules"
                )
        return self


class RetentionRuleResponse(BaseModel):
    """A retention rule as returned by the API."""

    id: int
    type: RetentionRuleType
    project_id: str
    data_storage_name: str | None
    dataset_name: str | None
    retention_period_in_days: int
    version: int
    is_active: bool
    user: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_model(cls, rule: RetentionRule) -> "RetentionRuleResponse":
        return cls.model_validate(rule)


class ProjectIdsResponse(BaseModel):
    """Distinct project ids that have active dataset rules."""

    project_ids: list[str]


class SoftDeleteResponse(BaseModel):
    """Result of deactivating a rule."""

    id: int
    is_active: bool = False

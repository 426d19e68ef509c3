"""Retention rule model."""

from enum import Enum

from sqlalchemy import Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class RetentionRuleType(str, Enum):
    """Scope a retention rule applies to."""

    GLOBAL = "GLOBAL"  # Fallback rule for every project
    DATASET = "DATASET"  # Rule for a single bucket or bucket prefix
    DEFAULT = "DEFAULT"


class RetentionRule(Base, TimestampMixin):
    """Retention rule for a storage location.

    Rules are identified by their business key (project id plus data storage
    name). They are never physically deleted: deactivating a rule flips
    ``is_active`` so the history stays queryable.
    """

    __tablename__ = "retention_rule"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dataset_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    retention_period_in_days: Mapped[int] = mapped_column(Integer, nullable=False)

    # gs://bucket[/path]; NULL for the global rule
    data_storage_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    project_id: Mapped[str] = mapped_column(String(256), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    user: Mapped[str | None] = mapped_column(String(256), nullable=True)

    __table_args__ = (
        Index("idx_retention_rule_project", "project_id"),
        Index("idx_retention_rule_type_active", "type", "is_active"),
        # At most one active rule per business key and type
        Index(
            "uq_retention_rule_active_business_key",
            "project_id",
            "data_storage_name",
            "type",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<RetentionRule(id={self.id}, type={self.type}, "
            f"project_id={self.project_id}, data_storage_name={self.data_storage_name})>"
        )

"""Database models for SDRS."""

from .base import Base, TimestampMixin
from .retention_rule import RetentionRule, RetentionRuleType

__all__ = [
    "Base",
    "TimestampMixin",
    "RetentionRule",
    "RetentionRuleType",
]

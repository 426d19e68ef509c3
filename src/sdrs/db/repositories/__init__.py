"""Data-access objects."""

from .base import GenericDao
from .protocol import RetentionRuleDao
from .retention_rule import RetentionRuleRepository

__all__ = [
    "GenericDao",
    "RetentionRuleDao",
    "RetentionRuleRepository",
]

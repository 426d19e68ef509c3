"""Data-access interface for retention rules.

Service code depends on this protocol rather than on a concrete DAO so the
storage backend can be swapped or faked in tests.
"""

from typing import Protocol, runtime_checkable

from sdrs.db.models.retention_rule import RetentionRule


@runtime_checkable
class RetentionRuleDao(Protocol):
    """Finder and mutator operations over retention rules."""

    async def find_dataset_rule_by_business_key(
        self, project_id: str, data_storage: str
    ) -> RetentionRule | None:
        """Get the active dataset rule for a project and storage location."""
        ...

    async def find_by_business_key(
        self,
        project_id: str,
        data_storage_name: str | None,
        include_deactivated: bool = False,
    ) -> RetentionRule | None:
        """Get the rule identified by a project and storage location."""
        ...

    async def soft_delete(self, entity: RetentionRule) -> int:
        """Deactivate a rule and return its id."""
        ...

    async def find_global_rule_by_project_id(self, project_id: str) -> RetentionRule | None:
        """Get the active global rule stored under a project id."""
        ...

    async def get_all_dataset_rule_project_ids(self) -> list[str]:
        """Get the distinct project ids that have active dataset rules."""
        ...

    async def find_dataset_rules_by_project_id(self, project_id: str) -> list[RetentionRule]:
        """Get all active dataset rules of a project."""
        ...

    async def create_rule(self, rule: RetentionRule) -> RetentionRule:
        """Insert a new rule."""
        ...

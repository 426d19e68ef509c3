"""Retention rule DAO."""

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from sdrs.core.exceptions import DuplicateRuleError
from sdrs.db.models.retention_rule import RetentionRule, RetentionRuleType
from sdrs.db.repositories.base import GenericDao

logger = structlog.get_logger("sdrs.db.retention_rule")

# SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Whether an IntegrityError came from a unique index rather than another constraint."""
    orig = exc.orig
    if UNIQUE_VIOLATION in (getattr(orig, "sqlstate", None), getattr(orig, "pgcode", None)):
        return True
    return "UNIQUE constraint failed" in str(orig)


class RetentionRuleRepository(GenericDao[RetentionRule, int]):
    """SQLAlchemy implementation of the RetentionRuleDao protocol.

    Single-record finders return None when nothing matches and raise
    MultipleRecordsFoundError when more than one row does.
    """

    model = RetentionRule

    async def find_dataset_rule_by_business_key(
        self, project_id: str, data_storage: str
    ) -> RetentionRule | None:
        """Get the active dataset rule for a project and storage location.

        Args:
            project_id: GCP project id
            data_storage: Storage location of the form 'gs://bucketName'

        Returns:
            The matching rule, or None
        """
        stmt = select(RetentionRule).where(
            RetentionRule.is_active.is_(True),
            RetentionRule.type == RetentionRuleType.DATASET.value,
            RetentionRule.project_id == project_id,
            RetentionRule.data_storage_name == data_storage,
        )
        return await self._get_single_record(stmt)

    async def find_by_business_key(
        self,
        project_id: str,
        data_storage_name: str | None,
        include_deactivated: bool = False,
    ) -> RetentionRule | None:
        """Get the rule uniquely identified by a project and storage location.

        Args:
            project_id: Project associated with the rule
            data_storage_name: Storage location associated with the rule; None
                matches rules without one, such as the global rule
            include_deactivated: Also match inactive rules

        Returns:
            The matching rule, or None
        """
        predicates = [
            RetentionRule.project_id == project_id,
            RetentionRule.data_storage_name.is_(None)
            if data_storage_name is None
            else RetentionRule.data_storage_name == data_storage_name,
        ]
        if not include_deactivated:
            predicates.append(RetentionRule.is_active.is_(True))

        return await self._get_single_record(select(RetentionRule).where(*predicates))

    async def soft_delete(self, entity: RetentionRule) -> int:
        """Set is_active to false for the provided rule.

        Args:
            entity: The rule to deactivate

        Returns:
            The id of the deactivated rule
        """
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(RetentionRule)
                    .where(RetentionRule.id == entity.id)
                    .values(is_active=False)
                )
        entity.is_active = False

        logger.info(
            "retention_rule_deactivated",
            rule_id=entity.id,
            project_id=entity.project_id,
            data_storage_name=entity.data_storage_name,
        )
        return entity.id

    async def find_global_rule_by_project_id(self, project_id: str) -> RetentionRule | None:
        """Get the global rule by its project id.

        Args:
            project_id: Project id to search by, normally "global-default"

        Returns:
            The active global rule, or None
        """
        stmt = select(RetentionRule).where(
            RetentionRule.is_active.is_(True),
            RetentionRule.type == RetentionRuleType.GLOBAL.value,
            RetentionRule.project_id == project_id,
        )
        return await self._get_single_record(stmt)

    async def get_all_dataset_rule_project_ids(self) -> list[str]:
        """Get all project ids associated with active dataset rules."""
        stmt = (
            select(RetentionRule.project_id)
            .distinct()
            .where(
                RetentionRule.is_active.is_(True),
                RetentionRule.type == RetentionRuleType.DATASET.value,
            )
            .order_by(RetentionRule.project_id)
        )
        return await self._get_records(stmt)

    async def find_dataset_rules_by_project_id(self, project_id: str) -> list[RetentionRule]:
        """Get all active dataset rules associated with a project."""
        stmt = (
            select(RetentionRule)
            .where(
                RetentionRule.is_active.is_(True),
                RetentionRule.type == RetentionRuleType.DATASET.value,
                RetentionRule.project_id == project_id,
            )
            .order_by(RetentionRule.id)
        )
        return await self._get_records(stmt)

    async def create_rule(self, rule: RetentionRule) -> RetentionRule:
        """Insert a new rule.

        Raises:
            DuplicateRuleError: If an active rule with the same business key
                and type already exists
            IntegrityError: If any other constraint is violated
        """
        try:
            saved = await self.save(rule)
        except IntegrityError as exc:
            if not _is_unique_violation(exc):
                raise
            raise DuplicateRuleError(
                rule.project_id, str(rule.data_storage_name), rule.type
            ) from exc

        logger.info(
            "retention_rule_created",
            rule_id=saved.id,
            rule_type=saved.type,
            project_id=saved.project_id,
        )
        return saved

"""Retention rule endpoints.

- POST   /retention-rules                               - Create a rule
- GET    /retention-rules                               - Look up a rule by business key
- DELETE /retention-rules                               - Soft-delete a rule by business key
- GET    /retention-rules/datasets                      - Active dataset rule by business key
- GET    /retention-rules/global                        - Active global rule
- GET    /retention-rules/projects                      - Projects with active dataset rules
- GET    /retention-rules/projects/{project_id}/datasets - Active dataset rules of a project

Omitting data_storage_name on GET and DELETE addresses rules stored without
one, such as the global rule.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, status

from sdrs.api.dependencies import get_app_settings, get_retention_rule_dao
from sdrs.api.schemas.retention_rule import (
    ProjectIdsResponse,
    RetentionRuleCreateRequest,
    RetentionRuleResponse,
    SoftDeleteResponse,
)
from sdrs.config.settings import Settings
from sdrs.core.exceptions import DuplicateRuleError, RecordNotFoundError
from sdrs.db.models.retention_rule import RetentionRule, RetentionRuleType
from sdrs.db.repositories.protocol import RetentionRuleDao

logger = structlog.get_logger("sdrs.api.retention_rules")

router = APIRouter(prefix="/retention-rules", tags=["retention-rules"])

Dao = Annotated[RetentionRuleDao, Depends(get_retention_rule_dao)]
ProjectIdQuery = Annotated[str, Query(min_length=1, max_length=256)]
DataStorageQuery = Annotated[str, Query(min_length=1, max_length=256)]
# Omitted for rules without a storage location, such as the global rule
OptionalDataStorageQuery = Annotated[str | None, Query(min_length=1, max_length=256)]


@router.post(
    "",
    response_model=RetentionRuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a retention rule",
)
async def create_rule(
    body: RetentionRuleCreateRequest,
    dao: Dao,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RetentionRuleResponse:
    """Create a rule; 409 when an active rule already owns the business key."""
    project_id = body.project_id
    if body.type == RetentionRuleType.GLOBAL:
        project_id = project_id or settings.GLOBAL_RULE_PROJECT_ID
        existing = await dao.find_global_rule_by_project_id(project_id)
    elif body.type == RetentionRuleType.DATASET:
        existing = await dao.find_dataset_rule_by_business_key(
            project_id, body.data_storage_name
        )
    else:
        existing = None

    if existing is not None:
        raise DuplicateRuleError(project_id, str(body.data_storage_name), body.type.value)

    rule = RetentionRule(
        type=body.type.value,
        project_id=project_id,
        data_storage_name=body.data_storage_name,
        dataset_name=body.dataset_name,
        retention_period_in_days=body.retention_period_in_days,
        user=body.user,
        version=1,
        is_active=True,
    )
    created = await dao.create_rule(rule)
    return RetentionRuleResponse.from_model(created)


@router.get(
    "",
    response_model=RetentionRuleResponse,
    summary="Get a rule by business key",
)
async def get_rule_by_business_key(
    dao: Dao,
    project_id: ProjectIdQuery,
    data_storage_name: OptionalDataStorageQuery = None,
    include_deactivated: bool = False,
) -> RetentionRuleResponse:
    """Look up the rule for a project and storage location."""
    rule = await dao.find_by_business_key(
        project_id, data_storage_name, include_deactivated
    )
    if rule is None:
        raise RecordNotFoundError("RetentionRule", f"{project_id}/{data_storage_name}")
    return RetentionRuleResponse.from_model(rule)


@router.delete(
    "",
    response_model=SoftDeleteResponse,
    summary="Deactivate a rule",
)
async def delete_rule(
    dao: Dao,
    project_id: ProjectIdQuery,
    data_storage_name: OptionalDataStorageQuery = None,
) -> SoftDeleteResponse:
    """Soft-delete the active rule for a project and storage location."""
    rule = await dao.find_by_business_key(project_id, data_storage_name)
    if rule is None:
        raise RecordNotFoundError("RetentionRule", f"{project_id}/{data_storage_name}")

    rule_id = await dao.soft_delete(rule)
    return SoftDeleteResponse(id=rule_id)


@router.get(
    "/datasets",
    response_model=RetentionRuleResponse,
    summary="Get the active dataset rule by business key",
)
async def get_dataset_rule(
    dao: Dao,
    project_id: ProjectIdQuery,
    data_storage_name: DataStorageQuery,
) -> RetentionRuleResponse:
    rule = await dao.find_dataset_rule_by_business_key(project_id, data_storage_name)
    if rule is None:
        raise RecordNotFoundError(
            "RetentionRule", f"DATASET {project_id}/{data_storage_name}"
        )
    return RetentionRuleResponse.from_model(rule)


@router.get(
    "/global",
    response_model=RetentionRuleResponse,
    summary="Get the active global rule",
)
async def get_global_rule(
    dao: Dao,
    settings: Annotated[Settings, Depends(get_app_settings)],
    project_id: Annotated[str | None, Query(min_length=1, max_length=256)] = None,
) -> RetentionRuleResponse:
    """Global rule, stored under the configured global project id by default."""
    project_id = project_id or settings.GLOBAL_RULE_PROJECT_ID
    rule = await dao.find_global_rule_by_project_id(project_id)
    if rule is None:
        raise RecordNotFoundError("RetentionRule", f"GLOBAL {project_id}")
    return RetentionRuleResponse.from_model(rule)


@router.get(
    "/projects",
    response_model=ProjectIdsResponse,
    summary="List projects with active dataset rules",
)
async def list_dataset_rule_projects(dao: Dao) -> ProjectIdsResponse:
    return ProjectIdsResponse(project_ids=await dao.get_all_dataset_rule_project_ids())


@router.get(
    "/projects/{project_id}/datasets",
    response_model=list[RetentionRuleResponse],
    summary="List active dataset rules of a project",
)
async def list_project_dataset_rules(
    project_id: str,
    dao: Dao,
) -> list[RetentionRuleResponse]:
    rules = await dao.find_dataset_rules_by_project_id(project_id)
    logger.debug("dataset_rules_listed", project_id=project_id, count=len(rules))
    return [RetentionRuleResponse.from_model(rule) for rule in rules]

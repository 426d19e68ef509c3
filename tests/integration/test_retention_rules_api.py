"""Integration tests for the retention rule endpoints."""

import pytest
from httpx import AsyncClient

from sdrs.db.models.retention_rule import RetentionRuleType

BASE = "/v1/retention-rules"


def _dataset_rule(project_id: str = "project-a", bucket: str = "gs://bucket-a", days: int = 30) -> dict:
    return {
        "type": "DATASET",
        "project_id": project_id,
        "data_storage_name": bucket,
        "dataset_name": "dataset",
        "retention_period_in_days": days,
        "user": "tester",
    }


@pytest.mark.asyncio
class TestCreateRule:
    """Tests for POST /v1/retention-rules."""

    async def test_create_dataset_rule(self, test_client: AsyncClient):
        response = await test_client.post(BASE, json=_dataset_rule())

        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["type"] == "DATASET"
        assert data["is_active"] is True
        assert data["version"] == 1

    async def test_duplicate_active_rule_returns_409(self, test_client: AsyncClient):
        await test_client.post(BASE, json=_dataset_rule())

        response = await test_client.post(BASE, json=_dataset_rule(days=60))

        assert response.status_code == 409
        assert response.json()["error_code"] == "duplicate_rule"

    async def test_global_rule_defaults_project_id(self, test_client: AsyncClient):
        response = await test_client.post(
            BASE, json={"type": "GLOBAL", "retention_period_in_days": 365}
        )

        assert response.status_code == 201
        assert response.json()["project_id"] == "global-default"

    async def test_second_global_rule_returns_409(self, test_client: AsyncClient):
        await test_client.post(BASE, json={"type": "GLOBAL", "retention_period_in_days": 365})

        response = await test_client.post(
            BASE, json={"type": "GLOBAL", "retention_period_in_days": 30}
        )

        assert response.status_code == 409

    async def test_dataset_rule_requires_gs_storage(self, test_client: AsyncClient):
        response = await test_client.post(
            BASE, json=_dataset_rule(bucket="s3://bucket-a")
        )

        assert response.status_code == 422

    async def test_negative_retention_rejected(self, test_client: AsyncClient):
        response = await test_client.post(BASE, json=_dataset_rule(days=-1))

        assert response.status_code == 422

    @pytest.mark.parametrize("rule_type", ["DEFAULT", "DATASET"])
    async def test_missing_project_id_rejected(self, test_client: AsyncClient, rule_type: str):
        response = await test_client.post(
            BASE, json={"type": rule_type, "retention_period_in_days": 3}
        )

        assert response.status_code == 422
        assert "project_id is required" in response.text

    async def test_create_default_rule(self, test_client: AsyncClient):
        response = await test_client.post(
            BASE,
            json={"type": "DEFAULT", "project_id": "project-a", "retention_period_in_days": 3},
        )

        assert response.status_code == 201
        assert response.json()["data_storage_name"] is None

    async def test_second_default_rule_returns_409(self, test_client: AsyncClient):
        body = {
            "type": "DEFAULT",
            "project_id": "project-a",
            "data_storage_name": "gs://bucket-a",
            "retention_period_in_days": 3,
        }
        await test_client.post(BASE, json=body)

        response = await test_client.post(BASE, json=body)

        assert response.status_code == 409
        assert response.json()["error_code"] == "duplicate_rule"


@pytest.mark.asyncio
class TestBusinessKeyLookup:
    """Tests for GET/DELETE /v1/retention-rules by business key."""

    async def test_get_by_business_key(self, test_client: AsyncClient):
        created = (await test_client.post(BASE, json=_dataset_rule())).json()

        response = await test_client.get(
            BASE, params={"project_id": "project-a", "data_storage_name": "gs://bucket-a"}
        )

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    async def test_soft_delete_then_lookup(self, test_client: AsyncClient):
        created = (await test_client.post(BASE, json=_dataset_rule())).json()
        key = {"project_id": "project-a", "data_storage_name": "gs://bucket-a"}

        deleted = await test_client.delete(BASE, params=key)

        assert deleted.status_code == 200
        assert deleted.json() == {"id": created["id"], "is_active": False}

        assert (await test_client.get(BASE, params=key)).status_code == 404

        history = await test_client.get(BASE, params={**key, "include_deactivated": True})
        assert history.status_code == 200
        assert history.json()["is_active"] is False

    async def test_global_rule_addressed_without_storage_name(self, test_client: AsyncClient):
        created = (
            await test_client.post(BASE, json={"type": "GLOBAL", "retention_period_in_days": 365})
        ).json()
        key = {"project_id": "global-default"}

        found = await test_client.get(BASE, params=key)
        assert found.status_code == 200
        assert found.json()["id"] == created["id"]

        deleted = await test_client.delete(BASE, params=key)
        assert deleted.status_code == 200
        assert deleted.json() == {"id": created["id"], "is_active": False}

        assert (await test_client.get(f"{BASE}/global")).status_code == 404

    async def test_delete_unknown_rule_returns_404(self, test_client: AsyncClient):
        response = await test_client.delete(
            BASE, params={"project_id": "nope", "data_storage_name": "gs://nope"}
        )

        assert response.status_code == 404

    async def test_dataset_lookup(self, test_client: AsyncClient, make_rule):
        await make_rule("project-a", "gs://bucket-a", rule_type=RetentionRuleType.DEFAULT)

        response = await test_client.get(
            f"{BASE}/datasets",
            params={"project_id": "project-a", "data_storage_name": "gs://bucket-a"},
        )

        assert response.status_code == 404

    async def test_ambiguous_lookup_returns_409(self, test_client: AsyncClient, make_rule):
        await make_rule("project-a", "gs://bucket-a", rule_type=RetentionRuleType.DATASET)
        await make_rule("project-a", "gs://bucket-a", rule_type=RetentionRuleType.DEFAULT)

        response = await test_client.get(
            BASE, params={"project_id": "project-a", "data_storage_name": "gs://bucket-a"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "multiple_records"


@pytest.mark.asyncio
class TestProjectQueries:
    """Tests for the project level queries."""

    async def test_global_rule(self, test_client: AsyncClient):
        await test_client.post(BASE, json={"type": "GLOBAL", "retention_period_in_days": 365})

        response = await test_client.get(f"{BASE}/global")

        assert response.status_code == 200
        assert response.json()["retention_period_in_days"] == 365

    async def test_missing_global_rule_returns_404(self, test_client: AsyncClient):
        response = await test_client.get(f"{BASE}/global")

        assert response.status_code == 404

    async def test_projects_lists_distinct_active_dataset_projects(self, test_client: AsyncClient):
        await test_client.post(BASE, json=_dataset_rule("project-a", "gs://bucket-1"))
        await test_client.post(BASE, json=_dataset_rule("project-a", "gs://bucket-2"))
        await test_client.post(BASE, json=_dataset_rule("project-b", "gs://bucket-3"))
        await test_client.delete(
            BASE, params={"project_id": "project-b", "data_storage_name": "gs://bucket-3"}
        )

        response = await test_client.get(f"{BASE}/projects")

        assert response.status_code == 200
        assert response.json() == {"project_ids": ["project-a"]}

    async def test_project_dataset_rules(self, test_client: AsyncClient):
        await test_client.post(BASE, json=_dataset_rule("project-a", "gs://bucket-1"))
        await test_client.post(BASE, json=_dataset_rule("project-a", "gs://bucket-2"))
        await test_client.post(BASE, json=_dataset_rule("project-b", "gs://bucket-3"))

        response = await test_client.get(f"{BASE}/projects/project-a/datasets")

        assert response.status_code == 200
        buckets = [rule["data_storage_name"] for rule in response.json()]
        assert buckets == ["gs://bucket-1", "gs://bucket-2"]

"""Integration tests for the tenant schema endpoints."""

import pytest
from httpx import AsyncClient

from repairdesk.core.database import Database
from repairdesk.core.tenancy import SCHEMA_VERSION, derive_table_names
from tests.conftest import TENANT_ID, auth_headers, create_user


pytestmark = pytest.mark.integration


class TestSchemaStatus:
    async def test_status_is_read_only(self, client: AsyncClient, headers: dict[str, str]):
        first = await client.get("/api/v1/tenants/me/schema", headers=headers)
        second = await client.get("/api/v1/tenants/me/schema", headers=headers)

        assert first.status_code == 200
        body = second.json()
        assert body["tenantId"] == TENANT_ID
        assert body["ready"] is False
        assert body["schemaVersion"] == SCHEMA_VERSION
        assert {table["exists"] for table in body["tables"]} == {False}

    async def test_lists_derived_table_names(
        self, client: AsyncClient, headers: dict[str, str]
    ):
        response = await client.get("/api/v1/tenants/me/schema", headers=headers)

        names = derive_table_names(TENANT_ID)
        assert {table["name"] for table in response.json()["tables"]} == set(names.all())

    async def test_ready_after_first_business_request(
        self, client: AsyncClient, headers: dict[str, str]
    ):
        await client.get("/api/v1/repairs", headers=headers)

        response = await client.get("/api/v1/tenants/me/schema", headers=headers)

        assert response.json()["ready"] is True

    async def test_account_without_tenant(self, client: AsyncClient, database: Database):
        user = await create_user(database, None, "nobody@example.com")

        response = await client.get("/api/v1/tenants/me/schema", headers=auth_headers(user))

        assert response.status_code == 422


class TestSchemaEnsure:
    async def test_provisions_and_is_repeatable(
        self, client: AsyncClient, headers: dict[str, str]
    ):
        first = await client.post("/api/v1/tenants/me/schema", headers=headers)
        second = await client.post("/api/v1/tenants/me/schema", headers=headers)

        assert first.status_code == 200
        assert first.json()["ready"] is True
        assert first.json()["appliedMigrations"] == []
        assert second.json()["ready"] is True
        assert second.json()["appliedMigrations"] == []

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post("/api/v1/tenants/me/schema")

        assert response.status_code == 401

"""Tests for health and info endpoints."""

import pytest
from httpx import AsyncClient

from repairdesk import __version__
from repairdesk.core.tenancy import SCHEMA_VERSION


pytestmark = pytest.mark.integration


async def test_liveness(client: AsyncClient):
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


async def test_readiness(client: AsyncClient):
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"] == {"database": "ok"}


async def test_info(client: AsyncClient):
    response = await client.get("/info")

    assert response.status_code == 200
    body = response.json()
    assert body["version"] == __version__
    assert body["schemaVersion"] == SCHEMA_VERSION


async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health/live", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"

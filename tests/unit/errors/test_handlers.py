"""Unit tests for RFC 7807 exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from repairdesk.core.errors import (
    ConstraintViolationError,
    NotFoundError,
    SchemaDriftError,
    TransientConnectionError,
    register_exception_handlers,
)


pytestmark = pytest.mark.unit


class Payload(BaseModel):
    price: float


@pytest.fixture
async def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise ConstraintViolationError("IMEI already exists", field="imeiNo")

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Repair ticket not found", resource="repair_ticket", resource_id="t1")

    @app.get("/unavailable")
    async def unavailable():
        raise TransientConnectionError(details={"operation": "list"})

    @app.get("/drift")
    async def drift():
        raise SchemaDriftError()

    @app.post("/validate")
    async def validate(payload: Payload):
        return payload

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


class TestAppExceptionHandler:
    """Tests for domain error rendering."""

    async def test_constraint_violation_names_field(self, client: AsyncClient):
        response = await client.get("/conflict")

        assert response.status_code == 409
        body = response.json()
        assert body["title"] == "Constraint Violation"
        assert body["field"] == "imeiNo"
        assert body["type"].endswith("/errors/constraint_violation")
        assert body["instance"] == "/conflict"

    async def test_not_found(self, client: AsyncClient):
        response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json()["resource_id"] == "t1"

    async def test_transient_connection_error_is_503_with_retry_after(
        self, client: AsyncClient
    ):
        response = await client.get("/unavailable")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "5"
        assert response.json()["title"] == "Database Unavailable"

    async def test_schema_drift_is_internal(self, client: AsyncClient):
        response = await client.get("/drift")

        assert response.status_code == 500
        assert response.json()["type"].endswith("/errors/schema_drift")


class TestValidationHandler:
    """Tests for request validation rendering."""

    async def test_lists_invalid_fields(self, client: AsyncClient):
        response = await client.post("/validate", json={"price": "free"})

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors[0]["field"] == "price"


class TestGenericHandler:
    """Tests for unexpected exceptions."""

    async def test_hides_details(self, client: AsyncClient):
        response = await client.get("/boom")

        assert response.status_code == 500
        assert "secret internals" not in response.text

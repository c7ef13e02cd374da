"""Pydantic schemas for tenant schema status."""

from repairdesk.core.schemas import CamelModel


class TableStatus(CamelModel):
    kind: str
    name: str
    exists: bool


class SchemaStatusResponse(CamelModel):
    """Whether the tenant's tables are provisioned."""

    tenant_id: str
    ready: bool
    schema_version: int
    tables: list[TableStatus]


class AppliedMigration(CamelModel):
    version: int
    table: str
    column: str


class SchemaEnsureResponse(SchemaStatusResponse):
    applied_migrations: list[AppliedMigration]

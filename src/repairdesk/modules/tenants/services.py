"""Provisioning and migration of a single tenant's tables.

Shared by the HTTP routes, the CLI and the nightly worker job.
"""

from typing import Annotated

from fastapi import Depends

from repairdesk.api.dependencies import DatabaseDep, SchemaManager
from repairdesk.core.database import Database
from repairdesk.core.tenancy import (
    SCHEMA_VERSION,
    TableKind,
    TenantSchemaManager,
    derive_table_names,
    ensure_tenant_schema,
    migrate_tenant_schema,
    missing_tenant_tables,
)
from repairdesk.modules.tenants.schemas import (
    AppliedMigration,
    SchemaEnsureResponse,
    SchemaStatusResponse,
    TableStatus,
)


class TenantSchemaService:
    def __init__(self, db: Database, manager: TenantSchemaManager | None = None) -> None:
        self.db = db
        self.manager = manager

    async def status(self, tenant_id: str) -> SchemaStatusResponse:
        """Report which of the tenant's tables exist. Never creates anything."""
        names = derive_table_names(tenant_id)
        missing = set(await missing_tenant_tables(self.db, tenant_id))
        return SchemaStatusResponse(
            tenant_id=tenant_id,
            ready=not missing,
            schema_version=SCHEMA_VERSION,
            tables=[
                TableStatus(
                    kind=kind.value,
                    name=getattr(names, kind.value),
                    exists=getattr(names, kind.value) not in missing,
                )
                for kind in TableKind
            ],
        )

    async def ensure(self, tenant_id: str) -> SchemaEnsureResponse:
        """Provision missing tables, then apply pending column migrations."""
        names = await ensure_tenant_schema(self.db, tenant_id)
        applied = await migrate_tenant_schema(self.db, tenant_id)
        if self.manager is not None:
            self.manager.forget(tenant_id)
        status = await self.status(tenant_id)
        return SchemaEnsureResponse(
            **status.model_dump(),
            applied_migrations=[
                AppliedMigration(
                    version=migration.version,
                    table=getattr(names, migration.kind.value),
                    column=migration.column,
                )
                for migration in applied
            ],
        )


def get_tenant_schema_service(db: DatabaseDep, manager: SchemaManager) -> TenantSchemaService:
    return TenantSchemaService(db, manager)


TenantSchemaSvc = Annotated[TenantSchemaService, Depends(get_tenant_schema_service)]

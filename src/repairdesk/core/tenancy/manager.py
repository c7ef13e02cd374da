"""Per-request entry point for tenant schemas."""

import structlog

from repairdesk.core.database import Database
from repairdesk.core.tenancy.migrator import migrate_tenant_schema
from repairdesk.core.tenancy.naming import derive_table_names
from repairdesk.core.tenancy.provisioner import ensure_tenant_schema
from repairdesk.core.tenancy.schema import TenantTables, build_tenant_tables


logger = structlog.get_logger()


class TenantSchemaManager:
    """Provision and migrate tenant tables once per process.

    The "known ready" set only saves DDL round trips. Correctness never
    depends on it: provisioning is create-if-absent and migration is
    additive, so two coroutines preparing the same tenant concurrently
    both succeed.

    Usage:
        manager = TenantSchemaManager(db)
        tables = await manager.prepare(tenant_id)
    """

    def __init__(self, db: Database) -> None:
        self.db = db
        self._ready: set[str] = set()

    def is_known_ready(self, tenant_id: str) -> bool:
        return tenant_id in self._ready

    def forget(self, tenant_id: str) -> None:
        """Drop the cached flag so the next prepare re-runs DDL."""
        self._ready.discard(tenant_id)

    async def prepare(self, tenant_id: str) -> TenantTables:
        """Return the tenant's tables, provisioning and migrating if needed."""
        names = derive_table_names(tenant_id)
        if tenant_id not in self._ready:
            await ensure_tenant_schema(self.db, tenant_id)
            applied = await migrate_tenant_schema(self.db, tenant_id)
            self._ready.add(tenant_id)
            logger.debug(
                "tenant_schema_ready",
                tenant_id=tenant_id,
                migrations_applied=len(applied),
            )
        return build_tenant_tables(names)

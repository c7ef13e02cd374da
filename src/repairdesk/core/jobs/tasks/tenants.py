"""Fleet-wide tenant schema maintenance.

Request-time preparation keeps active tenants current; this job also
reaches tenants nobody has touched since the last schema change.
"""

from typing import Any

import structlog

from repairdesk.core.database import Database
from repairdesk.core.tenancy import ensure_tenant_schema, migrate_tenant_schema
from repairdesk.modules.users.repos import UserRepository


log = structlog.get_logger()


async def migrate_tenants(db: Database) -> dict[str, Any]:
    """Provision and migrate every tenant listed in ``users``.

    A tenant that fails is logged and counted; the rest still run.

    Returns:
        Counts of tenants processed and failed, columns added, and the
        ids of failed tenants
    """
    async with db.session() as session:
        tenant_ids = await UserRepository(session).list_tenant_ids()

    migrated = 0
    columns_added = 0
    failed: list[str] = []
    for tenant_id in tenant_ids:
        try:
            await ensure_tenant_schema(db, tenant_id)
            applied = await migrate_tenant_schema(db, tenant_id)
        except Exception:
            log.exception("tenant_migration_failed", tenant_id=tenant_id)
            failed.append(tenant_id)
            continue
        migrated += 1
        columns_added += len(applied)

    log.info(
        "migrate_all_tenants_complete",
        tenants=len(tenant_ids),
        migrated=migrated,
        failed=len(failed),
        columns_added=columns_added,
    )
    return {
        "tenants": len(tenant_ids),
        "migrated": migrated,
        "failed": failed,
        "columns_added": columns_added,
    }


async def migrate_all_tenants(ctx: dict[str, Any]) -> dict[str, Any]:
    """arq entry point; the worker startup hook puts the pool in ``ctx``."""
    return await migrate_tenants(ctx["database"])

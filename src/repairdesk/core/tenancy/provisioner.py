"""Create-if-absent provisioning of a tenant's tables.

Creation relies on ``CREATE TABLE IF NOT EXISTS`` so two requests that
provision the same new tenant at the same time both succeed. Secondary
indexes are reconciled against the catalog afterwards, and an index that
a concurrent provisioner created first is not an error.
"""

import structlog
from sqlalchemy import Table, inspect
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.schema import CreateIndex, CreateTable

from repairdesk.core.database import Database
from repairdesk.core.database.errors import is_duplicate_index
from repairdesk.core.tenancy.naming import TenantTableSet, derive_table_names
from repairdesk.core.tenancy.schema import build_tenant_tables


logger = structlog.get_logger()


async def _ensure_indexes(conn: AsyncConnection, table: Table) -> None:
    existing = await conn.run_sync(
        lambda sync_conn: {ix["name"] for ix in inspect(sync_conn).get_indexes(table.name)}
    )
    for index in table.indexes:
        if index.name in existing:
            continue
        try:
            await conn.execute(CreateIndex(index))
        except DBAPIError as exc:
            if not is_duplicate_index(exc):
                raise
            logger.info("tenant_index_already_created", table=table.name, index=index.name)


async def ensure_tenant_schema(db: Database, tenant_id: str) -> TenantTableSet:
    """Ensure all four tables of ``tenant_id`` exist.

    Idempotent. Any DDL failure propagates: callers must not go on to
    read or write tenant data after a failed provision.

    Returns:
        The tenant's table names
    """
    names = derive_table_names(tenant_id)
    tables = build_tenant_tables(names)

    async def provision(conn: AsyncConnection) -> None:
        for _kind, table in tables.items():
            await conn.execute(CreateTable(table, if_not_exists=True))
            await _ensure_indexes(conn, table)

    await db.run(provision, operation="ensure_tenant_schema")
    logger.info("tenant_schema_provisioned", tenant_id=tenant_id, tables=list(names.all()))
    return names


async def missing_tenant_tables(db: Database, tenant_id: str) -> list[str]:
    """Return the names of the tenant's tables that do not exist yet."""
    names = derive_table_names(tenant_id)

    async def probe(conn: AsyncConnection) -> list[str]:
        return await conn.run_sync(
            lambda sync_conn: [
                name for name in names.all() if not inspect(sync_conn).has_table(name)
            ]
        )

    return await db.run(probe, operation="tenant_schema_exists")


async def tenant_schema_exists(db: Database, tenant_id: str) -> bool:
    """Whether every one of the tenant's four tables exists.

    A partially provisioned tenant (for example tickets created but team
    members missing) reports ``False``.
    """
    return not await missing_tenant_tables(db, tenant_id)

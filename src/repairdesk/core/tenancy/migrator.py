"""Additive, in-place migration of tenant tables.

The declared ``MIGRATIONS`` list is diffed against catalog metadata and
every missing column is added with ``ALTER TABLE ... ADD COLUMN``. Columns
are never dropped, renamed or retyped, so running this on every write
path needs no coordination.
"""

import structlog
from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection

from repairdesk.core.database import Database
from repairdesk.core.database.errors import is_duplicate_column, is_transient_error
from repairdesk.core.errors import SchemaDriftError
from repairdesk.core.tenancy.guard import quote_identifier
from repairdesk.core.tenancy.naming import TenantTableSet, derive_table_names
from repairdesk.core.tenancy.schema import MIGRATIONS, ColumnMigration, render_add_column


logger = structlog.get_logger()

# Table name -> column names, for the tenant tables that exist
Catalog = dict[str, set[str]]


def read_catalog(sync_conn: Connection, names: TenantTableSet) -> Catalog:
    inspector = inspect(sync_conn)
    catalog: Catalog = {}
    for name in names.all():
        if inspector.has_table(name):
            catalog[name] = {column["name"] for column in inspector.get_columns(name)}
    return catalog


def pending_migrations(names: TenantTableSet, catalog: Catalog) -> list[ColumnMigration]:
    """Migrations whose table exists but whose column does not.

    Tables missing from the catalog are skipped: provisioning creates
    them with every column already in place.
    """
    pending = []
    for migration in MIGRATIONS:
        columns = catalog.get(getattr(names, migration.kind.value))
        if columns is not None and migration.column not in columns:
            pending.append(migration)
    return pending


def render_migration(
    migration: ColumnMigration, table_name: str, columns: set[str], conn: AsyncConnection
) -> str:
    dialect = conn.dialect
    ddl = (
        f"ALTER TABLE {quote_identifier(table_name, dialect)} "
        f"ADD COLUMN {render_add_column(migration.kind, migration.column, dialect)}"
    )
    # Only MySQL understands column positions
    if dialect.name == "mysql" and migration.after in columns:
        ddl += f" AFTER {quote_identifier(migration.after, dialect)}"
    return ddl


async def migrate_tenant_schema(db: Database, tenant_id: str) -> list[ColumnMigration]:
    """Add any columns the tenant's existing tables are missing.

    A no-op when the tenant has no tables yet, and a no-op (zero ALTER
    statements) when the tables are already at ``SCHEMA_VERSION``.

    Returns:
        The migrations that were applied

    Raises:
        SchemaDriftError: If the catalog cannot be read
    """
    names = derive_table_names(tenant_id)

    async def migrate(conn: AsyncConnection) -> list[ColumnMigration]:
        try:
            catalog = await conn.run_sync(read_catalog, names)
        except DBAPIError as exc:
            if is_transient_error(exc):
                raise
            raise SchemaDriftError(
                "Could not read tenant table metadata",
                details={"tenant_id": tenant_id},
            ) from exc

        applied: list[ColumnMigration] = []
        for migration in pending_migrations(names, catalog):
            table_name = getattr(names, migration.kind.value)
            columns = catalog[table_name]
            try:
                await conn.exec_driver_sql(
                    render_migration(migration, table_name, columns, conn)
                )
            except DBAPIError as exc:
                if not is_duplicate_column(exc):
                    raise
                logger.info(
                    "tenant_column_already_added",
                    table=table_name,
                    column=migration.column,
                )
            else:
                applied.append(migration)
                logger.info(
                    "tenant_migration_applied",
                    tenant_id=tenant_id,
                    table=table_name,
                    column=migration.column,
                    version=migration.version,
                )
            columns.add(migration.column)
        return applied

    return await db.run(migrate, operation="migrate_tenant_schema")

"""Per-tenant table provisioning, migration and identifier safety."""

from repairdesk.core.tenancy.guard import check_identifier, quote_identifier
from repairdesk.core.tenancy.manager import TenantSchemaManager
from repairdesk.core.tenancy.migrator import migrate_tenant_schema
from repairdesk.core.tenancy.naming import (
    TenantTableSet,
    derive_table_names,
    validate_tenant_id,
)
from repairdesk.core.tenancy.provisioner import (
    ensure_tenant_schema,
    missing_tenant_tables,
    tenant_schema_exists,
)
from repairdesk.core.tenancy.schema import (
    MIGRATIONS,
    SCHEMA_VERSION,
    ColumnMigration,
    TableKind,
    TenantTables,
    build_tenant_tables,
)


__all__ = [
    "MIGRATIONS",
    "SCHEMA_VERSION",
    "ColumnMigration",
    "TableKind",
    "TenantSchemaManager",
    "TenantTableSet",
    "TenantTables",
    "build_tenant_tables",
    "check_identifier",
    "derive_table_names",
    "ensure_tenant_schema",
    "migrate_tenant_schema",
    "missing_tenant_tables",
    "quote_identifier",
    "tenant_schema_exists",
    "validate_tenant_id",
]

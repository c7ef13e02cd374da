"""Unit tests for the tenant table definitions."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from repairdesk.core.constants import MAX_IDENTIFIER_LENGTH
from repairdesk.core.tenancy import derive_table_names
from repairdesk.core.tenancy.migrator import pending_migrations, render_migration
from repairdesk.core.tenancy.schema import (
    MIGRATIONS,
    SCHEMA_VERSION,
    TABLE_SPECS,
    TICKET_STATUSES,
    TableKind,
    build_table,
    build_tenant_tables,
    index_name,
    render_add_column,
    shared_columns,
)


pytestmark = pytest.mark.unit


class TestTableSpecs:
    """Tests for the static column lists."""

    def test_schema_version(self):
        assert SCHEMA_VERSION == 3

    def test_every_migration_names_a_declared_column(self):
        for migration in MIGRATIONS:
            spec = TABLE_SPECS[migration.kind]
            assert migration.column in spec.column_names
            assert migration.after in spec.column_names

    def test_live_tickets_have_business_keys_unique(self):
        spec = TABLE_SPECS[TableKind.REPAIR_TICKETS]

        assert set(spec.unique_columns) == {"repairNumber", "spu", "imeiNo"}

    def test_trash_tables_have_no_unique_columns(self):
        assert TABLE_SPECS[TableKind.DELETED_TICKETS].unique_columns == ()
        assert TABLE_SPECS[TableKind.DELETED_MEMBERS].unique_columns == ()

    def test_trash_tables_add_deleted_at(self):
        assert "deletedAt" in TABLE_SPECS[TableKind.DELETED_TICKETS].column_names
        assert "deletedAt" in TABLE_SPECS[TableKind.DELETED_MEMBERS].column_names

    def test_shared_columns_cover_every_live_ticket_column(self):
        """A ticket moved to the trash keeps every field, including timestamps."""
        columns = shared_columns(TableKind.REPAIR_TICKETS, TableKind.DELETED_TICKETS)

        assert columns == TABLE_SPECS[TableKind.REPAIR_TICKETS].column_names

    def test_restore_never_copies_deleted_at(self):
        columns = shared_columns(TableKind.DELETED_MEMBERS, TableKind.TEAM_MEMBERS)

        assert "deletedAt" not in columns
        assert "email" in columns


class TestBuildTable:
    """Tests for build_table and build_tenant_tables."""

    def test_mysql_ddl(self):
        table = build_table(TableKind.REPAIR_TICKETS, "tenant_a1b2_repair_tickets")

        ddl = str(CreateTable(table, if_not_exists=True).compile(dialect=mysql.dialect()))

        assert "CREATE TABLE IF NOT EXISTS `tenant_a1b2_repair_tickets`" in ddl
        assert "`imeiNo` VARCHAR(15) NOT NULL" in ddl
        assert "UNIQUE (`imeiNo`)" in ddl
        assert "ENGINE=InnoDB" in ddl
        assert "utf8mb4_unicode_ci" in ddl
        for status in TICKET_STATUSES:
            assert f"'{status}'" in ddl

    def test_sqlite_ddl_quotes_every_column(self):
        table = build_table(TableKind.TEAM_MEMBERS, "tenant_a1b2_team_members")

        ddl = str(CreateTable(table).compile(dialect=sqlite.dialect()))

        assert '"tenant_a1b2_team_members"' in ddl
        assert '"userId"' in ddl
        assert "DEFAULT 'member'" in ddl

    def test_indexes_are_named_per_table(self):
        table = build_table(TableKind.REPAIR_TICKETS, "tenant_a1b2_repair_tickets")

        names = {index.name for index in table.indexes}

        assert names == {
            index_name("tenant_a1b2_repair_tickets", "userId"),
            index_name("tenant_a1b2_repair_tickets", "status"),
        }

    def test_index_names_differ_between_tenants(self):
        assert index_name("tenant_a_team_members", "userId") != index_name(
            "tenant_b_team_members", "userId"
        )

    def test_index_name_is_bounded(self):
        assert len(index_name("t" * MAX_IDENTIFIER_LENGTH, "repairNumber")) < MAX_IDENTIFIER_LENGTH

    def test_each_tenant_gets_its_own_metadata(self):
        first = build_tenant_tables(derive_table_names("tenant-one"))
        second = build_tenant_tables(derive_table_names("tenant-two"))

        assert first.repair_tickets.metadata is not second.repair_tickets.metadata
        assert first.repair_tickets.metadata is not first.team_members.metadata

    def test_build_tenant_tables_is_memoized(self):
        names = derive_table_names("a1b2-c3d4")

        assert build_tenant_tables(names) is build_tenant_tables(names)


class TestMigrationRendering:
    """Tests for ALTER TABLE rendering."""

    def test_render_add_column_mysql(self):
        ddl = render_add_column(TableKind.REPAIR_TICKETS, "waterDamaged", mysql.dialect())

        assert ddl == "`waterDamaged` BOOL NULL DEFAULT FALSE"

    def test_render_add_column_without_default(self):
        ddl = render_add_column(TableKind.DELETED_TICKETS, "createdAt", mysql.dialect())

        assert ddl == "`createdAt` DATETIME NULL"

    def test_render_migration_positions_column_on_mysql(self):
        conn = MagicMock(dialect=mysql.dialect())
        migration = MIGRATIONS[0]

        ddl = render_migration(migration, "tenant_x_repair_tickets", {"battery"}, conn)

        assert ddl == (
            "ALTER TABLE `tenant_x_repair_tickets` "
            "ADD COLUMN `waterDamaged` BOOL NULL DEFAULT FALSE AFTER `battery`"
        )

    def test_render_migration_skips_position_on_sqlite(self):
        conn = MagicMock(dialect=sqlite.dialect())

        ddl = render_migration(MIGRATIONS[0], "tenant_x_repair_tickets", {"battery"}, conn)

        assert "AFTER" not in ddl
        assert ddl.startswith('ALTER TABLE "tenant_x_repair_tickets" ADD COLUMN "waterDamaged"')

    def test_render_migration_skips_position_when_neighbor_missing(self):
        conn = MagicMock(dialect=mysql.dialect())

        ddl = render_migration(MIGRATIONS[0], "tenant_x_repair_tickets", {"id"}, conn)

        assert "AFTER" not in ddl


class TestPendingMigrations:
    """Tests for pending_migrations."""

    def test_nothing_pending_without_tables(self):
        assert pending_migrations(derive_table_names("a1b2"), {}) == []

    def test_only_missing_columns_of_existing_tables(self):
        names = derive_table_names("a1b2")
        catalog = {
            names.repair_tickets: set(TABLE_SPECS[TableKind.REPAIR_TICKETS].column_names)
            - {"waterDamaged"},
        }

        pending = pending_migrations(names, catalog)

        assert [(m.kind, m.column) for m in pending] == [
            (TableKind.REPAIR_TICKETS, "waterDamaged")
        ]

    def test_nothing_pending_at_current_version(self):
        names = derive_table_names("a1b2")
        catalog = {
            getattr(names, kind.value): set(spec.column_names)
            for kind, spec in TABLE_SPECS.items()
        }

        assert pending_migrations(names, catalog) == []

"""Canonical per-tenant table definitions.

The column lists below are static, versioned data. The provisioner turns
them into ``CREATE TABLE`` statements and the migrator diffs them against
the live catalog, so a column added here must also be listed in
``MIGRATIONS`` with the version that introduced it.
"""

import enum
import hashlib
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
    text,
)
from sqlalchemy.engine import Dialect
from sqlalchemy.sql import quoted_name
from sqlalchemy.types import TypeEngine

from repairdesk.core.constants import (
    DEFAULT_MEMBER_ROLE,
    DEFAULT_WARRANTY,
    IMEI_LENGTH,
    MAX_BRAND_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NUMBER_LENGTH,
    MAX_ROLE_LENGTH,
)
from repairdesk.core.tenancy.guard import quote_identifier
from repairdesk.core.tenancy.naming import TenantTableSet


TICKET_STATUSES = ("PENDING", "IN_PROGRESS", "COMPLETED", "DELIVERED", "CANCELLED")
DEFAULT_TICKET_STATUS = "PENDING"

MYSQL_TABLE_OPTIONS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_unicode_ci",
}


class TableKind(str, enum.Enum):
    """Per-tenant table kinds; values match ``TenantTableSet`` fields."""

    REPAIR_TICKETS = "repair_tickets"
    TEAM_MEMBERS = "team_members"
    DELETED_TICKETS = "deleted_tickets"
    DELETED_MEMBERS = "deleted_members"


class ColumnType(str, enum.Enum):
    STRING = "string"
    TEXT = "text"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    ENUM = "enum"
    JSON = "json"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """One column of a tenant table.

    Attributes:
        default: Server default as a SQL literal (``"FALSE"``, ``"'PENDING'"``)
        indexed: Whether the column gets a non-unique secondary index
        touch_on_update: Whether updates set the column to the current time
    """

    name: str
    type: ColumnType
    length: int | None = None
    nullable: bool = True
    default: str | None = None
    unique: bool = False
    indexed: bool = False
    primary_key: bool = False
    touch_on_update: bool = False


@dataclass(frozen=True, slots=True)
class TableSpec:
    kind: TableKind
    columns: tuple[ColumnSpec, ...]

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    @property
    def unique_columns(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns if column.unique)

    def column(self, name: str) -> ColumnSpec:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"{self.kind.value} has no column {name!r}")


@dataclass(frozen=True, slots=True)
class ColumnMigration:
    """A column that did not exist before ``version``.

    ``after`` names the neighbouring column the new one is placed behind
    on databases that support column positions.
    """

    version: int
    kind: TableKind
    column: str
    after: str


def _ticket_columns(*, live: bool) -> tuple[ColumnSpec, ...]:
    """Repair ticket columns; the trash copy drops uniqueness and defaults."""

    def flag(name: str) -> ColumnSpec:
        return ColumnSpec(name, ColumnType.BOOLEAN, default="FALSE" if live else None)

    columns = (
        ColumnSpec("id", ColumnType.STRING, MAX_ID_LENGTH, nullable=False, primary_key=True),
        ColumnSpec("userId", ColumnType.STRING, MAX_ID_LENGTH, nullable=False, indexed=True),
        ColumnSpec(
            "repairNumber", ColumnType.STRING, MAX_NUMBER_LENGTH, nullable=False, unique=live
        ),
        ColumnSpec("spu", ColumnType.STRING, MAX_NUMBER_LENGTH, unique=live),
        ColumnSpec("clientId", ColumnType.STRING, MAX_NAME_LENGTH),
        ColumnSpec("customerName", ColumnType.STRING, MAX_NAME_LENGTH, nullable=False),
        ColumnSpec("contact", ColumnType.STRING, MAX_NAME_LENGTH, nullable=False),
        ColumnSpec("imeiNo", ColumnType.STRING, IMEI_LENGTH, nullable=False, unique=live),
        ColumnSpec("brand", ColumnType.STRING, MAX_BRAND_LENGTH, nullable=False),
        ColumnSpec("model", ColumnType.STRING, MAX_BRAND_LENGTH, nullable=False),
        ColumnSpec("serialNo", ColumnType.STRING, MAX_NAME_LENGTH),
        ColumnSpec("softwareVersion", ColumnType.STRING, MAX_BRAND_LENGTH),
        ColumnSpec(
            "warranty",
            ColumnType.STRING,
            MAX_NUMBER_LENGTH,
            default=f"'{DEFAULT_WARRANTY}'" if live else None,
        ),
        flag("simCard"),
        flag("memoryCard"),
        flag("charger"),
        flag("battery"),
        flag("waterDamaged"),
        flag("loanEquipment"),
        ColumnSpec("equipmentObs", ColumnType.TEXT),
        ColumnSpec("repairObs", ColumnType.TEXT),
        ColumnSpec("selectedServices", ColumnType.JSON),
        ColumnSpec("condition", ColumnType.TEXT),
        ColumnSpec("problem", ColumnType.TEXT, nullable=False),
        ColumnSpec("price", ColumnType.DECIMAL, nullable=False),
        ColumnSpec(
            "status",
            ColumnType.ENUM,
            default=f"'{DEFAULT_TICKET_STATUS}'" if live else None,
            indexed=live,
        ),
    )
    return columns + _timestamps(live=live)


def _member_columns(*, live: bool) -> tuple[ColumnSpec, ...]:
    columns = (
        ColumnSpec("id", ColumnType.STRING, MAX_ID_LENGTH, nullable=False, primary_key=True),
        ColumnSpec("userId", ColumnType.STRING, MAX_ID_LENGTH, nullable=False, indexed=True),
        ColumnSpec("name", ColumnType.STRING, MAX_NAME_LENGTH, nullable=False),
        ColumnSpec("email", ColumnType.STRING, MAX_EMAIL_LENGTH, nullable=False),
        ColumnSpec(
            "role",
            ColumnType.STRING,
            MAX_ROLE_LENGTH,
            default=f"'{DEFAULT_MEMBER_ROLE}'" if live else None,
        ),
    )
    return columns + _timestamps(live=live)


def _timestamps(*, live: bool) -> tuple[ColumnSpec, ...]:
    if live:
        return (
            ColumnSpec("createdAt", ColumnType.TIMESTAMP, default="CURRENT_TIMESTAMP"),
            ColumnSpec(
                "updatedAt",
                ColumnType.TIMESTAMP,
                default="CURRENT_TIMESTAMP",
                touch_on_update=True,
            ),
        )
    # Trash rows keep the original timestamps so a restore preserves them
    return (
        ColumnSpec("createdAt", ColumnType.TIMESTAMP),
        ColumnSpec("updatedAt", ColumnType.TIMESTAMP),
        ColumnSpec("deletedAt", ColumnType.TIMESTAMP, default="CURRENT_TIMESTAMP"),
    )


TABLE_SPECS: dict[TableKind, TableSpec] = {
    TableKind.REPAIR_TICKETS: TableSpec(TableKind.REPAIR_TICKETS, _ticket_columns(live=True)),
    TableKind.TEAM_MEMBERS: TableSpec(TableKind.TEAM_MEMBERS, _member_columns(live=True)),
    TableKind.DELETED_TICKETS: TableSpec(
        TableKind.DELETED_TICKETS, _ticket_columns(live=False)
    ),
    TableKind.DELETED_MEMBERS: TableSpec(
        TableKind.DELETED_MEMBERS, _member_columns(live=False)
    ),
}

MIGRATIONS: tuple[ColumnMigration, ...] = (
    ColumnMigration(2, TableKind.REPAIR_TICKETS, "waterDamaged", after="battery"),
    ColumnMigration(2, TableKind.DELETED_TICKETS, "waterDamaged", after="battery"),
    ColumnMigration(3, TableKind.DELETED_TICKETS, "createdAt", after="status"),
    ColumnMigration(3, TableKind.DELETED_TICKETS, "updatedAt", after="createdAt"),
    ColumnMigration(3, TableKind.DELETED_MEMBERS, "createdAt", after="role"),
    ColumnMigration(3, TableKind.DELETED_MEMBERS, "updatedAt", after="createdAt"),
)

SCHEMA_VERSION = max(migration.version for migration in MIGRATIONS)


def index_name(table_name: str, column: str) -> str:
    """Name a secondary index.

    SQLite and PostgreSQL share one index namespace per schema, so the
    name embeds a short digest of the table name; the digest keeps the
    result under the 64-character identifier limit.
    """
    digest = hashlib.blake2b(table_name.encode(), digest_size=6).hexdigest()
    return f"ix_{digest}_{column}"


def column_type(spec: ColumnSpec) -> TypeEngine:
    """Map a logical column type to a SQLAlchemy type."""
    if spec.type is ColumnType.STRING:
        return String(spec.length)
    if spec.type is ColumnType.TEXT:
        return Text()
    if spec.type is ColumnType.DECIMAL:
        return Numeric(10, 2)
    if spec.type is ColumnType.BOOLEAN:
        return Boolean()
    if spec.type is ColumnType.ENUM:
        return Enum(*TICKET_STATUSES, name="ticket_status", create_constraint=False)
    if spec.type is ColumnType.JSON:
        return JSON()
    return DateTime()


def _column(spec: ColumnSpec) -> Column:
    return Column(
        spec.name,
        column_type(spec),
        primary_key=spec.primary_key,
        nullable=spec.nullable and not spec.primary_key,
        unique=spec.unique,
        server_default=text(spec.default) if spec.default is not None else None,
        onupdate=func.now() if spec.touch_on_update else None,
        quote=True,
    )


def build_table(kind: TableKind, name: str) -> Table:
    """Build the SQLAlchemy table for ``kind`` named ``name``.

    Each table gets its own ``MetaData`` so tenants never share state.
    Every identifier is force-quoted.
    """
    spec = TABLE_SPECS[kind]
    table = Table(
        name,
        MetaData(),
        *(_column(column) for column in spec.columns),
        quote=True,
        **MYSQL_TABLE_OPTIONS,
    )
    for column in spec.columns:
        if column.indexed:
            Index(quoted_name(index_name(name, column.name), True), table.c[column.name])
    return table


def render_add_column(kind: TableKind, column: str, dialect: Dialect) -> str:
    """Render the column definition used by ``ALTER TABLE ... ADD COLUMN``."""
    spec = TABLE_SPECS[kind].column(column)
    parts = [
        quote_identifier(spec.name, dialect),
        column_type(spec).compile(dialect=dialect),
        "NULL" if spec.nullable else "NOT NULL",
    ]
    if spec.default is not None:
        parts.append(f"DEFAULT {spec.default}")
    return " ".join(parts)


@dataclass(frozen=True)
class TenantTables:
    """Built SQLAlchemy tables for one tenant."""

    names: TenantTableSet
    repair_tickets: Table
    team_members: Table
    deleted_tickets: Table
    deleted_members: Table

    def by_kind(self, kind: TableKind) -> Table:
        return getattr(self, kind.value)

    def items(self) -> list[tuple[TableKind, Table]]:
        return [(kind, self.by_kind(kind)) for kind in TableKind]


@lru_cache(maxsize=1024)
def build_tenant_tables(names: TenantTableSet) -> TenantTables:
    """Build (and memoize) the four tables for a tenant."""
    return TenantTables(
        names=names,
        **{kind.value: build_table(kind, getattr(names, kind.value)) for kind in TableKind},
    )


def shared_columns(source: TableKind, target: TableKind) -> tuple[str, ...]:
    """Columns present in both kinds, in ``source`` order.

    Used when moving rows between a live table and its trash table.
    """
    target_columns = set(TABLE_SPECS[target].column_names)
    return tuple(c for c in TABLE_SPECS[source].column_names if c in target_columns)

"""Base repository over one tenant's live table and its trash table.

Rows are plain dicts keyed by the stored (camelCase) column names. Every
statement is built with SQLAlchemy Core against the tenant's force-quoted
``Table`` objects, so values always travel as bound parameters.
"""

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from sqlalchemy import Select, Table, delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection

from repairdesk.core.database import Database
from repairdesk.core.database.errors import duplicate_entry_field, is_duplicate_entry
from repairdesk.core.errors import ConstraintViolationError
from repairdesk.core.tenancy.schema import TABLE_SPECS, TableKind, TenantTables, shared_columns


Row = dict[str, Any]

# Columns the API may never write directly
READ_ONLY_COLUMNS = frozenset({"id", "userId", "createdAt", "updatedAt", "deletedAt"})

LIKE_ESCAPE = "/"


def escape_like(value: str) -> str:
    """Escape ``LIKE`` wildcards so ``value`` only matches itself."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class TenantRepository:
    """CRUD plus the soft-delete lifecycle for one record kind.

    Subclasses set ``live_kind``/``trash_kind`` and the columns that the
    free-text search looks at.
    """

    live_kind: ClassVar[TableKind]
    trash_kind: ClassVar[TableKind]
    search_columns: ClassVar[tuple[str, ...]] = ()
    resource: ClassVar[str] = "record"

    def __init__(self, db: Database, tables: TenantTables) -> None:
        self.db = db
        self.tables = tables

    @property
    def live(self) -> Table:
        return self.tables.by_kind(self.live_kind)

    @property
    def trash(self) -> Table:
        return self.tables.by_kind(self.trash_kind)

    @classmethod
    def editable_columns(cls) -> frozenset[str]:
        return frozenset(TABLE_SPECS[cls.live_kind].column_names) - READ_ONLY_COLUMNS

    # ============================================================
    # Reads
    # ============================================================

    def _filtered(self, table: Table, stmt: Select, search: str | None) -> Select:
        if search and self.search_columns:
            pattern = f"%{escape_like(search)}%"
            matches = [
                table.c[name].like(pattern, escape=LIKE_ESCAPE) for name in self.search_columns
            ]
            stmt = stmt.where(or_(*matches))
        return stmt

    async def _page(
        self,
        table: Table,
        order_column: str,
        *,
        search: str | None,
        filters: Mapping[str, Any],
        limit: int,
        offset: int,
    ) -> tuple[list[Row], int]:
        stmt = select(table)
        count_stmt = select(func.count()).select_from(table)
        for name, value in filters.items():
            stmt = stmt.where(table.c[name] == value)
            count_stmt = count_stmt.where(table.c[name] == value)
        stmt = self._filtered(table, stmt, search)
        count_stmt = self._filtered(table, count_stmt, search)
        stmt = stmt.order_by(table.c[order_column].desc(), table.c.id).limit(limit).offset(offset)

        async def read(conn: AsyncConnection) -> tuple[list[Row], int]:
            rows = (await conn.execute(stmt)).mappings().all()
            total = (await conn.execute(count_stmt)).scalar_one()
            return [dict(row) for row in rows], total

        return await self.db.run(read, operation=f"list_{table.name}")

    async def list_records(
        self,
        *,
        search: str | None = None,
        filters: Mapping[str, Any] | None = None,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Row], int]:
        """List live rows, newest first."""
        return await self._page(
            self.live, "createdAt", search=search, filters=filters or {}, limit=limit, offset=offset
        )

    async def list_deleted(
        self, *, search: str | None = None, limit: int, offset: int = 0
    ) -> tuple[list[Row], int]:
        """List trash rows, most recently deleted first."""
        return await self._page(
            self.trash, "deletedAt", search=search, filters={}, limit=limit, offset=offset
        )

    async def _get(self, table: Table, record_id: str) -> Row | None:
        async def read(conn: AsyncConnection) -> Row | None:
            row = (
                (await conn.execute(select(table).where(table.c.id == record_id)))
                .mappings()
                .first()
            )
            return dict(row) if row is not None else None

        return await self.db.run(read, operation=f"get_{table.name}")

    async def get(self, record_id: str) -> Row | None:
        return await self._get(self.live, record_id)

    async def get_deleted(self, record_id: str) -> Row | None:
        return await self._get(self.trash, record_id)

    async def find_by(self, column: str, value: Any) -> Row | None:
        """First live row whose ``column`` equals ``value``."""
        table = self.live

        async def read(conn: AsyncConnection) -> Row | None:
            row = (
                (await conn.execute(select(table).where(table.c[column] == value).limit(1)))
                .mappings()
                .first()
            )
            return dict(row) if row is not None else None

        return await self.db.run(read, operation=f"find_{table.name}")

    # ============================================================
    # Writes
    # ============================================================

    def _constraint_error(self, exc: IntegrityError) -> ConstraintViolationError:
        field = duplicate_entry_field(exc, TABLE_SPECS[self.live_kind].unique_columns)
        message = f"{field} already exists" if field else f"{self.resource} already exists"
        return ConstraintViolationError(message, field=field)

    async def _write(self, work: Any, operation: str) -> Any:
        try:
            return await self.db.run(work, operation=operation)
        except IntegrityError as exc:
            if is_duplicate_entry(exc):
                raise self._constraint_error(exc) from exc
            raise

    async def insert(self, values: Mapping[str, Any]) -> Row:
        """Insert a live row and return it as stored.

        Raises:
            ConstraintViolationError: If a unique column collides
        """
        table = self.live

        async def write(conn: AsyncConnection) -> Row:
            await conn.execute(insert(table).values(**values))
            row = (
                (await conn.execute(select(table).where(table.c.id == values["id"])))
                .mappings()
                .one()
            )
            return dict(row)

        return await self._write(write, f"insert_{table.name}")

    async def update(self, record_id: str, values: Mapping[str, Any]) -> Row | None:
        """Update editable columns; unknown columns are dropped.

        Returns:
            The updated row, or None if it does not exist
        """
        table = self.live
        allowed = self.editable_columns()
        changes = {name: value for name, value in values.items() if name in allowed}

        async def write(conn: AsyncConnection) -> Row | None:
            if changes:
                await conn.execute(update(table).where(table.c.id == record_id).values(**changes))
            row = (
                (await conn.execute(select(table).where(table.c.id == record_id)))
                .mappings()
                .first()
            )
            return dict(row) if row is not None else None

        return await self._write(write, f"update_{table.name}")

    async def _move(
        self,
        record_id: str,
        source: Table,
        target: Table,
        columns: Iterable[str],
        operation: str,
    ) -> bool:
        columns = tuple(columns)

        async def move(conn: AsyncConnection) -> bool:
            row = (
                (await conn.execute(select(source).where(source.c.id == record_id)))
                .mappings()
                .first()
            )
            if row is None:
                return False
            await conn.execute(insert(target).values({name: row[name] for name in columns}))
            await conn.execute(delete(source).where(source.c.id == record_id))
            return True

        return await self._write(move, operation)

    async def soft_delete(self, record_id: str) -> bool:
        """Move a live row into the trash table, keeping its id.

        Copy and delete share one transaction: the row is never lost and
        never present in both tables.
        """
        return await self._move(
            record_id,
            self.live,
            self.trash,
            shared_columns(self.live_kind, self.trash_kind),
            f"soft_delete_{self.live.name}",
        )

    async def restore(self, record_id: str) -> bool:
        """Move a trash row back into the live table.

        Raises:
            ConstraintViolationError: If the row collides with a live row;
                the trash row is left in place
        """
        return await self._move(
            record_id,
            self.trash,
            self.live,
            shared_columns(self.trash_kind, self.live_kind),
            f"restore_{self.live.name}",
        )

    async def purge(self, record_id: str) -> bool:
        """Permanently delete a trash row."""
        table = self.trash

        async def write(conn: AsyncConnection) -> bool:
            result = await conn.execute(delete(table).where(table.c.id == record_id))
            return result.rowcount > 0

        return await self.db.run(write, operation=f"purge_{table.name}")

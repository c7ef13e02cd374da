"""Repair ticket repository."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from repairdesk.api.dependencies import DatabaseDep
from repairdesk.core.auth import CurrentTenantTables
from repairdesk.core.tenancy.repository import LIKE_ESCAPE, TenantRepository, escape_like
from repairdesk.core.tenancy.schema import TableKind


class TicketRepository(TenantRepository):
    """Repair tickets and their trash, for one tenant."""

    live_kind = TableKind.REPAIR_TICKETS
    trash_kind = TableKind.DELETED_TICKETS
    search_columns = (
        "repairNumber",
        "imeiNo",
        "customerName",
        "contact",
        "clientId",
        "serialNo",
    )
    resource = "repair ticket"

    async def latest_with_prefix(self, column: str, prefix: str) -> str | None:
        """Greatest value of ``column`` that starts with ``prefix``.

        Sequences are zero-padded but outgrow the padding (``2025-9999`` is
        followed by ``2025-10000``), so longer values sort first.
        """
        table = self.live
        value = table.c[column]
        stmt = (
            select(value)
            .where(value.like(f"{escape_like(prefix)}%", escape=LIKE_ESCAPE))
            .order_by(func.length(value).desc(), value.desc())
            .limit(1)
        )

        async def read(conn: AsyncConnection) -> str | None:
            return (await conn.execute(stmt)).scalar_one_or_none()

        return await self.db.run(read, operation=f"latest_{column}")


def get_ticket_repository(db: DatabaseDep, tables: CurrentTenantTables) -> TicketRepository:
    return TicketRepository(db, tables)


TicketRepo = Annotated[TicketRepository, Depends(get_ticket_repository)]

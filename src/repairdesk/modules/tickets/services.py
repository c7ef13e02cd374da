"""Repair ticket business logic."""

from datetime import UTC, datetime
from typing import Annotated, Any

import structlog
from fastapi import Depends

from repairdesk.config import settings
from repairdesk.core.database import new_id
from repairdesk.core.errors import ConstraintViolationError, NotFoundError
from repairdesk.core.tenancy.repository import Row
from repairdesk.modules.tickets import numbering
from repairdesk.modules.tickets.repos import TicketRepo, TicketRepository
from repairdesk.modules.tickets.schemas import TicketCreate, TicketStatus, TicketUpdate


logger = structlog.get_logger()

# Collisions on these columns mean a concurrent create took the number
REGENERATED_FIELDS = frozenset({"repairNumber", "spu"})


def _not_found(ticket_id: str, *, deleted: bool = False) -> NotFoundError:
    if deleted:
        return NotFoundError(
            "Deleted repair ticket not found", resource="deleted_ticket", resource_id=ticket_id
        )
    return NotFoundError("Repair ticket not found", resource="repair_ticket", resource_id=ticket_id)


class TicketService:
    """Service for repair ticket operations.

    Usage:
        service = TicketService(repo)
        ticket = await service.create_ticket(data, actor_id)
    """

    def __init__(self, repo: TicketRepository, max_attempts: int | None = None) -> None:
        self.repo = repo
        self.max_attempts = max_attempts or settings.ticket_number_attempts

    # ============================================================
    # Numbering
    # ============================================================

    async def next_repair_number(self, now: datetime) -> str:
        current, legacy = numbering.repair_number_prefixes(now)
        latest = max(
            numbering.sequence_of(await self.repo.latest_with_prefix("repairNumber", current)),
            numbering.sequence_of(await self.repo.latest_with_prefix("repairNumber", legacy)),
        )
        return numbering.format_repair_number(now, latest + 1)

    async def next_spu(self, selected_services: list[str]) -> str:
        prefix = numbering.spu_prefix(selected_services)
        latest = await self.repo.latest_with_prefix("spu", prefix)
        return numbering.format_spu(prefix, numbering.sequence_of(latest) + 1)

    async def next_serial_number(self, now: datetime) -> str:
        prefix = numbering.serial_number_prefix(now)
        latest = await self.repo.latest_with_prefix("serialNo", prefix)
        return numbering.format_serial_number(prefix, numbering.sequence_of(latest) + 1)

    # ============================================================
    # CRUD
    # ============================================================

    async def list_tickets(
        self,
        *,
        status: TicketStatus | None = None,
        search: str | None = None,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Row], int]:
        filters: dict[str, Any] = {}
        if status is not None:
            filters["status"] = TicketStatus(status).value
        return await self.repo.list_records(
            search=search or None, filters=filters, limit=limit, offset=offset
        )

    async def get_ticket(self, ticket_id: str) -> Row:
        """Get a live ticket.

        Raises:
            NotFoundError: If the ticket does not exist
        """
        ticket = await self.repo.get(ticket_id)
        if ticket is None:
            raise _not_found(ticket_id)
        return ticket

    async def create_ticket(self, data: TicketCreate, actor_id: str) -> Row:
        """Open a ticket with freshly generated numbers.

        A collision on the repair number or SPU means another request
        generated the same number first; the numbers are regenerated and
        the insert retried up to ``max_attempts`` times.

        Raises:
            ConstraintViolationError: If the IMEI is already used, or numbers
                still collide after the last attempt
        """
        if await self.repo.find_by("imeiNo", data.imei_no) is not None:
            raise ConstraintViolationError(
                "IMEI already exists. Please use a different IMEI.", field="imeiNo"
            )

        fields = data.model_dump(by_alias=True, exclude={"serial_no"})
        supplied_serial = (data.serial_no or "").strip()

        attempt = 1
        while True:
            now = datetime.now(UTC)
            values = {
                **fields,
                "id": new_id(),
                "userId": actor_id,
                "repairNumber": await self.next_repair_number(now),
                "spu": await self.next_spu(data.selected_services),
                "serialNo": supplied_serial or await self.next_serial_number(now),
            }
            try:
                ticket = await self.repo.insert(values)
            except ConstraintViolationError as exc:
                if exc.field not in REGENERATED_FIELDS or attempt >= self.max_attempts:
                    raise
                logger.info(
                    "ticket_number_collision",
                    field=exc.field,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                )
                attempt += 1
                continue

            logger.info(
                "repair_ticket_created",
                ticket_id=ticket["id"],
                repair_number=ticket["repairNumber"],
            )
            return ticket

    async def update_ticket(self, ticket_id: str, data: TicketUpdate) -> Row:
        changes = data.model_dump(by_alias=True, exclude_unset=True)
        if "imeiNo" in changes:
            clash = await self.repo.find_by("imeiNo", changes["imeiNo"])
            if clash is not None and clash["id"] != ticket_id:
                raise ConstraintViolationError(
                    "IMEI already exists. Please use a different IMEI.", field="imeiNo"
                )
        ticket = await self.repo.update(ticket_id, changes)
        if ticket is None:
            raise _not_found(ticket_id)
        return ticket

    async def delete_ticket(self, ticket_id: str) -> None:
        """Move a ticket to the trash."""
        if not await self.repo.soft_delete(ticket_id):
            raise _not_found(ticket_id)
        logger.info("repair_ticket_deleted", ticket_id=ticket_id)

    # ============================================================
    # Trash
    # ============================================================

    async def list_deleted(
        self, *, search: str | None = None, limit: int, offset: int = 0
    ) -> tuple[list[Row], int]:
        return await self.repo.list_deleted(search=search or None, limit=limit, offset=offset)

    async def restore_ticket(self, ticket_id: str) -> Row:
        """Move a ticket back from the trash, keeping its id.

        Raises:
            NotFoundError: If the ticket is not in the trash
            ConstraintViolationError: If a live ticket now holds its IMEI,
                repair number or SPU
        """
        if not await self.repo.restore(ticket_id):
            raise _not_found(ticket_id, deleted=True)
        logger.info("repair_ticket_restored", ticket_id=ticket_id)
        return await self.get_ticket(ticket_id)

    async def purge_ticket(self, ticket_id: str) -> None:
        if not await self.repo.purge(ticket_id):
            raise _not_found(ticket_id, deleted=True)
        logger.info("repair_ticket_purged", ticket_id=ticket_id)


def get_ticket_service(repo: TicketRepo) -> TicketService:
    return TicketService(repo)


TicketSvc = Annotated[TicketService, Depends(get_ticket_service)]

"""Repair ticket API routes."""

from fastapi import Query, status

from repairdesk.core.auth import CurrentActorId
from repairdesk.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from repairdesk.modules.tickets import router
from repairdesk.modules.tickets.schemas import (
    DeletedTicketListResponse,
    DeletedTicketResponse,
    TicketCreate,
    TicketListResponse,
    TicketResponse,
    TicketStatus,
    TicketUpdate,
)
from repairdesk.modules.tickets.services import TicketSvc


# ============================================================
# Live tickets
# ============================================================


@router.get(
    "",
    response_model=TicketListResponse,
    summary="List repair tickets",
    description="Newest first. Optionally filter by status and search by number, IMEI, "
    "customer, contact, client id or serial number.",
)
async def list_tickets(
    service: TicketSvc,
    status_filter: TicketStatus | None = Query(None, alias="status"),
    q: str | None = Query(None, max_length=255, description="Free-text search"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> TicketListResponse:
    rows, total = await service.list_tickets(
        status=status_filter, search=q, limit=limit, offset=offset
    )
    return TicketListResponse(
        items=[TicketResponse.model_validate(row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create repair ticket",
)
async def create_ticket(
    data: TicketCreate,
    actor_id: CurrentActorId,
    service: TicketSvc,
) -> TicketResponse:
    ticket = await service.create_ticket(data, actor_id)
    return TicketResponse.model_validate(ticket)


# ============================================================
# Trash
# ============================================================


@router.get(
    "/trash",
    response_model=DeletedTicketListResponse,
    summary="List deleted repair tickets",
)
async def list_deleted_tickets(
    service: TicketSvc,
    q: str | None = Query(None, max_length=255),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> DeletedTicketListResponse:
    rows, total = await service.list_deleted(search=q, limit=limit, offset=offset)
    return DeletedTicketListResponse(
        items=[DeletedTicketResponse.model_validate(row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/trash/{ticket_id}/restore",
    response_model=TicketResponse,
    summary="Restore deleted repair ticket",
)
async def restore_ticket(ticket_id: str, service: TicketSvc) -> TicketResponse:
    ticket = await service.restore_ticket(ticket_id)
    return TicketResponse.model_validate(ticket)


@router.delete(
    "/trash/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Permanently delete repair ticket",
)
async def purge_ticket(ticket_id: str, service: TicketSvc) -> None:
    await service.purge_ticket(ticket_id)


# ============================================================
# Single ticket
# ============================================================


@router.get("/{ticket_id}", response_model=TicketResponse, summary="Get repair ticket")
async def get_ticket(ticket_id: str, service: TicketSvc) -> TicketResponse:
    return TicketResponse.model_validate(await service.get_ticket(ticket_id))


@router.patch("/{ticket_id}", response_model=TicketResponse, summary="Update repair ticket")
async def update_ticket(ticket_id: str, data: TicketUpdate, service: TicketSvc) -> TicketResponse:
    return TicketResponse.model_validate(await service.update_ticket(ticket_id, data))


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete repair ticket",
    description="Moves the ticket to the trash; it can be restored later.",
)
async def delete_ticket(ticket_id: str, service: TicketSvc) -> None:
    await service.delete_ticket(ticket_id)

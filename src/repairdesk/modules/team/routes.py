"""Team member API routes."""

from fastapi import Query, status

from repairdesk.core.auth import CurrentActorId
from repairdesk.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from repairdesk.modules.team import router
from repairdesk.modules.team.schemas import (
    DeletedMemberListResponse,
    DeletedMemberResponse,
    MemberCreate,
    MemberListResponse,
    MemberResponse,
    MemberUpdate,
)
from repairdesk.modules.team.services import TeamSvc


@router.get("", response_model=MemberListResponse, summary="List team members")
async def list_members(
    service: TeamSvc,
    q: str | None = Query(None, max_length=255),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> MemberListResponse:
    rows, total = await service.list_members(search=q, limit=limit, offset=offset)
    return MemberListResponse(
        items=[MemberResponse.model_validate(row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add team member",
)
async def create_member(
    data: MemberCreate, actor_id: CurrentActorId, service: TeamSvc
) -> MemberResponse:
    return MemberResponse.model_validate(await service.create_member(data, actor_id))


@router.get("/trash", response_model=DeletedMemberListResponse, summary="List removed members")
async def list_deleted_members(
    service: TeamSvc,
    q: str | None = Query(None, max_length=255),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> DeletedMemberListResponse:
    rows, total = await service.list_deleted(search=q, limit=limit, offset=offset)
    return DeletedMemberListResponse(
        items=[DeletedMemberResponse.model_validate(row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/trash/{member_id}/restore",
    response_model=MemberResponse,
    summary="Restore removed member",
)
async def restore_member(member_id: str, service: TeamSvc) -> MemberResponse:
    return MemberResponse.model_validate(await service.restore_member(member_id))


@router.delete(
    "/trash/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Permanently delete member",
)
async def purge_member(member_id: str, service: TeamSvc) -> None:
    await service.purge_member(member_id)


@router.get("/{member_id}", response_model=MemberResponse, summary="Get team member")
async def get_member(member_id: str, service: TeamSvc) -> MemberResponse:
    return MemberResponse.model_validate(await service.get_member(member_id))


@router.patch("/{member_id}", response_model=MemberResponse, summary="Update team member")
async def update_member(member_id: str, data: MemberUpdate, service: TeamSvc) -> MemberResponse:
    return MemberResponse.model_validate(await service.update_member(member_id, data))


@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove team member",
    description="Moves the member to the trash; it can be restored later.",
)
async def delete_member(member_id: str, service: TeamSvc) -> None:
    await service.delete_member(member_id)

"""Team member business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from repairdesk.core.database import new_id
from repairdesk.core.errors import ConstraintViolationError, NotFoundError
from repairdesk.core.tenancy.repository import Row
from repairdesk.modules.team.repos import MemberRepo, MemberRepository
from repairdesk.modules.team.schemas import MemberCreate, MemberUpdate


logger = structlog.get_logger()


def _not_found(member_id: str, *, deleted: bool = False) -> NotFoundError:
    if deleted:
        return NotFoundError(
            "Deleted team member not found", resource="deleted_member", resource_id=member_id
        )
    return NotFoundError("Team member not found", resource="team_member", resource_id=member_id)


class TeamService:
    """Service for team member operations.

    Emails are unique among a tenant's live members. The table carries no
    unique index on ``email``, so the check happens here.
    """

    def __init__(self, repo: MemberRepository) -> None:
        self.repo = repo

    async def _ensure_email_free(self, email: str, member_id: str | None = None) -> None:
        clash = await self.repo.find_by("email", email)
        if clash is not None and clash["id"] != member_id:
            raise ConstraintViolationError("Email already exists", field="email")

    async def list_members(
        self, *, search: str | None = None, limit: int, offset: int = 0
    ) -> tuple[list[Row], int]:
        return await self.repo.list_records(search=search or None, limit=limit, offset=offset)

    async def get_member(self, member_id: str) -> Row:
        member = await self.repo.get(member_id)
        if member is None:
            raise _not_found(member_id)
        return member

    async def create_member(self, data: MemberCreate, actor_id: str) -> Row:
        """Add a team member.

        Raises:
            ConstraintViolationError: If a live member already uses the email
        """
        await self._ensure_email_free(data.email)
        member = await self.repo.insert(
            {**data.model_dump(by_alias=True), "id": new_id(), "userId": actor_id}
        )
        logger.info("team_member_created", member_id=member["id"])
        return member

    async def update_member(self, member_id: str, data: MemberUpdate) -> Row:
        changes = data.model_dump(by_alias=True, exclude_unset=True)
        if changes.get("email"):
            await self._ensure_email_free(changes["email"], member_id)
        member = await self.repo.update(member_id, changes)
        if member is None:
            raise _not_found(member_id)
        return member

    async def delete_member(self, member_id: str) -> None:
        if not await self.repo.soft_delete(member_id):
            raise _not_found(member_id)
        logger.info("team_member_deleted", member_id=member_id)

    async def list_deleted(
        self, *, search: str | None = None, limit: int, offset: int = 0
    ) -> tuple[list[Row], int]:
        return await self.repo.list_deleted(search=search or None, limit=limit, offset=offset)

    async def restore_member(self, member_id: str) -> Row:
        """Move a member back from the trash.

        Raises:
            NotFoundError: If the member is not in the trash
            ConstraintViolationError: If a live member now uses the email
        """
        deleted = await self.repo.get_deleted(member_id)
        if deleted is None:
            raise _not_found(member_id, deleted=True)
        await self._ensure_email_free(deleted["email"], member_id)
        if not await self.repo.restore(member_id):
            raise _not_found(member_id, deleted=True)
        logger.info("team_member_restored", member_id=member_id)
        return await self.get_member(member_id)

    async def purge_member(self, member_id: str) -> None:
        if not await self.repo.purge(member_id):
            raise _not_found(member_id, deleted=True)
        logger.info("team_member_purged", member_id=member_id)


def get_team_service(repo: MemberRepo) -> TeamService:
    return TeamService(repo)


TeamSvc = Annotated[TeamService, Depends(get_team_service)]

"""Team member repository."""

from typing import Annotated

from fastapi import Depends

from repairdesk.api.dependencies import DatabaseDep
from repairdesk.core.auth import CurrentTenantTables
from repairdesk.core.tenancy.repository import TenantRepository
from repairdesk.core.tenancy.schema import TableKind


class MemberRepository(TenantRepository):
    live_kind = TableKind.TEAM_MEMBERS
    trash_kind = TableKind.DELETED_MEMBERS
    search_columns = ("name", "email", "role")
    resource = "team member"


def get_member_repository(db: DatabaseDep, tables: CurrentTenantTables) -> MemberRepository:
    return MemberRepository(db, tables)


MemberRepo = Annotated[MemberRepository, Depends(get_member_repository)]

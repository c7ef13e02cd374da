"""Account repository."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from repairdesk.api.dependencies import DBSession
from repairdesk.modules.users.models import User


class UserRepository:
    """Read access to the global ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def list_tenant_ids(self) -> list[str]:
        """Every assigned tenant id, in a stable order."""
        result = await self.session.execute(
            select(User.tenant_id)
            .where(User.tenant_id.is_not(None))
            .order_by(User.tenant_id)
        )
        return [tenant_id for tenant_id in result.scalars() if tenant_id]


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]

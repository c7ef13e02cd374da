"""Pytest configuration and shared fixtures.

Integration tests run against a throwaway SQLite file per test. The
tenant machinery only relies on catalog inspection and portable DDL, so
the same code paths run here as on MySQL (minus column positions).
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from repairdesk.core.auth import create_access_token
from repairdesk.core.database import Base, Database
from repairdesk.main import create_app
from repairdesk.modules.users.models import User


TENANT_ID = "a1b2-c3d4"
OTHER_TENANT_ID = "e5f6-a7b8"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Database with the global ``users`` table created."""
    db = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'repairdesk.db'}",
        retry_attempts=0,
        retry_base_delay=0,
    )
    await db.run(lambda conn: conn.run_sync(Base.metadata.create_all))

    yield db

    await db.dispose()


@pytest.fixture
async def app(database: Database) -> FastAPI:
    """Create test application instance."""
    return create_app(database=database)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Accounts
# ============================================================


async def create_user(db: Database, tenant_id: str | None, email: str) -> User:
    async with db.session() as session:
        user = User(name="Shop Owner", email=email, shop_name="Fix It", tenant_id=tenant_id)
        session.add(user)
        await session.flush()
    return user


@pytest.fixture
async def user(database: Database) -> User:
    """Account owning tenant ``a1b2-c3d4``."""
    return await create_user(database, TENANT_ID, "owner@example.com")


@pytest.fixture
async def other_user(database: Database) -> User:
    """Account owning tenant ``e5f6-a7b8``."""
    return await create_user(database, OTHER_TENANT_ID, "other@example.com")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers(user: User) -> dict[str, str]:
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user: User) -> dict[str, str]:
    return auth_headers(other_user)

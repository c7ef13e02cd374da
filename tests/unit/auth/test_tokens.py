"""Unit tests for JWT helpers and the tenant resolver."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from repairdesk.config import settings
from repairdesk.core.auth.backend import create_access_token, decode_token
from repairdesk.core.auth.dependencies import get_current_tenant_id, get_token_data
from repairdesk.core.errors import NotFoundError, UnauthorizedError, ValidationError


pytestmark = pytest.mark.unit


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAccessTokens:
    """Tests for create_access_token and decode_token."""

    def test_round_trip_carries_actor_only(self):
        token = create_access_token("user-1")

        data = decode_token(token)

        assert data is not None
        assert data.actor_id == "user-1"
        assert data.type == "access"
        claims = jwt.get_unverified_claims(token)
        assert "tenant_id" not in claims

    def test_expired_token_is_rejected(self):
        token = create_access_token("user-1", expires_delta=timedelta(seconds=-1))

        assert decode_token(token) is None

    def test_wrong_key_is_rejected(self):
        token = jwt.encode({"sub": "user-1", "exp": 9999999999}, "x" * 40, algorithm="HS256")

        assert decode_token(token) is None

    def test_missing_subject_is_rejected(self):
        token = jwt.encode(
            {"exp": 9999999999}, settings.secret_key, algorithm=settings.jwt_algorithm
        )

        assert decode_token(token) is None


class TestGetTokenData:
    """Tests for get_token_data."""

    async def test_missing_credentials(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await get_token_data(None)

        assert exc_info.value.error_code == "missing_token"

    async def test_garbage_token(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await get_token_data(bearer("not-a-jwt"))

        assert exc_info.value.error_code == "invalid_token"

    async def test_refresh_tokens_are_not_accepted(self):
        token = create_access_token("user-1", additional_claims={"type": "refresh"})

        with pytest.raises(UnauthorizedError) as exc_info:
            await get_token_data(bearer(token))

        assert exc_info.value.error_code == "invalid_token_type"


class TestGetCurrentTenantId:
    """Tests for the tenant resolver."""

    @pytest.fixture
    def request_(self):
        return MagicMock(state=SimpleNamespace())

    async def test_resolves_tenant_from_account(self, request_):
        users = AsyncMock()
        users.get_by_id.return_value = SimpleNamespace(id="user-1", tenant_id="a1b2-c3d4")

        tenant_id = await get_current_tenant_id(request_, "user-1", users)

        assert tenant_id == "a1b2-c3d4"
        assert request_.state.tenant_id == "a1b2-c3d4"
        users.get_by_id.assert_awaited_once_with("user-1")

    async def test_unknown_account(self, request_):
        users = AsyncMock()
        users.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await get_current_tenant_id(request_, "ghost", users)

    async def test_account_without_tenant(self, request_):
        users = AsyncMock()
        users.get_by_id.return_value = SimpleNamespace(id="user-1", tenant_id=None)

        with pytest.raises(ValidationError):
            await get_current_tenant_id(request_, "user-1", users)

    async def test_unusable_tenant_id(self, request_):
        users = AsyncMock()
        users.get_by_id.return_value = SimpleNamespace(id="user-1", tenant_id="t" * 100)

        with pytest.raises(ValidationError):
            await get_current_tenant_id(request_, "user-1", users)

"""FastAPI dependencies for the acting account and its tenant.

This module provides:
- Extracting and validating the bearer token
- Resolving the actor's tenant id from the accounts table
- Preparing the tenant's tables before a route touches them
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from repairdesk.api.dependencies import SchemaManager
from repairdesk.core.auth.backend import decode_token
from repairdesk.core.auth.schemas import TokenData
from repairdesk.core.errors import NotFoundError, UnauthorizedError, ValidationError
from repairdesk.core.tenancy import TenantTables, validate_tenant_id
from repairdesk.modules.users.repos import UserRepo


bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_data(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenData:
    """Extract and validate token data from the Authorization header.

    Raises:
        UnauthorizedError: If token is missing or invalid
    """
    if not credentials:
        raise UnauthorizedError("Missing authentication token", error_code="missing_token")

    token_data = decode_token(credentials.credentials)
    if not token_data:
        raise UnauthorizedError("Invalid or expired token", error_code="invalid_token")

    if token_data.type != "access":
        raise UnauthorizedError("Invalid token type", error_code="invalid_token_type")

    return token_data


async def get_current_actor_id(
    token_data: Annotated[TokenData, Depends(get_token_data)],
) -> str:
    return token_data.actor_id


CurrentActorId = Annotated[str, Depends(get_current_actor_id)]


async def get_current_tenant_id(
    request: Request,
    actor_id: CurrentActorId,
    users: UserRepo,
) -> str:
    """Resolve the tenant the actor may operate on.

    Raises:
        NotFoundError: If the account does not exist
        ValidationError: If the account has no usable tenant id
    """
    user = await users.get_by_id(actor_id)
    if user is None:
        raise NotFoundError("User not found", resource="user", resource_id=actor_id)
    if not user.tenant_id:
        raise ValidationError("Account has no tenant", details={"user_id": actor_id})

    tenant_id = validate_tenant_id(user.tenant_id)
    request.state.tenant_id = tenant_id
    structlog.contextvars.bind_contextvars(tenant_id=tenant_id, user_id=actor_id)
    return tenant_id


CurrentTenantId = Annotated[str, Depends(get_current_tenant_id)]


async def get_tenant_tables(tenant_id: CurrentTenantId, manager: SchemaManager) -> TenantTables:
    """Provision/migrate the actor's tables and hand them to the route."""
    return await manager.prepare(tenant_id)


CurrentTenantTables = Annotated[TenantTables, Depends(get_tenant_tables)]

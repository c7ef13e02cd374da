"""Actor authentication and tenant resolution."""

from repairdesk.core.auth.backend import create_access_token, decode_token
from repairdesk.core.auth.dependencies import (
    CurrentActorId,
    CurrentTenantId,
    CurrentTenantTables,
    get_current_tenant_id,
    get_tenant_tables,
)
from repairdesk.core.auth.schemas import TokenData


__all__ = [
    "CurrentActorId",
    "CurrentTenantId",
    "CurrentTenantTables",
    "TokenData",
    "create_access_token",
    "decode_token",
    "get_current_tenant_id",
    "get_tenant_tables",
]

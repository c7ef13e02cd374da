"""Tenant schema API routes."""

from repairdesk.core.auth import CurrentTenantId
from repairdesk.modules.tenants import router
from repairdesk.modules.tenants.schemas import SchemaEnsureResponse, SchemaStatusResponse
from repairdesk.modules.tenants.services import TenantSchemaSvc


@router.get(
    "/me/schema",
    response_model=SchemaStatusResponse,
    summary="Tenant schema status",
    description="Lists the caller's tables and whether each exists. Read-only.",
)
async def get_schema_status(
    tenant_id: CurrentTenantId, service: TenantSchemaSvc
) -> SchemaStatusResponse:
    return await service.status(tenant_id)


@router.post(
    "/me/schema",
    response_model=SchemaEnsureResponse,
    summary="Provision and migrate tenant tables",
    description="Creates missing tables and adds missing columns. Safe to repeat.",
)
async def ensure_schema(
    tenant_id: CurrentTenantId, service: TenantSchemaSvc
) -> SchemaEnsureResponse:
    return await service.ensure(tenant_id)

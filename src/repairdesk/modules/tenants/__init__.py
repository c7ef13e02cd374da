"""Self-service view of the caller's tenant tables."""

from fastapi import APIRouter


router = APIRouter(prefix="/tenants", tags=["tenants"])

# Import routes to register them (must be after router is defined)
from repairdesk.modules.tenants import routes  # noqa: F401, E402

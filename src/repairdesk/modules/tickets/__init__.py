"""Repair tickets stored in each tenant's own tables."""

from fastapi import APIRouter


router = APIRouter(prefix="/repairs", tags=["repairs"])

# Import routes to register them (must be after router is defined)
from repairdesk.modules.tickets import routes  # noqa: F401, E402

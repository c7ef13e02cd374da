"""Shop team members stored in each tenant's own tables."""

from fastapi import APIRouter


router = APIRouter(prefix="/team-members", tags=["team"])

# Import routes to register them (must be after router is defined)
from repairdesk.modules.team import routes  # noqa: F401, E402

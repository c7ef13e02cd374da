"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from repairdesk.core.database import Database, get_database, get_db
from repairdesk.core.tenancy import TenantSchemaManager


# Type alias for the ORM session over global tables
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Type alias for the process-wide pool
DatabaseDep = Annotated[Database, Depends(get_database)]


def get_schema_manager(request: Request) -> TenantSchemaManager:
    return request.app.state.schema_manager


SchemaManager = Annotated[TenantSchemaManager, Depends(get_schema_manager)]

"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repairdesk import __version__
from repairdesk.api.router import api_router
from repairdesk.config import settings
from repairdesk.core.database import Database
from repairdesk.core.errors import register_exception_handlers
from repairdesk.core.logging import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
)
from repairdesk.core.tenancy import TenantSchemaManager


configure_logging(settings)

logger = structlog.get_logger()


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Pool to use instead of building one from settings. The
            app disposes only the pool it built itself.

    Returns:
        Configured FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            environment=settings.environment,
        )
        owned = database is None
        if owned:
            app.state.database = Database.from_settings(settings)
            app.state.schema_manager = TenantSchemaManager(app.state.database)

        yield

        logger.info("application_shutdown")
        if owned:
            await app.state.database.dispose()
            logger.info("database_pool_disposed")

    app = FastAPI(
        title=settings.app_name,
        description="Repair shop backend with per-tenant table isolation",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    # Available before the lifespan runs, e.g. under transports that skip it
    if database is not None:
        app.state.database = database
        app.state.schema_manager = TenantSchemaManager(database)

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Added last so it runs first and the logging middleware sees the id
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app

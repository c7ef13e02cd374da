"""ARQ worker configuration.

Run the worker with:
    arq repairdesk.core.jobs.worker.WorkerSettings
"""

from typing import Any, ClassVar

import structlog
from arq import cron
from arq.connections import RedisSettings

from repairdesk.config import settings
from repairdesk.core.database import Database
from repairdesk.core.jobs.tasks import migrate_all_tenants
from repairdesk.core.logging import configure_logging


async def startup(ctx: dict[str, Any]) -> None:
    """Create the database pool shared by all jobs."""
    configure_logging(settings)
    log = structlog.get_logger()
    log.info("worker_startup", environment=settings.environment)

    ctx["database"] = Database.from_settings(settings)

    log.info("worker_startup_complete")


async def shutdown(ctx: dict[str, Any]) -> None:
    log = structlog.get_logger()
    log.info("worker_shutdown")

    database = ctx.get("database")
    if database is not None:
        await database.dispose()
        log.info("database_pool_disposed")

    log.info("worker_shutdown_complete")


class WorkerSettings:
    """ARQ worker settings."""

    functions: ClassVar[list[Any]] = [
        migrate_all_tenants,
    ]

    cron_jobs: ClassVar[list[Any]] = [
        # Bring every tenant to the current schema daily at 4 AM
        cron(migrate_all_tenants, hour=4, minute=0),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = RedisSettings.from_dsn(str(settings.redis_url))

    max_jobs = 10
    job_timeout = 1800  # 30 minutes; one pass over every tenant
    keep_result = 3600
    max_tries = 1

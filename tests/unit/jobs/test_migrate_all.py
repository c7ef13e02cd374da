"""Unit tests for the nightly tenant migration job."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from repairdesk.core.jobs.tasks import migrate_all_tenants
from repairdesk.core.jobs.worker import WorkerSettings, shutdown
from repairdesk.core.tenancy import MIGRATIONS


pytestmark = pytest.mark.unit

TASKS = "repairdesk.core.jobs.tasks.tenants"


def fake_database() -> MagicMock:
    db = MagicMock()

    @asynccontextmanager
    async def session():
        yield MagicMock()

    db.session = session
    return db


class TestMigrateAllTenants:
    """Tests for migrate_all_tenants."""

    async def test_continues_past_failing_tenant(self):
        db = fake_database()
        failure = OperationalError("ALTER TABLE", {}, Exception(1142, "ALTER command denied"))

        with (
            patch(f"{TASKS}.UserRepository") as repo_cls,
            patch(f"{TASKS}.ensure_tenant_schema", new_callable=AsyncMock) as ensure,
            patch(f"{TASKS}.migrate_tenant_schema", new_callable=AsyncMock) as migrate,
        ):
            repo_cls.return_value.list_tenant_ids = AsyncMock(return_value=["t1", "t2", "t3"])
            migrate.side_effect = [[MIGRATIONS[0]], failure, []]

            result = await migrate_all_tenants({"database": db})

        assert result == {"tenants": 3, "migrated": 2, "failed": ["t2"], "columns_added": 1}
        assert ensure.await_count == 3

    async def test_no_tenants(self):
        db = fake_database()

        with patch(f"{TASKS}.UserRepository") as repo_cls:
            repo_cls.return_value.list_tenant_ids = AsyncMock(return_value=[])

            result = await migrate_all_tenants({"database": db})

        assert result["tenants"] == 0
        assert result["failed"] == []


class TestWorkerSettings:
    """Tests for the arq worker configuration."""

    def test_job_is_registered(self):
        assert migrate_all_tenants in WorkerSettings.functions

    def test_runs_nightly_at_four(self):
        (job,) = WorkerSettings.cron_jobs

        assert job.coroutine is migrate_all_tenants
        assert job.hour == 4
        assert job.minute == 0

    async def test_shutdown_disposes_pool(self):
        db = AsyncMock()

        await shutdown({"database": db})

        db.dispose.assert_awaited_once()

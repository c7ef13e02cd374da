"""Background job tasks."""

from repairdesk.core.jobs.tasks.tenants import migrate_all_tenants, migrate_tenants


__all__ = [
    "migrate_all_tenants",
    "migrate_tenants",
]

"""Command group: repairdesk tenants - inspect and maintain tenant tables."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table

from repairdesk.config import settings
from repairdesk.core.database import Database
from repairdesk.core.errors import AppException
from repairdesk.core.tenancy import TableKind, derive_table_names


console = Console()

app = typer.Typer(help="Inspect and maintain per-tenant tables.", no_args_is_help=True)

T = TypeVar("T")


def open_database() -> Database:
    return Database.from_settings(settings)


def _run(work: Callable[[Database], Awaitable[T]]) -> T:
    """Run ``work`` against a fresh pool, disposing it afterwards."""

    async def runner() -> T:
        db = open_database()
        try:
            return await work(db)
        finally:
            await db.dispose()

    try:
        return asyncio.run(runner())
    except AppException as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(1) from exc


@app.command()
def tables(tenant_id: str = typer.Argument(..., help="Tenant id")) -> None:
    """Print the table names derived for a tenant. Does not connect."""
    try:
        names = derive_table_names(tenant_id)
    except AppException as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(1) from exc

    table = Table(title=f"Tables for {tenant_id}", show_header=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Table", no_wrap=True)
    for kind in TableKind:
        table.add_row(kind.value, getattr(names, kind.value))
    console.print(table)


@app.command()
def status(tenant_id: str = typer.Argument(..., help="Tenant id")) -> None:
    """Show which of a tenant's tables exist."""
    from repairdesk.modules.tenants.services import TenantSchemaService

    report = _run(lambda db: TenantSchemaService(db).status(tenant_id))

    table = Table(title=f"Schema for {tenant_id}", show_header=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Table", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for entry in report.tables:
        table.add_row(
            entry.kind,
            entry.name,
            "[green]present[/green]" if entry.exists else "[red]missing[/red]",
        )
    console.print(table)
    if not report.ready:
        raise typer.Exit(1)


@app.command()
def provision(tenant_id: str = typer.Argument(..., help="Tenant id")) -> None:
    """Create a tenant's missing tables and add missing columns."""
    from repairdesk.modules.tenants.services import TenantSchemaService

    report = _run(lambda db: TenantSchemaService(db).ensure(tenant_id))
    console.print(
        f"[green]✓[/green] Tenant {tenant_id} is at schema version {report.schema_version}"
    )
    for migration in report.applied_migrations:
        console.print(f"  added {migration.table}.{migration.column} (v{migration.version})")


@app.command()
def migrate(tenant_id: str = typer.Argument(..., help="Tenant id")) -> None:
    """Add missing columns to a tenant's existing tables. Creates nothing."""
    from repairdesk.core.tenancy import migrate_tenant_schema

    applied = _run(lambda db: migrate_tenant_schema(db, tenant_id))
    if not applied:
        console.print(f"[green]✓[/green] Tenant {tenant_id} is up to date")
        return
    for migration in applied:
        console.print(f"  added {migration.kind.value}.{migration.column} (v{migration.version})")
    console.print(f"[green]✓[/green] Applied {len(applied)} migration(s)")


@app.command("migrate-all")
def migrate_all() -> None:
    """Provision and migrate every tenant, continuing past failures."""
    from repairdesk.core.jobs.tasks import migrate_tenants

    result = _run(migrate_tenants)
    console.print(
        f"Tenants: {result['tenants']}  migrated: {result['migrated']}  "
        f"columns added: {result['columns_added']}"
    )
    if result["failed"]:
        console.print(f"[red]Failed:[/red] {', '.join(result['failed'])}")
        raise typer.Exit(1)

"""RepairDesk command line interface."""

import typer
from rich.console import Console

from repairdesk import __version__
from repairdesk.commands import tenants
from repairdesk.config import settings
from repairdesk.core.logging import configure_logging


console = Console()

app = typer.Typer(
    name="repairdesk",
    help="Operate RepairDesk tenant schemas.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(tenants.app, name="tenants")


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit."),
) -> None:
    """RepairDesk CLI - provision and migrate tenant tables."""
    if version:
        console.print(f"[bold cyan]repairdesk[/bold cyan] version {__version__}")
        raise typer.Exit()
    configure_logging(settings)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

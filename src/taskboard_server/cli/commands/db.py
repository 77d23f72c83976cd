"""Database management commands."""

import typer

from taskboard_server.cli.utils import console
from taskboard_server.database import AlembicManager

app = typer.Typer(help="Database operations")


@app.command()
def current():
    """Show the current and head schema revisions.

    Examples:
        taskboard-cli db current
    """
    alembic_manager = AlembicManager()
    current_rev = alembic_manager.get_current_revision()
    head_rev = alembic_manager.get_head_revision()

    console.print(f"Current revision: [bold]{current_rev or 'none'}[/bold]")
    console.print(f"Head revision:    [bold]{head_rev or 'none'}[/bold]")
    if current_rev and current_rev == head_rev:
        console.print("[green]Database schema is up to date[/green]")
    else:
        console.print("[yellow]Database schema is behind; run 'taskboard-cli db upgrade'[/yellow]")


@app.command()
def upgrade(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt and proceed with migration automatically",
    ),
):
    """Upgrade database to latest schema version.

    Examples:
        taskboard-cli db upgrade
        taskboard-cli db upgrade --yes
    """
    console.print("[bold]Upgrading database to latest version...[/bold]\n")

    alembic_manager = AlembicManager()
    if alembic_manager.alembic_cfg is None:
        console.print("[red]Alembic configuration not found (alembic.ini)[/red]")
        raise typer.Exit(1)

    if not alembic_manager.needs_migration():
        console.print("[green]Database is already at latest version[/green]")
        return

    if not yes:
        console.print("[yellow]The upgrade process will modify your database schema.[/yellow]")
        if not typer.confirm("Proceed with database upgrade?"):
            console.print("[yellow]Upgrade cancelled.[/yellow]")
            raise typer.Exit(0)

    if not alembic_manager.perform_migration():
        console.print("[red]Database upgrade failed[/red]")
        raise typer.Exit(1)

    console.print(f"[bold green]Database upgraded to {alembic_manager.get_head_revision()}[/bold green]")

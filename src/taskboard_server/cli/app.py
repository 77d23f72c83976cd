"""Main CLI application."""

import typer

from taskboard_server.cli.commands import cqrs, db
from taskboard_server.services.di import register_core_services
from taskboard_server.services.registry import get_service_registry

app = typer.Typer(
    name="taskboard-cli",
    help="Taskboard CLI - Administrative tools",
    no_args_is_help=True,
)


@app.callback()
def main_callback():
    """Global options for all commands."""
    registry = get_service_registry()
    register_core_services(registry)


app.add_typer(db.app, name="db")
app.add_typer(cqrs.app, name="cqrs")

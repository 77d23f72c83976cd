"""Message bus inspection commands."""

import typer

from taskboard_server.cli.utils import console, render_table
from taskboard_server.cqrs import COMMAND_TYPES, EVENT_TYPES, QUERY_TYPES
from taskboard_server.cqrs.dispatcher import describe_handler
from taskboard_server.cqrs.setup import build_message_buses, register_message_buses, register_message_handlers
from taskboard_server.services.di import register_app_services
from taskboard_server.services.registry import get_service_registry

app = typer.Typer(help="Command, query and event bus inspection")


@app.command("list")
def list_handlers():
    """Wire the buses as the server does and print every registration.

    Fails with exit code 1 if any command or query type has no handler.

    Examples:
        taskboard-cli cqrs list
    """
    registry = get_service_registry()
    register_app_services(registry)
    buses = build_message_buses()
    register_message_buses(registry, buses)

    try:
        register_message_handlers(buses, registry)
    except Exception as e:
        console.print(f"[red]Handler wiring failed: {e}[/red]")
        raise typer.Exit(1) from None

    command_rows = [
        (str(t), describe_handler(buses.command_bus.get_handler(t))) for t in sorted(COMMAND_TYPES)
    ]
    query_rows = [(str(t), describe_handler(buses.query_bus.get_handler(t))) for t in sorted(QUERY_TYPES)]
    event_rows = [
        (str(t), ", ".join(describe_handler(h) for h in buses.event_bus.get_subscribers(t)) or "[dim]none[/dim]")
        for t in sorted(EVENT_TYPES)
    ]

    console.print(render_table("Commands", ("Type", "Handler"), command_rows))
    console.print(render_table("Queries", ("Type", "Handler"), query_rows))
    console.print(render_table("Events", ("Type", "Subscribers"), event_rows))

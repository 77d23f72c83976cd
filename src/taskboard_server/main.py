"""Main entry point for the taskboard server using Typer and Pydantic Settings."""

import typer
import uvicorn
from loguru import logger

from taskboard_server.logging import setup_logging
from taskboard_server.settings import get_settings

app = typer.Typer()


HOST_OPTION = typer.Option(
    None,
    help="Host to bind the server to (overrides TASKBOARD_HOST)",
    metavar="<server>",
)  # fmt: skip
PORT_OPTION = typer.Option(
    None,
    help="Port to bind the server to (overrides TASKBOARD_PORT)",
    metavar="<port>",
)  # fmt: skip
RELOAD_OPTION = typer.Option(
    None,
    help="Enable/disable auto-reload (overrides TASKBOARD_RELOAD)",
)  # fmt: skip
LOG_LEVEL_OPTION = typer.Option(
    None,
    help="Log level (overrides TASKBOARD_LOG_LEVEL)",
    metavar="<level>",
    case_sensitive=False,
)  # fmt: skip
SQL_LOG_OPTION = typer.Option(
    None,
    help="Enable/disable SQL query logging (overrides TASKBOARD_SQL_LOG)",
)  # fmt: skip
DATABASE_URL_OPTION = typer.Option(
    None,
    help="Database URL (overrides TASKBOARD_DATABASE_URL)",
    metavar="<dsn>",
)  # fmt: skip
MAIL_BACKEND_OPTION = typer.Option(
    None,
    help="Mail backend: smtp or console (overrides TASKBOARD_MAIL_BACKEND)",
    metavar="<backend>",
)  # fmt: skip


def _update_settings(
    host: str | None,
    port: int | None,
    log_level: str | None,
    reload: bool | None,
    sql_log: bool | None,
    database_url: str | None,
    mail_backend: str | None,
) -> None:
    """Update settings with CLI overrides."""
    settings = get_settings()

    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if log_level is not None:
        settings.log_level = log_level.upper()
    if reload is not None:
        settings.reload = reload
    if sql_log is not None:
        settings.sql_log = sql_log
    if database_url is not None:
        settings.database_url = database_url
    if mail_backend is not None:
        settings.mail_backend = mail_backend.lower()


@app.command()
def run(
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    reload: bool = RELOAD_OPTION,
    sql_log: bool = SQL_LOG_OPTION,
    database_url: str = DATABASE_URL_OPTION,
    mail_backend: str = MAIL_BACKEND_OPTION,
) -> None:
    """Run the taskboard server."""
    _update_settings(host, port, log_level, reload, sql_log, database_url, mail_backend)

    settings = get_settings()

    setup_logging(settings.log_level)

    logger.info(f"Starting taskboard server on {settings.host}:{settings.port}")
    logger.info(f"Reload: {settings.reload}")
    logger.info(f"Mail backend: {settings.mail_backend}")

    # Reload mode needs an import string
    if settings.reload:
        uvicorn.run(
            "taskboard_server.app:app",
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    else:
        from taskboard_server.app import app as fastapi_app

        uvicorn.run(
            fastapi_app,
            host=settings.host,
            port=settings.port,
            reload=False,
            log_level=settings.log_level.lower(),
        )


@app.command()
def version() -> None:
    """Print the installed version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as package_version

    try:
        typer.echo(package_version("taskboard-server"))
    except PackageNotFoundError:
        typer.echo("unknown")


if __name__ == "__main__":
    app()

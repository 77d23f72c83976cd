"""Main FastAPI application module."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.engine import Engine

from taskboard_server.api.api_router import router as api_router
from taskboard_server.api.ping import router as ping_router
from taskboard_server.cqrs.setup import build_message_buses, register_message_buses, register_message_handlers
from taskboard_server.database import dispose_db
from taskboard_server.exception_handlers import register_exception_handlers
from taskboard_server.logging import setup_logging, setup_sqlalchemy_logging
from taskboard_server.services.di import register_all_services
from taskboard_server.services.mail_service import MailSender
from taskboard_server.services.registry import ServiceRegistry, get_service_registry
from taskboard_server.settings import Settings, get_settings


def _log_server_endpoints_summary(settings: Settings) -> None:
    server_url = f"http://{settings.host}:{settings.port}"
    logger.info(f"Server running at: {server_url}")
    for name, path in (("REST API", "/api"), ("Ping", "/ping"), ("API Docs", "/docs"), ("OpenAPI Schema", "/openapi.json")):
        logger.info(f"   {name}: {server_url}{path}")


def wire_application(
    registry: ServiceRegistry,
    settings: Settings,
    engine: Engine | None = None,
    mail_sender: MailSender | None = None,
) -> None:
    """Register services, build the buses and wire every handler.

    Raises:
        NoHandlerRegisteredError: If a command or query type has no handler
    """
    logger.info("Registering services in the service registry")
    register_all_services(registry, settings=settings, engine=engine, mail_sender=mail_sender)

    buses = build_message_buses()
    register_message_buses(registry, buses)
    register_message_handlers(buses, registry)


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    mail_sender: MailSender | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use instead of the cached process settings
        engine: Database engine to use instead of the lazily created one
        mail_sender: Mail transport to use instead of the configured one
    """

    @asynccontextmanager
    async def app_lifespan(_app: FastAPI):
        """Handle startup and shutdown events for the application."""
        app_settings = settings or get_settings()
        _app.state.settings = app_settings  # type: ignore[attr-defined]

        setup_logging(log_level=app_settings.log_level)
        setup_sqlalchemy_logging(app_settings.sql_log)

        registry = get_service_registry()
        wire_application(registry, app_settings, engine=engine, mail_sender=mail_sender)

        _log_server_endpoints_summary(app_settings)

        yield

        logger.info("Taskboard server shutting down")
        registry.clear()
        if engine is None:
            dispose_db()

    application = FastAPI(
        lifespan=app_lifespan,
        title="Taskboard server",
        description="Multi-tenant project and task board API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=[(settings or get_settings()).origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    application.include_router(ping_router, prefix="")
    application.include_router(api_router, prefix="/api")

    return application


app = create_app()

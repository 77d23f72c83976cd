"""Dependency injection setup module.

This module provides centralized service registration for both the FastAPI
server and the CLI. Message handlers receive everything registered here
through their constructors.
"""

from loguru import logger
from sqlalchemy.engine import Engine

from taskboard_server.database import SessionProvider
from taskboard_server.services.activity_service import ActivityService, get_activity_service
from taskboard_server.services.email_templates import EmailTemplates
from taskboard_server.services.mail_service import MailSender, build_mail_sender
from taskboard_server.services.project_service import ProjectService, get_project_service
from taskboard_server.services.registry import ServiceRegistry
from taskboard_server.services.team_service import TeamService, get_team_service
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService, get_user_service
from taskboard_server.settings import Settings, get_settings


def register_core_services(
    registry: ServiceRegistry,
    settings: Settings | None = None,
    engine: Engine | None = None,
    mail_sender: MailSender | None = None,
) -> None:
    """Register infrastructure services in the service registry.

    Args:
        registry: Service registry instance to register services in
        settings: Settings to use instead of the cached process settings
        engine: Engine for the session provider; the lazily created process engine when None
        mail_sender: Mail transport to use instead of the configured one
    """
    logger.debug("Registering core services in DI container")

    settings = settings or get_settings()
    registry.register_singleton(Settings, settings)
    registry.register_singleton(SessionProvider, SessionProvider(engine))
    registry.register_singleton(MailSender, mail_sender or build_mail_sender(settings))
    registry.register_singleton(EmailTemplates, EmailTemplates(settings))
    registry.register_singleton(TokenService, TokenService(settings))


def register_app_services(registry: ServiceRegistry) -> None:
    """Register application-specific services in the service registry.

    These are registered as factories because their get_*_service() functions
    already provide singleton behavior via @lru_cache.

    Args:
        registry: Service registry instance to register services in
    """
    logger.debug("Registering application services in DI container")

    registry.register_factory(UserService, get_user_service)
    registry.register_factory(TeamService, get_team_service)
    registry.register_factory(ProjectService, get_project_service)
    registry.register_factory(ActivityService, get_activity_service)


def register_all_services(
    registry: ServiceRegistry,
    settings: Settings | None = None,
    engine: Engine | None = None,
    mail_sender: MailSender | None = None,
) -> None:
    """Register both core and application services."""
    register_core_services(registry, settings=settings, engine=engine, mail_sender=mail_sender)
    register_app_services(registry)

"""Shared fixtures: in-memory database, wired registry and buses, log capture."""

from collections.abc import Generator

import pytest
from loguru import logger
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from taskboard_server.cqrs.setup import (
    MessageBuses,
    build_message_buses,
    register_message_buses,
    register_message_handlers,
)
from taskboard_server.database import SessionProvider
from taskboard_server.models import db_model  # noqa: F401  registers the tables
from taskboard_server.services.di import register_all_services
from taskboard_server.services.mail_service import MailMessage
from taskboard_server.services.registry import ServiceRegistry
from taskboard_server.settings import Settings


class RecordingMailSender:
    """Mail transport that keeps every message instead of sending it."""

    def __init__(self):
        self.sent: list[MailMessage] = []

    async def send(self, message: MailMessage) -> None:
        self.sent.append(message)


class FailingMailSender:
    async def send(self, message: MailMessage) -> None:
        raise ConnectionError("mail relay unreachable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
        origin="http://app.test/",
        password_hash_rounds=4,
        mail_backend="console",
    )


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sessions(engine) -> SessionProvider:
    return SessionProvider(engine)


@pytest.fixture
def mail_sender() -> RecordingMailSender:
    return RecordingMailSender()


@pytest.fixture
def failing_mail_sender() -> FailingMailSender:
    return FailingMailSender()


@pytest.fixture
def registry(settings, engine, mail_sender) -> ServiceRegistry:
    registry = ServiceRegistry()
    register_all_services(registry, settings=settings, engine=engine, mail_sender=mail_sender)
    return registry


@pytest.fixture
def buses(registry) -> MessageBuses:
    buses = build_message_buses()
    register_message_buses(registry, buses)
    register_message_handlers(buses, registry)
    return buses


class LogCapture:
    """Loguru records emitted while a test runs."""

    def __init__(self):
        self.records: list[dict] = []

    def sink(self, message) -> None:
        self.records.append(message.record)

    def messages(self, level: str) -> list[str]:
        return [record["message"] for record in self.records if record["level"].name == level]


@pytest.fixture
def log_records() -> Generator[LogCapture]:
    capture = LogCapture()
    handler_id = logger.add(capture.sink, level="TRACE")
    yield capture
    logger.remove(handler_id)

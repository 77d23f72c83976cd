"""Database configuration and connection setup.

The SQLModel engine is created lazily, after application settings have been
loaded and possibly overridden by CLI flags. This prevents premature failure
on import when ``TASKBOARD_DATABASE_URL`` is not yet set or will be provided
via command line.
"""

import asyncio
from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager, contextmanager

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine, text
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from taskboard_server.settings import get_settings

_engine: Engine | None = None


def _build_engine() -> Engine:
    """Create and return a new engine from current settings.

    Raises:
        ValueError: if database URL not configured.
    """
    settings = get_settings()
    database_url = settings.database_url
    if not database_url:
        raise ValueError("Database URL missing: provide TASKBOARD_DATABASE_URL env or --database-url CLI argument")

    if database_url.startswith("sqlite"):
        engine_local = create_engine(database_url, echo=settings.sql_log, connect_args={"check_same_thread": False})
    else:
        engine_local = create_engine(
            database_url,
            pool_pre_ping=True,
            pool_recycle=3600,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            echo=settings.sql_log,
            connect_args={"connect_timeout": 10},
        )
    logger.info("SQL echo is {}", "enabled" if settings.sql_log else "disabled")
    return engine_local


def get_engine() -> Engine:
    """Return a singleton engine instance, creating it lazily."""
    global _engine
    if _engine is None:
        _engine = _build_engine()
    return _engine


def dispose_db() -> None:
    """Dispose of the database engine if it was created."""
    global _engine
    if _engine is not None:
        logger.info("Closing database connections")
        _engine.dispose()
        _engine = None


_RETRY_POLICY = {
    "stop": stop_after_attempt(5),
    "wait": wait_exponential(multiplier=1, min=1, max=10),
    "reraise": True,
    "retry": retry_if_exception_type(Exception),
    "before_sleep": before_sleep_log(logger, "DEBUG"),
}


def _connect() -> Session:
    """Open a session and check the connection once.

    A failed check disposes the engine so the next attempt recreates it.
    """
    global _engine
    try:
        session = Session(get_engine(), expire_on_commit=False)
        session.execute(text("SELECT 1"))
        return session
    except Exception as e:
        if _engine is not None:
            logger.warning("Database connection failed, disposing engine for retry...")
            _engine.dispose()
            _engine = None
        logger.error("Failed to create database session: {}", e)
        raise


@retry(**_RETRY_POLICY)
def _create_session() -> Session:
    """Create a database session with retry logic.

    Raises:
        Exception: If all retry attempts fail
    """
    return _connect()


@retry(**_RETRY_POLICY)
async def _acreate_session() -> Session:
    """Async variant of ``_create_session`` for code running on the event loop.

    Connection attempts run in a worker thread and the backoff uses
    ``asyncio.sleep``, so an unreachable database never stalls the loop.
    """
    return await asyncio.to_thread(_connect)


@contextmanager
def borrow_db_session() -> Generator[Session]:
    """Public context manager for ad-hoc database usage.

    Creates a database session with retry logic and yields it to the caller.
    Use this for CLI commands and other synchronous code; message handlers
    use ``SessionProvider.open_session`` instead.

    Example:
        with borrow_db_session() as session:
            session.exec(text("SELECT 1"))
    """
    session = _create_session()
    session_id = id(session)

    try:
        yield session
    except Exception as e:  # noqa: BLE001
        logger.error("Error during database session {}: {}", session_id, e)
        raise
    finally:
        session.close()
        logger.trace("Database session {} closed and resources released", session_id)


class SessionProvider:
    """Hands out sessions to code running outside FastAPI's dependency graph.

    Command, query and event handlers get a ``SessionProvider`` injected
    instead of a session, because their lifetime is not tied to a request.
    Without an explicit engine the provider borrows sessions from the
    process-wide engine (with connection retry).

    ``session()`` is for synchronous callers (routes run in the threadpool,
    the CLI); async handlers use ``open_session()``.
    """

    def __init__(self, engine: Engine | None = None):
        self._engine = engine

    @contextmanager
    def session(self) -> Generator[Session]:
        if self._engine is None:
            with borrow_db_session() as session:
                yield session
            return

        with self._managed(Session(self._engine, expire_on_commit=False)) as session:
            yield session

    @asynccontextmanager
    async def open_session(self) -> AsyncGenerator[Session]:
        if self._engine is None:
            session = await _acreate_session()
        else:
            session = Session(self._engine, expire_on_commit=False)

        with self._managed(session):
            yield session

    @staticmethod
    @contextmanager
    def _managed(session: Session) -> Generator[Session]:
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

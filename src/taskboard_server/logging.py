"""Logging configuration for the taskboard server.

All output goes through loguru. Standard-library loggers (uvicorn, SQLAlchemy,
aiosmtplib, ...) are intercepted and re-emitted through it.

Every line carries the correlation id of the message being handled, so a
command and the events it publishes can be followed across log lines. The
buses bind the id with ``logger.contextualize``; lines logged outside of a
message show ``NO_CORRELATION_ID``.
"""

import logging
import sys

from loguru import logger

NO_CORRELATION_ID = "-"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Library loggers that follow the application log level
_LIBRARY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore", "aiosmtplib", "asyncio")

_SQLALCHEMY_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.dialects")


class InterceptHandler(logging.Handler):
    """Re-emit standard logging records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the original caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _intercept(name: str, level: str | int | None = None) -> None:
    std_logger = logging.getLogger(name)
    std_logger.handlers = [InterceptHandler()]
    std_logger.propagate = False
    if level is not None:
        std_logger.setLevel(level)


def setup_logging(log_level: str) -> None:
    """Configure loguru logging for the entire application.

    Args:
        log_level: Log level to use (from settings, which handles env vars and CLI args).
    """
    log_level = log_level.upper()

    logger.remove()
    logger.configure(extra={"correlation_id": NO_CORRELATION_ID})
    logger.add(sys.stderr, format=LOG_FORMAT, level=log_level, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.Logger.manager.loggerDict):
        _intercept(name)
    for name in _LIBRARY_LOGGERS:
        _intercept(name, log_level)

    logger.info(f"Log level set to: {log_level}")


def setup_sqlalchemy_logging(sql_log: bool = False) -> None:
    """Route SQLAlchemy logging through loguru.

    Statements are logged at INFO when ``sql_log`` is set and suppressed otherwise.
    """
    for name in _SQLALCHEMY_LOGGERS:
        _intercept(name)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_log else logging.WARNING)

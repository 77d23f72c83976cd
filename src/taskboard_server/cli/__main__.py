"""CLI entry point.

Usage:
    python -m taskboard_server.cli db upgrade
    taskboard-cli db current
    taskboard-cli cqrs list
"""

import sys

from loguru import logger

import taskboard_server
from taskboard_server.cli.app import app


def _configure_cli_logging() -> None:
    """Configure loguru for CLI (compact format: level + message, no timestamps)."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | <level>{message}</level>",
        level="INFO",
        colorize=True,
    )
    logger.enable(taskboard_server.__name__)


def main() -> None:
    """CLI entry point with logging configuration."""
    _configure_cli_logging()
    app()


if __name__ == "__main__":
    main()

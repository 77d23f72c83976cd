"""CLI module for taskboard-server.

Provides command-line interface for administrative tasks like database
migrations and message bus inspection.
"""

from taskboard_server.cli.app import app

__all__ = ["app"]

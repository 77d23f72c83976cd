"""Alembic utility functions for database schema management.

Provides reusable functionality for:
- Alembic configuration and revision detection
- Running upgrades from the admin CLI
"""

import os

import alembic.command
import alembic.config
from alembic.script import ScriptDirectory
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .connection import borrow_db_session


class AlembicManager:
    """Centralized alembic operations manager."""

    def __init__(self):
        """Initialize alembic configuration."""
        self.alembic_cfg: alembic.config.Config | None = None
        self._init_alembic_config()

    def _init_alembic_config(self) -> None:
        """Initialize alembic configuration.

        Searches for alembic.ini in the following order:
        1. Current working directory
        2. Project root (where this package is checked out)

        Also sets the script_location to absolute path so migrations work from any directory.
        """
        alembic_ini_path = os.path.join(os.getcwd(), "alembic.ini")
        project_root = os.getcwd()

        if not os.path.exists(alembic_ini_path):
            # database/ -> taskboard_server/ -> src/ -> project root
            project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
            alembic_ini_path = os.path.join(project_root, "alembic.ini")

        if not os.path.exists(alembic_ini_path):
            logger.error("Alembic configuration file not found in cwd or project root")
            return

        logger.trace(f"Loading alembic configuration from: {alembic_ini_path}")
        self.alembic_cfg = alembic.config.Config(alembic_ini_path)

        migrations_path = os.path.join(project_root, "migrations")
        if os.path.exists(migrations_path):
            self.alembic_cfg.set_main_option("script_location", migrations_path)
            logger.trace(f"Set migrations path to: {migrations_path}")

    def get_current_revision(self) -> str | None:
        """Get current alembic revision from database."""
        with borrow_db_session() as session:
            try:
                row = session.exec(text("SELECT version_num FROM alembic_version LIMIT 1")).one_or_none()
            except SQLAlchemyError as e:
                logger.error(f"Failed to get current revision: {e}")
                return None
        current_rev = row[0] if row is not None else None
        logger.trace(f"Current database revision: {current_rev}")
        return current_rev

    def get_head_revision(self) -> str:
        """Get head revision from alembic scripts."""
        if not self.alembic_cfg:
            logger.error("Alembic configuration not initialized")
            return ""

        script_directory = ScriptDirectory.from_config(self.alembic_cfg)
        head_rev = script_directory.get_current_head()
        logger.trace(f"Head revision from scripts: {head_rev}")
        return head_rev or ""

    def needs_migration(self) -> bool:
        """Check if database needs migration."""
        current_rev = self.get_current_revision()
        head_rev = self.get_head_revision()

        if not current_rev:
            logger.warning("No current revision found - database may not be initialized")
            return True

        if not head_rev:
            logger.warning("No head revision found - no alembic scripts available")
            return False

        needs_migration = current_rev != head_rev
        if needs_migration:
            logger.info(f"Migration needed: current={current_rev}, head={head_rev}")
        else:
            logger.info(f"Database up to date: {current_rev}")

        return needs_migration

    def perform_migration(self, target: str = "head") -> bool:
        """Execute database migration to specified target.

        Args:
            target: Migration target (default: "head")

        Returns:
            True if migration successful, False otherwise
        """
        if not self.alembic_cfg:
            logger.error("Alembic configuration not initialized")
            return False

        try:
            logger.info(f"Starting database migration to '{target}'")
            alembic.command.upgrade(self.alembic_cfg, target)
            logger.info(f"Database migration to '{target}' completed successfully")
            return True
        except (OSError, ValueError, RuntimeError, SQLAlchemyError) as e:
            logger.error(f"Migration failed: {e}")
            return False

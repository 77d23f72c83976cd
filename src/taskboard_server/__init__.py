"""Taskboard server: permission model and message buses behind a FastAPI API."""

from .settings import Settings, get_settings  # noqa: F401

__all__ = ["get_settings", "Settings"]

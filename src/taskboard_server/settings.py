"""Application configuration using Pydantic Settings.

This module centralizes runtime configuration for the taskboard server. Values
can be provided via environment variables (preferred) or fall back to the
defaults below. A ``Settings`` instance is intended to be retrieved via
``get_settings`` which caches the object for reuse across the process.

Environment variable prefix: ``TASKBOARD_`` (e.g. ``TASKBOARD_HOST``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime application settings.

    Attributes map directly to environment variables using the ``TASKBOARD_``
    prefix (case-insensitive). For example, ``host`` <- ``TASKBOARD_HOST``.
    """

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host interface to bind the server",
    )  # fmt: skip
    port: int = Field(
        default=8080,
        description="Server port",
    )  # fmt: skip
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application log level",
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload in development",
    )  # fmt: skip
    sql_log: bool = Field(
        default=False,
        description="Enable SQL query logging",
    )  # fmt: skip
    database_url: str | None = Field(
        default=None,
        description="Database connection string",
    )  # fmt: skip
    origin: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web client, used to build links in emails",
    )  # fmt: skip

    # Authentication settings
    jwt_secret: str = Field(
        default="change-me",
        description="Secret used to sign access and invite tokens",
    )  # fmt: skip
    jwt_refresh_secret: str = Field(
        default="change-me-too",
        description="Secret used to sign refresh tokens",
    )  # fmt: skip
    access_token_ttl_minutes: int = Field(default=15, ge=1)
    refresh_token_ttl_minutes: int = Field(default=20, ge=1)
    invite_ttl_days: int = Field(default=7, ge=1)
    otp_ttl_minutes: int = Field(default=10, ge=1)
    password_hash_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor",
    )
    cookie_secure: bool = Field(
        default=False,
        description="Mark auth cookies as Secure (enable behind HTTPS)",
    )  # fmt: skip

    # Mail settings
    mail_backend: Literal["smtp", "console"] = Field(
        default="console",
        description="Mail transport: 'smtp' sends real mail, 'console' only logs it",
    )
    mail_from: str = Field(default="Taskboard <no-reply@taskboard.local>")
    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=587)
    smtp_username: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_start_tls: bool = Field(default=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()

        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(allowed))}")

        return v_upper

    @field_validator("origin")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        case_sensitive=False,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached ``Settings`` instance.

    The first invocation reads environment variables / .env file; subsequent
    calls reuse the same object to ensure consistent config.
    """

    return Settings()


__all__ = ["Settings", "get_settings"]

"""Timezone-aware time helpers."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def expires_in(*, minutes: int = 0, days: int = 0) -> datetime:
    """Return an aware UTC timestamp ``minutes``/``days`` from now."""
    return utcnow() + timedelta(minutes=minutes, days=days)


def is_expired(expires_at: datetime | None) -> bool:
    """Treat a missing expiry as already expired."""
    if expires_at is None:
        return True
    return ensure_utc(expires_at) <= utcnow()

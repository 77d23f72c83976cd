"""Service for the activity log written by event subscribers."""

from functools import lru_cache
from uuid import UUID

from loguru import logger
from sqlmodel import Session, col, select

from taskboard_server.models.db_model import ActivityLog


class ActivityService:
    """Append-only audit trail."""

    def record(
        self,
        session: Session,
        action: str,
        *,
        user_id: UUID | None = None,
        team_id: UUID | None = None,
        details: str | None = None,
        correlation_id: str | None = None,
    ) -> ActivityLog:
        entry = ActivityLog(
            action=action,
            user_id=user_id,
            team_id=team_id,
            details=details,
            correlation_id=correlation_id,
        )
        session.add(entry)
        session.commit()
        session.refresh(entry)
        logger.debug(f"Service: record - {action} (user={user_id}, correlation_id={correlation_id})")
        return entry

    def list_for_user(self, session: Session, user_id: UUID) -> list[ActivityLog]:
        stmt = select(ActivityLog).where(ActivityLog.user_id == user_id).order_by(col(ActivityLog.created_at))
        return list(session.exec(stmt).all())


@lru_cache
def get_activity_service() -> ActivityService:
    """Get a singleton instance of the activity service."""
    return ActivityService()

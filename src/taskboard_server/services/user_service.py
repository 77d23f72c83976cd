"""Service for user-related persistence operations."""

from datetime import datetime
from functools import lru_cache
from uuid import UUID

from loguru import logger
from sqlmodel import Session, or_, select

from taskboard_server.models.api_model import UserResponse
from taskboard_server.models.db_model import Project, TeamMember, User
from taskboard_server.permissions import UserContext
from taskboard_server.utils.clock import utcnow


class UserService:
    """Service for user-related operations.

    Methods take the session as their first argument so one session can span
    several service calls inside a command handler.
    """

    def get_by_id(self, session: Session, user_id: UUID | str) -> User | None:
        logger.debug(f"Service: get_by_id with user_id={user_id}")
        try:
            key = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
        except ValueError:
            return None
        return session.get(User, key)

    def get_by_email(self, session: Session, email: str) -> User | None:
        return session.exec(select(User).where(User.email == email)).first()

    def get_by_username(self, session: Session, username: str) -> User | None:
        return session.exec(select(User).where(User.username == username)).first()

    def create_user(
        self,
        session: Session,
        *,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
        otp: str,
        otp_expires_at: datetime,
    ) -> User:
        """Create an unverified, active user.

        Returns:
            The persisted user with generated id and timestamps
        """
        user = User(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=password_hash,
            otp=otp,
            otp_expires_at=otp_expires_at,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.debug(f"Service: create_user - created user {user.id}")
        return user

    def set_otp(self, session: Session, user: User, otp: str, expires_at: datetime) -> User:
        user.otp = otp
        user.otp_expires_at = expires_at
        return self._save(session, user)

    def mark_verified(self, session: Session, user: User) -> User:
        user.is_verified = True
        user.otp = None
        user.otp_expires_at = None
        return self._save(session, user)

    def update_password(self, session: Session, user: User, password_hash: str) -> User:
        """Store a new password hash and invalidate the OTP and refresh token."""
        user.password_hash = password_hash
        user.otp = None
        user.otp_expires_at = None
        user.refresh_token = None
        return self._save(session, user)

    def set_refresh_token(self, session: Session, user: User, refresh_token: str | None) -> User:
        user.refresh_token = refresh_token
        return self._save(session, user)

    def build_user_context(self, session: Session, user: User) -> UserContext:
        """Build the permission context of a user from their memberships.

        A user belongs to the teams they are a member of and to the projects
        they own or that belong to one of those teams.
        """
        team_ids = set(session.exec(select(TeamMember.team_id).where(TeamMember.user_id == user.id)).all())
        project_filter = Project.owner_id == user.id
        if team_ids:
            project_filter = or_(project_filter, Project.team_id.in_(list(team_ids)))
        project_ids = session.exec(select(Project.id).where(project_filter)).all()
        return UserContext(
            id=str(user.id),
            role=user.role,
            team_ids=frozenset(str(team_id) for team_id in team_ids),
            project_ids=frozenset(str(project_id) for project_id in project_ids),
        )

    @staticmethod
    def to_public(user: User) -> UserResponse:
        return UserResponse.model_validate(user)

    @staticmethod
    def _save(session: Session, user: User) -> User:
        user.updated_at = utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


@lru_cache
def get_user_service() -> UserService:
    """Get a singleton instance of the user service."""
    return UserService()

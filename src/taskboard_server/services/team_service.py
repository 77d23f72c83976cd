"""Service for team, membership and invitation persistence."""

from datetime import datetime
from functools import lru_cache
from uuid import UUID

from loguru import logger
from sqlmodel import Session, col, select

from taskboard_server.models.db_model import Team, TeamInvite, TeamMember
from taskboard_server.permissions import Role
from taskboard_server.utils.clock import ensure_utc, utcnow


class TeamService:
    """Service for team-related operations."""

    def get_team(self, session: Session, team_id: UUID | str) -> Team | None:
        try:
            key = team_id if isinstance(team_id, UUID) else UUID(str(team_id))
        except ValueError:
            return None
        return session.get(Team, key)

    def list_teams(self, session: Session) -> list[Team]:
        """All teams, newest first. Callers filter by visibility."""
        return list(session.exec(select(Team).order_by(col(Team.created_at).desc())).all())

    def create_team(self, session: Session, name: str, created_by: UUID, description: str | None = None) -> Team:
        """Create a team and make its creator an ADMIN member."""
        team = Team(name=name, description=description, created_by_id=created_by)
        session.add(team)
        session.flush()
        session.add(TeamMember(team_id=team.id, user_id=created_by, role=Role.ADMIN))
        session.commit()
        session.refresh(team)
        logger.debug(f"Service: create_team - created team {team.id}")
        return team

    def get_membership(self, session: Session, team_id: UUID, user_id: UUID) -> TeamMember | None:
        stmt = select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        return session.exec(stmt).first()

    def add_member(self, session: Session, team_id: UUID, user_id: UUID, role: Role) -> TeamMember:
        member = TeamMember(team_id=team_id, user_id=user_id, role=role)
        session.add(member)
        session.commit()
        session.refresh(member)
        logger.debug(f"Service: add_member - user {user_id} joined team {team_id} as {role}")
        return member

    def list_members(self, session: Session, team_id: UUID) -> list[TeamMember]:
        stmt = select(TeamMember).where(TeamMember.team_id == team_id).order_by(col(TeamMember.joined_at))
        return list(session.exec(stmt).all())

    def get_pending_invite(self, session: Session, team_id: UUID, email: str) -> TeamInvite | None:
        """Return the unaccepted, unexpired invite for an email, if any."""
        stmt = select(TeamInvite).where(
            TeamInvite.team_id == team_id,
            TeamInvite.email == email,
            TeamInvite.accepted == False,  # noqa: E712
        )
        now = utcnow()
        for invite in session.exec(stmt).all():
            if ensure_utc(invite.expires_at) > now:
                return invite
        return None

    def create_invite(
        self,
        session: Session,
        *,
        team_id: UUID,
        email: str,
        role: Role,
        token: str,
        invited_by_id: UUID,
        expires_at: datetime,
    ) -> TeamInvite:
        invite = TeamInvite(
            team_id=team_id,
            email=email,
            role=role,
            token=token,
            invited_by_id=invited_by_id,
            expires_at=expires_at,
        )
        session.add(invite)
        session.commit()
        session.refresh(invite)
        logger.debug(f"Service: create_invite - invite {invite.id} for {email} to team {team_id}")
        return invite


@lru_cache
def get_team_service() -> TeamService:
    """Get a singleton instance of the team service."""
    return TeamService()

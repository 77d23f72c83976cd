from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from taskboard_server.models.base_model import ProjectBase, TeamBase, UserBase
from taskboard_server.permissions import Role
from taskboard_server.utils.clock import utcnow


def _timestamp(**kwargs):
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True), **kwargs)


class User(UserBase, table=True):
    """User model."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    password_hash: str
    otp: str | None = None
    otp_expires_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    refresh_token: str | None = None
    created_at: datetime = _timestamp()
    updated_at: datetime = _timestamp()

    memberships: list["TeamMember"] = Relationship(back_populates="user")


class Team(TeamBase, table=True):
    """Team model."""

    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_by_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = _timestamp()
    updated_at: datetime = _timestamp()

    members: list["TeamMember"] = Relationship(back_populates="team")


class TeamMember(SQLModel, table=True):
    """Membership of a user in a team, with the user's role inside that team."""

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", index=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    role: Role = Field(default=Role.MEMBER)
    joined_at: datetime = _timestamp()

    team: Team = Relationship(back_populates="members")
    user: User = Relationship(back_populates="memberships")


class TeamInvite(SQLModel, table=True):
    """Pending invitation of an email address to a team."""

    __tablename__ = "team_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", index=True)
    email: str = Field(index=True)
    role: Role = Field(default=Role.MEMBER)
    token: str = Field(unique=True)
    invited_by_id: UUID = Field(foreign_key="users.id")
    accepted: bool = False
    expires_at: datetime = Field(sa_type=DateTime(timezone=True))
    created_at: datetime = _timestamp()


class Project(ProjectBase, table=True):
    """Project model."""

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID | None = Field(default=None, foreign_key="teams.id", index=True)
    owner_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    created_at: datetime = _timestamp()
    updated_at: datetime = _timestamp()


class ActivityLog(SQLModel, table=True):
    """Audit trail entry written by event subscribers."""

    __tablename__ = "activity_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    action: str = Field(index=True)
    user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    team_id: UUID | None = Field(default=None, foreign_key="teams.id")
    details: str | None = None
    correlation_id: str | None = None
    created_at: datetime = _timestamp()

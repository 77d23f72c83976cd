from uuid import UUID

from sqlmodel import Field, SQLModel

from taskboard_server.permissions import Role


class UserBase(SQLModel):
    """Base model for a user (public fields only)."""

    id: UUID | None = None
    first_name: str
    last_name: str
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    role: Role = Field(default=Role.MEMBER)
    is_verified: bool = False
    is_active: bool = True


class TeamBase(SQLModel):
    """Base model for a team."""

    id: UUID | None = None
    name: str
    description: str | None = None


class ProjectBase(SQLModel):
    """Base model for a project."""

    id: UUID | None = None
    name: str
    description: str | None = None
    team_id: UUID | None = None
    owner_id: UUID | None = None

"""API models for the taskboard server."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard_server.permissions import Role


class ApiResponse(BaseModel):
    """Envelope of every successful JSON response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    status_code: int = Field(alias="statusCode")
    data: Any = None


class ErrorResponse(BaseModel):
    """Envelope of every error JSON response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    status_code: int = Field(alias="statusCode")
    error: str


class UserResponse(BaseModel):
    """Public view of a user; never carries hashes, OTPs or tokens."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    username: str
    email: str
    role: Role
    is_verified: bool
    is_active: bool
    created_at: datetime | None = None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class LoginResult(BaseModel):
    """Result of the login command; the route moves the tokens into cookies."""

    user: UserResponse
    tokens: TokenPair


class InviteResult(BaseModel):
    """Result of the invite command.

    ``added`` is True when an existing user was put into the team directly and
    no invitation was sent.
    """

    team_id: UUID
    email: str
    role: Role
    added: bool
    invite_id: UUID | None = None
    expires_at: datetime | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    team_id: UUID | None = None
    owner_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeamMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    role: Role
    joined_at: datetime | None = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    created_by_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeamDetailResponse(TeamResponse):
    """A team with its members, oldest membership first."""

    members: list[TeamMemberResponse] = []


# Request bodies


class RegisterInput(BaseModel):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    email: str = ""
    password: str = ""


class VerifyInput(BaseModel):
    email: str = ""
    otp: str = ""


class LoginInput(BaseModel):
    email: str = ""
    password: str = ""


class EmailInput(BaseModel):
    email: str = ""


class UpdatePasswordInput(BaseModel):
    email: str = ""
    otp: str = ""
    password: str = ""


class InviteInput(BaseModel):
    email: str = ""
    role: str = Role.MEMBER


class ProjectCreateInput(BaseModel):
    name: str = ""
    description: str | None = None
    team_id: UUID | None = None


class ProjectUpdateInput(BaseModel):
    """Partial project update; only the fields present in the body change.

    ``description`` may be cleared with ``null``; ``name`` may not.
    """

    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("name must be a non-empty string")
        return v.strip()


class TeamCreateInput(BaseModel):
    name: str = ""
    description: str | None = None

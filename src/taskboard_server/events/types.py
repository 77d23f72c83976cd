"""Event type definitions.

Events are the primary way the command path hands work to best-effort side
effects (mail, activity log). Each event copies the metadata of the command
that produced it, so the correlation id follows the whole chain.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from taskboard_server.cqrs import Event, MessageType


class UserRegisteredPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    username: str
    otp: str


class UserRegisteredEvent(Event):
    """Emitted when a user registers or asks for a new verification code."""

    type: ClassVar[str] = MessageType.REGISTERED_USER_EVENT
    payload: UserRegisteredPayload


class UserVerifiedPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str


class UserVerifiedEvent(Event):
    type: ClassVar[str] = MessageType.USER_VERIFIED_EVENT
    payload: UserVerifiedPayload


class PasswordResetRequestedPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    username: str
    otp: str


class PasswordResetRequestedEvent(Event):
    type: ClassVar[str] = MessageType.PASSWORD_RESET_REQUESTED_EVENT
    payload: PasswordResetRequestedPayload


class TeamInviteSentPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    invite_id: str
    team_id: str
    team_name: str
    email: str
    role: str
    token: str
    invited_by_id: str
    inviter_name: str


class TeamInviteSentEvent(Event):
    type: ClassVar[str] = MessageType.TEAM_INVITE_SENT_EVENT
    payload: TeamInviteSentPayload

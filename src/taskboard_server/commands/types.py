"""Command definitions.

Each command pairs a ``MessageType`` tag with a frozen payload model. Payload
fields default to empty strings so that a missing field reaches the handler
and is reported with the same ``allFieldsAreRequired`` code as a blank one.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from taskboard_server.cqrs import Command, MessageType


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class RegisterUserPayload(_Payload):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    email: str = ""
    password: str = ""


class RegisterUserCommand(Command):
    type: ClassVar[str] = MessageType.REGISTER_USER_COMMAND
    payload: RegisterUserPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"user:{self.payload.email.strip().lower()}"


class VerifyUserPayload(_Payload):
    email: str = ""
    otp: str = ""


class VerifyUserCommand(Command):
    type: ClassVar[str] = MessageType.VERIFY_USER_COMMAND
    payload: VerifyUserPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"user:{self.payload.email.strip().lower()}"


class LoginUserPayload(_Payload):
    email: str = ""
    password: str = ""


class LoginUserCommand(Command):
    type: ClassVar[str] = MessageType.LOGIN_USER_COMMAND
    payload: LoginUserPayload


class ResendOtpPayload(_Payload):
    email: str = ""


class ResendOtpCommand(Command):
    type: ClassVar[str] = MessageType.RESEND_OTP_COMMAND
    payload: ResendOtpPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"user:{self.payload.email.strip().lower()}"


class RequestPasswordResetPayload(_Payload):
    email: str = ""


class RequestPasswordResetCommand(Command):
    type: ClassVar[str] = MessageType.REQUEST_PASSWORD_RESET_COMMAND
    payload: RequestPasswordResetPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"user:{self.payload.email.strip().lower()}"


class ResetPasswordPayload(_Payload):
    email: str = ""
    otp: str = ""
    password: str = ""


class ResetPasswordCommand(Command):
    type: ClassVar[str] = MessageType.RESET_PASSWORD_COMMAND
    payload: ResetPasswordPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"user:{self.payload.email.strip().lower()}"


class InviteTeamMemberPayload(_Payload):
    team_id: str
    email: str = ""
    role: str = "MEMBER"
    invited_by_id: str


class InviteTeamMemberCommand(Command):
    type: ClassVar[str] = MessageType.INVITE_TEAM_MEMBER_COMMAND
    payload: InviteTeamMemberPayload

    @property
    def exclusive_key(self) -> str | None:
        return f"team-invite:{self.payload.team_id}:{self.payload.email.strip().lower()}"

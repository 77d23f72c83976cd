"""Command handlers for the closed set of command types.

``COMMAND_HANDLERS`` maps every command type to the handler class serving it.
The composition root instantiates each class with its dependencies from the
service registry and registers it on the command bus.
"""

from taskboard_server.commands.team_handlers import InviteTeamMemberHandler
from taskboard_server.commands.user_handlers import (
    LoginUserHandler,
    RegisterUserHandler,
    RequestPasswordResetHandler,
    ResendOtpHandler,
    ResetPasswordHandler,
    VerifyUserHandler,
)
from taskboard_server.cqrs import CommandHandler, MessageType

COMMAND_HANDLERS: dict[MessageType, type[CommandHandler]] = {
    MessageType.REGISTER_USER_COMMAND: RegisterUserHandler,
    MessageType.VERIFY_USER_COMMAND: VerifyUserHandler,
    MessageType.LOGIN_USER_COMMAND: LoginUserHandler,
    MessageType.RESEND_OTP_COMMAND: ResendOtpHandler,
    MessageType.REQUEST_PASSWORD_RESET_COMMAND: RequestPasswordResetHandler,
    MessageType.RESET_PASSWORD_COMMAND: ResetPasswordHandler,
    MessageType.INVITE_TEAM_MEMBER_COMMAND: InviteTeamMemberHandler,
}

__all__ = ["COMMAND_HANDLERS"]

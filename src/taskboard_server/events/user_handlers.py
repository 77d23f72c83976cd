"""User event handlers.

These run after the triggering command has committed. A failure here (mail
relay down, activity insert rejected) is logged by the event bus and does not
undo or fail the command.
"""

from uuid import UUID

from loguru import logger

from taskboard_server.constants import ACTIVITY_USER_REGISTERED, ACTIVITY_USER_VERIFIED
from taskboard_server.cqrs import EventHandler
from taskboard_server.database import SessionProvider
from taskboard_server.events.types import PasswordResetRequestedEvent, UserRegisteredEvent, UserVerifiedEvent
from taskboard_server.services.activity_service import ActivityService
from taskboard_server.services.email_templates import EmailTemplates
from taskboard_server.services.mail_service import MailSender


class SendVerificationEmailHandler(EventHandler[UserRegisteredEvent]):
    """Mail the verification code to a newly registered user."""

    def __init__(self, mail: MailSender, templates: EmailTemplates):
        self.mail = mail
        self.templates = templates

    async def handle(self, event: UserRegisteredEvent) -> None:
        p = event.payload
        await self.mail.send(self.templates.verification_email(p.username, p.email, p.otp))
        logger.debug(f"Verification email queued for user {p.user_id} (correlation_id={event.correlation_id})")


class RecordUserRegisteredHandler(EventHandler[UserRegisteredEvent]):
    def __init__(self, activity: ActivityService, sessions: SessionProvider):
        self.activity = activity
        self.sessions = sessions

    async def handle(self, event: UserRegisteredEvent) -> None:
        async with self.sessions.open_session() as session:
            self.activity.record(
                session,
                ACTIVITY_USER_REGISTERED,
                user_id=UUID(event.payload.user_id),
                details=event.payload.email,
                correlation_id=event.correlation_id,
            )


class SendPasswordResetEmailHandler(EventHandler[PasswordResetRequestedEvent]):
    """Mail the password reset code."""

    def __init__(self, mail: MailSender, templates: EmailTemplates):
        self.mail = mail
        self.templates = templates

    async def handle(self, event: PasswordResetRequestedEvent) -> None:
        p = event.payload
        await self.mail.send(self.templates.password_reset_email(p.username, p.email, p.otp))


class RecordUserVerifiedHandler(EventHandler[UserVerifiedEvent]):
    def __init__(self, activity: ActivityService, sessions: SessionProvider):
        self.activity = activity
        self.sessions = sessions

    async def handle(self, event: UserVerifiedEvent) -> None:
        async with self.sessions.open_session() as session:
            self.activity.record(
                session,
                ACTIVITY_USER_VERIFIED,
                user_id=UUID(event.payload.user_id),
                correlation_id=event.correlation_id,
            )

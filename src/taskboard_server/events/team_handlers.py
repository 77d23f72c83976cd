"""Team event handlers."""

from uuid import UUID

from taskboard_server.constants import ACTIVITY_TEAM_INVITE_SENT
from taskboard_server.cqrs import EventHandler
from taskboard_server.database import SessionProvider
from taskboard_server.events.types import TeamInviteSentEvent
from taskboard_server.services.activity_service import ActivityService
from taskboard_server.services.email_templates import EmailTemplates
from taskboard_server.services.mail_service import MailSender


class SendTeamInviteEmailHandler(EventHandler[TeamInviteSentEvent]):
    def __init__(self, mail: MailSender, templates: EmailTemplates):
        self.mail = mail
        self.templates = templates

    async def handle(self, event: TeamInviteSentEvent) -> None:
        p = event.payload
        await self.mail.send(self.templates.team_invite_email(p.email, p.team_name, p.inviter_name, p.role, p.token))


class RecordTeamInviteSentHandler(EventHandler[TeamInviteSentEvent]):
    def __init__(self, activity: ActivityService, sessions: SessionProvider):
        self.activity = activity
        self.sessions = sessions

    async def handle(self, event: TeamInviteSentEvent) -> None:
        p = event.payload
        async with self.sessions.open_session() as session:
            self.activity.record(
                session,
                ACTIVITY_TEAM_INVITE_SENT,
                user_id=UUID(p.invited_by_id),
                team_id=UUID(p.team_id),
                details=f"{p.email} as {p.role}",
                correlation_id=event.correlation_id,
            )

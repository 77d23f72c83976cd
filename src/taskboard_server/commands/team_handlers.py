"""Team command handlers."""

from loguru import logger

from taskboard_server.commands.types import InviteTeamMemberCommand
from taskboard_server.cqrs import CommandHandler, EventBus
from taskboard_server.database import SessionProvider
from taskboard_server.events.types import TeamInviteSentEvent, TeamInviteSentPayload
from taskboard_server.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.api_model import InviteResult
from taskboard_server.permissions import ResourceContext, Role, UserContext, can_manage_team
from taskboard_server.services.team_service import TeamService
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService
from taskboard_server.settings import Settings
from taskboard_server.utils.clock import expires_in
from taskboard_server.utils.validators import is_valid_email, normalize_email


class InviteTeamMemberHandler(CommandHandler[InviteTeamMemberCommand]):
    """Invite an email address to a team, or add an existing user directly.

    The inviter must be allowed to manage the team based on their role inside
    it, and only team admins may hand out the ADMIN role.
    """

    def __init__(
        self,
        teams: TeamService,
        users: UserService,
        sessions: SessionProvider,
        tokens: TokenService,
        events: EventBus,
        settings: Settings,
    ):
        self.teams = teams
        self.users = users
        self.sessions = sessions
        self.tokens = tokens
        self.events = events
        self.settings = settings

    async def handle(self, command: InviteTeamMemberCommand) -> InviteResult:
        p = command.payload
        if not p.email or not p.email.strip():
            raise ValidationError(ErrorMessage.EMAIL_IS_REQUIRED)
        email = normalize_email(p.email)
        if not is_valid_email(email):
            raise ValidationError(ErrorMessage.INVALID_EMAIL_FORMAT)
        try:
            role = Role(p.role.strip().upper())
        except ValueError:
            raise ValidationError(ErrorMessage.INVALID_ROLE) from None

        async with self.sessions.open_session() as session:
            team = self.teams.get_team(session, p.team_id)
            if team is None:
                raise ResourceNotFoundError(ErrorMessage.TEAM_NOT_FOUND, "Team", p.team_id)

            inviter = self.users.get_by_id(session, p.invited_by_id)
            if inviter is None:
                raise AuthenticationError(ErrorMessage.UNAUTHORIZED)

            membership = self.teams.get_membership(session, team.id, inviter.id)
            if membership is None:
                raise PermissionDeniedError(ErrorMessage.FORBIDDEN)

            # Authority inside a team comes from the team role, not the account role
            inviter_context = UserContext(id=str(inviter.id), role=membership.role, team_ids=frozenset({str(team.id)}))
            if not can_manage_team(inviter_context, ResourceContext(team_id=str(team.id))):
                raise PermissionDeniedError(ErrorMessage.FORBIDDEN)
            if role == Role.ADMIN and membership.role != Role.ADMIN:
                raise PermissionDeniedError(ErrorMessage.FORBIDDEN)

            invitee = self.users.get_by_email(session, email)
            if invitee is not None and invitee.is_active:
                if self.teams.get_membership(session, team.id, invitee.id) is not None:
                    raise ConflictError(ErrorMessage.USER_ALREADY_TEAM_MEMBER)
                self.teams.add_member(session, team.id, invitee.id, role)
                logger.info(f"Added {invitee.id} to team {team.id} as {role} (correlation_id={command.correlation_id})")
                return InviteResult(team_id=team.id, email=email, role=role, added=True)

            if self.teams.get_pending_invite(session, team.id, email) is not None:
                raise ConflictError(ErrorMessage.INVITE_ALREADY_SENT)

            token = self.tokens.create_invite_token(str(team.id), email, role)
            invite = self.teams.create_invite(
                session,
                team_id=team.id,
                email=email,
                role=role,
                token=token,
                invited_by_id=inviter.id,
                expires_at=expires_in(days=self.settings.invite_ttl_days),
            )
            result = InviteResult(
                team_id=team.id,
                email=email,
                role=role,
                added=False,
                invite_id=invite.id,
                expires_at=invite.expires_at,
            )
            payload = TeamInviteSentPayload(
                invite_id=str(invite.id),
                team_id=str(team.id),
                team_name=team.name,
                email=email,
                role=role,
                token=token,
                invited_by_id=str(inviter.id),
                inviter_name=f"{inviter.first_name} {inviter.last_name}".strip(),
            )

        logger.info(f"Invite {result.invite_id} sent to team {result.team_id} (correlation_id={command.correlation_id})")
        await self.events.publish(TeamInviteSentEvent(payload=payload, metadata=command.metadata))
        return result

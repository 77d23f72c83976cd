"""Event handlers for the closed set of event types.

``EVENT_SUBSCRIBERS`` lists, per event type, the handler classes subscribed
to it in subscription order. Any number of subscribers is allowed, including
none.
"""

from taskboard_server.cqrs import EventHandler, MessageType
from taskboard_server.events.team_handlers import RecordTeamInviteSentHandler, SendTeamInviteEmailHandler
from taskboard_server.events.user_handlers import (
    RecordUserRegisteredHandler,
    RecordUserVerifiedHandler,
    SendPasswordResetEmailHandler,
    SendVerificationEmailHandler,
)

EVENT_SUBSCRIBERS: dict[MessageType, list[type[EventHandler]]] = {
    MessageType.REGISTERED_USER_EVENT: [SendVerificationEmailHandler, RecordUserRegisteredHandler],
    MessageType.USER_VERIFIED_EVENT: [RecordUserVerifiedHandler],
    MessageType.PASSWORD_RESET_REQUESTED_EVENT: [SendPasswordResetEmailHandler],
    MessageType.TEAM_INVITE_SENT_EVENT: [SendTeamInviteEmailHandler, RecordTeamInviteSentHandler],
}

__all__ = ["EVENT_SUBSCRIBERS"]

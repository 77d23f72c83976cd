"""Closed enumeration of message types.

Producers (routes, handlers) and the bus registries share these tags. Adding a
command or query means extending ``MessageType`` and registering exactly one
handler before first dispatch; startup fails otherwise.
"""

from enum import StrEnum


class MessageType(StrEnum):
    """Type tags of every command, query and event in the system."""

    # Commands
    REGISTER_USER_COMMAND = "REGISTER_USER_COMMAND"
    VERIFY_USER_COMMAND = "VERIFY_USER_COMMAND"
    LOGIN_USER_COMMAND = "LOGIN_USER_COMMAND"
    RESEND_OTP_COMMAND = "RESEND_OTP_COMMAND"
    REQUEST_PASSWORD_RESET_COMMAND = "REQUEST_PASSWORD_RESET_COMMAND"
    RESET_PASSWORD_COMMAND = "RESET_PASSWORD_COMMAND"
    INVITE_TEAM_MEMBER_COMMAND = "INVITE_TEAM_MEMBER_COMMAND"

    # Events
    REGISTERED_USER_EVENT = "REGISTERED_USER_EVENT"
    USER_VERIFIED_EVENT = "USER_VERIFIED_EVENT"
    PASSWORD_RESET_REQUESTED_EVENT = "PASSWORD_RESET_REQUESTED_EVENT"
    TEAM_INVITE_SENT_EVENT = "TEAM_INVITE_SENT_EVENT"

    # Queries
    GET_USER_BY_ID_QUERY = "GET_USER_BY_ID_QUERY"


COMMAND_TYPES: frozenset[MessageType] = frozenset(t for t in MessageType if t.name.endswith("_COMMAND"))
EVENT_TYPES: frozenset[MessageType] = frozenset(t for t in MessageType if t.name.endswith("_EVENT"))
QUERY_TYPES: frozenset[MessageType] = frozenset(t for t in MessageType if t.name.endswith("_QUERY"))

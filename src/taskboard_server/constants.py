"""Global constants for the taskboard server.

This module defines constants used throughout the application to avoid
hardcoded strings and make the codebase more maintainable.
"""

# Auth cookie names
ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

# Source tag stamped on messages built by the HTTP layer
SOURCE_API = "api"

OTP_LENGTH = 6

# Activity log actions
ACTIVITY_USER_REGISTERED = "USER_REGISTERED"
ACTIVITY_USER_VERIFIED = "USER_VERIFIED"
ACTIVITY_TEAM_INVITE_SENT = "TEAM_INVITE_SENT"

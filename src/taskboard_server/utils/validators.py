"""Input validation rules shared by the auth command handlers."""

import re

from taskboard_server.messages import ErrorMessage

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARACTER_PATTERN = re.compile(r"[^A-Za-z0-9]")

MIN_PASSWORD_LENGTH = 8


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def password_error(password: str) -> ErrorMessage | None:
    """Return the first password rule the value breaks, or None if it is acceptable.

    Rules: at least 8 characters with a lowercase letter, an uppercase letter,
    a digit and a special character.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return ErrorMessage.PASSWORD_TOO_SHORT
    if not any(c.islower() for c in password):
        return ErrorMessage.PASSWORD_NEEDS_LOWERCASE
    if not any(c.isupper() for c in password):
        return ErrorMessage.PASSWORD_NEEDS_UPPERCASE
    if not any(c.isdigit() for c in password):
        return ErrorMessage.PASSWORD_NEEDS_NUMBER
    if not SPECIAL_CHARACTER_PATTERN.search(password):
        return ErrorMessage.PASSWORD_NEEDS_SPECIAL
    return None

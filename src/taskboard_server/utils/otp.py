"""One-time password generation."""

import secrets

from taskboard_server.constants import OTP_LENGTH


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Generate a numeric one-time password, zero padded to ``length`` digits."""
    return f"{secrets.randbelow(10**length):0{length}d}"

"""JWT issuing and validation (PyJWT, HS256)."""

import secrets
from datetime import timedelta
from typing import Any

import jwt
from loguru import logger

from taskboard_server.exceptions import AuthenticationError
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.api_model import TokenPair
from taskboard_server.models.db_model import User
from taskboard_server.settings import Settings
from taskboard_server.utils.clock import utcnow

ALGORITHM = "HS256"


class TokenService:
    """Issues access, refresh and invite tokens and decodes access tokens."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = utcnow()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def create_token_pair(self, user: User) -> TokenPair:
        claims = {"sub": str(user.id), "email": user.email, "role": str(user.role)}
        access = self._encode(
            {**claims, "type": "access"},
            self.settings.jwt_secret,
            timedelta(minutes=self.settings.access_token_ttl_minutes),
        )
        refresh = self._encode(
            {**claims, "type": "refresh", "jti": secrets.token_hex(8)},
            self.settings.jwt_refresh_secret,
            timedelta(minutes=self.settings.refresh_token_ttl_minutes),
        )
        return TokenPair(access_token=access, refresh_token=refresh)

    def create_invite_token(self, team_id: str, email: str, role: str) -> str:
        return self._encode(
            {"team_id": team_id, "email": email, "role": role, "type": "invite", "jti": secrets.token_hex(8)},
            self.settings.jwt_secret,
            timedelta(days=self.settings.invite_ttl_days),
        )

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """Decode and validate an access token.

        Raises:
            AuthenticationError: If the token is malformed, expired or not an access token
        """
        try:
            payload = jwt.decode(token, self.settings.jwt_secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected access token: {e}")
            raise AuthenticationError(ErrorMessage.UNAUTHORIZED) from e
        if payload.get("type") != "access" or "sub" not in payload:
            raise AuthenticationError(ErrorMessage.UNAUTHORIZED)
        return payload

"""Tests for JWT issuing and validation."""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from taskboard_server.exceptions import AuthenticationError
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.db_model import User
from taskboard_server.permissions import Role
from taskboard_server.services.token_service import ALGORITHM, TokenService
from taskboard_server.utils.clock import utcnow


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def user() -> User:
    return User(
        id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        username="ada",
        email="ada@example.com",
        role=Role.MANAGER,
        password_hash="x",
    )


def test_access_token_round_trip(tokens, user):
    pair = tokens.create_token_pair(user)

    claims = tokens.decode_access_token(pair.access_token)

    assert claims["sub"] == str(user.id)
    assert claims["email"] == "ada@example.com"
    assert claims["role"] == "MANAGER"
    assert claims["type"] == "access"


def test_refresh_token_is_not_an_access_token(tokens, user):
    pair = tokens.create_token_pair(user)

    with pytest.raises(AuthenticationError):
        tokens.decode_access_token(pair.refresh_token)


def test_invite_token_is_not_an_access_token(tokens):
    token = tokens.create_invite_token("t1", "new@example.com", "MEMBER")

    with pytest.raises(AuthenticationError):
        tokens.decode_access_token(token)


def test_expired_token(tokens, settings, user):
    now = utcnow()
    token = jwt.encode(
        {"sub": str(user.id), "type": "access", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        settings.jwt_secret,
        algorithm=ALGORITHM,
    )

    with pytest.raises(AuthenticationError) as exc_info:
        tokens.decode_access_token(token)
    assert exc_info.value.message == ErrorMessage.UNAUTHORIZED


def test_token_signed_with_other_secret(tokens, user):
    token = jwt.encode({"sub": str(user.id), "type": "access"}, "another-secret", algorithm=ALGORITHM)

    with pytest.raises(AuthenticationError):
        tokens.decode_access_token(token)


def test_garbage_token(tokens):
    with pytest.raises(AuthenticationError):
        tokens.decode_access_token("not-a-jwt")

"""User account command handlers.

Handlers validate their payload, do their writes inside one session and then
publish events for the side effects (mail, activity log). Business rule
violations are raised as ``AppError`` subclasses; the command bus logs and
re-raises them and the HTTP layer maps them to status codes.
"""

import asyncio
import secrets

from loguru import logger

from taskboard_server.commands.types import (
    LoginUserCommand,
    RegisterUserCommand,
    RequestPasswordResetCommand,
    ResendOtpCommand,
    ResetPasswordCommand,
    VerifyUserCommand,
)
from taskboard_server.cqrs import CommandHandler, EventBus
from taskboard_server.database import SessionProvider
from taskboard_server.events.types import (
    PasswordResetRequestedEvent,
    PasswordResetRequestedPayload,
    UserRegisteredEvent,
    UserRegisteredPayload,
    UserVerifiedEvent,
    UserVerifiedPayload,
)
from taskboard_server.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.api_model import LoginResult, UserResponse
from taskboard_server.models.db_model import User
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService
from taskboard_server.settings import Settings
from taskboard_server.utils.clock import expires_in, is_expired
from taskboard_server.utils.otp import generate_otp
from taskboard_server.utils.passwords import hash_password, verify_password
from taskboard_server.utils.validators import is_valid_email, normalize_email, password_error


def _require(*values: str) -> None:
    if not all(value and value.strip() for value in values):
        raise ValidationError(ErrorMessage.ALL_FIELDS_ARE_REQUIRED)


def _require_email(email: str) -> str:
    if not email or not email.strip():
        raise ValidationError(ErrorMessage.EMAIL_IS_REQUIRED)
    email = normalize_email(email)
    if not is_valid_email(email):
        raise ValidationError(ErrorMessage.INVALID_EMAIL_FORMAT)
    return email


def _check_password(password: str) -> None:
    error = password_error(password)
    if error is not None:
        raise ValidationError(error)


def _otp_matches(user: User, otp: str) -> bool:
    if not user.otp or is_expired(user.otp_expires_at):
        return False
    return secrets.compare_digest(user.otp, otp.strip())


class RegisterUserHandler(CommandHandler[RegisterUserCommand]):
    """Create an unverified account and trigger the verification email."""

    def __init__(self, users: UserService, sessions: SessionProvider, events: EventBus, settings: Settings):
        self.users = users
        self.sessions = sessions
        self.events = events
        self.settings = settings

    async def handle(self, command: RegisterUserCommand) -> UserResponse:
        p = command.payload
        _require(p.first_name, p.last_name, p.username, p.email, p.password)
        email = _require_email(p.email)
        _check_password(p.password)

        async with self.sessions.open_session() as session:
            if self.users.get_by_email(session, email):
                raise ConflictError(ErrorMessage.USER_ALREADY_EXISTS)
            if self.users.get_by_username(session, p.username.strip()):
                raise ConflictError(ErrorMessage.USERNAME_ALREADY_TAKEN)

            otp = generate_otp()
            password_hash = await asyncio.to_thread(hash_password, p.password, self.settings.password_hash_rounds)
            user = self.users.create_user(
                session,
                first_name=p.first_name.strip(),
                last_name=p.last_name.strip(),
                username=p.username.strip(),
                email=email,
                password_hash=password_hash,
                otp=otp,
                otp_expires_at=expires_in(minutes=self.settings.otp_ttl_minutes),
            )
            public = self.users.to_public(user)

        logger.info(f"Registered user {public.id} (correlation_id={command.correlation_id})")
        await self.events.publish(
            UserRegisteredEvent(
                payload=UserRegisteredPayload(user_id=str(public.id), email=email, username=public.username, otp=otp),
                metadata=command.metadata,
            )
        )
        return public


class VerifyUserHandler(CommandHandler[VerifyUserCommand]):
    """Confirm an email address with the one-time password sent to it."""

    def __init__(self, users: UserService, sessions: SessionProvider, events: EventBus):
        self.users = users
        self.sessions = sessions
        self.events = events

    async def handle(self, command: VerifyUserCommand) -> UserResponse:
        p = command.payload
        _require(p.email, p.otp)
        email = _require_email(p.email)

        async with self.sessions.open_session() as session:
            user = self.users.get_by_email(session, email)
            if user is None:
                raise ResourceNotFoundError(ErrorMessage.USER_DOES_NOT_EXIST, "User", email)
            if user.is_verified:
                raise ValidationError(ErrorMessage.USER_ALREADY_VERIFIED)
            if not _otp_matches(user, p.otp):
                raise ValidationError(ErrorMessage.INVALID_OR_EXPIRED_OTP)
            public = self.users.to_public(self.users.mark_verified(session, user))

        logger.info(f"Verified user {public.id} (correlation_id={command.correlation_id})")
        await self.events.publish(
            UserVerifiedEvent(payload=UserVerifiedPayload(user_id=str(public.id), email=email), metadata=command.metadata)
        )
        return public


class LoginUserHandler(CommandHandler[LoginUserCommand]):
    """Check credentials and issue an access/refresh token pair."""

    def __init__(self, users: UserService, sessions: SessionProvider, tokens: TokenService):
        self.users = users
        self.sessions = sessions
        self.tokens = tokens

    async def handle(self, command: LoginUserCommand) -> LoginResult:
        p = command.payload
        _require(p.email, p.password)
        email = normalize_email(p.email)

        async with self.sessions.open_session() as session:
            user = self.users.get_by_email(session, email)
            if user is None or not await asyncio.to_thread(verify_password, p.password, user.password_hash):
                raise AuthenticationError(ErrorMessage.INVALID_CREDENTIALS)
            if not user.is_verified:
                raise PermissionDeniedError(ErrorMessage.USER_NOT_VERIFIED)
            if not user.is_active:
                raise PermissionDeniedError(ErrorMessage.USER_DEACTIVATED)

            tokens = self.tokens.create_token_pair(user)
            user = self.users.set_refresh_token(session, user, tokens.refresh_token)
            public = self.users.to_public(user)

        logger.info(f"User {public.id} logged in (correlation_id={command.correlation_id})")
        return LoginResult(user=public, tokens=tokens)


class ResendOtpHandler(CommandHandler[ResendOtpCommand]):
    """Issue a fresh verification code for an unverified account."""

    def __init__(self, users: UserService, sessions: SessionProvider, events: EventBus, settings: Settings):
        self.users = users
        self.sessions = sessions
        self.events = events
        self.settings = settings

    async def handle(self, command: ResendOtpCommand) -> None:
        email = _require_email(command.payload.email)

        async with self.sessions.open_session() as session:
            user = self.users.get_by_email(session, email)
            if user is None:
                raise ResourceNotFoundError(ErrorMessage.USER_DOES_NOT_EXIST, "User", email)
            if user.is_verified:
                raise ValidationError(ErrorMessage.USER_ALREADY_VERIFIED)
            otp = generate_otp()
            self.users.set_otp(session, user, otp, expires_in(minutes=self.settings.otp_ttl_minutes))
            payload = UserRegisteredPayload(user_id=str(user.id), email=email, username=user.username, otp=otp)

        await self.events.publish(UserRegisteredEvent(payload=payload, metadata=command.metadata))


class RequestPasswordResetHandler(CommandHandler[RequestPasswordResetCommand]):
    """Send a password reset code.

    Unknown addresses succeed silently so the endpoint cannot be used to
    discover which emails have accounts.
    """

    def __init__(self, users: UserService, sessions: SessionProvider, events: EventBus, settings: Settings):
        self.users = users
        self.sessions = sessions
        self.events = events
        self.settings = settings

    async def handle(self, command: RequestPasswordResetCommand) -> None:
        email = _require_email(command.payload.email)

        async with self.sessions.open_session() as session:
            user = self.users.get_by_email(session, email)
            if user is None:
                logger.debug(f"Password reset requested for unknown email (correlation_id={command.correlation_id})")
                return
            if not user.is_active:
                raise PermissionDeniedError(ErrorMessage.USER_DEACTIVATED)
            otp = generate_otp()
            self.users.set_otp(session, user, otp, expires_in(minutes=self.settings.otp_ttl_minutes))
            payload = PasswordResetRequestedPayload(user_id=str(user.id), email=email, username=user.username, otp=otp)

        await self.events.publish(PasswordResetRequestedEvent(payload=payload, metadata=command.metadata))


class ResetPasswordHandler(CommandHandler[ResetPasswordCommand]):
    """Set a new password after checking the reset code."""

    def __init__(self, users: UserService, sessions: SessionProvider, settings: Settings):
        self.users = users
        self.sessions = sessions
        self.settings = settings

    async def handle(self, command: ResetPasswordCommand) -> None:
        p = command.payload
        _require(p.email, p.otp, p.password)
        email = _require_email(p.email)
        _check_password(p.password)

        async with self.sessions.open_session() as session:
            user = self.users.get_by_email(session, email)
            if user is None:
                raise ResourceNotFoundError(ErrorMessage.USER_DOES_NOT_EXIST, "User", email)
            if not _otp_matches(user, p.otp):
                raise ValidationError(ErrorMessage.INVALID_OR_EXPIRED_OTP)
            if not user.is_active:
                raise PermissionDeniedError(ErrorMessage.USER_DEACTIVATED)
            password_hash = await asyncio.to_thread(hash_password, p.password, self.settings.password_hash_rounds)
            self.users.update_password(session, user, password_hash)

        logger.info(f"Password updated for {email} (correlation_id={command.correlation_id})")

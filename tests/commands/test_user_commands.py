"""Tests for the user account command handlers, executed through the command bus."""

from uuid import UUID

import pytest

from taskboard_server.commands.types import (
    LoginUserCommand,
    LoginUserPayload,
    RegisterUserCommand,
    RegisterUserPayload,
    RequestPasswordResetCommand,
    RequestPasswordResetPayload,
    ResendOtpCommand,
    ResendOtpPayload,
    ResetPasswordCommand,
    ResetPasswordPayload,
    VerifyUserCommand,
    VerifyUserPayload,
)
from taskboard_server.constants import ACTIVITY_USER_REGISTERED, ACTIVITY_USER_VERIFIED
from taskboard_server.cqrs import MessageMetadata, MessageType
from taskboard_server.cqrs.setup import build_message_buses, register_message_buses, register_message_handlers
from taskboard_server.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)
from taskboard_server.messages import ErrorMessage
from taskboard_server.services.activity_service import ActivityService
from taskboard_server.services.di import register_all_services
from taskboard_server.services.registry import ServiceRegistry
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService

PASSWORD = "Sup3r-secret"


def register_command(**overrides) -> RegisterUserCommand:
    fields = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": PASSWORD,
    }
    fields.update(overrides)
    return RegisterUserCommand(
        payload=RegisterUserPayload(**fields),
        metadata=MessageMetadata(correlation_id="corr-register", source="test"),
    )


def record_events(buses, message_type: MessageType) -> list:
    recorded = []
    buses.event_bus.subscribe(message_type, recorded.append)
    return recorded


async def register_and_get_otp(buses, **overrides) -> tuple:
    events = record_events(buses, MessageType.REGISTERED_USER_EVENT)
    user = await buses.command_bus.execute(register_command(**overrides))
    return user, events[-1].payload.otp


async def register_verified(buses, **overrides):
    user, otp = await register_and_get_otp(buses, **overrides)
    email = overrides.get("email", "ada@example.com")
    await buses.command_bus.execute(VerifyUserCommand(payload=VerifyUserPayload(email=email, otp=otp)))
    return user


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_register_creates_unverified_user(self, buses, sessions, mail_sender):
        events = record_events(buses, MessageType.REGISTERED_USER_EVENT)

        user = await buses.command_bus.execute(register_command(email="  Ada@Example.com "))

        assert user.email == "ada@example.com"
        assert user.username == "ada"
        assert user.is_verified is False
        assert user.is_active is True

        assert len(events) == 1
        assert events[0].payload.user_id == str(user.id)
        assert events[0].correlation_id == "corr-register"
        assert len(events[0].payload.otp) == 6

        assert len(mail_sender.sent) == 1
        assert mail_sender.sent[0].to == "ada@example.com"
        assert mail_sender.sent[0].subject == "Verify your email"
        assert events[0].payload.otp in mail_sender.sent[0].html

        with sessions.session() as session:
            stored = UserService().get_by_id(session, user.id)
            assert stored.password_hash != PASSWORD
            entries = ActivityService().list_for_user(session, user.id)
            assert [entry.action for entry in entries] == [ACTIVITY_USER_REGISTERED]
            assert entries[0].correlation_id == "corr-register"

    @pytest.mark.asyncio
    async def test_missing_field(self, buses):
        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(register_command(username="   "))
        assert exc_info.value.message == ErrorMessage.ALL_FIELDS_ARE_REQUIRED

    @pytest.mark.asyncio
    async def test_invalid_email(self, buses):
        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(register_command(email="not-an-email"))
        assert exc_info.value.message == ErrorMessage.INVALID_EMAIL_FORMAT

    @pytest.mark.asyncio
    async def test_weak_password(self, buses):
        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(register_command(password="Sh0rt!"))
        assert exc_info.value.message == ErrorMessage.PASSWORD_TOO_SHORT

    @pytest.mark.asyncio
    async def test_duplicate_email(self, buses):
        await buses.command_bus.execute(register_command())

        with pytest.raises(ConflictError) as exc_info:
            await buses.command_bus.execute(register_command(username="someone-else"))
        assert exc_info.value.message == ErrorMessage.USER_ALREADY_EXISTS

    @pytest.mark.asyncio
    async def test_duplicate_username(self, buses):
        await buses.command_bus.execute(register_command())

        with pytest.raises(ConflictError) as exc_info:
            await buses.command_bus.execute(register_command(email="other@example.com"))
        assert exc_info.value.message == ErrorMessage.USERNAME_ALREADY_TAKEN

    @pytest.mark.asyncio
    async def test_mail_failure_does_not_fail_registration(
        self, settings, engine, sessions, failing_mail_sender, log_records
    ):
        registry = ServiceRegistry()
        register_all_services(registry, settings=settings, engine=engine, mail_sender=failing_mail_sender)
        buses = build_message_buses()
        register_message_buses(registry, buses)
        register_message_handlers(buses, registry)

        user = await buses.command_bus.execute(register_command())

        assert user.email == "ada@example.com"
        assert any("mail relay unreachable" in m for m in log_records.messages("ERROR"))
        with sessions.session() as session:
            assert UserService().get_by_email(session, "ada@example.com") is not None
            # The sibling subscriber still recorded the activity
            assert len(ActivityService().list_for_user(session, user.id)) == 1


class TestVerifyUser:
    @pytest.mark.asyncio
    async def test_verify_with_correct_code(self, buses, sessions):
        user, otp = await register_and_get_otp(buses)
        verified_events = record_events(buses, MessageType.USER_VERIFIED_EVENT)

        result = await buses.command_bus.execute(
            VerifyUserCommand(payload=VerifyUserPayload(email="ada@example.com", otp=otp))
        )

        assert result.is_verified is True
        assert [event.payload.user_id for event in verified_events] == [str(user.id)]
        with sessions.session() as session:
            stored = UserService().get_by_id(session, user.id)
            assert stored.otp is None
            actions = [entry.action for entry in ActivityService().list_for_user(session, user.id)]
            assert actions == [ACTIVITY_USER_REGISTERED, ACTIVITY_USER_VERIFIED]

    @pytest.mark.asyncio
    async def test_wrong_code(self, buses):
        _, otp = await register_and_get_otp(buses)
        wrong = "000000" if otp != "000000" else "111111"

        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(VerifyUserCommand(payload=VerifyUserPayload(email="ada@example.com", otp=wrong)))
        assert exc_info.value.message == ErrorMessage.INVALID_OR_EXPIRED_OTP

    @pytest.mark.asyncio
    async def test_already_verified(self, buses):
        await register_verified(buses)

        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(
                VerifyUserCommand(payload=VerifyUserPayload(email="ada@example.com", otp="123456"))
            )
        assert exc_info.value.message == ErrorMessage.USER_ALREADY_VERIFIED

    @pytest.mark.asyncio
    async def test_unknown_user(self, buses):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await buses.command_bus.execute(
                VerifyUserCommand(payload=VerifyUserPayload(email="nobody@example.com", otp="123456"))
            )
        assert exc_info.value.message == ErrorMessage.USER_DOES_NOT_EXIST
        assert exc_info.value.status_code == 404


class TestLoginUser:
    @pytest.mark.asyncio
    async def test_login_issues_tokens(self, buses, registry, sessions):
        user = await register_verified(buses)

        result = await buses.command_bus.execute(
            LoginUserCommand(payload=LoginUserPayload(email="ADA@example.com", password=PASSWORD))
        )

        assert result.user.id == user.id
        claims = registry.get(TokenService).decode_access_token(result.tokens.access_token)
        assert UUID(claims["sub"]) == user.id
        with sessions.session() as session:
            assert UserService().get_by_id(session, user.id).refresh_token == result.tokens.refresh_token

    @pytest.mark.asyncio
    async def test_unverified_user_cannot_log_in(self, buses):
        await buses.command_bus.execute(register_command())

        with pytest.raises(PermissionDeniedError) as exc_info:
            await buses.command_bus.execute(
                LoginUserCommand(payload=LoginUserPayload(email="ada@example.com", password=PASSWORD))
            )
        assert exc_info.value.message == ErrorMessage.USER_NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_wrong_password(self, buses):
        await register_verified(buses)

        with pytest.raises(AuthenticationError) as exc_info:
            await buses.command_bus.execute(
                LoginUserCommand(payload=LoginUserPayload(email="ada@example.com", password="Wr0ng-password"))
            )
        assert exc_info.value.message == ErrorMessage.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(self, buses):
        with pytest.raises(AuthenticationError) as exc_info:
            await buses.command_bus.execute(
                LoginUserCommand(payload=LoginUserPayload(email="nobody@example.com", password=PASSWORD))
            )
        assert exc_info.value.message == ErrorMessage.INVALID_CREDENTIALS


class TestResendOtp:
    @pytest.mark.asyncio
    async def test_resend_replaces_code(self, buses, mail_sender):
        _, first_otp = await register_and_get_otp(buses)
        events = record_events(buses, MessageType.REGISTERED_USER_EVENT)

        await buses.command_bus.execute(ResendOtpCommand(payload=ResendOtpPayload(email="ada@example.com")))

        assert len(events) == 1
        assert len(mail_sender.sent) == 2
        assert events[0].payload.otp in mail_sender.sent[-1].html

    @pytest.mark.asyncio
    async def test_resend_for_verified_user(self, buses):
        await register_verified(buses)

        with pytest.raises(ValidationError):
            await buses.command_bus.execute(ResendOtpCommand(payload=ResendOtpPayload(email="ada@example.com")))


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self, buses, mail_sender):
        result = await buses.command_bus.execute(
            RequestPasswordResetCommand(payload=RequestPasswordResetPayload(email="nobody@example.com"))
        )

        assert result is None
        assert mail_sender.sent == []

    @pytest.mark.asyncio
    async def test_reset_flow(self, buses, mail_sender):
        await register_verified(buses)
        events = record_events(buses, MessageType.PASSWORD_RESET_REQUESTED_EVENT)

        await buses.command_bus.execute(
            RequestPasswordResetCommand(payload=RequestPasswordResetPayload(email="ada@example.com"))
        )
        otp = events[0].payload.otp
        assert mail_sender.sent[-1].subject == "Reset your password"

        new_password = "N3w-password!"
        await buses.command_bus.execute(
            ResetPasswordCommand(payload=ResetPasswordPayload(email="ada@example.com", otp=otp, password=new_password))
        )

        result = await buses.command_bus.execute(
            LoginUserCommand(payload=LoginUserPayload(email="ada@example.com", password=new_password))
        )
        assert result.user.email == "ada@example.com"

        with pytest.raises(AuthenticationError):
            await buses.command_bus.execute(
                LoginUserCommand(payload=LoginUserPayload(email="ada@example.com", password=PASSWORD))
            )

    @pytest.mark.asyncio
    async def test_reset_code_is_single_use(self, buses):
        await register_verified(buses)
        events = record_events(buses, MessageType.PASSWORD_RESET_REQUESTED_EVENT)
        await buses.command_bus.execute(
            RequestPasswordResetCommand(payload=RequestPasswordResetPayload(email="ada@example.com"))
        )
        payload = ResetPasswordPayload(email="ada@example.com", otp=events[0].payload.otp, password="N3w-password!")

        await buses.command_bus.execute(ResetPasswordCommand(payload=payload))

        with pytest.raises(ValidationError) as exc_info:
            await buses.command_bus.execute(ResetPasswordCommand(payload=payload))
        assert exc_info.value.message == ErrorMessage.INVALID_OR_EXPIRED_OTP


def test_user_commands_are_keyed_by_email():
    assert register_command(email=" Ada@Example.com").exclusive_key == "user:ada@example.com"
    assert VerifyUserCommand(payload=VerifyUserPayload(email="ada@example.com")).exclusive_key == "user:ada@example.com"
    assert LoginUserCommand(payload=LoginUserPayload(email="ada@example.com")).exclusive_key is None

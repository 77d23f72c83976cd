"""
Auth API - account registration, verification, login and password reset.

Every endpoint builds a command, stamps it with a fresh correlation id and
hands it to the command bus. Business rule violations come back as
``AppError`` exceptions and are rendered by the global exception handlers.
"""

from fastapi import APIRouter, Depends, Response, status

from taskboard_server.api.dependencies import (
    CurrentUser,
    authenticated_metadata,
    command_bus,
    current_user,
    message_metadata,
    query_bus,
    service,
)
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
from taskboard_server.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from taskboard_server.cqrs import CommandBus, MessageMetadata, QueryBus
from taskboard_server.messages import SuccessMessage
from taskboard_server.models.api_model import (
    ApiResponse,
    EmailInput,
    LoginInput,
    LoginResult,
    RegisterInput,
    UpdatePasswordInput,
    VerifyInput,
)
from taskboard_server.queries.types import GetUserByIdPayload, GetUserByIdQuery
from taskboard_server.settings import Settings

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterInput,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
) -> ApiResponse:
    """Register a new, unverified account and email a verification code."""
    user = await bus.execute(RegisterUserCommand(payload=RegisterUserPayload(**body.model_dump()), metadata=metadata))
    return ApiResponse(message=SuccessMessage.USER_REGISTERED, status_code=status.HTTP_201_CREATED, data=user)


@router.post("/verify", response_model=ApiResponse)
async def verify(
    body: VerifyInput,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
) -> ApiResponse:
    user = await bus.execute(VerifyUserCommand(payload=VerifyUserPayload(**body.model_dump()), metadata=metadata))
    return ApiResponse(message=SuccessMessage.USER_VERIFIED, status_code=status.HTTP_200_OK, data=user)


@router.post("/login", response_model=ApiResponse)
async def login(
    body: LoginInput,
    response: Response,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
    settings: Settings = Depends(service(Settings)),
) -> ApiResponse:
    """Log in and set the access and refresh token cookies."""
    result: LoginResult = await bus.execute(LoginUserCommand(payload=LoginUserPayload(**body.model_dump()), metadata=metadata))

    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        result.tokens.access_token,
        max_age=settings.access_token_ttl_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        result.tokens.refresh_token,
        max_age=settings.refresh_token_ttl_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return ApiResponse(message=SuccessMessage.LOGIN_SUCCESSFUL, status_code=status.HTTP_200_OK, data=result.user)


@router.post("/logout", response_model=ApiResponse)
async def logout(response: Response) -> ApiResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return ApiResponse(message=SuccessMessage.LOGOUT_SUCCESSFUL, status_code=status.HTTP_200_OK)


@router.post("/resend-otp", response_model=ApiResponse)
async def resend_otp(
    body: EmailInput,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
) -> ApiResponse:
    await bus.execute(ResendOtpCommand(payload=ResendOtpPayload(email=body.email), metadata=metadata))
    return ApiResponse(message=SuccessMessage.OTP_SENT, status_code=status.HTTP_200_OK)


@router.post("/forgot-password", response_model=ApiResponse)
async def forgot_password(
    body: EmailInput,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
) -> ApiResponse:
    """Request a password reset code. Answers the same whether or not the email is known."""
    await bus.execute(RequestPasswordResetCommand(payload=RequestPasswordResetPayload(email=body.email), metadata=metadata))
    return ApiResponse(message=SuccessMessage.PASSWORD_RESET_REQUESTED, status_code=status.HTTP_200_OK)


@router.post("/update-password", response_model=ApiResponse)
async def update_password(
    body: UpdatePasswordInput,
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(message_metadata),
) -> ApiResponse:
    await bus.execute(ResetPasswordCommand(payload=ResetPasswordPayload(**body.model_dump()), metadata=metadata))
    return ApiResponse(message=SuccessMessage.PASSWORD_UPDATED, status_code=status.HTTP_200_OK)


@router.get("/me", response_model=ApiResponse)
async def me(
    auth: CurrentUser = Depends(current_user),
    bus: QueryBus = Depends(query_bus),
    metadata: MessageMetadata = Depends(authenticated_metadata),
) -> ApiResponse:
    user = await bus.execute(GetUserByIdQuery(payload=GetUserByIdPayload(user_id=auth.context.id), metadata=metadata))
    return ApiResponse(message=SuccessMessage.USER_FETCHED, status_code=status.HTTP_200_OK, data=user)

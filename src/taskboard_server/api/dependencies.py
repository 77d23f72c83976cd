"""API dependencies for FastAPI endpoints."""

from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import TypeVar
from uuid import uuid4

from fastapi import Depends, Request
from sqlmodel import Session

from taskboard_server.constants import ACCESS_TOKEN_COOKIE, SOURCE_API
from taskboard_server.cqrs import CommandBus, MessageMetadata, QueryBus
from taskboard_server.database import SessionProvider
from taskboard_server.exceptions import AuthenticationError, PermissionDeniedError
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.db_model import User
from taskboard_server.permissions import UserContext
from taskboard_server.services.registry import get_service_registry
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService

T = TypeVar("T")


def service[T](service_type: type[T]) -> Callable[[], T]:
    """FastAPI dependency that provides a service by type.

    Args:
        service_type: The type of service to retrieve from the registry

    Returns:
        A callable that returns the requested service instance

    Example:
        ```python
        @router.get("/endpoint")
        def endpoint(users: UserService = Depends(service(UserService))):
            ...
        ```
    """

    def get_service() -> T:
        registry = get_service_registry()
        return registry.get(service_type)

    return get_service


def db_session(sessions: SessionProvider = Depends(service(SessionProvider))) -> Generator[Session]:
    """Yield a session from the registered ``SessionProvider``."""
    with sessions.session() as session:
        yield session


def message_metadata() -> MessageMetadata:
    """Metadata for a message built by an anonymous route: a fresh correlation id per request."""
    return MessageMetadata(correlation_id=str(uuid4()), source=SOURCE_API)


def command_bus(bus: CommandBus = Depends(service(CommandBus))) -> CommandBus:
    return bus


def query_bus(bus: QueryBus = Depends(service(QueryBus))) -> QueryBus:
    return bus


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated user and their resolved permission context."""

    user: User
    context: UserContext


def _bearer_token(request: Request) -> str | None:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def current_user(
    request: Request,
    session: Session = Depends(db_session),
    tokens: TokenService = Depends(service(TokenService)),
    users: UserService = Depends(service(UserService)),
) -> CurrentUser:
    """Authenticate the request from the access token cookie or Bearer header.

    Raises:
        AuthenticationError: No token, an invalid token, or an unknown user
        PermissionDeniedError: The account is deactivated
    """
    token = _bearer_token(request)
    if not token:
        raise AuthenticationError(ErrorMessage.UNAUTHORIZED)

    claims = tokens.decode_access_token(token)
    user = users.get_by_id(session, claims["sub"])
    if user is None:
        raise AuthenticationError(ErrorMessage.UNAUTHORIZED)
    if not user.is_active:
        raise PermissionDeniedError(ErrorMessage.USER_DEACTIVATED)

    return CurrentUser(user=user, context=users.build_user_context(session, user))


def authenticated_metadata(auth: CurrentUser = Depends(current_user)) -> MessageMetadata:
    """Metadata for a message built by an authenticated route, stamped with the caller's id.

    ``current_user`` is cached per request, so routes may also depend on it directly.
    """
    return MessageMetadata(correlation_id=str(uuid4()), user_id=auth.context.id, source=SOURCE_API)

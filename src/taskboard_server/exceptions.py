"""Common exceptions for the server.

Every application error carries a stable ``message`` code from
``ErrorMessage`` and the HTTP status the route layer should answer with.
Command handlers raise these; the command bus logs and re-raises them
unchanged and ``exception_handlers`` turns them into JSON responses.
"""

from http import HTTPStatus

from taskboard_server.messages import ErrorMessage


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: ErrorMessage | str, detail: str | None = None):
        self.message = str(message)
        self.detail = detail
        super().__init__(detail or self.message)

    @property
    def error(self) -> str:
        return HTTPStatus(self.status_code).phrase


class ValidationError(AppError):
    """Raised when a request payload fails a business validation rule."""

    status_code = HTTPStatus.BAD_REQUEST


class AuthenticationError(AppError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = HTTPStatus.UNAUTHORIZED


class PermissionDeniedError(AppError):
    """Raised after a permission check answers ``False``."""

    status_code = HTTPStatus.FORBIDDEN

    def __init__(self, message: ErrorMessage | str = ErrorMessage.FORBIDDEN, detail: str | None = None):
        super().__init__(message, detail)


class ResourceNotFoundError(AppError):
    """Raised when a resource doesn't exist.

    Generic exception for any resource that cannot be found by its identifier.
    """

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, message: ErrorMessage | str, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(message, f"{resource_type} not found: {identifier}")


class ConflictError(AppError):
    """Raised when the request clashes with existing state (duplicate user, pending invite)."""

    status_code = HTTPStatus.CONFLICT

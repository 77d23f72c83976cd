"""Global exception handlers for the FastAPI application.

This module contains custom exception handlers that convert application
exceptions into ``{message, statusCode, error}`` JSON responses.
"""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from taskboard_server.cqrs import CqrsError
from taskboard_server.exceptions import AppError
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.api_model import ErrorResponse


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(message=message, status_code=status_code, error=HTTPStatus(status_code).phrase)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}")
    return error_response(exc.status_code, exc.message)


async def cqrs_error_handler(request: Request, exc: CqrsError) -> JSONResponse:
    # Bus wiring problems are configuration errors, never the client's fault
    logger.error(f"{request.method} {request.url.path} failed on message dispatch: {exc}")
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, ErrorMessage.INTERNAL_SERVER_ERROR)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> 400 invalid request body: {exc.errors()}")
    return error_response(HTTPStatus.BAD_REQUEST, ErrorMessage.ALL_FIELDS_ARE_REQUIRED)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(CqrsError, cqrs_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    logger.debug("Registered exception handlers")

"""
Error taxonomy and JSON error handlers.

Every service answers failures with the same envelope:

    {"error": "<message>"}

Services raise the classes below; `register_exception_handlers` turns them
(and FastAPI's own validation/HTTP errors) into that envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(AppError):
    """400: malformed body or parameters."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid request"


class AuthenticationError(AppError):
    """401: missing or invalid credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "invalid token"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    """403: caller lacks the required role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "access denied"


class NotFoundError(AppError):
    """404: no row for the requested id."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class UpstreamError(AppError):
    """502: a downstream service failed or was unreachable."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "bad gateway"


_BY_STATUS: dict[int, type[AppError]] = {
    status.HTTP_400_BAD_REQUEST: ValidationError,
    status.HTTP_401_UNAUTHORIZED: AuthenticationError,
    status.HTTP_403_FORBIDDEN: AuthorizationError,
    status.HTTP_404_NOT_FOUND: NotFoundError,
}


def error_for_status(status_code: int, message: str | None = None) -> AppError:
    """
    Rebuild the error a downstream service reported.

    Known client errors keep their class and message so they pass through the
    gateway unchanged; anything else becomes an UpstreamError.
    """
    cls = _BY_STATUS.get(status_code)
    if cls is None:
        return UpstreamError(message)
    return cls(message)


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(
    app: FastAPI,
    fallback_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    fallback_message: str = "internal server error",
) -> None:
    """
    Install the JSON error envelope on `app`.

    Leaves use the default 500 fallback; the gateway passes 502 since most of
    its unexpected failures are caused downstream.
    """

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return _error_response(exc.status_code, exc.message, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(status.HTTP_400_BAD_REQUEST, _first_validation_message(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(fallback_status, fallback_message)

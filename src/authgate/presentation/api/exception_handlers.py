"""Centralized exception handlers for the FastAPI application.

Every ``AuthError`` carries an ``ErrorKind``; the kind alone decides the
HTTP status. Internal failures are logged with their details and
answered with a generic message.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from authgate_auth.exceptions import AuthError, ErrorCode, ErrorKind

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"

ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BAD_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INTERNAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_error_response(
    status_code: int,
    message: str,
    code: str,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
    )


def auth_error_response(request: Request, exc: AuthError) -> JSONResponse:
    """Log ``exc`` and turn it into the client-facing response."""
    status_code = ERROR_KIND_TO_STATUS[exc.kind]

    if exc.kind is ErrorKind.INTERNAL_FAILURE:
        logger.error(
            "Internal failure on %s %s: %s (code=%s, details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
            exc.details,
        )
        return create_error_response(
            status_code=status_code,
            message=INTERNAL_ERROR_MESSAGE,
            code=exc.code.value,
        )

    logger.warning(
        "Request rejected on %s %s: %s (code=%s)",
        request.method,
        request.url.path,
        exc.message,
        exc.code.value,
    )
    return create_error_response(
        status_code=status_code,
        message=exc.message,
        code=exc.code.value,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        return auth_error_response(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format."""
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=INTERNAL_ERROR_MESSAGE,
            code=ErrorCode.INTERNAL_ERROR.value,
        )

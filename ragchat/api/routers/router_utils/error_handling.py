"""
Error handling for the HTTP API.

Maps the application exception hierarchy to HTTP status codes. Registered
as an app-wide exception handler so errors raised by dependencies (for
example a missing provider key) are mapped the same way as errors raised
by route bodies.

Dependencies: fastapi, ragchat.core.exceptions
System role: Uniform error responses
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ragchat.core.exceptions import (
    DocumentNotFoundError,
    ProviderError,
    ProviderUnavailable,
    RagChatException,
    SessionNotFoundError,
    StorageError,
    ValidationError,
)
from ragchat.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[RagChatException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DocumentNotFoundError: status.HTTP_404_NOT_FOUND,
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    ProviderUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    ProviderError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: RagChatException) -> int:
    """HTTP status for an application exception (500 when unmapped)."""
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def ragchat_exception_handler(request: Request, exc: RagChatException) -> JSONResponse:
    """
    Render an application exception as a JSON error response.

    Args:
        request: Failed request
        exc: Raised exception

    Returns:
        JSONResponse: {"error": exception type, "detail": message}
    """
    status_code = status_code_for(exc)
    log_with_context(
        logger,
        logging.ERROR if status_code >= 500 else logging.WARNING,
        f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}",
        status_code=status_code,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 responses."""
    logger.warning(f"{request.method} {request.url.path} - Invalid request: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application exception handlers to an app."""
    app.add_exception_handler(RagChatException, ragchat_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

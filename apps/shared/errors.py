"""
Secure Error Handling

Provides utilities for handling errors securely without leaking sensitive information,
and the exception handlers that render every failure as the JSON envelope
`{"success": false, "error": "..."}`.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server Error"


class StorageError(Exception):
    """Raised by storage adapters when the document store fails or is unavailable."""


def log_and_sanitize_error(
    error: Exception,
    context: str,
    user_message: Optional[str] = None
) -> tuple[str, str]:
    """
    Log full error details server-side and return sanitized message for client.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "Blog lookup")
        user_message: Optional custom message to show user. If None, uses generic message.

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    # Generate unique error ID for correlation
    error_id = str(uuid.uuid4())[:8]

    # Log full error server-side
    logger.error(
        f"{context} failed [{error_id}]: {type(error).__name__}: {str(error)}",
        exc_info=True
    )

    # Return sanitized message for client
    if user_message:
        sanitized = f"{user_message} (Error ID: {error_id})"
    else:
        sanitized = f"{context} failed. Please try again later. (Error ID: {error_id})"

    return sanitized, error_id


def error_response(message: str, status_code: int) -> JSONResponse:
    """Consistent error payloads across the API."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
        },
    )


def format_request_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI's request validation errors into one readable line."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "Invalid request")
        parts.append(f"{location}: {message}" if location else message)
    return ", ".join(parts) or "Invalid request"


def setup_error_handlers(app: FastAPI) -> None:
    """Register handlers that render HTTP, request and unexpected errors as envelopes."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        message = (
            detail.get("message") if isinstance(detail, dict) else str(detail)
        ) or "Request failed."
        return error_response(message=message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(
            message=format_request_errors(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path, exc_info=exc)
        return error_response(
            message=SERVER_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

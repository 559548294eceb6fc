"""Server error handling - sanitizes errors for client responses.

Prevents exposure of sensitive information like file paths, stack traces,
and internal configuration to HTTP clients.
"""

import logging
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from timeoff.core.errors import (
    ConfigError,
    CorrelationError,
    DialogError,
    DownstreamCallError,
    RecognitionError,
)

logger = logging.getLogger(__name__)


# Error messages safe to expose to clients
SAFE_ERROR_MESSAGES = {
    "ConfigError": "Configuration error. Please contact support.",
    "DialogError": "Dialog execution error. Please try again.",
    "DialogStackError": "Dialog execution error. Please try again.",
    "DialogNotFoundError": "Dialog execution error. Please try again.",
    "RecognitionError": "Unable to understand request. Please rephrase.",
    "CorrelationError": "Unrecognized channel action.",
    "ProfileLookupError": "Downstream service error.",
    "ApprovalSubmissionError": "Downstream service error.",
}

DEFAULT_ERROR_MESSAGE = "An internal error occurred. Please try again later."
SUPPORT_MESSAGE = "If this problem persists, contact support with the reference code."


def create_error_reference() -> str:
    """Generate unique error reference for client/server correlation."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def get_safe_error_message(exception: Exception) -> str:
    """Get client-safe error message for exception type."""
    return SAFE_ERROR_MESSAGES.get(type(exception).__name__, DEFAULT_ERROR_MESSAGE)


def get_http_status_for_exception(exception: Exception) -> int:
    """Map exception types to appropriate HTTP status codes."""
    if isinstance(exception, CorrelationError):
        return 400
    if isinstance(exception, RecognitionError):
        return 422
    if isinstance(exception, DownstreamCallError):
        return 502
    if isinstance(exception, (ConfigError, DialogError)):
        return 500
    return 500


def log_error_with_context(
    error_ref: str,
    exception: Exception,
    conversation_id: str | None = None,
    endpoint: str | None = None,
) -> None:
    """Log full error details server-side for debugging."""
    logger.error(
        f"[{error_ref}] Error in {endpoint or 'unknown'} "
        f"for conversation {conversation_id or 'unknown'}: "
        f"{type(exception).__name__}: {exception}",
        exc_info=exception,
        extra={
            "error_reference": error_ref,
            "conversation_id": conversation_id,
            "endpoint": endpoint,
            "exception_type": type(exception).__name__,
        },
    )


async def timeoff_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Sanitized response for errors raised by the bot."""
    error_ref = create_error_reference()
    conversation_id = request.path_params.get("conversation_id")
    log_error_with_context(error_ref, exc, conversation_id, request.url.path)

    return JSONResponse(
        status_code=get_http_status_for_exception(exc),
        content={
            "error": get_safe_error_message(exc),
            "reference": error_ref,
            "message": SUPPORT_MESSAGE,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for uncaught exceptions."""
    error_ref = create_error_reference()
    log_error_with_context(error_ref, exc, None, request.url.path)

    return JSONResponse(
        status_code=500,
        content={
            "error": DEFAULT_ERROR_MESSAGE,
            "reference": error_ref,
            "message": SUPPORT_MESSAGE,
        },
    )

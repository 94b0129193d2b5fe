"""filestorage API error handling.

Translates storage errors and framework errors into JSON error responses.

Storage error mapping:
- InvalidKeyError(reason) -> 400 {"error": reason}
- ObjectNotFoundError(key) -> 404 {"error": "object `key` not found"}
- StorageIOError(detail) -> 500 {"error": "storage I/O error: detail"}

Framework handlers:
- ApiError: Errors raised directly by route handlers
- HTTPException: Unknown routes (404), wrong methods (405), etc.
- RequestValidationError: Malformed requests (422)
- Exception: Catch-all for unhandled exceptions (500, no stack traces)

The handlers only translate; they never retry or fall back.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filestorage.api.error_model import make_error_response
from filestorage.observability.tracing import get_current_trace_id
from filestorage.storage.errors import (
    InvalidKeyError,
    ObjectNotFoundError,
    StorageIOError,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Application-level HTTP error raised by route handlers.

    Attributes:
        status_code: HTTP status code (e.g., 400).
        message: Human-readable error message.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def not_found_message(key: str) -> str:
    """Return the client-facing message for a missing object."""
    return f"object `{key}` not found"


def io_error_message(detail: str) -> str:
    """Return the client-facing message for a storage I/O failure."""
    return f"storage I/O error: {detail}"


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """FastAPI exception handler for ApiError."""
    assert isinstance(exc, ApiError)

    return make_error_response(request, message=exc.message, http_status=exc.status_code)


async def invalid_key_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map InvalidKeyError to 400.

    Invalid keys are client faults and are not logged as server problems.
    """
    assert isinstance(exc, InvalidKeyError)

    logger.debug("Rejected object key %r: %s", exc.key, exc.reason)
    return make_error_response(request, message=exc.reason, http_status=400)


async def object_not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map ObjectNotFoundError to 404 with the key in the message."""
    assert isinstance(exc, ObjectNotFoundError)

    return make_error_response(
        request,
        message=not_found_message(exc.key or ""),
        http_status=404,
    )


async def storage_io_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map StorageIOError to 500 and log it as a server-side fault."""
    assert isinstance(exc, StorageIOError)

    logger.error(
        "Storage I/O error: %s",
        exc.detail,
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "trace_id": get_current_trace_id(),
            "object_key": exc.key,
        },
    )
    return make_error_response(request, message=io_error_message(exc.detail), http_status=500)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map Starlette/FastAPI HTTP exceptions to the error body."""
    assert isinstance(exc, StarletteHTTPException)

    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"
    return make_error_response(
        request,
        message=message,
        http_status=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map request validation errors to 422 without exposing validation internals."""
    assert isinstance(exc, RequestValidationError)

    return make_error_response(request, message="request validation failed", http_status=422)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler for unhandled exceptions.

    Returns 500 with a generic message. Does NOT expose stack traces or
    exception details to clients; the exception is logged instead.
    """
    logger.exception(
        "Unhandled exception: %s",
        type(exc).__name__,
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return make_error_response(request, message="internal error", http_status=500)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all error handlers on the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(InvalidKeyError, invalid_key_handler)
    app.add_exception_handler(ObjectNotFoundError, object_not_found_handler)
    app.add_exception_handler(StorageIOError, storage_io_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

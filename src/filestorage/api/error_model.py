"""Shared error response builder for the filestorage API.

Every error the API returns, from route handlers, exception handlers or
middleware, uses the same small JSON body:

    {"error": "<human-readable message>"}

The X-Request-Id header is always set so failures can be correlated with
server logs. Bodies never carry stack traces or filesystem paths.
"""

from __future__ import annotations

import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from filestorage.api.middleware.request_id import REQUEST_ID_HEADER


def _get_request_id(request: Request) -> str:
    """Extract or generate request_id for error responses.

    Priority:
    1. request.state.request_id (set by RequestIdMiddleware)
    2. X-Request-Id header (if present)
    3. Generate new UUID (fallback)

    Returns:
        Request ID string (never None).
    """
    request_id: str | None = getattr(request.state, "request_id", None)
    if request_id is not None:
        return str(request_id)

    header_id: str | None = request.headers.get(REQUEST_ID_HEADER)
    if header_id and header_id.strip():
        return header_id.strip()

    return str(uuid.uuid4())


def make_error_response(
    request: Request,
    *,
    message: str,
    http_status: int,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error JSON response.

    Args:
        request: The FastAPI request object (for request_id extraction).
        message: Human-readable error message placed under "error".
        http_status: HTTP status code (e.g., 400, 404, 500).
        headers: Optional extra response headers (e.g., Allow on 405).

    Returns:
        JSONResponse with the error body and X-Request-Id header.
    """
    request_id = _get_request_id(request)

    response = JSONResponse(
        status_code=http_status,
        content={"error": message},
        headers=headers,
    )
    response.headers[REQUEST_ID_HEADER] = request_id

    return response

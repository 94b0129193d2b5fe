"""Request ID middleware for the filestorage API.

Gives every request an ID for log correlation, copies it onto the active
OpenTelemetry span, and writes one access log line per request.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from filestorage.observability.tracing import set_span_attributes

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


def _resolve_request_id(request: Request) -> str:
    """Use a non-blank client-supplied X-Request-Id, else a fresh uuid4."""
    incoming = request.headers.get(REQUEST_ID_HEADER)
    if incoming and incoming.strip():
        return incoming.strip()
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that attaches a request ID to every request.

    Behavior:
    - request.state.request_id is set before the route runs.
    - The response carries the same value in X-Request-Id.
    - The current span gets filestorage.request_id when tracing is on.
    - One INFO line is logged with method, path, status and latency.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process the request and attach request ID."""
        request_id = _resolve_request_id(request)
        request.state.request_id = request_id
        set_span_attributes({"filestorage.request_id": request_id})

        started = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "%s %s -> %d (%.1f ms) request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response

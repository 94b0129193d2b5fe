"""Object storage OpenTelemetry tracing integration.

Provides the tracing decorator applied to storage operations.

Security:
    - Never export absolute filesystem paths in span attributes
    - Never export raw keys; only their SHA256 hash
"""

from __future__ import annotations

import functools
import hashlib
import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

from filestorage.observability.tracing import is_tracing_enabled

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TRACER_NAME = "filestorage.object_store"


def traced_storage_operation(operation: str) -> Callable[[F], F]:
    """Decorator to trace storage operations with OpenTelemetry.

    Emits spans with safe attributes (no absolute paths, no raw keys).

    Args:
        operation: Operation name (e.g., "put", "get", "delete").

    Returns:
        Decorated function that emits OTel spans when tracing is enabled.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, key: str, *args: Any, **kwargs: Any) -> Any:
            if not is_tracing_enabled():
                return func(self, key, *args, **kwargs)

            try:
                from opentelemetry import trace
            except ImportError:
                return func(self, key, *args, **kwargs)

            tracer = trace.get_tracer(TRACER_NAME)
            span_name = f"{TRACER_NAME}.{operation}"

            with tracer.start_as_current_span(span_name) as span:
                key_sha256 = hashlib.sha256(key.encode("utf-8", "surrogatepass")).hexdigest()
                span.set_attribute("filestorage.object_key_sha256", key_sha256)
                span.set_attribute("storage.backend", getattr(self, "backend_name", "unknown"))

                if operation == "put" and args and isinstance(args[0], bytes | bytearray):
                    span.set_attribute("filestorage.object_size_bytes", len(args[0]))

                try:
                    result = func(self, key, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("error", True)
                    span.set_attribute("error.type", type(e).__name__)
                    raise

                if isinstance(result, bytes):
                    span.set_attribute("filestorage.object_size_bytes", len(result))

                return result

        return cast(F, wrapper)

    return decorator

"""filestorage FastAPI application factory.

This module provides the create_app() factory for bootstrapping the HTTP
façade over a single shared object store.
"""

import logging

from fastapi import FastAPI

from filestorage.api.errors import register_exception_handlers
from filestorage.api.middleware.request_id import RequestIdMiddleware
from filestorage.api.routes.health import FILESTORAGE_VERSION
from filestorage.api.routes.health import router as health_router
from filestorage.api.routes.objects import router as objects_router
from filestorage.observability.tracing import configure_tracing, instrument_fastapi
from filestorage.storage.filesystem_store import FilesystemObjectStore
from filestorage.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)


def create_app(object_store: ObjectStore | None = None) -> FastAPI:
    """Create and configure the filestorage FastAPI application.

    This factory:
    - Creates a FastAPI app with service metadata
    - Binds one object store to app.state for the process lifetime
    - Registers RequestIdMiddleware and the error handlers
    - Mounts the health and object routers

    Args:
        object_store: Store shared by every request handler. If None, a
            FilesystemObjectStore is created from FILESTORAGE_DATA_DIR.

    Returns:
        Configured FastAPI application instance.

    Raises:
        StorageIOError: If the default store's root cannot be created.
    """
    app = FastAPI(
        title="filestorage",
        description="Minimal filesystem-backed object storage",
        version=FILESTORAGE_VERSION,
    )

    if object_store is None:
        object_store = FilesystemObjectStore()

    app.state.object_store = object_store
    logger.info("Serving objects from backend=%s", object_store.backend_name)

    configure_tracing()

    app.add_middleware(RequestIdMiddleware)

    instrument_fastapi(app)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(objects_router)

    return app

"""Object routes for the filestorage API.

- PUT /objects/{key} stores the request body (201, empty body)
- GET /objects/{key} returns the object bytes (200, application/octet-stream)
- DELETE /objects/{key} removes the object (204)

{key} captures any number of path segments. Storage errors propagate to the
handlers registered in filestorage.api.errors. The blocking filesystem call
runs in a worker thread so requests proceed concurrently; nothing orders or
serializes operations on the same key.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from filestorage.api.errors import ApiError
from filestorage.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Objects"])

OBJECTS_PREFIX = "/objects"
OBJECT_MEDIA_TYPE = "application/octet-stream"
EMPTY_KEY_MESSAGE = "object key cannot be empty"


def get_object_store(request: Request) -> ObjectStore:
    """FastAPI dependency returning the process-wide object store."""
    store: ObjectStore = request.app.state.object_store
    return store


RequireObjectStore = Annotated[ObjectStore, Depends(get_object_store)]


def _ensure_key_present(key: str) -> None:
    """Reject an empty key before it reaches the storage engine."""
    if not key:
        raise ApiError(status_code=400, message=EMPTY_KEY_MESSAGE)


@router.put(
    OBJECTS_PREFIX + "/{key:path}",
    status_code=201,
    summary="Store an object",
    responses={
        201: {"description": "Object stored"},
        400: {"description": "Invalid object key"},
        500: {"description": "Storage I/O error"},
    },
)
async def put_object(request: Request, key: str, store: RequireObjectStore) -> Response:
    """Store the raw request body under key, replacing any existing object."""
    _ensure_key_present(key)
    body = await request.body()

    await asyncio.to_thread(store.put, key, body)

    logger.debug("PUT object key=%s size_bytes=%d", key, len(body))
    return Response(status_code=201)


@router.get(
    OBJECTS_PREFIX + "/{key:path}",
    summary="Fetch an object",
    response_class=Response,
    responses={
        200: {"description": "Object bytes", "content": {OBJECT_MEDIA_TYPE: {}}},
        400: {"description": "Invalid object key"},
        404: {"description": "Object not found"},
        500: {"description": "Storage I/O error"},
    },
)
async def get_object(key: str, store: RequireObjectStore) -> Response:
    """Return the full object content with its byte count as Content-Length."""
    _ensure_key_present(key)

    data = await asyncio.to_thread(store.get, key)

    return Response(
        content=data,
        media_type=OBJECT_MEDIA_TYPE,
        headers={"Content-Length": str(len(data))},
    )


@router.delete(
    OBJECTS_PREFIX + "/{key:path}",
    status_code=204,
    summary="Delete an object",
    responses={
        204: {"description": "Object deleted"},
        400: {"description": "Invalid object key"},
        404: {"description": "Object not found"},
        500: {"description": "Storage I/O error"},
    },
)
async def delete_object(key: str, store: RequireObjectStore) -> Response:
    """Remove the object stored under key."""
    _ensure_key_present(key)

    await asyncio.to_thread(store.delete, key)

    return Response(status_code=204)

"""filestorage object storage engine.

Stores opaque byte sequences under slash-delimited string keys, one file per
object beneath a storage root.

Backends:
- FilesystemObjectStore: Local filesystem

Environment Variables:
    FILESTORAGE_DATA_DIR: Storage root for the filesystem backend
        (default: "data")
"""

from filestorage.storage.errors import (
    InvalidKeyError,
    ObjectNotFoundError,
    ObjectStorageError,
    StorageIOError,
)
from filestorage.storage.filesystem_store import (
    FilesystemObjectStore,
    resolve_key_path,
    validate_key,
)
from filestorage.storage.object_store import ObjectStore

__all__ = [
    "ObjectStore",
    "FilesystemObjectStore",
    "ObjectStorageError",
    "InvalidKeyError",
    "ObjectNotFoundError",
    "StorageIOError",
    "resolve_key_path",
    "validate_key",
]

"""Filesystem object storage backend.

Each object is a single file at ``{base_dir}/{key}``; the slash-delimited
segments of the key become nested directories. There are no sidecar files,
no temporary files, and no metadata: the filesystem itself is the only
persisted state.

Key validation is the only defense against escaping the storage root. It
runs before any filesystem call that uses the key and stops at the first
violation.

Concurrent writers to the same key race at the filesystem level; whichever
write completes last wins. Empty ancestor directories are left in place after
a delete.

Environment Variables:
    FILESTORAGE_DATA_DIR: Storage root used when no base_dir is given
        (default: "data")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from filestorage.storage.errors import (
    InvalidKeyError,
    ObjectNotFoundError,
    StorageIOError,
)
from filestorage.storage.object_store import ObjectStore
from filestorage.storage.tracing import traced_storage_operation

logger = logging.getLogger(__name__)

FILESTORAGE_DATA_DIR_ENV = "FILESTORAGE_DATA_DIR"
DEFAULT_DATA_DIR = "data"

EMPTY_KEY_MESSAGE = "key cannot be empty"
ABSOLUTE_KEY_MESSAGE = "absolute paths are not allowed"
UNSUPPORTED_SEGMENTS_MESSAGE = "contains unsupported segments"


def _split_segments(key: str) -> list[str]:
    """Split a key on the platform path separators."""
    if os.altsep:
        key = key.replace(os.altsep, os.sep)
    return key.split(os.sep)


def _is_plain_segment(segment: str) -> bool:
    """Check that a segment is a literal name and nothing else."""
    if segment in ("", os.curdir, os.pardir):
        return False
    if "\x00" in segment:
        return False
    # Drive prefixes such as "C:" only exist on Windows; always empty elsewhere.
    drive, _ = os.path.splitdrive(segment)
    return not drive


def validate_key(key: str) -> list[str]:
    """Validate an object key and return its path segments.

    Rules, checked in order:
    1. The key must not be empty.
    2. The key must not be an absolute path on this platform.
    3. Every segment must be a plain name: no "..", ".", empty segments from
       doubled or trailing separators, or drive/root prefixes.

    Args:
        key: Caller-supplied object key.

    Returns:
        The key's segments, suitable for joining onto the storage root.

    Raises:
        InvalidKeyError: On the first rule the key violates.
    """
    if not key:
        raise InvalidKeyError(EMPTY_KEY_MESSAGE, key=key)

    if os.path.isabs(key):
        raise InvalidKeyError(ABSOLUTE_KEY_MESSAGE, key=key)

    segments = _split_segments(key)
    if not all(_is_plain_segment(segment) for segment in segments):
        raise InvalidKeyError(UNSUPPORTED_SEGMENTS_MESSAGE, key=key)

    return segments


def resolve_key_path(root: Path, key: str) -> Path:
    """Validate a key and resolve it to a path under root."""
    return root.joinpath(*validate_key(key))


class FilesystemObjectStore(ObjectStore):
    """Filesystem-based object storage implementation.

    Objects are stored directly at their key path:
        {base_dir}/a/b/c/object.bin   # key "a/b/c/object.bin"

    The instance holds nothing but its root path, so one instance can be
    shared across threads without locking.
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        """Initialize filesystem storage, creating the root if absent.

        Args:
            base_dir: Storage root. If None, uses the FILESTORAGE_DATA_DIR
                env var or "data" relative to the working directory.

        Raises:
            StorageIOError: If the root (or one of its ancestors) cannot be
                created, e.g. permission denied or a file in the way.
        """
        if base_dir is None:
            base_dir = os.environ.get(FILESTORAGE_DATA_DIR_ENV, DEFAULT_DATA_DIR)

        self._base_dir = Path(base_dir).resolve()

        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError.from_os_error(e) from e

        logger.debug("FilesystemObjectStore initialized with base_dir=%s", self._base_dir)

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "filesystem"

    @property
    def base_dir(self) -> Path:
        """Return the storage root."""
        return self._base_dir

    @traced_storage_operation("put")
    def put(self, key: str, data: bytes) -> None:
        """Store an object, replacing any existing content."""
        path = resolve_key_path(self._base_dir, key)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageIOError.from_os_error(e, key=key) from e

        logger.debug("Stored object: key=%s size_bytes=%d", key, len(data))

    @traced_storage_operation("get")
    def get(self, key: str) -> bytes:
        """Retrieve an object's full content."""
        path = resolve_key_path(self._base_dir, key)

        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(key) from e
        except OSError as e:
            raise StorageIOError.from_os_error(e, key=key) from e

    @traced_storage_operation("delete")
    def delete(self, key: str) -> None:
        """Remove an object; parent directories are kept."""
        path = resolve_key_path(self._base_dir, key)

        try:
            path.unlink()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(key) from e
        except OSError as e:
            raise StorageIOError.from_os_error(e, key=key) from e

        logger.debug("Deleted object: key=%s", key)

"""Object storage interface definition.

Provides the ObjectStore interface that storage backends implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """Abstract base class for object storage backends.

    Implementations store opaque byte sequences under string keys with:
    - Key validation before any backend access
    - Whole-object reads and writes (no streaming)
    - No metadata, versioning, or write coordination

    Implementations:
    - FilesystemObjectStore: one file per object under a root directory
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend identifier for observability.

        Returns:
            Backend name string (e.g., "filesystem").
        """
        ...

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """Store an object, replacing any existing content.

        Args:
            key: Logical key/path for the object.
            data: Object content as bytes.

        Raises:
            InvalidKeyError: If the key fails validation.
            StorageIOError: If the backend cannot complete the write.
        """
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retrieve an object's full content.

        Args:
            key: Logical key/path of the object.

        Returns:
            Object content as bytes.

        Raises:
            InvalidKeyError: If the key fails validation.
            ObjectNotFoundError: If no object is stored under the key.
            StorageIOError: If the backend cannot complete the read.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Permanently remove an object.

        Args:
            key: Logical key/path of the object.

        Raises:
            InvalidKeyError: If the key fails validation.
            ObjectNotFoundError: If no object is stored under the key.
            StorageIOError: If the backend cannot complete the deletion.
        """
        ...

"""Object storage error types.

Every storage failure surfaces as exactly one of three kinds:

- InvalidKeyError: the caller supplied a syntactically disallowed key.
- ObjectNotFoundError: the key is valid but no object is stored under it.
- StorageIOError: any other filesystem failure.

The engine never recovers from these locally; they propagate to the caller
for translation into a protocol-appropriate response.
"""

from __future__ import annotations


class ObjectStorageError(Exception):
    """Base exception for object storage operations.

    Attributes:
        message: Human-readable error message.
        key: Object key associated with the operation (if applicable).
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key:
            return f"{self.message} key={self.key}"
        return self.message


class InvalidKeyError(ObjectStorageError):
    """Raised when an object key fails validation.

    Covers empty keys, absolute paths, and keys containing parent, current,
    empty or root segments. Always a client-side fault.
    """

    def __init__(self, reason: str, *, key: str | None = None) -> None:
        super().__init__(reason, key=key)
        self.reason = reason


class ObjectNotFoundError(ObjectStorageError):
    """Raised when no object is stored under a valid key."""

    def __init__(self, key: str) -> None:
        super().__init__("Object not found", key=key)


class StorageIOError(ObjectStorageError):
    """Raised when the filesystem cannot complete an operation.

    The detail is a description of the OS error (e.g. "Permission denied
    (os error 13)") and never includes absolute filesystem paths.
    """

    def __init__(
        self,
        detail: str,
        *,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(detail, key=key)
        self.detail = detail
        self.cause = cause

    @classmethod
    def from_os_error(cls, error: OSError, *, key: str | None = None) -> StorageIOError:
        """Build an error from an OSError without leaking the path it names."""
        return cls(describe_os_error(error), key=key, cause=error)


def describe_os_error(error: OSError) -> str:
    """Describe an OSError by strerror and errno only."""
    if error.errno is not None and error.strerror:
        return f"{error.strerror} (os error {error.errno})"
    if error.strerror:
        return error.strerror
    return type(error).__name__

"""Process configuration for the filestorage service.

Environment Variables:
    FILESTORAGE_ADDR: Bind address as host:port (default: 127.0.0.1:8080).
        IPv6 hosts are bracketed, e.g. [::1]:8080.
    FILESTORAGE_DATA_DIR: Storage root directory (default: data)
    FILESTORAGE_LOG_LEVEL: Logging level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from filestorage.storage.filesystem_store import DEFAULT_DATA_DIR, FILESTORAGE_DATA_DIR_ENV

FILESTORAGE_ADDR_ENV = "FILESTORAGE_ADDR"
FILESTORAGE_LOG_LEVEL_ENV = "FILESTORAGE_LOG_LEVEL"

DEFAULT_BIND_ADDRESS = "127.0.0.1:8080"
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class SettingsError(Exception):
    """Raised when a configuration value is missing or malformed."""

    pass


def parse_bind_address(value: str) -> tuple[str, int]:
    """Parse a host:port socket address.

    Args:
        value: Address such as "127.0.0.1:8080" or "[::1]:8080".

    Returns:
        Tuple of (host, port). Brackets are stripped from IPv6 hosts.

    Raises:
        SettingsError: If the host is missing or the port is not 0-65535.
    """
    value = value.strip()
    host, sep, port_str = value.rpartition(":")
    if not sep or not host:
        raise SettingsError(f"invalid socket address: {value!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        # Unbracketed IPv6 is ambiguous with the port separator.
        raise SettingsError(f"invalid socket address: {value!r}")

    if not host or not port_str.isdigit():
        raise SettingsError(f"invalid socket address: {value!r}")

    port = int(port_str)
    if port > 65535:
        raise SettingsError(f"invalid socket address: {value!r}")

    return host, port


def parse_log_level(value: str) -> str:
    """Normalize a logging level name, raising SettingsError if unknown."""
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise SettingsError(f"invalid log level: {value!r}")
    return level


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        host: Interface to bind the HTTP server to.
        port: TCP port to bind the HTTP server to.
        data_dir: Storage root directory.
        log_level: Logging level name (e.g., "INFO").
    """

    host: str
    port: int
    data_dir: Path
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def bind_address(self) -> str:
        """Return the bind address in host:port form."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def log_level_number(self) -> int:
        """Return the numeric logging level."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(
        cls,
        *,
        addr: str | None = None,
        data_dir: str | Path | None = None,
        log_level: str | None = None,
    ) -> Settings:
        """Build settings from explicit overrides, then environment, then defaults.

        Raises:
            SettingsError: If any value is malformed.
        """
        if addr is None:
            addr = os.environ.get(FILESTORAGE_ADDR_ENV, DEFAULT_BIND_ADDRESS)
        if data_dir is None:
            data_dir = os.environ.get(FILESTORAGE_DATA_DIR_ENV, DEFAULT_DATA_DIR)
        if log_level is None:
            log_level = os.environ.get(FILESTORAGE_LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)

        host, port = parse_bind_address(addr)

        return cls(
            host=host,
            port=port,
            data_dir=Path(data_dir),
            log_level=parse_log_level(log_level),
        )

"""Pytest configuration and fixtures for filestorage tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

import pytest

FILESTORAGE_ENV_VARS = (
    "FILESTORAGE_ADDR",
    "FILESTORAGE_DATA_DIR",
    "FILESTORAGE_LOG_LEVEL",
    "FILESTORAGE_OTEL_ENABLED",
    "FILESTORAGE_OTEL_TEST_CAPTURE",
    "FILESTORAGE_REQUIRE_OTEL",
)


@pytest.fixture(autouse=True)
def clean_filestorage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without filestorage configuration in the environment.

    Tests that need a variable set it explicitly with monkeypatch.
    """
    for name in FILESTORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

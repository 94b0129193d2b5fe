"""Tests for object key validation and key-to-path resolution.

Validation order:
1. empty -> "key cannot be empty"
2. absolute -> "absolute paths are not allowed"
3. any non-plain segment -> "contains unsupported segments"
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from filestorage.storage.errors import InvalidKeyError
from filestorage.storage.filesystem_store import resolve_key_path, validate_key


class TestRejectedKeys:
    """Keys that must never reach the filesystem."""

    def test_empty_key(self) -> None:
        """The empty string is rejected first."""
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_key("")

        assert exc_info.value.reason == "key cannot be empty"

    @pytest.mark.parametrize(
        "absolute_key",
        [
            "/absolute/path",
            "/etc/passwd",
            "/",
            "//double",
        ],
    )
    def test_absolute_keys(self, absolute_key: str) -> None:
        """Absolute paths are rejected with their own message."""
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_key(absolute_key)

        assert exc_info.value.reason == "absolute paths are not allowed"

    def test_absolute_check_precedes_segment_check(self) -> None:
        """An absolute key with ".." reports the absolute-path violation."""
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_key("/../etc/passwd")

        assert exc_info.value.reason == "absolute paths are not allowed"

    @pytest.mark.parametrize(
        "invalid_key",
        [
            "..",
            ".",
            "../escape",
            "foo/../bar",
            "foo/../../etc/passwd",
            "normal/../../../escape",
            "./relative",
            "a/./b",
            "a//b",
            "trailing/",
            "a/b/",
            "key\x00null",
        ],
    )
    def test_unsupported_segments(self, invalid_key: str) -> None:
        """Parent, current, empty and NUL-bearing segments are rejected."""
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_key(invalid_key)

        assert exc_info.value.reason == "contains unsupported segments"
        assert exc_info.value.key == invalid_key

    @pytest.mark.skipif(os.name != "nt", reason="drive prefixes only exist on Windows")
    @pytest.mark.parametrize("drive_key", ["C:relative", "C:\\windows\\path", "D:/drive"])
    def test_drive_prefixes_on_windows(self, drive_key: str) -> None:
        """Drive-qualified keys are rejected on Windows."""
        with pytest.raises(InvalidKeyError):
            validate_key(drive_key)


class TestAcceptedKeys:
    """Keys made only of plain names."""

    @pytest.mark.parametrize(
        "valid_key",
        [
            "simple",
            "path/to/file.txt",
            "deep/nested/path/to/file.pdf",
            "file-with-dashes.txt",
            "file_with_underscores.txt",
            "file.multiple.dots.txt",
            "123/numeric/456",
            "...",
            "..hidden",
            ".hidden",
            "with space/and more",
            "unicodé/файл",
        ],
    )
    def test_valid_keys_return_segments(self, valid_key: str) -> None:
        """Valid keys split into their slash-delimited segments."""
        assert validate_key(valid_key) == valid_key.split("/")

    @pytest.mark.skipif(os.name == "nt", reason="backslash is a separator on Windows")
    def test_backslash_is_a_plain_character_on_posix(self) -> None:
        """On POSIX a backslash is part of a file name, not a separator."""
        assert validate_key("..\\escape") == ["..\\escape"]


class TestResolveKeyPath:
    """Tests for mapping keys to paths under a root."""

    def test_resolves_under_root(self, tmp_path: Path) -> None:
        """The resolved path is root joined with the key's segments."""
        assert resolve_key_path(tmp_path, "a/b/c.bin") == tmp_path / "a" / "b" / "c.bin"

    def test_single_segment(self, tmp_path: Path) -> None:
        """A one-segment key maps directly under the root."""
        assert resolve_key_path(tmp_path, "object") == tmp_path / "object"

    def test_invalid_key_raises(self, tmp_path: Path) -> None:
        """Resolution performs validation first."""
        with pytest.raises(InvalidKeyError):
            resolve_key_path(tmp_path, "../escape")

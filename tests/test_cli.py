"""Tests for the filestorage CLI.

Exit codes:
    0: success
    1: startup failure / storage I/O error
    2: invalid key / object not found
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from filestorage import cli


def _stderr_error(capsys: pytest.CaptureFixture[str]) -> str:
    err = capsys.readouterr().err.strip().splitlines()[-1]
    return json.loads(err)["error"]


class TestStorageCommands:
    """Tests for put/get/delete against a local root."""

    def test_put_get_delete_roundtrip(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """put stores a file, get writes it back out, delete removes it."""
        root = tmp_path / "root"
        source = tmp_path / "hello.txt"
        source.write_bytes(b"Hello from the CLI!")
        target = tmp_path / "out.txt"

        assert cli.main(["put", "greetings/hello.txt", "--input", str(source), "--data-dir", str(root)]) == 0
        put_output = json.loads(capsys.readouterr().out)
        assert put_output == {"key": "greetings/hello.txt", "size_bytes": 19, "status": "stored"}

        assert cli.main(["get", "greetings/hello.txt", "--out", str(target), "--data-dir", str(root)]) == 0
        assert target.read_bytes() == b"Hello from the CLI!"

        assert cli.main(["delete", "greetings/hello.txt", "--data-dir", str(root)]) == 0
        assert not (root / "greetings" / "hello.txt").exists()

    def test_get_missing_object_exits_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A missing object prints the not-found message and exits 2."""
        exit_code = cli.main(["get", "never-written", "--data-dir", str(tmp_path)])

        assert exit_code == 2
        assert _stderr_error(capsys) == "object `never-written` not found"

    def test_delete_missing_object_exits_2(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Deleting a missing object exits 2."""
        assert cli.main(["delete", "never-written", "--data-dir", str(tmp_path)]) == 2

    def test_invalid_key_exits_2(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A traversal key is rejected with the validation reason."""
        source = tmp_path / "payload"
        source.write_bytes(b"data")

        exit_code = cli.main(
            ["put", "../escape", "--input", str(source), "--data-dir", str(tmp_path / "root")]
        )

        assert exit_code == 2
        assert _stderr_error(capsys) == "contains unsupported segments"
        assert not (tmp_path / "escape").exists()

    def test_unreadable_root_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A storage root blocked by a regular file is an I/O failure."""
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"file")

        exit_code = cli.main(["get", "anything", "--data-dir", str(blocker)])

        assert exit_code == 1
        assert _stderr_error(capsys).startswith("storage I/O error: ")

    def test_missing_input_file_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An unreadable --input file exits 1."""
        exit_code = cli.main(
            ["put", "key", "--input", str(tmp_path / "absent"), "--data-dir", str(tmp_path)]
        )

        assert exit_code == 1
        assert _stderr_error(capsys).startswith("cannot access file")

    def test_data_dir_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """FILESTORAGE_DATA_DIR is used when --data-dir is omitted."""
        monkeypatch.setenv("FILESTORAGE_DATA_DIR", str(tmp_path / "env-root"))
        source = tmp_path / "payload"
        source.write_bytes(b"env")

        assert cli.main(["put", "k", "--input", str(source)]) == 0
        assert (tmp_path / "env-root" / "k").read_bytes() == b"env"


class TestServeCommand:
    """Tests for serve startup failures and wiring."""

    def test_bad_address_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """An unparseable bind address fails before anything starts."""
        exit_code = cli.main(["serve", "--addr", "nonsense", "--data-dir", str(tmp_path)])

        assert exit_code == 1
        assert "invalid socket address" in _stderr_error(capsys)

    def test_root_creation_failure_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A storage root that cannot be created fails startup."""
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"file")

        exit_code = cli.main(["serve", "--data-dir", str(blocker / "nested")])

        assert exit_code == 1
        assert _stderr_error(capsys).startswith("storage I/O error: ")

    def test_serve_runs_uvicorn_with_settings(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """serve builds the app and hands host and port to uvicorn."""
        import uvicorn

        captured: dict[str, Any] = {}

        class _FakeServer:
            def __init__(self, config: uvicorn.Config) -> None:
                captured["config"] = config
                self.started = False

            def run(self) -> None:
                self.started = True

        monkeypatch.setattr(uvicorn, "Server", _FakeServer)

        exit_code = cli.main(["serve", "--addr", "127.0.0.1:9123", "--data-dir", str(tmp_path / "srv")])

        assert exit_code == 0
        config = captured["config"]
        assert (config.host, config.port) == ("127.0.0.1", 9123)
        assert config.app.state.object_store.base_dir == (tmp_path / "srv").resolve()
        assert (tmp_path / "srv").is_dir()

    def test_server_that_never_started_exits_1(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """If uvicorn returns without starting, serve reports failure."""
        import uvicorn

        class _NeverStarts:
            def __init__(self, config: uvicorn.Config) -> None:
                self.started = False

            def run(self) -> None:
                return None

        monkeypatch.setattr(uvicorn, "Server", _NeverStarts)

        assert cli.main(["serve", "--data-dir", str(tmp_path)]) == 1


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    """Running without a command prints usage and exits 0."""
    assert cli.main([]) == 0
    assert "usage: filestorage" in capsys.readouterr().out

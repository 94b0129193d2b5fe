"""filestorage CLI.

Usage:
    filestorage serve [--addr HOST:PORT] [--data-dir PATH] [--log-level LEVEL]
    filestorage put KEY [--input PATH] [--data-dir PATH]
    filestorage get KEY [--out PATH] [--data-dir PATH]
    filestorage delete KEY [--data-dir PATH]

serve runs the HTTP API under uvicorn. put, get and delete run a single
storage operation directly against the storage root, without a server.
Unset options fall back to FILESTORAGE_ADDR, FILESTORAGE_DATA_DIR and
FILESTORAGE_LOG_LEVEL.

Exit codes:
    0: Success / clean shutdown
    1: Startup failure, storage I/O error, or internal error
    2: Invalid key or object not found
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from filestorage.api.errors import io_error_message, not_found_message
from filestorage.config import Settings, SettingsError
from filestorage.storage.errors import InvalidKeyError, ObjectNotFoundError, StorageIOError
from filestorage.storage.filesystem_store import FilesystemObjectStore

logger = logging.getLogger("filestorage")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True))


def _output_error(message: str) -> None:
    """Output a JSON error line to stderr."""
    print(json.dumps({"error": message}), file=sys.stderr)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _load_settings(args: argparse.Namespace) -> Settings:
    return Settings.from_env(
        addr=getattr(args, "addr", None),
        data_dir=args.data_dir,
        log_level=args.log_level,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API until interrupted.

    Exit codes:
        0: Server started and shut down cleanly
        1: Bad configuration, storage root creation failure, or bind failure
    """
    from filestorage.api.main import create_app
    from filestorage.observability.tracing import TracingConfigError

    try:
        settings = _load_settings(args)
    except SettingsError as e:
        _output_error(str(e))
        return 1

    _configure_logging(settings.log_level)

    try:
        store = FilesystemObjectStore(settings.data_dir)
    except StorageIOError as e:
        logger.error("Cannot create storage root %s: %s", settings.data_dir, e.detail)
        _output_error(io_error_message(e.detail))
        return 1

    try:
        app = create_app(object_store=store)
    except TracingConfigError as e:
        logger.error("%s", e)
        _output_error(str(e))
        return 1

    import uvicorn

    logger.info(
        "listening on http://%s (storage root: %s)",
        settings.bind_address,
        store.base_dir,
    )

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    # uvicorn raises SystemExit(1) itself when the socket cannot be bound.
    server.run()

    return 0 if server.started else 1


def cmd_put(store: FilesystemObjectStore, args: argparse.Namespace) -> int:
    """Store stdin (or --input) under KEY."""
    if args.input:
        data = Path(args.input).read_bytes()
    else:
        data = sys.stdin.buffer.read()

    store.put(args.key, data)
    _output_json({"key": args.key, "size_bytes": len(data), "status": "stored"})
    return 0


def cmd_get(store: FilesystemObjectStore, args: argparse.Namespace) -> int:
    """Write the object stored under KEY to stdout (or --out)."""
    data = store.get(args.key)

    if args.out:
        Path(args.out).write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    return 0


def cmd_delete(store: FilesystemObjectStore, args: argparse.Namespace) -> int:
    """Delete the object stored under KEY."""
    store.delete(args.key)
    _output_json({"key": args.key, "status": "deleted"})
    return 0


STORAGE_COMMANDS: dict[str, Callable[[FilesystemObjectStore, argparse.Namespace], int]] = {
    "put": cmd_put,
    "get": cmd_get,
    "delete": cmd_delete,
}


def run_storage_command(args: argparse.Namespace) -> int:
    """Open the storage root and run one put/get/delete command.

    Exit codes:
        0: Operation succeeded
        1: Storage I/O error (including unreadable input or unwritable output)
        2: Invalid key or object not found
    """
    try:
        settings = _load_settings(args)
    except SettingsError as e:
        _output_error(str(e))
        return 1

    _configure_logging(settings.log_level)

    try:
        store = FilesystemObjectStore(settings.data_dir)
        return STORAGE_COMMANDS[args.command](store, args)
    except InvalidKeyError as e:
        _output_error(e.reason)
        return 2
    except ObjectNotFoundError as e:
        _output_error(not_found_message(e.key or ""))
        return 2
    except StorageIOError as e:
        _output_error(io_error_message(e.detail))
        return 1
    except OSError as e:
        _output_error(f"cannot access file: {e.strerror or type(e).__name__}")
        return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-dir",
        metavar="PATH",
        default=None,
        help="Storage root directory (default: $FILESTORAGE_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default=None,
        help="Logging level (default: $FILESTORAGE_LOG_LEVEL or INFO)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="filestorage",
        description="filestorage - filesystem-backed object storage",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument(
        "--addr",
        metavar="HOST:PORT",
        default=None,
        help="Bind address (default: $FILESTORAGE_ADDR or 127.0.0.1:8080)",
    )
    _add_common_arguments(serve_parser)

    put_parser = subparsers.add_parser("put", help="Store an object")
    put_parser.add_argument("key", help="Object key")
    put_parser.add_argument(
        "--input",
        metavar="PATH",
        default=None,
        help="File to read the object from (reads stdin if omitted)",
    )
    _add_common_arguments(put_parser)

    get_parser = subparsers.add_parser("get", help="Fetch an object")
    get_parser.add_argument("key", help="Object key")
    get_parser.add_argument(
        "--out",
        metavar="PATH",
        default=None,
        help="File to write the object to (writes stdout if omitted)",
    )
    _add_common_arguments(get_parser)

    delete_parser = subparsers.add_parser("delete", help="Delete an object")
    delete_parser.add_argument("key", help="Object key")
    _add_common_arguments(delete_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Startup failure / I/O error / internal error
        2: Invalid key or object not found
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            return 0

        if args.command == "serve":
            return cmd_serve(args)

        return run_storage_command(args)

    except Exception as e:
        logger.exception("Unexpected error")
        _output_error(f"internal error: {type(e).__name__}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

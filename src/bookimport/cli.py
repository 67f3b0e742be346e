"""Command line interface for bookimport."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from . import __version__
from .config import ConfigurationError, Settings, WebSettings, load_settings
from .importer import try_import_book
from .paths import is_directory

DEFAULT_CONFIG = Path("bookimport.toml")
_LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import EPUB archives into a library storage directory"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--storage-root", type=Path, help="Override the library storage directory"
    )
    parser.add_argument(
        "--cleanup-on-failure",
        dest="cleanup_on_failure",
        action=argparse.BooleanOptionalAction,
        help="Remove a partially extracted book when its import fails",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the root log level",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    import_parser = commands.add_parser("import", help="Import an EPUB archive")
    import_parser.add_argument("archive", type=Path, help="Archive file to import")

    query_parser = commands.add_parser(
        "is-dir", help="Report whether a path is an existing directory"
    )
    query_parser.add_argument("path", type=Path)

    serve_parser = commands.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", type=str, help="Override bind host")
    serve_parser.add_argument("--port", type=int, help="Override bind port")

    return parser.parse_args(argv)


def load_and_merge_settings(args: argparse.Namespace) -> Settings:
    explicit_config = args.config != DEFAULT_CONFIG
    settings = load_settings(args.config, required=explicit_config)

    storage_root = settings.storage_root
    if args.storage_root is not None:
        storage_root = args.storage_root.expanduser().resolve()

    cleanup_on_failure = settings.cleanup_on_failure
    if args.cleanup_on_failure is not None:
        cleanup_on_failure = args.cleanup_on_failure

    web = settings.web
    host = getattr(args, "host", None)
    port = getattr(args, "port", None)
    if host is not None or port is not None:
        if port is not None and not 0 < port < 65536:
            raise ConfigurationError("Port must be between 1 and 65535")
        web = WebSettings(
            host=host if host is not None else web.host,
            port=port if port is not None else web.port,
        )

    return Settings(
        storage_root=storage_root,
        cleanup_on_failure=cleanup_on_failure,
        web=web,
    )


def _run_import(settings: Settings, archive: Path) -> int:
    result = try_import_book(
        archive,
        settings.require_storage_root(),
        cleanup_on_failure=settings.cleanup_on_failure,
    )
    if not result.ok:
        _LOGGER.error("%s", result.message)
        return 1
    print(result.destination)
    return 0


def _run_query(path: Path) -> int:
    found = is_directory(path)
    print("true" if found else "false")
    return 0 if found else 1


def _run_server(settings: Settings) -> int:
    from .web import run_server

    settings.require_storage_root()
    try:
        run_server(settings)
    except OSError:
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s"
    )

    if args.command == "is-dir":
        return _run_query(args.path)

    try:
        settings = load_and_merge_settings(args)
        if args.command == "import":
            return _run_import(settings, args.archive)
        return _run_server(settings)
    except (ConfigurationError, FileNotFoundError) as exc:
        _LOGGER.error("Configuration error: %s", exc)
        return 2


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

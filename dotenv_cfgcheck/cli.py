from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable

from .env_loader import EnvLoader, EnvNotFoundError, EnvParseError, EnvReadError, find_env, find_nearest_env
from .env_parser import EnvSyntaxError
from .env_writer import serialize

logger = logging.getLogger(__name__)


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)
    logger.debug(f"Running command {args.command!r}")

    if args.command == "check":
        return _handle_check(args)
    if args.command == "show":
        return _handle_show(args)
    if args.command == "find":
        return _handle_find(args)
    if args.command == "write":
        return _handle_write(args)
    parser.error("No command specified")
    return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="envtool", description="Parse, locate and rewrite .env files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    check = sub.add_parser("check", help="Validate a .env file")
    check.add_argument("path", help="Path to the .env file")

    show = sub.add_parser("show", help="Print the parsed entries of a .env file")
    show.add_argument("path", help="Path to the .env file")
    show.add_argument("--format", choices=("text", "json"), default="text", help="Output format")

    find = sub.add_parser("find", help="Locate the nearest .env file in a directory or its parents")
    find.add_argument("directory", nargs="?", default=None, help="Directory to start from (default: cwd)")
    find.add_argument("--parse", action="store_true", help="Print the parsed entries instead of the path")
    find.add_argument("--format", choices=("text", "json"), default="text", help="Output format for --parse")

    write = sub.add_parser("write", help="Parse a .env file and serialize it to a new file")
    write.add_argument("source", help="Path to the .env file to read")
    write.add_argument("dest", help="Destination file, overwritten if it exists")
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger(__package__).setLevel(level)


def _load(path: str) -> dict[str, str] | None:
    try:
        return EnvLoader(path).load()
    except FileNotFoundError:
        print(f"File not found: {path}", file=sys.stderr)
    except EnvSyntaxError as exc:
        print(f"Syntax error: {exc}", file=sys.stderr)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"I/O error: {exc}", file=sys.stderr)
    return None


def _handle_check(args: argparse.Namespace) -> int:
    entries = _load(args.path)
    if entries is None:
        return 2
    print(f"OK: {args.path} is valid ({len(entries)} keys)")
    return 0


def _handle_show(args: argparse.Namespace) -> int:
    entries = _load(args.path)
    if entries is None:
        return 2
    _print_entries(entries, args.format)
    return 0


def _handle_find(args: argparse.Namespace) -> int:
    if not args.parse:
        path = find_nearest_env(args.directory)
        if path is None:
            print(f"No .env file found: {EnvNotFoundError()}", file=sys.stderr)
            return 2
        print(path)
        return 0
    try:
        entries = find_env(args.directory)
    except EnvNotFoundError as exc:
        print(f"No .env file found: {exc}", file=sys.stderr)
        return 2
    except EnvParseError as exc:
        print(f"Syntax error: {exc}", file=sys.stderr)
        return 2
    except EnvReadError as exc:
        print(f"I/O error: {exc}", file=sys.stderr)
        return 2
    _print_entries(entries, args.format)
    return 0


def _handle_write(args: argparse.Namespace) -> int:
    entries = _load(args.source)
    if entries is None:
        return 2
    try:
        message = serialize(entries, args.dest)
    except OSError as exc:
        print(f"I/O error: {exc}", file=sys.stderr)
        return 2
    print(message)
    return 0


def _print_entries(entries: dict[str, str], fmt: str) -> None:
    if fmt == "json":
        json.dump(entries, sys.stdout, indent=2, sort_keys=True)
        print()
        return
    for key in sorted(entries):
        print(f"{key}={entries[key]}")


if __name__ == "__main__":
    sys.exit(main())

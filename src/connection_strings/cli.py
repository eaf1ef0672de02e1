"""CLI entry-point for connection-string."""

import argparse
import logging
import sys
from typing import NoReturn

from connection_strings.config import ConnectionStringSource, EnvConnectionStringSource
from connection_strings.connection_string import (
    ITEM_SEPARATOR,
    KEY_VALUE_SEPARATOR,
    ConnectionString,
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parse, edit and re-emit an Azure-style connection string.",
    )
    parser.add_argument("text", nargs="?", help="Connection string (inline)")
    parser.add_argument(
        "--from-env",
        metavar="NAME",
        help="Read the connection string from an environment variable or .env",
    )
    parser.add_argument(
        "--item-separator", default=ITEM_SEPARATOR, help="Separator between pairs",
    )
    parser.add_argument(
        "--key-value-separator",
        default=KEY_VALUE_SEPARATOR,
        help="Separator between a key and its value",
    )
    parser.add_argument(
        "--output-item-separator", help="Pair separator for output (default: input's)",
    )
    parser.add_argument(
        "--output-key-value-separator",
        help="Key/value separator for output (default: input's)",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a property (repeatable)",
    )
    parser.add_argument(
        "--unset",
        action="append",
        default=[],
        metavar="KEY",
        help="Remove a property (repeatable)",
    )
    parser.add_argument("--get", metavar="KEY", help="Print a single value")
    parser.add_argument(
        "--format",
        choices=("text", "json", "pairs"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log parsing details",
    )
    return parser.parse_args(argv)


def _read_input(args: argparse.Namespace, source: ConnectionStringSource) -> str:
    if args.text is not None:
        return args.text
    if args.from_env:
        value = source.get(args.from_env)
        if not value:
            _fail(f"{args.from_env} is not set.")
        return value
    return sys.stdin.read().strip()


def _apply_edits(cs: ConnectionString, args: argparse.Namespace) -> None:
    for assignment in args.set:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            _fail(f"Invalid --set {assignment!r}, expected KEY=VALUE.")
        cs.set(key, value)
    for key in args.unset:
        cs.remove(key)


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    sys.exit(1)


def main(
    argv: list[str] | None = None,
    *,
    _source: ConnectionStringSource | None = None,
) -> None:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    source = _source or EnvConnectionStringSource()

    text = _read_input(args, source)
    try:
        cs = ConnectionString.from_string(
            text, args.item_separator, args.key_value_separator,
        )
    except ValueError as exc:
        _fail(str(exc))
    _apply_edits(cs, args)

    if args.get is not None:
        value = cs.get(args.get)
        if value is None:
            _fail(f"{args.get} is not set.")
        print(value)
        return

    item_sep = args.output_item_separator or args.item_separator
    kv_sep = args.output_key_value_separator or args.key_value_separator
    if args.format == "json":
        print(cs.to_json(item_sep, kv_sep))
    elif args.format == "pairs":
        for key, value in cs.items():
            print(f"{key}{kv_sep}{value}")
    else:
        print(cs.to_string(item_sep, kv_sep))

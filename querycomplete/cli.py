#!/usr/bin/env python3
"""querycomplete - context-aware completion for SQL and MongoDB queries."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from querycomplete.shared.core.ranking import CompletionLimits


def _add_completion_arguments(parser: argparse.ArgumentParser, dialects: bool) -> None:
    parser.add_argument(
        "text",
        nargs="?",
        help="Query text to complete, or '-' to read it from stdin",
    )
    parser.add_argument("--file", "-f", help="Read the query text from a file")
    parser.add_argument(
        "--cursor",
        "-c",
        type=int,
        metavar="OFFSET",
        help="Cursor offset into the text (default: end of text)",
    )
    parser.add_argument(
        "--metadata",
        "-m",
        metavar="PATH",
        help="Path to a metadata JSON file (schemas/tables/columns or collections/fields)",
    )
    if dialects:
        from querycomplete.domains.sql.completion.core import Dialect

        parser.add_argument(
            "--dialect",
            "-d",
            choices=[d.value for d in Dialect],
            help="SQL dialect (default: metadata 'dialect' key, then the settings default)",
        )
    parser.add_argument(
        "--explicit",
        action="store_true",
        help="Treat the request as explicit (complete inside strings and comments)",
    )
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="querycomplete",
        description="Context-aware completion for SQL statements and MongoDB JSON commands",
        epilog="Example: querycomplete sql 'SELECT * FROM u' --metadata schema.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Path to settings JSON file (overrides ~/.querycomplete/settings.json)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log resolver decisions to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sql_parser = subparsers.add_parser("sql", help="Complete a SQL statement")
    _add_completion_arguments(sql_parser, dialects=True)

    mongo_parser = subparsers.add_parser("mongo", help="Complete a MongoDB JSON command")
    _add_completion_arguments(mongo_parser, dialects=False)

    config_parser = subparsers.add_parser("config", help="Show or change completion settings")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Settings commands")
    config_subparsers.add_parser("show", help="Show the effective settings")

    limit_parser = config_subparsers.add_parser("set-limit", help="Set one completion limit")
    limit_parser.add_argument(
        "name",
        choices=sorted(CompletionLimits.__dataclass_fields__),
        help="Limit to change",
    )
    limit_parser.add_argument("value", type=int, help="New positive value")

    dialect_parser = config_subparsers.add_parser("set-dialect", help="Set the default SQL dialect")
    dialect_parser.add_argument("dialect", help="Dialect name (postgres, mysql, mariadb, sqlserver, sqlite)")

    args = parser.parse_args(argv)
    if args.settings:
        os.environ["QUERYCOMPLETE_SETTINGS_PATH"] = str(args.settings)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    from .commands import (
        cmd_config_set_dialect,
        cmd_config_set_limit,
        cmd_config_show,
        cmd_mongo,
        cmd_sql,
    )

    if args.command == "sql":
        return cmd_sql(args)

    if args.command == "mongo":
        return cmd_mongo(args)

    if args.command == "config":
        if args.config_command == "show":
            return cmd_config_show(args)
        elif args.config_command == "set-limit":
            return cmd_config_set_limit(args)
        elif args.config_command == "set-dialect":
            return cmd_config_set_dialect(args)
        else:
            config_parser.print_help()
            return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

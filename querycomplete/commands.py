"""CLI command handlers for querycomplete."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from querycomplete.shared.core.ranking import CompletionResult
from querycomplete.shared.core.settings import DIALECT_KEY, LIMITS_KEY, SettingsStore


def _read_text(args: Any) -> str | None:
    if args.text == "-":
        return sys.stdin.read()
    if args.file:
        try:
            with open(args.file, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            print(f"Error: File '{args.file}' not found.")
            return None
        except OSError as e:
            print(f"Error reading file: {e}")
            return None
    if args.text is None:
        print("Error: Either query text, '-' or --file must be provided.")
        return None
    return args.text


def _load_metadata(path: str | None) -> dict[str, Any] | None:
    """Load a metadata JSON file; raises ValueError with a printable message."""
    if not path:
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ValueError(f"Metadata file '{path}' not found") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Could not read metadata file '{path}': {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Metadata file must contain a JSON object")
    return data


def _output_json(result: CompletionResult, summary: dict[str, Any]) -> None:
    payload = {
        "insertFrom": result.insert_from,
        "context": summary,
        "candidates": [c.to_dict() for c in result.candidates],
    }
    print(json.dumps(payload, indent=2))


def _output_table(result: CompletionResult, summary: dict[str, Any], title: str) -> None:
    console = Console()
    table = Table(title=title)
    table.add_column("Label", style="bold")
    table.add_column("Kind")
    table.add_column("Detail")
    table.add_column("Boost", justify="right")
    for candidate in result.candidates:
        table.add_row(
            candidate.label,
            candidate.kind.value,
            candidate.detail or "",
            str(candidate.boost),
        )
    console.print(table)

    context_table = Table(title="Context", show_header=False)
    context_table.add_column("Key", style="dim")
    context_table.add_column("Value")
    context_table.add_row("insertFrom", str(result.insert_from))
    for key, value in summary.items():
        context_table.add_row(key, json.dumps(value) if not isinstance(value, str) else value)
    console.print(context_table)

    if not result.candidates:
        console.print("(no suggestions)", style="dim")


def _emit(args: Any, result: CompletionResult, title: str) -> int:
    summary = result.context.summary() if result.context is not None else {}
    if args.json:
        _output_json(result, summary)
    else:
        _output_table(result, summary, title)
    return 0


def cmd_sql(args: Any) -> int:
    """Complete a SQL statement."""
    from querycomplete.domains.sql.completion.completion import complete
    from querycomplete.domains.sql.completion.core import SqlMetadata

    text = _read_text(args)
    if text is None:
        return 1

    store = SettingsStore()
    try:
        data = _load_metadata(args.metadata)
        dialect = args.dialect
        if dialect is None and not (data and (data.get("dialect") or data.get("dbType"))):
            dialect = store.default_dialect()
        metadata = SqlMetadata.from_dict(data, dialect=dialect)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    cursor = len(text) if args.cursor is None else args.cursor
    result = complete(
        text,
        cursor,
        metadata,
        explicit=args.explicit,
        limits=store.load_completion_limits(),
    )
    return _emit(args, result, f"SQL completions ({metadata.dialect.value})")


def cmd_mongo(args: Any) -> int:
    """Complete a MongoDB JSON command."""
    from querycomplete.domains.mongo.completion.completion import complete
    from querycomplete.domains.mongo.completion.core import MongoMetadata

    text = _read_text(args)
    if text is None:
        return 1

    try:
        metadata = MongoMetadata.from_dict(_load_metadata(args.metadata))
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    cursor = len(text) if args.cursor is None else args.cursor
    result = complete(
        text,
        cursor,
        metadata,
        explicit=args.explicit,
        limits=SettingsStore().load_completion_limits(),
    )
    return _emit(args, result, "MongoDB completions")


def cmd_config_show(args: Any) -> int:
    store = SettingsStore()
    limits = store.load_completion_limits()
    payload = {
        "settingsPath": str(store.file_path),
        DIALECT_KEY: store.default_dialect(),
        LIMITS_KEY: {name: getattr(limits, name) for name in limits.__dataclass_fields__},
    }
    print(json.dumps(payload, indent=2))
    return 0


def cmd_config_set_limit(args: Any) -> int:
    try:
        limits = SettingsStore().set_completion_limit(args.name, args.value)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    print(f"Completion limit '{args.name}' set to {getattr(limits, args.name)}.")
    return 0


def cmd_config_set_dialect(args: Any) -> int:
    from querycomplete.domains.sql.completion.core import Dialect

    valid = [d.value for d in Dialect]
    if args.dialect not in valid:
        print(f"Error: Invalid dialect '{args.dialect}'. Valid dialects: {', '.join(valid)}")
        return 1
    SettingsStore().set(DIALECT_KEY, args.dialect)
    print(f"Default dialect set to '{args.dialect}'.")
    return 0

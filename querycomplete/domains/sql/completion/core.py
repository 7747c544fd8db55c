"""Core SQL completion types.

Clause and expected-type enums, table/CTE references, the resolved cursor
context and the caller-supplied metadata snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_logger = logging.getLogger(__name__)


class MetadataError(ValueError):
    """Raised when a metadata payload cannot be turned into a snapshot."""


class Dialect(Enum):
    """Supported SQL dialects."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"

    @classmethod
    def from_value(cls, value: str | Dialect | None) -> Dialect:
        """Resolve a dialect name, falling back to postgres for unknown names."""
        if isinstance(value, Dialect):
            return value
        if value:
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        _logger.debug("Unknown dialect %r, using postgres", value)
        return cls.POSTGRES


class Clause(Enum):
    """Outermost SQL clause containing the cursor."""

    SELECT = "SELECT"
    FROM = "FROM"
    WHERE = "WHERE"
    JOIN = "JOIN"
    ON = "ON"
    ORDER_BY = "ORDER_BY"
    GROUP_BY = "GROUP_BY"
    HAVING = "HAVING"
    INSERT = "INSERT"
    INTO = "INTO"
    VALUES = "VALUES"
    UPDATE = "UPDATE"
    SET = "SET"
    DELETE = "DELETE"
    CREATE = "CREATE"
    ALTER = "ALTER"
    DROP = "DROP"
    WITH = "WITH"
    LIMIT = "LIMIT"
    OFFSET = "OFFSET"
    UNION = "UNION"
    UNKNOWN = "UNKNOWN"


class ExpectedType(Enum):
    """What kind of token is expected at the cursor."""

    COLUMN = "column"
    TABLE_OR_SCHEMA = "table_or_schema"
    JOIN_CONDITION = "join_condition"
    VALUE = "value"
    KEYWORD = "keyword"
    FUNCTION = "function"
    DATA_TYPE = "data_type"
    COLUMN_OR_EXPRESSION = "column_or_expression"
    OPERATOR = "operator"
    ANY = "any"


class QualifierKind(Enum):
    CTE = "cte"
    TABLE = "table"
    SCHEMA = "schema"


class Boost:
    """Ranking weights for SQL candidates (higher = more relevant)."""

    EXACT_MATCH = 100
    FK_SUGGESTION = 60  # above in-scope columns so join conditions lead
    COLUMN_IN_SCOPE = 50
    COLUMN_QUALIFIED = 40
    TABLE_IN_SCOPE = 35
    SNIPPET = 30
    FUNCTION = 25
    FUNCTION_FUZZY = 12
    TABLE = 20
    SCHEMA = 15
    KEYWORD_RELEVANT = 10
    OPERATOR = 8
    DATA_TYPE = 7
    KEYWORD_OTHER = 5


@dataclass(frozen=True)
class TableRef:
    """A table reference with optional alias."""

    name: str
    alias: str | None = None
    schema: str | None = None
    span: tuple[int, int] = (0, 0)

    @property
    def reference_name(self) -> str:
        """Name used to qualify this table's columns (alias wins)."""
        return self.alias or self.name


@dataclass(frozen=True)
class CteRef:
    name: str
    span: tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class ResolvedQualifier:
    """What a ``qualifier.`` in front of the cursor refers to."""

    kind: QualifierKind
    name: str
    schema: str | None = None


@dataclass(frozen=True)
class SqlContext:
    """Classified cursor position for the SQL pipeline."""

    clause: Clause
    expected_type: ExpectedType
    current_word: str
    cursor: int
    depth: int = 0
    in_string: bool = False
    in_comment: bool = False
    after_delimiter: bool = False
    in_window: bool = False
    tables_in_scope: tuple[TableRef, ...] = ()
    ctes_in_scope: tuple[CteRef, ...] = ()
    current_qualifier: str | None = None
    resolved_qualifier: ResolvedQualifier | None = None
    previous_token: str | None = None
    previous_keyword: str | None = None
    compared_column: str | None = None

    @property
    def opaque(self) -> bool:
        """True when the cursor sits inside a string literal or comment."""
        return self.in_string or self.in_comment

    @property
    def insert_from(self) -> int:
        return self.cursor - len(self.current_word)

    def summary(self) -> dict[str, Any]:
        return {
            "clause": self.clause.value,
            "expectedType": self.expected_type.value,
            "currentWord": self.current_word,
            "depth": self.depth,
            "inString": self.in_string,
            "inComment": self.in_comment,
            "qualifier": self.current_qualifier,
            "tables": [
                {"schema": t.schema, "table": t.name, "alias": t.alias} for t in self.tables_in_scope
            ],
            "ctes": [c.name for c in self.ctes_in_scope],
            "previousToken": self.previous_token,
            "previousKeyword": self.previous_keyword,
        }


# ---------------------------------------------------------------------------
# Metadata snapshot supplied by the caller
# ---------------------------------------------------------------------------


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _row_count(value: Any) -> int | None:
    """Row counts arrive as numbers or, for bigint columns, numeric strings."""
    if value is None or isinstance(value, bool):
        return None
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        _logger.debug("Ignoring non-numeric row count %r", value)
        return None
    return count if count >= 0 else None


@dataclass(frozen=True)
class TableInfo:
    name: str
    schema: str | None = None
    row_count: int | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True)
class ColumnInfo:
    """Column metadata used for details, operator filtering and enum values."""

    name: str
    data_type: str = ""
    nullable: bool = True
    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_auto_increment: bool = False
    is_generated: bool = False
    default: str | None = None
    enum_values: tuple[str, ...] = ()
    foreign_key_ref: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> ColumnInfo:
        if isinstance(data, str):
            return cls(name=data)
        if not isinstance(data, dict) or not data.get("name"):
            raise MetadataError(f"Column entry needs a name: {data!r}")
        default = _pick(data, "defaultValue", "default")
        return cls(
            name=str(data["name"]),
            data_type=str(_pick(data, "type", "dataType", "data_type", default="")),
            nullable=bool(_pick(data, "nullable", default=True)),
            is_primary_key=bool(_pick(data, "isPrimaryKey", "is_primary_key", default=False)),
            is_foreign_key=bool(_pick(data, "isForeignKey", "is_foreign_key", default=False)),
            is_auto_increment=bool(_pick(data, "isAutoIncrement", "is_auto_increment", default=False)),
            is_generated=bool(_pick(data, "isGenerated", "is_generated", default=False)),
            default=None if default is None else str(default),
            enum_values=tuple(str(v) for v in _pick(data, "enumValues", "enum_values", default=())),
            foreign_key_ref=_pick(data, "foreignKeyRef", "foreign_key_ref"),
        )


@dataclass(frozen=True)
class ForeignKey:
    """A single-column foreign-key edge from source to target."""

    source_table: str
    source_column: str
    target_table: str
    target_column: str
    constraint_name: str | None = None
    source_schema: str | None = None
    target_schema: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ForeignKey:
        if not isinstance(data, dict):
            raise MetadataError(f"Invalid foreign key entry: {data!r}")
        ends = (
            _pick(data, "sourceTable", "source_table"),
            _pick(data, "sourceColumn", "source_column"),
            _pick(data, "targetTable", "target_table"),
            _pick(data, "targetColumn", "target_column"),
        )
        if not all(ends):
            raise MetadataError(f"Foreign key needs source and target table/column: {data!r}")
        return cls(
            source_table=str(ends[0]),
            source_column=str(ends[1]),
            target_table=str(ends[2]),
            target_column=str(ends[3]),
            constraint_name=_pick(data, "constraintName", "constraint_name"),
            source_schema=_pick(data, "sourceSchema", "source_schema"),
            target_schema=_pick(data, "targetSchema", "target_schema"),
        )


@dataclass(frozen=True)
class SqlMetadata:
    """Read-only schema snapshot for one completion request.

    ``columns`` is keyed by ``"schema.table"`` or bare ``"table"``.
    """

    schemas: tuple[str, ...] = ()
    tables: tuple[TableInfo, ...] = ()
    columns: dict[str, tuple[ColumnInfo, ...]] = field(default_factory=dict)
    foreign_keys: tuple[ForeignKey, ...] = ()
    dialect: Dialect = Dialect.POSTGRES

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None, dialect: str | None = None) -> SqlMetadata:
        """Build a snapshot from a JSON-style dict (camelCase or snake_case keys)."""
        if data is None:
            return cls(dialect=Dialect.from_value(dialect))
        if not isinstance(data, dict):
            raise MetadataError("SQL metadata must be an object")

        tables = []
        for entry in data.get("tables") or []:
            if isinstance(entry, str):
                tables.append(TableInfo(name=entry))
            elif isinstance(entry, dict) and entry.get("name"):
                tables.append(
                    TableInfo(
                        name=str(entry["name"]),
                        schema=entry.get("schema"),
                        row_count=_row_count(_pick(entry, "rowCount", "row_count")),
                    )
                )
            else:
                raise MetadataError(f"Table entry needs a name: {entry!r}")

        raw_columns = data.get("columns") or {}
        if not isinstance(raw_columns, dict):
            raise MetadataError("columns must map table keys to column lists")
        columns = {
            str(key): tuple(ColumnInfo.from_dict(c) for c in cols or [])
            for key, cols in raw_columns.items()
        }

        foreign_keys = tuple(
            ForeignKey.from_dict(fk) for fk in _pick(data, "foreignKeys", "foreign_keys", default=[])
        )

        return cls(
            schemas=tuple(str(s) for s in data.get("schemas") or []),
            tables=tuple(tables),
            columns=columns,
            foreign_keys=foreign_keys,
            dialect=Dialect.from_value(dialect or _pick(data, "dialect", "dbType")),
        )

    def find_table_key(self, table: str, schema: str | None = None) -> str | None:
        """Find the ``columns`` key for a table, case-insensitively."""
        table_lower = table.lower()
        if schema:
            wanted = f"{schema}.{table}".lower()
            for key in self.columns:
                if key.lower() == wanted:
                    return key
        for key in self.columns:
            key_lower = key.lower()
            if key_lower == table_lower or key_lower.rsplit(".", 1)[-1] == table_lower:
                return key
        return None

    def columns_for(self, table: str, schema: str | None = None) -> tuple[ColumnInfo, ...]:
        key = self.find_table_key(table, schema)
        if key is None:
            return ()
        return self.columns[key]

    def find_column(self, name: str, table: str | None = None) -> ColumnInfo | None:
        """Look a column up in one table, or across all tables when none is given."""
        name_lower = name.lower()
        pools = [self.columns_for(table)] if table else list(self.columns.values())
        for pool in pools:
            for column in pool:
                if column.name.lower() == name_lower:
                    return column
        return None

"""SQL operators, column type categories and per-dialect data types."""

from __future__ import annotations

import re
from enum import Enum
from typing import NamedTuple

from .core import Dialect


class TypeCategory(Enum):
    """Coarse value-type category of a column."""

    NUMERIC = "numeric"
    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    JSON = "json"
    ARRAY = "array"
    BINARY = "binary"
    UUID = "uuid"
    ANY = "any"


class SqlOperator(NamedTuple):
    operator: str
    description: str
    valid_for: frozenset[TypeCategory]


def _op(operator: str, description: str, *categories: str) -> SqlOperator:
    return SqlOperator(operator, description, frozenset(TypeCategory(c) for c in categories))


_ORDERED = ("numeric", "date", "string")

SQL_OPERATORS: tuple[SqlOperator, ...] = (
    # Comparison
    _op("=", "Equal to", "any"),
    _op("<>", "Not equal to", "any"),
    _op("!=", "Not equal to", "any"),
    _op("<", "Less than", *_ORDERED),
    _op(">", "Greater than", *_ORDERED),
    _op("<=", "Less than or equal", *_ORDERED),
    _op(">=", "Greater than or equal", *_ORDERED),
    # Pattern matching
    _op("LIKE", "Pattern match (case-sensitive)", "string"),
    _op("NOT LIKE", "Pattern does not match", "string"),
    _op("ILIKE", "Pattern match (case-insensitive)", "string"),
    _op("SIMILAR TO", "Regex pattern match", "string"),
    _op("~", "Regex match (PostgreSQL)", "string"),
    _op("~*", "Regex match case-insensitive", "string"),
    _op("!~", "Regex not match", "string"),
    _op("!~*", "Regex not match case-insensitive", "string"),
    # Range and list
    _op("BETWEEN", "Within range (inclusive)", *_ORDERED),
    _op("NOT BETWEEN", "Outside range", *_ORDERED),
    _op("IN", "Match any in list", "any"),
    _op("NOT IN", "Not in list", "any"),
    # NULL
    _op("IS NULL", "Is NULL", "any"),
    _op("IS NOT NULL", "Is not NULL", "any"),
    _op("IS DISTINCT FROM", "Distinct (NULL-safe)", "any"),
    _op("IS NOT DISTINCT FROM", "Not distinct (NULL-safe)", "any"),
    # Boolean
    _op("IS TRUE", "Is true", "boolean"),
    _op("IS FALSE", "Is false", "boolean"),
    _op("IS NOT TRUE", "Is not true", "boolean"),
    _op("IS NOT FALSE", "Is not false", "boolean"),
    # JSON (PostgreSQL)
    _op("->", "Get JSON element", "json"),
    _op("->>", "Get JSON element as text", "json"),
    _op("#>", "Get JSON path", "json"),
    _op("#>>", "Get JSON path as text", "json"),
    _op("@>", "Contains", "json", "array"),
    _op("<@", "Contained by", "json", "array"),
    _op("?", "Key exists", "json"),
    _op("?|", "Any key exists", "json"),
    _op("?&", "All keys exist", "json"),
    # Arrays (PostgreSQL)
    _op("&&", "Arrays overlap", "array"),
    _op("||", "Concatenation", "array", "string"),
    # Arithmetic
    _op("+", "Addition", "numeric", "date"),
    _op("-", "Subtraction", "numeric", "date"),
    _op("*", "Multiplication", "numeric"),
    _op("/", "Division", "numeric"),
    _op("%", "Modulo", "numeric"),
    _op("^", "Exponentiation (PostgreSQL)", "numeric"),
    _op("|/", "Square root (PostgreSQL)", "numeric"),
    _op("||/", "Cube root (PostgreSQL)", "numeric"),
    _op("@", "Absolute value (PostgreSQL)", "numeric"),
    # Bitwise
    _op("&", "Bitwise AND", "numeric"),
    _op("|", "Bitwise OR", "numeric"),
    _op("#", "Bitwise XOR (PostgreSQL)", "numeric"),
    _op("<<", "Bitwise shift left", "numeric"),
    _op(">>", "Bitwise shift right", "numeric"),
)

# Checked in order; the first match wins
_CATEGORY_PATTERNS: tuple[tuple[re.Pattern[str], TypeCategory], ...] = (
    (re.compile(r"INT|SERIAL|DECIMAL|NUMERIC|REAL|DOUBLE|FLOAT|MONEY|NUMBER"), TypeCategory.NUMERIC),
    (re.compile(r"CHAR|TEXT|VARCHAR|STRING|CLOB"), TypeCategory.STRING),
    (re.compile(r"DATE|TIME|TIMESTAMP|INTERVAL|YEAR"), TypeCategory.DATE),
    (re.compile(r"BOOL"), TypeCategory.BOOLEAN),
    (re.compile(r"JSON"), TypeCategory.JSON),
    (re.compile(r"\[\]|ARRAY"), TypeCategory.ARRAY),
    (re.compile(r"BYTEA|BLOB|BINARY|IMAGE"), TypeCategory.BINARY),
    (re.compile(r"UUID|UNIQUEIDENTIFIER"), TypeCategory.UUID),
)


def get_column_type_category(sql_type: str | None) -> TypeCategory:
    """Map a declared column type to its value category."""
    upper = (sql_type or "").upper()
    for pattern, category in _CATEGORY_PATTERNS:
        if pattern.search(upper):
            return category
    return TypeCategory.ANY


def get_operators_for_type(sql_type: str | None) -> list[SqlOperator]:
    """Operators valid for a column type; unknown types get the any-typed operators."""
    category = get_column_type_category(sql_type)
    return [
        op
        for op in SQL_OPERATORS
        if TypeCategory.ANY in op.valid_for or category in op.valid_for
    ]


_MYSQL_TYPES = (
    "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
    "DECIMAL", "DEC", "NUMERIC", "FLOAT", "DOUBLE", "DOUBLE PRECISION", "REAL", "BIT",
    "CHAR", "VARCHAR", "TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT",
    "BINARY", "VARBINARY", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
    "DATE", "DATETIME", "TIMESTAMP", "TIME", "YEAR",
    "JSON",
    "ENUM", "SET", "GEOMETRY", "POINT", "LINESTRING", "POLYGON",
)

SQL_DATA_TYPES: dict[Dialect, tuple[str, ...]] = {
    Dialect.POSTGRES: (
        "SMALLINT", "INTEGER", "INT", "BIGINT", "DECIMAL", "NUMERIC", "REAL", "DOUBLE PRECISION",
        "SMALLSERIAL", "SERIAL", "BIGSERIAL", "MONEY",
        "CHAR", "CHARACTER", "VARCHAR", "CHARACTER VARYING", "TEXT",
        "BYTEA",
        "DATE", "TIME", "TIME WITH TIME ZONE", "TIMESTAMP", "TIMESTAMP WITH TIME ZONE",
        "TIMESTAMPTZ", "TIMETZ", "INTERVAL",
        "BOOLEAN", "BOOL",
        "UUID",
        "JSON", "JSONB",
        "ARRAY", "INTEGER[]", "TEXT[]", "VARCHAR[]",
        "POINT", "LINE", "LSEG", "BOX", "PATH", "POLYGON", "CIRCLE",
        "CIDR", "INET", "MACADDR", "MACADDR8",
        "BIT", "BIT VARYING", "VARBIT", "TSVECTOR", "TSQUERY", "XML",
    ),
    Dialect.MYSQL: _MYSQL_TYPES,
    Dialect.MARIADB: _MYSQL_TYPES + ("UUID",),
    Dialect.SQLSERVER: (
        "BIGINT", "INT", "SMALLINT", "TINYINT", "BIT",
        "DECIMAL", "DEC", "NUMERIC", "MONEY", "SMALLMONEY",
        "FLOAT", "REAL",
        "CHAR", "VARCHAR", "TEXT", "NCHAR", "NVARCHAR", "NTEXT",
        "BINARY", "VARBINARY", "IMAGE",
        "DATE", "TIME", "DATETIME", "DATETIME2", "SMALLDATETIME", "DATETIMEOFFSET",
        "UNIQUEIDENTIFIER", "XML", "SQL_VARIANT", "GEOGRAPHY", "GEOMETRY", "HIERARCHYID",
    ),
    Dialect.SQLITE: (
        "INTEGER", "INT", "TINYINT", "SMALLINT", "MEDIUMINT", "BIGINT",
        "UNSIGNED BIG INT", "INT2", "INT8",
        "REAL", "DOUBLE", "DOUBLE PRECISION", "FLOAT",
        "TEXT", "CHARACTER", "VARCHAR", "VARYING CHARACTER", "NCHAR",
        "NATIVE CHARACTER", "NVARCHAR", "CLOB",
        "BLOB", "NONE",
        "NUMERIC", "DECIMAL", "BOOLEAN", "DATE", "DATETIME",
    ),
}


def get_data_types(dialect: Dialect) -> tuple[str, ...]:
    return SQL_DATA_TYPES.get(dialect, ())

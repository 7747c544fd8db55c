"""SQL keyword tables.

Each keyword lists the clauses (or preceding keywords) after which it is a
relevant suggestion, and optionally the clause it opens.
"""

from __future__ import annotations

from typing import NamedTuple

from .core import Clause


class SqlKeyword(NamedTuple):
    keyword: str
    valid_after: tuple[str, ...]
    starts_clause: Clause | None = None
    description: str = ""


def _kw(keyword: str, valid_after: str, description: str, starts: Clause | None = None) -> SqlKeyword:
    return SqlKeyword(keyword, tuple(valid_after.split()), starts, description)


# Keyword -> clause it opens, matched right-to-left to find the current clause.
# AND/OR are deliberately absent: they stay inside WHERE/HAVING/ON.
CLAUSE_KEYWORDS: dict[str, Clause] = {
    "SELECT": Clause.SELECT,
    "FROM": Clause.FROM,
    "WHERE": Clause.WHERE,
    "LEFT OUTER JOIN": Clause.JOIN,
    "RIGHT OUTER JOIN": Clause.JOIN,
    "FULL OUTER JOIN": Clause.JOIN,
    "INNER JOIN": Clause.JOIN,
    "LEFT JOIN": Clause.JOIN,
    "RIGHT JOIN": Clause.JOIN,
    "FULL JOIN": Clause.JOIN,
    "CROSS JOIN": Clause.JOIN,
    "JOIN": Clause.JOIN,
    "ON": Clause.ON,
    "ORDER BY": Clause.ORDER_BY,
    "GROUP BY": Clause.GROUP_BY,
    "HAVING": Clause.HAVING,
    "INSERT": Clause.INSERT,
    "INTO": Clause.INTO,
    "VALUES": Clause.VALUES,
    "UPDATE": Clause.UPDATE,
    "SET": Clause.SET,
    "DELETE": Clause.DELETE,
    "CREATE": Clause.CREATE,
    "ALTER": Clause.ALTER,
    "DROP": Clause.DROP,
    "WITH": Clause.WITH,
    "LIMIT": Clause.LIMIT,
    "OFFSET": Clause.OFFSET,
    "UNION": Clause.UNION,
}

# Words never accepted as a table alias
ALIAS_STOP_WORDS = frozenset(
    """
    SELECT FROM WHERE JOIN ON AND OR NOT IN LIKE BETWEEN IS NULL AS ORDER BY
    GROUP HAVING LIMIT OFFSET INSERT INTO VALUES UPDATE SET DELETE CREATE ALTER
    DROP TABLE INDEX VIEW LEFT RIGHT INNER OUTER FULL CROSS NATURAL UNION ALL
    DISTINCT ASC DESC CASE WHEN THEN ELSE END WITH RECURSIVE
    """.split()
)

SQL_KEYWORDS: tuple[SqlKeyword, ...] = (
    # SELECT
    _kw("SELECT", "UNKNOWN WITH UNION", "Select columns from table", Clause.SELECT),
    _kw("DISTINCT", "SELECT", "Return unique rows only"),
    _kw("ALL", "SELECT UNION", "Return all rows"),
    _kw("TOP", "SELECT", "Limit rows (SQL Server)"),
    # FROM
    _kw("FROM", "SELECT DELETE", "Specify source table(s)", Clause.FROM),
    _kw("AS", "SELECT FROM JOIN", "Define alias"),
    # JOIN
    _kw("JOIN", "FROM JOIN ON", "Join tables", Clause.JOIN),
    _kw("INNER", "FROM JOIN ON", "Inner join modifier"),
    _kw("LEFT", "FROM JOIN ON", "Left outer join"),
    _kw("RIGHT", "FROM JOIN ON", "Right outer join"),
    _kw("FULL", "FROM JOIN ON", "Full outer join"),
    _kw("OUTER", "FROM JOIN ON", "Outer join modifier"),
    _kw("CROSS", "FROM JOIN ON", "Cross join (cartesian)"),
    _kw("NATURAL", "FROM JOIN", "Natural join"),
    _kw("ON", "JOIN INSERT", "Join condition", Clause.ON),
    _kw("USING", "JOIN", "Join on matching columns"),
    # WHERE
    _kw("WHERE", "FROM JOIN ON SET UPDATE DELETE", "Filter rows", Clause.WHERE),
    _kw("AND", "WHERE ON HAVING", "Logical AND"),
    _kw("OR", "WHERE ON HAVING", "Logical OR"),
    _kw("NOT", "WHERE ON HAVING AND OR CREATE ALTER", "Logical NOT"),
    _kw("IN", "WHERE ON HAVING", "Match any value in list"),
    _kw("BETWEEN", "WHERE ON HAVING", "Range comparison"),
    _kw("LIKE", "WHERE ON HAVING", "Pattern matching"),
    _kw("ILIKE", "WHERE ON HAVING", "Case-insensitive LIKE (PostgreSQL)"),
    _kw("SIMILAR TO", "WHERE ON HAVING", "Regex pattern match (PostgreSQL)"),
    _kw("IS", "WHERE ON HAVING", "NULL comparison"),
    _kw("NULL", "WHERE ON HAVING SET", "NULL value"),
    _kw("EXISTS", "WHERE ON HAVING", "Subquery exists"),
    _kw("ANY", "WHERE ON HAVING", "Compare to any in subquery"),
    _kw("SOME", "WHERE ON HAVING", "Same as ANY"),
    # GROUP BY / HAVING / ORDER BY
    _kw("GROUP", "FROM WHERE JOIN ON", "Group rows"),
    _kw("BY", "GROUP ORDER PARTITION", "Specify columns"),
    _kw("HAVING", "GROUP_BY", "Filter groups", Clause.HAVING),
    _kw("ORDER", "FROM WHERE GROUP_BY HAVING JOIN ON", "Sort results"),
    _kw("ASC", "ORDER_BY", "Ascending order"),
    _kw("DESC", "ORDER_BY", "Descending order"),
    _kw("NULLS", "ORDER_BY", "NULL ordering"),
    _kw("NULLS FIRST", "ORDER_BY", "Sort NULLs first"),
    _kw("NULLS LAST", "ORDER_BY", "Sort NULLs last"),
    _kw("FIRST", "ORDER_BY NULLS", "NULLs first"),
    _kw("LAST", "ORDER_BY NULLS", "NULLs last"),
    # LIMIT / OFFSET / FETCH
    _kw("LIMIT", "FROM WHERE ORDER_BY GROUP_BY HAVING", "Limit rows returned", Clause.LIMIT),
    _kw("OFFSET", "LIMIT", "Skip rows", Clause.OFFSET),
    _kw("FETCH", "ORDER_BY OFFSET", "Fetch rows (SQL standard)"),
    _kw("NEXT", "OFFSET", "Fetch next rows"),
    _kw("ROWS", "OFFSET LIMIT SELECT OVER", "Row count or rows frame"),
    _kw("ONLY", "OFFSET", "Only specified rows"),
    # Set operations
    _kw("UNION", "SELECT FROM WHERE ORDER_BY", "Combine results", Clause.UNION),
    _kw("INTERSECT", "SELECT FROM WHERE ORDER_BY", "Common rows"),
    _kw("EXCEPT", "SELECT FROM WHERE ORDER_BY", "Rows not in second query"),
    _kw("MINUS", "SELECT FROM WHERE ORDER_BY", "Same as EXCEPT (Oracle)"),
    # CTE
    _kw("WITH", "UNKNOWN", "Common Table Expression", Clause.WITH),
    _kw("RECURSIVE", "WITH", "Recursive CTE"),
    _kw("MATERIALIZED", "WITH", "Materialize CTE"),
    _kw("NOT MATERIALIZED", "WITH", "Don't materialize CTE"),
    # INSERT
    _kw("INSERT", "UNKNOWN WITH", "Insert rows", Clause.INSERT),
    _kw("INTO", "INSERT", "Target table", Clause.INTO),
    _kw("VALUES", "INTO", "Values to insert", Clause.VALUES),
    _kw("DEFAULT", "VALUES SET", "Use default value"),
    _kw("RETURNING", "INSERT UPDATE DELETE VALUES", "Return affected rows"),
    _kw("CONFLICT", "INSERT", "Conflict handling"),
    _kw("DO", "INSERT", "Conflict action"),
    _kw("NOTHING", "INSERT", "Do nothing on conflict"),
    # UPDATE / DELETE
    _kw("UPDATE", "UNKNOWN WITH INSERT FOR", "Update rows", Clause.UPDATE),
    _kw("SET", "UPDATE", "Set column values", Clause.SET),
    _kw("DELETE", "UNKNOWN WITH", "Delete rows", Clause.DELETE),
    # DDL
    _kw("CREATE", "UNKNOWN", "Create object", Clause.CREATE),
    _kw("ALTER", "UNKNOWN", "Alter object", Clause.ALTER),
    _kw("DROP", "UNKNOWN", "Drop object", Clause.DROP),
    _kw("TRUNCATE", "UNKNOWN", "Remove all rows"),
    _kw("TABLE", "CREATE ALTER DROP TRUNCATE", "Table object"),
    _kw("INDEX", "CREATE DROP", "Index object"),
    _kw("VIEW", "CREATE ALTER DROP", "View object"),
    _kw("SCHEMA", "CREATE ALTER DROP", "Schema object"),
    _kw("DATABASE", "CREATE ALTER DROP", "Database object"),
    _kw("SEQUENCE", "CREATE ALTER DROP", "Sequence object"),
    _kw("FUNCTION", "CREATE ALTER DROP", "Function object"),
    _kw("PROCEDURE", "CREATE ALTER DROP", "Procedure object"),
    _kw("TRIGGER", "CREATE ALTER DROP", "Trigger object"),
    _kw("TYPE", "CREATE ALTER DROP", "Type object"),
    # Constraints
    _kw("PRIMARY", "CREATE ALTER", "Primary key"),
    _kw("KEY", "CREATE ALTER", "Key constraint"),
    _kw("FOREIGN", "CREATE ALTER", "Foreign key"),
    _kw("REFERENCES", "CREATE ALTER", "FK reference"),
    _kw("UNIQUE", "CREATE ALTER", "Unique constraint"),
    _kw("CHECK", "CREATE ALTER", "Check constraint"),
    _kw("CONSTRAINT", "CREATE ALTER", "Named constraint"),
    # Column modifiers
    _kw("COLUMN", "ALTER ADD DROP", "Column object"),
    _kw("ADD", "ALTER", "Add column/constraint"),
    _kw("RENAME", "ALTER", "Rename object"),
    _kw("TO", "ALTER RENAME", "Rename target"),
    # Transactions
    _kw("BEGIN", "UNKNOWN", "Begin transaction"),
    _kw("COMMIT", "UNKNOWN", "Commit transaction"),
    _kw("ROLLBACK", "UNKNOWN", "Rollback transaction"),
    _kw("SAVEPOINT", "UNKNOWN", "Create savepoint"),
    _kw("TRANSACTION", "UNKNOWN", "Transaction"),
    # CASE
    _kw("CASE", "SELECT WHERE SET ON HAVING", "Conditional expression"),
    _kw("WHEN", "SELECT WHERE SET", "Condition branch"),
    _kw("THEN", "SELECT WHERE SET", "Result for condition"),
    _kw("ELSE", "SELECT WHERE SET", "Default result"),
    _kw("END", "SELECT WHERE SET", "End CASE"),
    # Window functions
    _kw("OVER", "SELECT", "Window specification"),
    _kw("PARTITION", "SELECT OVER", "Partition by"),
    _kw("WINDOW", "SELECT FROM WHERE", "Named window"),
    _kw("RANGE", "SELECT OVER", "Range frame"),
    _kw("GROUPS", "SELECT OVER", "Groups frame (PostgreSQL 11+)"),
    _kw("UNBOUNDED", "SELECT OVER", "Unbounded frame"),
    _kw("PRECEDING", "SELECT OVER", "Preceding rows"),
    _kw("FOLLOWING", "SELECT OVER", "Following rows"),
    _kw("CURRENT", "SELECT OVER", "Current row"),
    _kw("ROW", "SELECT OVER", "Single row"),
    _kw("FILTER", "SELECT", "Filter aggregate (PostgreSQL)"),
    _kw("WITHIN GROUP", "SELECT", "Ordered-set aggregate"),
    _kw("EXCLUDE", "OVER", "Exclude frame rows"),
    # Literals
    _kw("TRUE", "WHERE SET VALUES ON HAVING", "Boolean true"),
    _kw("FALSE", "WHERE SET VALUES ON HAVING", "Boolean false"),
    # EXPLAIN
    _kw("EXPLAIN", "UNKNOWN", "Query execution plan"),
    _kw("ANALYZE", "UNKNOWN EXPLAIN", "Analyze query/table"),
    # Advanced joins and locking
    _kw("LATERAL", "FROM JOIN", "Lateral subquery (PostgreSQL)"),
    _kw("FOR", "FROM WHERE ORDER_BY LIMIT", "Row locking"),
    _kw("SHARE", "FOR", "Lock for share"),
    _kw("NO KEY UPDATE", "FOR", "Lock without key"),
    _kw("KEY SHARE", "FOR", "Lock key share"),
    _kw("NOWAIT", "FOR", "Don't wait for lock"),
    _kw("SKIP LOCKED", "FOR", "Skip locked rows"),
    _kw("DISTINCT ON", "SELECT", "Distinct on columns (PostgreSQL)"),
    # Arrays and JSON
    _kw("ARRAY", "SELECT WHERE SET VALUES", "Array constructor"),
    _kw("JSONB", "CREATE ALTER", "JSONB type"),
    # Procedures
    _kw("EXEC", "UNKNOWN", "Execute procedure (SQL Server)"),
    _kw("CALL", "UNKNOWN", "Call procedure"),
)

# Offered right after ``OVER (``
WINDOW_KEYWORDS: tuple[SqlKeyword, ...] = (
    _kw("PARTITION BY", "OVER", "Partition rows"),
    _kw("ORDER BY", "OVER", "Order within partition"),
    _kw("ROWS", "OVER", "Rows-based frame"),
    _kw("RANGE", "OVER", "Range-based frame"),
    _kw("GROUPS", "OVER", "Groups-based frame"),
    _kw("BETWEEN", "OVER", "Frame between"),
    _kw("UNBOUNDED PRECEDING", "OVER", "From partition start"),
    _kw("UNBOUNDED FOLLOWING", "OVER", "To partition end"),
    _kw("CURRENT ROW", "OVER", "Current row"),
    _kw("EXCLUDE CURRENT ROW", "OVER", "Exclude current"),
    _kw("EXCLUDE GROUP", "OVER", "Exclude peers"),
    _kw("EXCLUDE TIES", "OVER", "Exclude ties"),
    _kw("EXCLUDE NO OTHERS", "OVER", "Include all"),
)

KEYWORD_NAMES = frozenset(k.keyword for k in SQL_KEYWORDS)


def get_keywords_for_clause(clause: Clause) -> list[SqlKeyword]:
    """Keywords relevant right after the given clause."""
    return [k for k in SQL_KEYWORDS if clause.value in k.valid_after]


def is_keyword(word: str) -> bool:
    return word.upper() in KEYWORD_NAMES

"""SQL candidate generators.

Every generator takes the resolved context, the metadata snapshot and the
typed prefix and returns a fresh list of ``Completion`` values. Generators
never see each other's output.
"""

from __future__ import annotations

from querycomplete.shared.core.ranking import Completion, CompletionKind, matches_prefix

from .core import (
    Boost,
    Clause,
    ColumnInfo,
    QualifierKind,
    SqlContext,
    SqlMetadata,
    TableRef,
)
from .functions import get_functions_for_dialect, search_functions, search_functions_fuzzy
from .keywords import SQL_KEYWORDS, WINDOW_KEYWORDS
from .operators import get_data_types, get_operators_for_type
from .snippets import SQL_SNIPPETS

MAX_FUNCTIONS = 50
MIN_FUZZY_PREFIX = 2
MAX_ENUM_PREVIEW = 5

LITERAL_VALUES = ("NULL", "TRUE", "FALSE", "DEFAULT", "CURRENT_DATE", "CURRENT_TIMESTAMP", "NOW()")


def format_row_count(count: int) -> str:
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}k"
    return f"{count / 1_000_000:.1f}M"


def format_column_detail(column: ColumnInfo) -> str:
    """Column type followed by constraint badges, e.g. ``integer • PK NOT NULL``."""
    badges = []
    if column.is_primary_key:
        badges.append("PK")
    if column.is_foreign_key:
        badges.append("FK")
    if column.is_auto_increment:
        badges.append("AUTO")
    if column.is_generated:
        badges.append("GEN")
    if not column.nullable:
        badges.append("NOT NULL")
    parts = [column.data_type] if column.data_type else []
    if badges:
        parts.append(" ".join(badges))
    return " • ".join(parts)


def format_column_info(column: ColumnInfo) -> str:
    sections = [f"Type: {column.data_type or 'unknown'}"]
    if column.is_primary_key:
        sections.append("Primary key")
    if column.is_foreign_key and column.foreign_key_ref:
        sections.append(f"FK -> {column.foreign_key_ref}")
    if column.is_auto_increment:
        sections.append("Auto-increment")
    if column.is_generated:
        sections.append("Generated")
    sections.append("Nullable" if column.nullable else "NOT NULL")
    if column.default is not None:
        sections.append(f"Default: {column.default}")
    if column.enum_values:
        shown = ", ".join(column.enum_values[:MAX_ENUM_PREVIEW])
        extra = len(column.enum_values) - MAX_ENUM_PREVIEW
        sections.append(f"Enum: {shown}" + (f", +{extra} more" if extra > 0 else ""))
    return "\n".join(sections)


def _row_count_info(row_count: int | None) -> str | None:
    return f"{format_row_count(row_count)} rows" if row_count else None


def _star(context: SqlContext, prefix: str, boost: int) -> list[Completion]:
    if context.clause is Clause.SELECT and matches_prefix("*", prefix):
        return [Completion("*", CompletionKind.KEYWORD, detail="All columns", boost=boost)]
    return []


def qualified_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Completions after ``qualifier.``: tables of a schema, or columns of a table/CTE."""
    resolved = context.resolved_qualifier
    if resolved is None:
        return []

    if resolved.kind is QualifierKind.SCHEMA:
        schema = resolved.name.lower()
        return [
            Completion(
                table.name,
                CompletionKind.TABLE,
                detail=table.qualified_name,
                info=_row_count_info(table.row_count),
                boost=Boost.TABLE,
            )
            for table in metadata.tables
            if table.schema and table.schema.lower() == schema and matches_prefix(table.name, prefix)
        ]

    completions = [
        Completion(
            column.name,
            CompletionKind.COLUMN,
            detail=format_column_detail(column),
            info=format_column_info(column),
            boost=Boost.COLUMN_QUALIFIED,
        )
        for column in metadata.columns_for(resolved.name, resolved.schema)
        if matches_prefix(column.name, prefix)
    ]
    completions.extend(_star(context, prefix, Boost.COLUMN_QUALIFIED + 5))
    return completions


def column_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Columns of the tables in scope, or every known column when none are."""
    completions: list[Completion] = []
    tables = context.tables_in_scope

    if tables:
        for ref in tables:
            alias = ref.reference_name
            for column in metadata.columns_for(ref.name, ref.schema):
                if not matches_prefix(column.name, prefix):
                    continue
                completions.append(
                    Completion(
                        column.name,
                        CompletionKind.COLUMN,
                        detail=f"{alias}.{column.name} ({column.data_type})",
                        info=format_column_info(column),
                        boost=Boost.COLUMN_IN_SCOPE,
                    )
                )
                if len(tables) > 1:
                    completions.append(
                        Completion(
                            f"{alias}.{column.name}",
                            CompletionKind.COLUMN,
                            detail=column.data_type,
                            boost=Boost.COLUMN_IN_SCOPE - 5,
                        )
                    )
    else:
        for table_key, columns in metadata.columns.items():
            for column in columns:
                if matches_prefix(column.name, prefix):
                    completions.append(
                        Completion(
                            column.name,
                            CompletionKind.COLUMN,
                            detail=f"{table_key}.{column.name} ({column.data_type})",
                            boost=Boost.TABLE,
                        )
                    )

    completions.extend(_star(context, prefix, Boost.COLUMN_IN_SCOPE + 10))
    return completions


def table_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    in_scope = {ref.name.lower() for ref in context.tables_in_scope}
    completions: list[Completion] = []
    for table in metadata.tables:
        if not matches_prefix(table.name, prefix):
            continue
        completions.append(
            Completion(
                table.name,
                CompletionKind.TABLE,
                detail=table.qualified_name,
                info=_row_count_info(table.row_count),
                boost=Boost.TABLE_IN_SCOPE if table.name.lower() in in_scope else Boost.TABLE,
            )
        )
        if table.schema and matches_prefix(table.qualified_name, prefix):
            completions.append(
                Completion(
                    table.qualified_name,
                    CompletionKind.TABLE,
                    detail=_row_count_info(table.row_count),
                    boost=Boost.TABLE - 5,
                )
            )
    return completions


def schema_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    return [
        Completion(schema, CompletionKind.SCHEMA, detail="Schema", boost=Boost.SCHEMA)
        for schema in metadata.schemas
        if matches_prefix(schema, prefix)
    ]


def cte_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    return [
        Completion(
            cte.name,
            CompletionKind.CTE,
            detail="CTE (Common Table Expression)",
            boost=Boost.TABLE_IN_SCOPE,
        )
        for cte in context.ctes_in_scope
        if matches_prefix(cte.name, prefix)
    ]


def function_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Prefix matches first; longer prefixes also reach substring and abbreviation matches."""
    if len(prefix) >= MIN_FUZZY_PREFIX:
        functions = search_functions_fuzzy(metadata.dialect, prefix, MAX_FUNCTIONS)
    elif prefix:
        functions = search_functions(metadata.dialect, prefix)
    else:
        functions = list(get_functions_for_dialect(metadata.dialect))
    return [
        Completion(
            func.name,
            CompletionKind.FUNCTION,
            detail=func.signature,
            info=func.description,
            boost=Boost.FUNCTION if matches_prefix(func.name, prefix) else Boost.FUNCTION_FUZZY,
            insert_text=f"{func.name}()" if "(" in func.signature else func.name,
        )
        for func in functions[:MAX_FUNCTIONS]
    ]


def keyword_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Keywords valid after the current clause or previous token rank above the rest."""
    anchors = {context.clause.value}
    if context.previous_token:
        anchors.add(context.previous_token.upper())

    keywords = list(SQL_KEYWORDS)
    if context.in_window:
        keywords.extend(WINDOW_KEYWORDS)
        anchors = {"OVER"}

    completions = []
    for keyword in keywords:
        if not matches_prefix(keyword.keyword, prefix):
            continue
        relevant = any(anchor in keyword.valid_after for anchor in anchors)
        completions.append(
            Completion(
                keyword.keyword,
                CompletionKind.KEYWORD,
                detail=keyword.description,
                boost=Boost.KEYWORD_RELEVANT if relevant else Boost.KEYWORD_OTHER,
            )
        )
    return completions


def alias_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    completions = [
        Completion(
            ref.reference_name,
            CompletionKind.ALIAS,
            detail=f"Alias for {ref.name}",
            boost=Boost.TABLE_IN_SCOPE + 5,
        )
        for ref in context.tables_in_scope
        if matches_prefix(ref.reference_name, prefix)
    ]
    completions.extend(
        Completion(cte.name, CompletionKind.ALIAS, detail="CTE", boost=Boost.TABLE_IN_SCOPE + 5)
        for cte in context.ctes_in_scope
        if matches_prefix(cte.name, prefix)
    )
    return completions


def _find_in_scope(tables: tuple[TableRef, ...], table: str, schema: str | None) -> TableRef | None:
    table_lower = table.lower()
    for ref in tables:
        if ref.name.lower() != table_lower:
            continue
        if ref.schema and schema and ref.schema.lower() != schema.lower():
            continue
        return ref
    return None


def join_condition_completions(
    context: SqlContext, metadata: SqlMetadata, prefix: str
) -> list[Completion]:
    """FK-derived ``a.col = b.col`` conditions between tables in scope."""
    tables = context.tables_in_scope
    if len(tables) < 2:
        return []

    completions = []
    for fk in metadata.foreign_keys:
        source = _find_in_scope(tables, fk.source_table, fk.source_schema)
        target = _find_in_scope(tables, fk.target_table, fk.target_schema)
        if source is None or target is None:
            continue

        detail = f"FK: {fk.constraint_name or 'foreign key'}"
        condition = f"{source.reference_name}.{fk.source_column} = {target.reference_name}.{fk.target_column}"
        reverse = f"{target.reference_name}.{fk.target_column} = {source.reference_name}.{fk.source_column}"
        if matches_prefix(condition, prefix):
            completions.append(
                Completion(
                    condition,
                    CompletionKind.JOIN,
                    detail=detail,
                    info=f"Join {source.name} to {target.name}",
                    boost=Boost.FK_SUGGESTION,
                )
            )
        if matches_prefix(reverse, prefix):
            completions.append(
                Completion(reverse, CompletionKind.JOIN, detail=detail, boost=Boost.FK_SUGGESTION - 5)
            )
    return completions


def _lookup_column(context: SqlContext, metadata: SqlMetadata, reference: str) -> ColumnInfo | None:
    """Find a possibly ``alias.``-qualified column in the metadata."""
    qualifier, _, name = reference.rpartition(".")
    if not qualifier:
        return metadata.find_column(name)
    table = qualifier
    for ref in context.tables_in_scope:
        if ref.alias and ref.alias.lower() == qualifier.lower():
            table = ref.name
            break
    return metadata.find_column(name, table) or metadata.find_column(name)


def operator_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    column = _lookup_column(context, metadata, context.previous_token) if context.previous_token else None
    return [
        Completion(op.operator, CompletionKind.OPERATOR, detail=op.description, boost=Boost.OPERATOR)
        for op in get_operators_for_type(column.data_type if column else None)
        if matches_prefix(op.operator, prefix)
    ]


def value_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Literal values, plus enum values of the column being compared."""
    completions = [
        Completion(value, CompletionKind.VALUE, boost=Boost.KEYWORD_RELEVANT)
        for value in LITERAL_VALUES
        if matches_prefix(value, prefix)
    ]
    if context.compared_column:
        column = _lookup_column(context, metadata, context.compared_column)
        if column is not None:
            completions.extend(
                Completion(
                    f"'{value}'",
                    CompletionKind.VALUE,
                    detail=f"{column.name} enum",
                    boost=Boost.COLUMN_QUALIFIED,
                )
                for value in column.enum_values
                if matches_prefix(value, prefix)
            )
    return completions


def data_type_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    return [
        Completion(data_type, CompletionKind.DATA_TYPE, boost=Boost.DATA_TYPE)
        for data_type in get_data_types(metadata.dialect)
        if matches_prefix(data_type, prefix)
    ]


def snippet_completions(context: SqlContext, metadata: SqlMetadata, prefix: str) -> list[Completion]:
    """Statement templates, only before any clause has been typed."""
    if context.clause is not Clause.UNKNOWN or context.depth:
        return []
    return [
        Completion(
            snippet.label,
            CompletionKind.SNIPPET,
            detail=snippet.detail,
            boost=Boost.SNIPPET - snippet.priority,
            insert_text=snippet.text,
        )
        for snippet in SQL_SNIPPETS
        if matches_prefix(snippet.label, prefix)
    ]

"""SQL completion engine.

Provides context-aware SQL autocompletion with:
- Clause and expected-token detection (tables after FROM, columns after SELECT, etc.)
- Alias and CTE recognition (FROM users u -> u.id suggests users columns)
- Foreign-key aware JOIN ... ON suggestions
- Dialect-specific functions, operators and data types
- Ranked, deduplicated and capped results
"""

from querycomplete.domains.sql.completion.completion import (
    GENERATORS,
    bucket_of,
    complete,
    get_completions,
)
from querycomplete.domains.sql.completion.context import (
    determine_expected_type,
    extract_ctes,
    extract_table_refs,
    find_clause,
    get_context,
    resolve_qualifier,
)
from querycomplete.domains.sql.completion.core import (
    Boost,
    Clause,
    ColumnInfo,
    CteRef,
    Dialect,
    ExpectedType,
    ForeignKey,
    MetadataError,
    QualifierKind,
    ResolvedQualifier,
    SqlContext,
    SqlMetadata,
    TableInfo,
    TableRef,
)
from querycomplete.domains.sql.completion.functions import (
    SQL_FUNCTIONS,
    clear_function_caches,
    get_functions_by_category,
    get_functions_for_dialect,
    search_functions,
    search_functions_fuzzy,
)
from querycomplete.domains.sql.completion.keywords import (
    CLAUSE_KEYWORDS,
    SQL_KEYWORDS,
    WINDOW_KEYWORDS,
    get_keywords_for_clause,
    is_keyword,
)
from querycomplete.domains.sql.completion.operators import (
    SQL_DATA_TYPES,
    SQL_OPERATORS,
    TypeCategory,
    get_column_type_category,
    get_data_types,
    get_operators_for_type,
)
from querycomplete.domains.sql.completion.scanner import (
    get_current_word,
    get_previous_token,
    get_qualifier,
    is_inside_comment,
    is_inside_string,
    scan,
)
from querycomplete.domains.sql.completion.snippets import SQL_SNIPPETS

__all__ = [
    "Boost",
    "CLAUSE_KEYWORDS",
    "Clause",
    "ColumnInfo",
    "CteRef",
    "Dialect",
    "ExpectedType",
    "ForeignKey",
    "GENERATORS",
    "MetadataError",
    "QualifierKind",
    "ResolvedQualifier",
    "SQL_DATA_TYPES",
    "SQL_FUNCTIONS",
    "SQL_KEYWORDS",
    "SQL_OPERATORS",
    "SQL_SNIPPETS",
    "SqlContext",
    "SqlMetadata",
    "TableInfo",
    "TableRef",
    "TypeCategory",
    "WINDOW_KEYWORDS",
    "bucket_of",
    "clear_function_caches",
    "complete",
    "determine_expected_type",
    "extract_ctes",
    "extract_table_refs",
    "find_clause",
    "get_column_type_category",
    "get_completions",
    "get_context",
    "get_current_word",
    "get_data_types",
    "get_functions_by_category",
    "get_functions_for_dialect",
    "get_keywords_for_clause",
    "get_operators_for_type",
    "get_previous_token",
    "get_qualifier",
    "is_inside_comment",
    "is_inside_string",
    "is_keyword",
    "resolve_qualifier",
    "scan",
    "search_functions",
    "search_functions_fuzzy",
]

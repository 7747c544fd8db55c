"""Tests for SQL metadata parsing and the static catalogs."""

import pytest

from querycomplete.sql_completion import (
    SQL_FUNCTIONS,
    SQL_KEYWORDS,
    SQL_SNIPPETS,
    ColumnInfo,
    Dialect,
    ForeignKey,
    MetadataError,
    SqlMetadata,
    TypeCategory,
    clear_function_caches,
    get_column_type_category,
    get_data_types,
    get_functions_by_category,
    get_functions_for_dialect,
    get_keywords_for_clause,
    get_operators_for_type,
    is_keyword,
    search_functions,
    search_functions_fuzzy,
)
from querycomplete.sql_completion import Clause


class TestDialect:
    """Tests for dialect resolution."""

    def test_case_insensitive(self):
        assert Dialect.from_value("MySQL") == Dialect.MYSQL

    def test_unknown_falls_back_to_postgres(self):
        assert Dialect.from_value("oracle") == Dialect.POSTGRES

    def test_none_falls_back_to_postgres(self):
        assert Dialect.from_value(None) == Dialect.POSTGRES


class TestMetadata:
    """Tests for building metadata snapshots from dicts."""

    def test_none_gives_empty_snapshot(self):
        metadata = SqlMetadata.from_dict(None, dialect="sqlite")
        assert metadata.tables == ()
        assert metadata.dialect == Dialect.SQLITE

    def test_snake_case_keys(self):
        metadata = SqlMetadata.from_dict(
            {
                "tables": [{"name": "t", "row_count": 5}],
                "columns": {"t": [{"name": "c", "data_type": "int", "is_primary_key": True}]},
                "foreign_keys": [
                    {
                        "source_table": "t",
                        "source_column": "c",
                        "target_table": "u",
                        "target_column": "id",
                    }
                ],
            }
        )
        assert metadata.tables[0].row_count == 5
        assert metadata.columns["t"][0].is_primary_key
        assert metadata.foreign_keys[0].target_table == "u"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1200", 1200), (" 42 ", 42), (7.0, 7), ("many", None), (True, None), (-3, None)],
    )
    def test_row_count_coerced(self, raw, expected):
        metadata = SqlMetadata.from_dict({"tables": [{"name": "t", "rowCount": raw}]})
        assert metadata.tables[0].row_count == expected

    def test_db_type_key_sets_dialect(self):
        assert SqlMetadata.from_dict({"dbType": "sqlserver"}).dialect == Dialect.SQLSERVER

    def test_explicit_dialect_wins(self):
        assert SqlMetadata.from_dict({"dialect": "mysql"}, dialect="sqlite").dialect == Dialect.SQLITE

    def test_string_column_entries(self):
        metadata = SqlMetadata.from_dict({"columns": {"t": ["a", "b"]}})
        assert [c.name for c in metadata.columns["t"]] == ["a", "b"]

    def test_not_an_object(self):
        with pytest.raises(MetadataError):
            SqlMetadata.from_dict(["users"])

    def test_table_without_name(self):
        with pytest.raises(MetadataError):
            SqlMetadata.from_dict({"tables": [{"schema": "public"}]})

    def test_columns_not_a_mapping(self):
        with pytest.raises(MetadataError):
            SqlMetadata.from_dict({"columns": ["a"]})

    def test_column_without_name(self):
        with pytest.raises(MetadataError):
            ColumnInfo.from_dict({"type": "int"})

    def test_incomplete_foreign_key(self):
        with pytest.raises(MetadataError):
            ForeignKey.from_dict({"sourceTable": "orders", "sourceColumn": "user_id"})

    def test_metadata_error_is_value_error(self):
        assert issubclass(MetadataError, ValueError)

    def test_find_table_key_case_insensitive(self, shop_metadata):
        assert shop_metadata.find_table_key("USERS") == "public.users"

    def test_find_table_key_with_schema(self, shop_metadata):
        assert shop_metadata.find_table_key("events", "audit") == "audit.events"

    def test_find_column_across_tables(self, shop_metadata):
        assert shop_metadata.find_column("total").data_type == "numeric(10,2)"

    def test_find_column_missing(self, shop_metadata):
        assert shop_metadata.find_column("nope") is None


class TestFunctions:
    """Tests for the function catalog."""

    def setup_method(self):
        clear_function_caches()

    def test_dialect_filtering(self):
        sqlite_names = {f.name for f in get_functions_for_dialect(Dialect.SQLITE)}
        assert "JULIANDAY" in sqlite_names
        assert "NOW" not in sqlite_names

    def test_search_is_case_insensitive_prefix(self):
        names = {f.name for f in search_functions(Dialect.POSTGRES, "str")}
        assert "STRING_AGG" in names
        assert all(name.startswith("STR") for name in names)

    def test_fuzzy_abbreviation(self):
        names = [f.name for f in search_functions_fuzzy(Dialect.POSTGRES, "rn")]
        assert "ROW_NUMBER" in names

    def test_fuzzy_prefix_ranks_first(self):
        results = search_functions_fuzzy(Dialect.POSTGRES, "count")
        assert results[0].name == "COUNT"

    def test_category_lookup(self):
        window = get_functions_by_category(Dialect.POSTGRES, "window")
        assert "ROW_NUMBER" in {f.name for f in window}
        assert all(f.category == "window" for f in window)
        assert get_functions_by_category(Dialect.POSTGRES, "window") is window

    def test_unknown_category_is_empty(self):
        assert get_functions_by_category(Dialect.POSTGRES, "astrology") == ()

    def test_cached_result_is_stable(self):
        assert get_functions_for_dialect(Dialect.MYSQL) is get_functions_for_dialect(Dialect.MYSQL)

    def test_every_function_has_a_dialect(self):
        assert all(f.dialects for f in SQL_FUNCTIONS)


class TestOperatorsAndTypes:
    """Tests for operator filtering and data types."""

    @pytest.mark.parametrize(
        ("sql_type", "category"),
        [
            ("integer", TypeCategory.NUMERIC),
            ("varchar(255)", TypeCategory.STRING),
            ("timestamp", TypeCategory.DATE),
            (None, TypeCategory.ANY),
        ],
    )
    def test_type_category(self, sql_type, category):
        assert get_column_type_category(sql_type) == category

    def test_unknown_type_gets_generic_operators(self):
        operators = {op.operator for op in get_operators_for_type(None)}
        assert "=" in operators
        assert "IS NULL" in operators
        assert "LIKE" not in operators

    def test_data_types_per_dialect(self):
        assert "JSONB" in get_data_types(Dialect.POSTGRES)
        assert "NVARCHAR" in get_data_types(Dialect.SQLSERVER)
        assert "JSONB" not in get_data_types(Dialect.SQLITE)


class TestKeywordsAndSnippets:
    """Tests for keyword tables and snippets."""

    def test_is_keyword(self):
        assert is_keyword("select")
        assert not is_keyword("users")

    def test_keywords_for_clause(self):
        keywords = {k.keyword for k in get_keywords_for_clause(Clause.FROM)}
        assert "WHERE" in keywords

    def test_keyword_names_unique(self):
        names = [k.keyword for k in SQL_KEYWORDS]
        assert len(names) == len(set(names))

    def test_snippet_templates_render(self):
        for snippet in SQL_SNIPPETS:
            assert "${" not in snippet.text

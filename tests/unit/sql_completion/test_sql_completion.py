"""Tests for SQL candidate generation, ranking and the complete() entry point."""

import pytest

from querycomplete.shared.core.ranking import CompletionKind, CompletionLimits
from querycomplete.sql_completion import (
    GENERATORS,
    Boost,
    Dialect,
    ExpectedType,
    SqlMetadata,
    complete,
    get_completions,
    get_context,
)


def _labels(result):
    return [c.label for c in result.candidates]


class TestDispatch:
    """Tests for the expected-type dispatch table."""

    def test_every_expected_type_has_generators(self):
        """No expected type may fall through without generators."""
        assert set(GENERATORS) == set(ExpectedType)

    def test_generator_lists_not_empty(self):
        assert all(GENERATORS.values())


class TestTableSuggestions:
    """Tests for table and schema suggestions."""

    def test_tables_after_from(self, shop_metadata):
        """After FROM should suggest tables."""
        result = complete("SELECT * FROM ", 14, shop_metadata)
        labels = _labels(result)
        assert "users" in labels
        assert "orders" in labels

    def test_schemas_after_from(self, shop_metadata):
        result = complete("SELECT * FROM ", 14, shop_metadata)
        kinds = {c.label: c.kind for c in result.candidates}
        assert kinds.get("public") == CompletionKind.SCHEMA

    def test_table_prefix(self, shop_metadata):
        sql = "SELECT * FROM us"
        result = complete(sql, len(sql), shop_metadata)
        assert "users" in _labels(result)
        assert "orders" not in _labels(result)
        assert result.insert_from == len(sql) - 2

    def test_row_count_info(self, shop_metadata):
        sql = "SELECT * FROM ord"
        result = complete(sql, len(sql), shop_metadata)
        orders = next(c for c in result.candidates if c.label == "orders")
        assert orders.info == "2.5M rows"
        assert orders.detail == "public.orders"

    def test_string_row_count(self):
        """Bigint row counts sent as JSON strings still render."""
        result = complete("SELECT * FROM ", 14, {"tables": [{"name": "users", "rowCount": "1200"}]})
        users = next(c for c in result.candidates if c.label == "users")
        assert users.info == "1.2k rows"

    def test_schema_qualifier_lists_its_tables(self, shop_metadata):
        """FROM schema. suggests that schema's tables only."""
        sql = "SELECT * FROM audit."
        result = complete(sql, len(sql), shop_metadata)
        assert _labels(result) == ["events"]

    def test_cte_suggested_as_table(self, shop_metadata):
        sql = "WITH recent AS (SELECT * FROM orders) SELECT * FROM "
        result = complete(sql, len(sql), shop_metadata)
        kinds = {c.label: c.kind for c in result.candidates}
        assert kinds.get("recent") == CompletionKind.CTE


class TestColumnSuggestions:
    """Tests for column suggestions."""

    def test_columns_of_table_in_scope(self, shop_metadata):
        sql = "SELECT  FROM users u"
        result = complete(sql, 7, shop_metadata)
        email = next(c for c in result.candidates if c.label == "email")
        assert email.kind == CompletionKind.COLUMN
        assert email.boost == Boost.COLUMN_IN_SCOPE
        assert email.detail == "u.email (varchar(255))"

    def test_single_table_has_no_qualified_forms(self, shop_metadata):
        sql = "SELECT  FROM users u"
        result = complete(sql, 7, shop_metadata)
        assert "u.email" not in _labels(result)

    def test_multiple_tables_add_qualified_forms(self, shop_metadata):
        sql = "SELECT  FROM users u JOIN orders o ON u.id = o.user_id"
        result = complete(sql, 7, shop_metadata)
        labels = _labels(result)
        assert "u.email" in labels
        assert "o.user_id" in labels

    def test_star_in_select(self, shop_metadata):
        sql = "SELECT  FROM users"
        result = complete(sql, 7, shop_metadata)
        assert result.candidates[0].label == "*"

    def test_columns_without_tables_in_scope(self, shop_metadata):
        """With no FROM yet, every known column is offered at table weight."""
        sql = "SELECT tot"
        result = complete(sql, len(sql), shop_metadata)
        total = next(c for c in result.candidates if c.label == "total")
        assert total.boost == Boost.TABLE

    def test_qualified_columns(self, shop_metadata):
        """alias. lists only that table's columns."""
        sql = "SELECT o. FROM orders o"
        result = complete(sql, len("SELECT o."), shop_metadata)
        labels = _labels(result)
        assert {"id", "user_id", "total"} <= set(labels)
        assert "email" not in labels

    def test_qualified_column_prefix(self, shop_metadata):
        sql = "SELECT u.em FROM users u"
        result = complete(sql, len("SELECT u.em"), shop_metadata)
        assert _labels(result) == ["email"]

    def test_column_detail_badges(self, shop_metadata):
        sql = "SELECT u. FROM users u"
        result = complete(sql, len("SELECT u."), shop_metadata)
        pk = next(c for c in result.candidates if c.label == "id")
        assert pk.detail == "integer • PK NOT NULL"

    def test_exact_match_ranks_first(self, shop_metadata):
        sql = "SELECT * FROM users WHERE id"
        result = complete(sql, len(sql), shop_metadata)
        assert result.candidates[0].label == "id"
        assert result.candidates[0].boost == Boost.EXACT_MATCH


class TestJoinConditions:
    """Tests for foreign-key derived ON suggestions."""

    def test_fk_condition_ranks_first(self, shop_metadata):
        sql = "SELECT id, FROM users u JOIN orders o ON "
        result = complete(sql, len(sql), shop_metadata)
        first = result.candidates[0]
        assert first.label == "o.user_id = u.id"
        assert first.kind == CompletionKind.JOIN
        assert first.boost == Boost.FK_SUGGESTION
        assert first.detail == "FK: orders_user_id_fkey"

    def test_reverse_condition_offered(self, shop_metadata):
        sql = "SELECT * FROM users u JOIN orders o ON "
        result = complete(sql, len(sql), shop_metadata)
        assert "u.id = o.user_id" in _labels(result)

    def test_aliases_offered(self, shop_metadata):
        sql = "SELECT * FROM users u JOIN orders o ON "
        result = complete(sql, len(sql), shop_metadata)
        aliases = [c.label for c in result.candidates if c.kind == CompletionKind.ALIAS]
        assert aliases == ["u", "o"]

    def test_no_condition_without_both_tables(self, shop_metadata):
        sql = "SELECT * FROM users u JOIN events e ON "
        result = complete(sql, len(sql), shop_metadata)
        assert not any(c.kind == CompletionKind.JOIN for c in result.candidates)


class TestOperatorsAndValues:
    """Tests for operator and value suggestions in filters."""

    def test_string_column_operators(self, shop_metadata):
        sql = "SELECT * FROM users WHERE email "
        result = complete(sql, len(sql), shop_metadata)
        labels = _labels(result)
        assert "=" in labels
        assert "LIKE" in labels
        assert "+" not in labels

    def test_numeric_column_operators(self, shop_metadata):
        sql = "SELECT * FROM users WHERE id "
        result = complete(sql, len(sql), shop_metadata)
        labels = _labels(result)
        assert ">" in labels
        assert "LIKE" not in labels

    def test_enum_values_after_comparison(self, shop_metadata):
        sql = "SELECT * FROM users WHERE status = "
        result = complete(sql, len(sql), shop_metadata)
        labels = _labels(result)
        assert "'active'" in labels
        assert "'banned'" in labels
        assert "NULL" in labels

    def test_enum_value_prefix(self, shop_metadata):
        sql = "SELECT * FROM users WHERE status = ac"
        result = complete(sql, len(sql), shop_metadata)
        assert "'active'" in _labels(result)
        assert "'banned'" not in _labels(result)


class TestFunctionsKeywordsAndTypes:
    """Tests for function, keyword, data type and snippet suggestions."""

    def test_function_inserts_parens(self):
        sql = "SELECT COU"
        result = complete(sql, len(sql))
        count = next(c for c in result.candidates if c.label == "COUNT")
        assert count.kind == CompletionKind.FUNCTION
        assert count.text == "COUNT()"

    def test_overloads_collapse_to_one_candidate(self):
        sql = "SELECT COU"
        result = complete(sql, len(sql))
        assert _labels(result).count("COUNT") == 1

    def test_function_abbreviation(self):
        """rn reaches ROW_NUMBER below functions that start with the prefix."""
        sql = "SELECT rn"
        result = complete(sql, len(sql))
        row_number = next(c for c in result.candidates if c.label == "ROW_NUMBER")
        assert row_number.boost == Boost.FUNCTION_FUZZY

    def test_function_prefix_match_keeps_full_boost(self):
        sql = "SELECT COU"
        result = complete(sql, len(sql))
        assert next(c for c in result.candidates if c.label == "COUNT").boost == Boost.FUNCTION

    def test_single_letter_prefix_stays_prefix_only(self):
        sql = "SELECT r"
        result = complete(sql, len(sql))
        functions = [c.label for c in result.candidates if c.kind == CompletionKind.FUNCTION]
        assert functions
        assert all(name.startswith("R") for name in functions)

    def test_dialect_functions(self):
        sql = "SELECT GROUP_CON"
        mysql = complete(sql, len(sql), SqlMetadata(dialect=Dialect.MYSQL))
        postgres = complete(sql, len(sql), SqlMetadata())
        assert "GROUP_CONCAT" in _labels(mysql)
        assert "GROUP_CONCAT" not in _labels(postgres)

    def test_data_types_after_cast(self):
        sql = "SELECT CAST(total AS VARC"
        result = complete(sql, len(sql))
        assert "VARCHAR" in _labels(result)
        assert all(c.kind == CompletionKind.DATA_TYPE for c in result.candidates)

    def test_keyword_prefix(self):
        sql = "SEL"
        result = complete(sql, len(sql))
        assert "SELECT" in _labels(result)

    def test_snippets_at_start(self):
        result = complete("", 0)
        assert any(c.kind == CompletionKind.SNIPPET for c in result.candidates)

    def test_snippet_text_has_no_placeholders(self):
        result = complete("", 0)
        snippets = [c for c in result.candidates if c.kind == CompletionKind.SNIPPET]
        assert all("${" not in c.text for c in snippets)

    def test_no_snippets_inside_clause(self, shop_metadata):
        sql = "SELECT * FROM users WHERE "
        result = complete(sql, len(sql), shop_metadata)
        assert not any(c.kind == CompletionKind.SNIPPET for c in result.candidates)

    def test_window_keywords_after_over(self):
        sql = "SELECT ROW_NUMBER() OVER ("
        result = complete(sql, len(sql))
        assert "PARTITION BY" in _labels(result)


class TestSuppression:
    """Tests for strings, comments and explicit requests."""

    def test_comment_returns_nothing(self):
        sql = "SELECT 1 -- FR"
        result = complete(sql, len(sql))
        assert result.candidates == []

    def test_string_returns_nothing(self, shop_metadata):
        sql = "SELECT * FROM users WHERE email = 'us"
        result = complete(sql, len(sql), shop_metadata)
        assert result.candidates == []

    def test_explicit_request_in_string(self, shop_metadata):
        """An explicit request inside a literal gets the generic candidate set."""
        sql = "SELECT * FROM users WHERE email = 'us"
        result = complete(sql, len(sql), shop_metadata, explicit=True)
        assert "users" in _labels(result)


class TestLimitsAndStability:
    """Tests for caps, deduplication and determinism."""

    def test_total_cap(self):
        result = complete("", 0)
        assert len(result.candidates) <= CompletionLimits().max_total

    def test_custom_limits(self, shop_metadata):
        limits = CompletionLimits(max_total=3)
        result = complete("SELECT * FROM ", 14, shop_metadata, limits=limits)
        assert len(result.candidates) == 3

    def test_no_duplicate_label_kind_pairs(self, shop_metadata):
        sql = "SELECT  FROM users u JOIN orders o"
        result = complete(sql, 7, shop_metadata)
        pairs = [(c.label, c.kind) for c in result.candidates]
        assert len(pairs) == len(set(pairs))

    def test_sorted_by_boost(self, shop_metadata):
        sql = "SELECT * FROM users u JOIN orders o ON "
        boosts = [c.boost for c in complete(sql, len(sql), shop_metadata).candidates]
        assert boosts == sorted(boosts, reverse=True)

    def test_repeatable(self, shop_metadata):
        sql = "SELECT  FROM users u JOIN orders o"
        assert complete(sql, 7, shop_metadata) == complete(sql, 7, shop_metadata)

    def test_dict_metadata_accepted(self):
        result = complete("SELECT * FROM ", 14, {"tables": ["accounts"]})
        assert "accounts" in _labels(result)

    def test_cursor_clamped(self):
        result = complete("SELECT ", 999)
        assert result.insert_from == 7

    @pytest.mark.parametrize("cursor", [0, 3, 7, 14, 25, 32])
    def test_never_raises(self, shop_metadata, cursor):
        sql = "SELECT * FROM users u WHERE u."
        result = complete(sql, cursor, shop_metadata)
        assert result.insert_from <= max(0, min(cursor, len(sql)))

    def test_get_completions_defaults_metadata(self):
        context = get_context("SELECT ", 7)
        assert isinstance(get_completions(context), list)

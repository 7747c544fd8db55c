"""Tests for lexical scanning of SQL text."""

from querycomplete.sql_completion import (
    get_current_word,
    get_previous_token,
    get_qualifier,
    is_inside_comment,
    is_inside_string,
    scan,
)


class TestStringDetection:
    """Tests for string literal and quoted identifier detection."""

    def test_unclosed_single_quote(self):
        """An open '...' literal puts the cursor inside a string."""
        assert is_inside_string("SELECT * FROM users WHERE name = 'Jo")

    def test_closed_single_quote(self):
        """A closed literal does not."""
        assert not is_inside_string("SELECT * FROM users WHERE name = 'Jo' ")

    def test_doubled_quote_escape(self):
        """'' inside a literal is an escaped quote, not a terminator."""
        assert is_inside_string("SELECT 'it''s")

    def test_backslash_escape(self):
        """Backslash-escaped quotes do not close the literal."""
        assert is_inside_string("SELECT 'a\\'b")

    def test_double_quoted_identifier(self):
        """Unclosed double-quoted identifiers count as strings."""
        assert is_inside_string('SELECT "my col')

    def test_backtick_identifier(self):
        """Unclosed backtick identifiers count as strings."""
        assert is_inside_string("SELECT `my col")

    def test_dollar_quoted_body(self):
        """PostgreSQL $$ bodies are strings until the matching tag."""
        assert is_inside_string("CREATE FUNCTION f() AS $$ BEGIN")

    def test_tagged_dollar_quote_closed(self):
        """A closed $tag$ body leaves the cursor in code."""
        assert not is_inside_string("SELECT $fn$ body $fn$ ")

    def test_cursor_before_string(self):
        """Only the state at the cursor matters."""
        sql = "SELECT 'abc'"
        assert not is_inside_string(sql, 7)


class TestCommentDetection:
    """Tests for line and block comment detection."""

    def test_line_comment(self):
        """Text after -- is a comment."""
        assert is_inside_comment("SELECT 1 -- FR")

    def test_line_comment_ends_at_newline(self):
        """A newline ends a line comment."""
        assert not is_inside_comment("SELECT 1 -- note\nFROM ")

    def test_block_comment(self):
        """An unclosed /* is a comment."""
        assert is_inside_comment("SELECT /* pick ")

    def test_nested_block_comment(self):
        """Block comments nest; one */ does not close two /*."""
        assert is_inside_comment("SELECT /* a /* b */ still ")

    def test_closed_block_comment(self):
        assert not is_inside_comment("SELECT /* a */ ")

    def test_dashes_in_string_are_not_comment(self):
        """-- inside a literal does not start a comment."""
        assert not is_inside_comment("SELECT '--' ")


class TestMasking:
    """Tests for the masked copy of the document."""

    def test_masked_same_length(self):
        """Masking preserves offsets."""
        sql = "SELECT 'FROM' x -- WHERE\nFROM t"
        assert len(scan(sql, len(sql)).masked) == len(sql)

    def test_literal_body_blanked(self):
        """Keywords inside literals are blanked out."""
        sql = "SELECT 'FROM' x"
        assert scan(sql, len(sql)).masked == "SELECT '    ' x"

    def test_comment_blanked(self):
        """Comments are blanked but newlines kept."""
        sql = "SELECT 1 -- FROM\nx"
        masked = scan(sql, len(sql)).masked
        assert "FROM" not in masked
        assert masked.endswith("\nx")

    def test_quoted_identifier_kept(self):
        """Quoted identifiers stay visible so table refs still match."""
        sql = 'SELECT * FROM "Users"'
        assert scan(sql, len(sql)).masked == sql

    def test_quoted_identifier_blanked_for_keywords(self):
        """The keyword copy hides quoted names but keeps literal masking."""
        sql = 'SELECT "from", `order`, \'WHERE\' x'
        result = scan(sql, len(sql))
        assert result.keywords_masked == 'SELECT "    ", `     `, \'     \' x'
        assert len(result.keywords_masked) == len(sql)


class TestTokenHelpers:
    """Tests for word, qualifier and previous-token helpers."""

    def test_current_word(self):
        sql = "SELECT us"
        assert get_current_word(sql, len(sql)) == "us"

    def test_current_word_empty_after_space(self):
        sql = "SELECT "
        assert get_current_word(sql, len(sql)) == ""

    def test_qualifier(self):
        """The identifier before a dot is the qualifier."""
        sql = "SELECT u.na"
        assert get_qualifier(sql, len(sql)) == "u"

    def test_qualifier_with_empty_word(self):
        sql = "SELECT u."
        assert get_qualifier(sql, len(sql)) == "u"

    def test_no_qualifier(self):
        sql = "SELECT na"
        assert get_qualifier(sql, len(sql)) is None

    def test_previous_token(self):
        sql = "SELECT * FROM users WHERE id "
        assert get_previous_token(sql, len(sql)) == "id"

    def test_previous_token_stops_at_comma(self):
        sql = "SELECT a,b"
        assert get_previous_token(sql, len(sql)) == "b"

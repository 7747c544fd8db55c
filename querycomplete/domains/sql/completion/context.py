"""SQL structural context resolver.

Works on the masked documents produced by the scanner, so keywords inside
string literals and comments never influence the result. Clause and keyword
detection also ignore quoted identifiers such as "from" or `order`.
"""

from __future__ import annotations

import logging
import re

from .core import (
    Clause,
    CteRef,
    ExpectedType,
    QualifierKind,
    ResolvedQualifier,
    SqlContext,
    TableRef,
)
from .keywords import ALIAS_STOP_WORDS, CLAUSE_KEYWORDS, KEYWORD_NAMES
from .scanner import get_current_word, get_last_token_info, get_previous_token, get_qualifier, scan

_logger = logging.getLogger(__name__)

# Quoted identifiers: "name", `name`, [name] or bare name
_IDENT = r'(?:"([^"]+)"|`([^`]+)`|\[([^\]]+)\]|(\w+))'
# Keywords are never consumed as an alias so a following JOIN still matches
_ALIAS = r"(?:\s+(?:AS\s+)?(?!(?:" + "|".join(sorted(ALIAS_STOP_WORDS)) + r")\b)(\w+))?"
_TABLE = r"(?:" + _IDENT + r"\.)?" + _IDENT

_FROM_JOIN_PATTERN = re.compile(r"\b(?:FROM|JOIN|UPDATE)\s+" + _TABLE + _ALIAS, re.IGNORECASE)
_INTO_PATTERN = re.compile(r"\bINTO\s+" + _TABLE, re.IGNORECASE)
_LIST_ITEM_PATTERN = re.compile(r"\s*,\s*" + _TABLE + _ALIAS, re.IGNORECASE)

_WITH_PATTERN = re.compile(r"\bWITH\s+(RECURSIVE\s+)?", re.IGNORECASE)
_CTE_PATTERN = re.compile(r"(\w+)\s*(?:\([^)]*\))?\s*AS\s*\(", re.IGNORECASE)

# Longest first so multi-word keywords win over their last word
_CLAUSE_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(CLAUSE_KEYWORDS, key=len, reverse=True)) + r")\b"
)
_PREVIOUS_KEYWORD_PATTERN = re.compile(
    r"(?<!\S)(" + "|".join(sorted([*CLAUSE_KEYWORDS, "AND", "OR"], key=len, reverse=True)) + r")(?=[\s,;(]|$)"
)

_COMPARED_COLUMN_PATTERN = re.compile(
    r"(\w+(?:\.\w+)?)\s*(?:=|<>|!=|<=|>=|<|>|\bLIKE\b|\bIN\b)\s*\(?\s*\w*$", re.IGNORECASE
)
_CAST_AS_PATTERN = re.compile(r"\bCAST\s*\([^()]*\bAS\s+\w*$", re.IGNORECASE)
_TYPE_CAST_PATTERN = re.compile(r"::\s*\w*$")
_COMPARISON_END = re.compile(r"[=<>!]+\s*$")
_EXEC_PATTERN = re.compile(r"\b(?:EXEC|EXECUTE|CALL)\s+\w*$", re.IGNORECASE)

_OPERATOR_CLAUSES = {Clause.WHERE, Clause.HAVING, Clause.ON}
_DELIMITER_CHARS = ",(=<>!+-*/%|"


def _first(groups: tuple[str | None, ...]) -> str | None:
    return next((g for g in groups if g is not None), None)


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", text).upper().strip()


def find_clause(text_before_cursor: str) -> Clause:
    """Return the clause opened by the rightmost clause keyword before the cursor."""
    normalized = _normalize(text_before_cursor)
    clause = Clause.UNKNOWN
    for match in _CLAUSE_PATTERN.finditer(normalized):
        clause = CLAUSE_KEYWORDS[match.group(1)]
    return clause


def _table_ref(groups: tuple[str | None, ...], span: tuple[int, int]) -> TableRef | None:
    schema = _first(groups[0:4])
    table = _first(groups[4:8])
    alias = groups[8] if len(groups) > 8 else None
    if not table:
        return None
    if alias and alias.upper() in ALIAS_STOP_WORDS:
        alias = None
    return TableRef(name=table, alias=alias, schema=schema, span=span)


def extract_table_refs(sql: str) -> list[TableRef]:
    """Extract table references and aliases from SQL.

    Handles patterns like:
    - FROM users
    - FROM users u, orders AS o
    - JOIN schema.orders o ON ...
    - FROM "quoted_table" / [bracketed] / `backtick`
    - UPDATE users u SET ...
    - INSERT INTO users (...)
    - DELETE FROM users WHERE ...

    A would-be alias that is a SQL keyword is discarded.
    """
    refs: list[TableRef] = []

    for match in _FROM_JOIN_PATTERN.finditer(sql):
        ref = _table_ref(match.groups(), match.span())
        if ref is None:
            continue
        refs.append(ref)
        end = match.end()
        # Comma-separated FROM list
        while True:
            item = _LIST_ITEM_PATTERN.match(sql, end)
            if item is None:
                break
            item_ref = _table_ref(item.groups(), item.span())
            if item_ref is not None:
                refs.append(item_ref)
            end = item.end()

    for match in _INTO_PATTERN.finditer(sql):
        ref = _table_ref(match.groups(), match.span())
        if ref is not None:
            refs.append(ref)

    seen: set[tuple[str | None, str, str | None]] = set()
    unique: list[TableRef] = []
    for ref in sorted(refs, key=lambda r: r.span[0]):
        key = (ref.schema, ref.name, ref.alias)
        if key not in seen:
            seen.add(key)
            unique.append(ref)
    return unique


def extract_ctes(sql: str) -> list[CteRef]:
    """Extract CTE names from a ``WITH [RECURSIVE]`` prologue."""
    with_match = _WITH_PATTERN.search(sql)
    if not with_match:
        return []
    offset = with_match.end()
    return [
        CteRef(name=m.group(1), span=(offset + m.start(), offset + m.end()))
        for m in _CTE_PATTERN.finditer(sql[offset:])
    ]


def resolve_qualifier(
    qualifier: str, tables: list[TableRef], ctes: list[CteRef]
) -> ResolvedQualifier:
    """Resolve ``qualifier.`` against CTEs, then aliases, then table names.

    Anything unknown is taken to be a schema name.
    """
    lower = qualifier.lower()
    for cte in ctes:
        if cte.name.lower() == lower:
            return ResolvedQualifier(QualifierKind.CTE, cte.name)
    for table in tables:
        if table.alias and table.alias.lower() == lower:
            return ResolvedQualifier(QualifierKind.TABLE, table.name, table.schema)
    for table in tables:
        if table.name.lower() == lower:
            return ResolvedQualifier(QualifierKind.TABLE, table.name, table.schema)
    return ResolvedQualifier(QualifierKind.SCHEMA, qualifier)


def find_previous_keyword(text_before_cursor: str) -> str | None:
    keyword = None
    for match in _PREVIOUS_KEYWORD_PATTERN.finditer(_normalize(text_before_cursor)):
        keyword = match.group(1)
    return keyword


def is_inside_over(text: str) -> bool:
    """Check if the text ends inside an ``OVER (...)`` window specification."""
    last_over = text.upper().rfind(" OVER")
    if last_over == -1:
        return False
    after = text[last_over:]
    return after.count("(") > after.count(")")


def is_inside_case(text: str) -> bool:
    upper = text.upper()
    return len(re.findall(r"\bCASE\b", upper)) > len(re.findall(r"\bEND\b", upper))


def _paren_depth(text: str) -> int:
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
    return depth


def _expects_operator(clause: Clause, raw_before: str, current_word: str) -> bool:
    """After an identifier or ``)`` followed by whitespace in a filter clause."""
    if current_word or clause not in _OPERATOR_CLAUSES:
        return False
    if not raw_before or not raw_before[-1].isspace():
        return False
    value, ttype = get_last_token_info(raw_before.rstrip())
    if not ttype or value is None:
        return False
    if ttype.startswith("Token.Name") or ttype.startswith("Token.Literal.String.Symbol"):
        return True
    if ttype == "Token.Punctuation" and value == ")":
        return True
    return ttype.startswith("Token.Keyword") and value.upper() not in KEYWORD_NAMES


def determine_expected_type(
    clause: Clause,
    text_before_cursor: str,
    qualifier: str | None,
    raw_before: str = "",
    current_word: str = "",
) -> tuple[ExpectedType, bool]:
    """Decide what token kind belongs at the cursor.

    Layers are checked in a fixed order: qualifier, OVER, CASE, subquery,
    punctuation, then the clause default. Returns the type and whether the
    cursor sits right after ``OVER (``.
    """
    last_chars = text_before_cursor[-30:].strip().upper()
    last_50 = text_before_cursor[-50:].strip().upper()

    if qualifier:
        return ExpectedType.COLUMN, False

    if is_inside_over(text_before_cursor):
        if last_chars.endswith("BY") or last_chars.endswith(","):
            return ExpectedType.COLUMN, False
        if last_chars.endswith("("):
            return ExpectedType.KEYWORD, True
        return ExpectedType.COLUMN, False

    if is_inside_case(text_before_cursor):
        if last_chars.endswith(("WHEN", "THEN", "ELSE")):
            return ExpectedType.COLUMN_OR_EXPRESSION, False
        return ExpectedType.KEYWORD, False

    if "(" in last_50 and ")" not in last_50:
        after_paren = last_50[last_50.rfind("(") + 1 :].strip()
        if after_paren in ("", "SELECT"):
            return ExpectedType.COLUMN_OR_EXPRESSION, False

    if _CAST_AS_PATTERN.search(text_before_cursor) or _TYPE_CAST_PATTERN.search(text_before_cursor):
        return ExpectedType.DATA_TYPE, False

    if last_chars.endswith(","):
        if clause is Clause.SELECT:
            return ExpectedType.COLUMN_OR_EXPRESSION, False
        if clause in (Clause.FROM, Clause.JOIN):
            return ExpectedType.TABLE_OR_SCHEMA, False
        if clause in (Clause.GROUP_BY, Clause.ORDER_BY, Clause.INSERT, Clause.INTO):
            return ExpectedType.COLUMN, False
        return ExpectedType.ANY, False

    if last_chars.endswith("("):
        if clause in (Clause.INSERT, Clause.INTO):
            return ExpectedType.COLUMN, False
        if clause is Clause.VALUES:
            return ExpectedType.VALUE, False
        return ExpectedType.COLUMN_OR_EXPRESSION, False

    if last_chars.endswith(("OVER", "FILTER")):
        return ExpectedType.KEYWORD, False

    # The partial value being typed does not hide the comparison before it
    stem = last_chars[: max(0, len(last_chars) - len(current_word))].rstrip()
    if _COMPARISON_END.search(stem) or stem.endswith((" LIKE", " IN")):
        return ExpectedType.VALUE, False

    if last_chars.endswith((" AND", " OR")):
        return ExpectedType.COLUMN_OR_EXPRESSION, False

    if _EXEC_PATTERN.search(text_before_cursor):
        return ExpectedType.FUNCTION, False

    if _expects_operator(clause, raw_before, current_word):
        return ExpectedType.OPERATOR, False

    return _clause_default(clause, last_chars), False


def _clause_default(clause: Clause, last_chars: str) -> ExpectedType:
    if clause is Clause.SELECT:
        return ExpectedType.COLUMN_OR_EXPRESSION
    if clause in (Clause.FROM, Clause.JOIN):
        return ExpectedType.TABLE_OR_SCHEMA
    if clause is Clause.ON:
        return ExpectedType.JOIN_CONDITION
    if clause in (Clause.WHERE, Clause.HAVING):
        return ExpectedType.COLUMN_OR_EXPRESSION
    if clause in (Clause.ORDER_BY, Clause.GROUP_BY, Clause.SET):
        return ExpectedType.COLUMN
    if clause in (Clause.INSERT, Clause.INTO):
        if last_chars.endswith("INTO"):
            return ExpectedType.TABLE_OR_SCHEMA
        return ExpectedType.COLUMN
    if clause is Clause.VALUES:
        return ExpectedType.VALUE
    if clause is Clause.UPDATE:
        if last_chars.endswith("UPDATE"):
            return ExpectedType.TABLE_OR_SCHEMA
        return ExpectedType.COLUMN
    if clause in (Clause.DELETE, Clause.DROP):
        return ExpectedType.TABLE_OR_SCHEMA
    if clause in (Clause.CREATE, Clause.ALTER):
        if "TABLE" in last_chars:
            return ExpectedType.TABLE_OR_SCHEMA
        return ExpectedType.KEYWORD
    return ExpectedType.ANY


def get_context(text: str, cursor: int) -> SqlContext:
    """Classify the cursor position in ``text``.

    Never raises: out-of-range cursors are clamped and unrecognised structure
    yields ``Clause.UNKNOWN`` with ``ExpectedType.ANY``.
    """
    cursor = max(0, min(cursor, len(text)))
    scanned = scan(text, cursor)
    masked = scanned.masked
    current_word = get_current_word(text, cursor)

    if scanned.in_string or scanned.in_comment:
        return SqlContext(
            clause=Clause.UNKNOWN,
            expected_type=ExpectedType.ANY,
            current_word=current_word,
            cursor=cursor,
            in_string=scanned.in_string,
            in_comment=scanned.in_comment,
        )

    before = masked[:cursor]
    keyword_before = scanned.keywords_masked[:cursor]
    qualifier = get_qualifier(masked, cursor)
    clause = find_clause(keyword_before)
    tables = extract_table_refs(masked)
    ctes = extract_ctes(masked)
    expected_type, in_window = determine_expected_type(
        clause, keyword_before, qualifier, raw_before=text[:cursor], current_word=current_word
    )

    word_start = cursor - len(current_word)
    # The reference being typed ("FROM audit.") is not a qualifier target
    dot = word_start - 1
    resolvable = [t for t in tables if not t.span[0] < dot <= t.span[1]]
    preceding = before[:word_start].rstrip()
    compared = _COMPARED_COLUMN_PATTERN.search(before)

    context = SqlContext(
        clause=clause,
        expected_type=expected_type,
        current_word=current_word,
        cursor=cursor,
        depth=_paren_depth(before),
        after_delimiter=bool(preceding) and preceding[-1] in _DELIMITER_CHARS,
        in_window=in_window,
        tables_in_scope=tuple(tables),
        ctes_in_scope=tuple(ctes),
        current_qualifier=qualifier,
        resolved_qualifier=resolve_qualifier(qualifier, resolvable, ctes) if qualifier else None,
        previous_token=get_previous_token(masked, word_start),
        previous_keyword=find_previous_keyword(keyword_before),
        compared_column=compared.group(1) if compared else None,
    )
    _logger.debug(
        "SQL context at %d: clause=%s expected=%s tables=%d",
        cursor,
        clause.value,
        expected_type.value,
        len(tables),
    )
    return context

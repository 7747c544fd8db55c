"""Lexical scanning for SQL completion.

A single forward pass classifies every character as code, string literal or
comment. The scan also yields two masked copies of the document (same length,
literal bodies and comments blanked) so the structural regexes never match
keywords that only appear inside text. The second copy also blanks quoted
identifier bodies, for clause and keyword detection.
"""

from __future__ import annotations

import re
from enum import Enum, auto
from typing import NamedTuple

_DOLLAR_TAG = re.compile(r"\$([A-Za-z_]\w*)?\$")
_WORD_CHARS = re.compile(r"\w")


class ScanState(Enum):
    CODE = auto()
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()
    BACKTICK = auto()
    DOLLAR_QUOTE = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()


_STRING_STATES = {
    ScanState.SINGLE_QUOTE,
    ScanState.DOUBLE_QUOTE,
    ScanState.BACKTICK,
    ScanState.DOLLAR_QUOTE,
}
_COMMENT_STATES = {ScanState.LINE_COMMENT, ScanState.BLOCK_COMMENT}

# Quoted identifiers keep their text in the masked copy so table refs still match
_MASKED_STATES = {ScanState.SINGLE_QUOTE, ScanState.DOLLAR_QUOTE} | _COMMENT_STATES
_IDENTIFIER_STATES = {ScanState.DOUBLE_QUOTE, ScanState.BACKTICK}


class ScanResult(NamedTuple):
    """Outcome of scanning a document up to the cursor."""

    masked: str
    in_string: bool
    in_comment: bool
    keywords_masked: str


def scan(text: str, cursor: int) -> ScanResult:
    """Scan ``text`` and report the lexical state at ``cursor``.

    Handles '...' (with '' and backslash escapes), "...", `...`, PostgreSQL
    $tag$...$tag$ bodies, -- line comments and nested /* */ block comments.
    """
    masked: list[str] = []
    keywords_masked: list[str] = []
    state = ScanState.CODE
    state_at_cursor = ScanState.CODE
    block_depth = 0
    dollar_close = ""
    i = 0
    n = len(text)

    def blank(chunk: str) -> str:
        return "".join("\n" if ch == "\n" else " " for ch in chunk)

    def emit(chunk: str, hide: bool, hide_keywords: bool | None = None) -> None:
        masked.append(blank(chunk) if hide else chunk)
        if hide_keywords is None:
            hide_keywords = hide
        keywords_masked.append(blank(chunk) if hide_keywords else chunk)

    while i < n:
        if i == cursor:
            state_at_cursor = state
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state is ScanState.CODE:
            if ch == "-" and nxt == "-":
                state = ScanState.LINE_COMMENT
                emit(ch + nxt, True)
                i += 2
                if i > cursor >= i - 1:
                    state_at_cursor = ScanState.CODE
                continue
            if ch == "/" and nxt == "*":
                state = ScanState.BLOCK_COMMENT
                block_depth = 1
                emit(ch + nxt, True)
                i += 2
                if i > cursor >= i - 1:
                    state_at_cursor = ScanState.CODE
                continue
            if ch == "'":
                state = ScanState.SINGLE_QUOTE
            elif ch == '"':
                state = ScanState.DOUBLE_QUOTE
            elif ch == "`":
                state = ScanState.BACKTICK
            elif ch == "$":
                match = _DOLLAR_TAG.match(text, i)
                if match and not (i > 0 and _WORD_CHARS.match(text[i - 1])):
                    dollar_close = match.group(0)
                    state = ScanState.DOLLAR_QUOTE
                    emit(dollar_close, False)
                    end = match.end()
                    if i < cursor < end:
                        state_at_cursor = ScanState.CODE
                    i = end
                    continue
            emit(ch, False)
            i += 1
            continue

        if state is ScanState.LINE_COMMENT:
            if ch == "\n":
                state = ScanState.CODE
                emit(ch, False)
            else:
                emit(ch, True)
            i += 1
            continue

        if state is ScanState.BLOCK_COMMENT:
            if ch == "/" and nxt == "*":
                block_depth += 1
                emit(ch + nxt, True)
                i += 2
                if i > cursor >= i - 1:
                    state_at_cursor = ScanState.BLOCK_COMMENT
                continue
            if ch == "*" and nxt == "/":
                block_depth -= 1
                emit(ch + nxt, True)
                i += 2
                if i > cursor >= i - 1:
                    state_at_cursor = ScanState.BLOCK_COMMENT
                if block_depth == 0:
                    state = ScanState.CODE
                continue
            emit(ch, True)
            i += 1
            continue

        if state is ScanState.DOLLAR_QUOTE:
            if text.startswith(dollar_close, i):
                emit(dollar_close, False)
                end = i + len(dollar_close)
                if i < cursor < end:
                    state_at_cursor = ScanState.DOLLAR_QUOTE
                i = end
                state = ScanState.CODE
                continue
            emit(ch, True)
            i += 1
            continue

        # Quoted literal or identifier
        closer = {"SINGLE_QUOTE": "'", "DOUBLE_QUOTE": '"', "BACKTICK": "`"}[state.name]
        hide = state in _MASKED_STATES
        hide_keywords = hide or state in _IDENTIFIER_STATES
        if ch == "\\" and state is ScanState.SINGLE_QUOTE and nxt:
            emit(ch + nxt, hide, hide_keywords)
            i += 2
            if i > cursor >= i - 1:
                state_at_cursor = state
            continue
        if ch == closer:
            if nxt == closer:
                # Doubled quote is an escaped quote
                emit(ch + nxt, hide, hide_keywords)
                i += 2
                if i > cursor >= i - 1:
                    state_at_cursor = state
                continue
            state = ScanState.CODE
            emit(ch, False)
            i += 1
            continue
        emit(ch, hide, hide_keywords)
        i += 1

    if cursor >= n:
        state_at_cursor = state

    return ScanResult(
        masked="".join(masked),
        in_string=state_at_cursor in _STRING_STATES,
        in_comment=state_at_cursor in _COMMENT_STATES,
        keywords_masked="".join(keywords_masked),
    )


def is_inside_string(text: str, cursor: int | None = None) -> bool:
    """Check if the cursor position is inside an unclosed string literal or quoted name."""
    return scan(text, len(text) if cursor is None else cursor).in_string


def is_inside_comment(text: str, cursor: int | None = None) -> bool:
    """Check if the cursor position is inside a line or block comment."""
    return scan(text, len(text) if cursor is None else cursor).in_comment


def get_current_word(text: str, cursor: int) -> str:
    """Get the run of word characters immediately before the cursor."""
    start = cursor
    while start > 0 and _WORD_CHARS.match(text[start - 1]):
        start -= 1
    return text[start:cursor]


def get_qualifier(text: str, cursor: int) -> str | None:
    """Get the identifier before a ``.`` that precedes the current word, if any."""
    i = cursor - len(get_current_word(text, cursor)) - 1
    if i < 0 or text[i] != ".":
        return None
    qualifier = get_current_word(text, i)
    return qualifier or None


def get_previous_token(text: str, pos: int) -> str | None:
    """Get the token ending before ``pos``, skipping whitespace.

    Tokens are runs of anything except whitespace, commas, parens and semicolons.
    """
    end = pos
    while end > 0 and text[end - 1].isspace():
        end -= 1
    start = end
    while start > 0 and not text[start - 1].isspace() and text[start - 1] not in ",();":
        start -= 1
    if start < end:
        return text[start:end]
    return None


def get_last_token_info(sql: str) -> tuple[str | None, str | None]:
    """Get the last meaningful token and its type using sqlparse.

    Args:
        sql: The SQL text to analyze

    Returns:
        Tuple of (token_value, token_type_string)
    """
    try:
        import sqlparse

        parsed = sqlparse.parse(sql)
        if not parsed:
            return None, None

        tokens = [t for t in parsed[0].flatten() if not t.is_whitespace]
        if not tokens:
            return None, None

        last = tokens[-1]
        ttype = str(last.ttype) if last.ttype else None
        return last.value, ttype
    except Exception:
        return None, None

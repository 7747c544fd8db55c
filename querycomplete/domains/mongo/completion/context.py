"""Structural context resolution for MongoDB JSON commands.

The text before the cursor is folded one character at a time into an
immutable ``ScanState``. The state keeps a stack of open ``{``/``[`` frames,
each tagged with the key that owns it, plus the last completed key and
whether a value is expected. Classification only looks at that final state,
so half-typed documents resolve the same way as complete ones.
"""

from __future__ import annotations

import logging
import re
from functools import partial, reduce
from typing import NamedTuple

from .core import Frame, MongoContext, MongoContextKind

_logger = logging.getLogger(__name__)

PIPELINE_KEYS = frozenset({"pipeline", "aggregate"})

QUERY_KEYS = frozenset({"find", "filter", "$match", "query"})

UPDATE_KEYS = frozenset({"update", "$set", "$unset", "$inc", "$push", "$pull", "$addToSet"})

PROJECTION_KEYS = frozenset({"projection", "$project", "fields"})

SORT_KEYS = frozenset({"sort", "$sort"})

GROUP_ACCUMULATOR_KEYS = frozenset(
    {
        "$sum",
        "$avg",
        "$min",
        "$max",
        "$first",
        "$last",
        "$push",
        "$addToSet",
        "$stdDevPop",
        "$stdDevSamp",
        "$count",
    }
)

PROJECT_STAGES = frozenset({"$project", "$addFields", "$set"})

# Kinds whose value positions take aggregation expressions
_EXPRESSION_KINDS = frozenset(
    {
        MongoContextKind.PROJECT_EXPR,
        MongoContextKind.STAGE_BODY,
        MongoContextKind.GROUP_ACCUMULATOR,
        MongoContextKind.GROUP,
    }
)

_WORD_BREAK = frozenset(' \t\r\n{}[]:,"')
_COLLECTION = re.compile(r'"collection"\s*:\s*"([^"]*)"')


class ScanState(NamedTuple):
    """Immutable parser state threaded through the fold."""

    frames: tuple[Frame, ...] = ()
    in_string: bool = False
    string_start: int = -1
    string_is_key: bool = False
    escaped: bool = False
    last_key: str | None = None
    current_key: str | None = None
    expecting_value: bool = False

    @property
    def at_key_position(self) -> bool:
        if self.expecting_value:
            return False
        return not self.frames or self.frames[-1].kind == "{"


def _step(text: str, state: ScanState, item: tuple[int, str]) -> ScanState:
    index, ch = item

    if state.in_string:
        if state.escaped:
            return state._replace(escaped=False)
        if ch == "\\":
            return state._replace(escaped=True)
        if ch == '"':
            if state.string_is_key:
                return state._replace(in_string=False, last_key=text[state.string_start + 1 : index])
            return state._replace(in_string=False)
        return state

    if ch == '"':
        return state._replace(
            in_string=True,
            string_start=index,
            string_is_key=state.at_key_position,
        )
    if ch in "{[":
        owner = state.current_key if state.expecting_value else None
        return state._replace(
            frames=state.frames + (Frame(ch, owner),),
            expecting_value=False,
            current_key=None,
            last_key=None,
        )
    if ch in "}]":
        return state._replace(
            frames=state.frames[:-1],
            expecting_value=False,
            current_key=None,
            last_key=None,
        )
    if ch == ":":
        return state._replace(expecting_value=True, current_key=state.last_key)
    if ch == ",":
        return state._replace(expecting_value=False, current_key=None, last_key=None)
    return state


def scan(text: str, cursor: int) -> ScanState:
    """Fold ``text[:cursor]`` into the parser state at the cursor."""
    return reduce(partial(_step, text), enumerate(text[:cursor]), ScanState())


def get_current_word(text: str, cursor: int) -> str:
    """Get the run of non-structural characters immediately before the cursor."""
    start = cursor
    while start > 0 and text[start - 1] not in _WORD_BREAK:
        start -= 1
    return text[start:cursor]


def find_collection(text: str) -> str | None:
    """Get the collection named by a ``"collection": "<name>"`` pair, if any."""
    match = _COLLECTION.search(text)
    if match and match.group(1):
        return match.group(1)
    return None


def find_pipeline_index(frames: tuple[Frame, ...]) -> int | None:
    """Index of the innermost open pipeline array.

    Pipelines are arrays owned by ``pipeline``/``aggregate`` keys (including
    ``$lookup`` and ``$unionWith`` sub-pipelines) and the arrays inside a
    ``$facet`` stage.
    """
    found = None
    for i, frame in enumerate(frames):
        if frame.kind != "[":
            continue
        if frame.key in PIPELINE_KEYS or (i > 0 and frames[i - 1].key == "$facet"):
            found = i
    return found


def _classify_group(inner: tuple[Frame, ...], state: ScanState) -> MongoContextKind:
    if not inner:
        key = state.current_key if state.expecting_value else None
        if key == "_id":
            return MongoContextKind.PROJECT_EXPR
        if key is None or key.startswith("$"):
            return MongoContextKind.GROUP
        return MongoContextKind.GROUP_ACCUMULATOR
    owner = inner[0].key or ""
    if owner == "_id":
        return MongoContextKind.PROJECT_EXPR
    if len(inner) == 1 and not state.expecting_value and not owner.startswith("$"):
        return MongoContextKind.GROUP_ACCUMULATOR
    return MongoContextKind.PROJECT_EXPR


def classify_pipeline(
    relative: tuple[Frame, ...], state: ScanState, path: tuple[str, ...]
) -> tuple[MongoContextKind, str | None]:
    """Classify a position inside a pipeline array.

    Args:
        relative: Frames opened after the pipeline array itself
        state: Final scan state
        path: Keys of all open frames

    Returns:
        Tuple of (kind, current stage name)
    """
    if not relative:
        return MongoContextKind.PIPELINE, None
    if len(relative) == 1:
        if state.expecting_value:
            return MongoContextKind.STAGE_BODY, state.current_key
        return MongoContextKind.STAGE, None

    stage = relative[1].key
    inner = relative[2:]
    if stage == "$group":
        return _classify_group(inner, state), stage
    if stage in PROJECT_STAGES:
        return MongoContextKind.PROJECT_EXPR, stage
    if stage == "$match":
        if "$expr" in path:
            return MongoContextKind.PROJECT_EXPR, stage
        return MongoContextKind.QUERY, stage
    if stage == "$sort":
        return MongoContextKind.SORT, stage
    return MongoContextKind.STAGE_BODY, stage


def classify_command(frames: tuple[Frame, ...], state: ScanState, path: tuple[str, ...]) -> MongoContextKind:
    """Classify a position outside any pipeline by the keys that own it."""
    if len(frames) <= 1:
        return MongoContextKind.ROOT
    if "$expr" in path:
        return MongoContextKind.PROJECT_EXPR

    last = path[-1] if path else None
    if last in QUERY_KEYS:
        return MongoContextKind.QUERY
    if last in UPDATE_KEYS:
        return MongoContextKind.UPDATE
    if last in PROJECTION_KEYS:
        return MongoContextKind.PROJECTION
    if last in SORT_KEYS:
        return MongoContextKind.SORT
    if last in GROUP_ACCUMULATOR_KEYS:
        return MongoContextKind.GROUP_ACCUMULATOR

    if state.expecting_value:
        return MongoContextKind.VALUE
    if any(key in QUERY_KEYS for key in path):
        return MongoContextKind.QUERY
    if any(key in UPDATE_KEYS for key in path):
        return MongoContextKind.UPDATE
    return MongoContextKind.UNKNOWN


def get_context(text: str, cursor: int) -> MongoContext:
    """Resolve the MongoDB context at ``cursor``; never raises for any input."""
    cursor = max(0, min(cursor, len(text)))
    state = scan(text, cursor)
    frames = state.frames
    path = tuple(frame.key for frame in frames if frame.key)

    pipeline_index = find_pipeline_index(frames)
    if pipeline_index is None:
        kind = classify_command(frames, state, path)
        stage = None
    else:
        kind, stage = classify_pipeline(frames[pipeline_index + 1 :], state, path)

    expecting_value = state.expecting_value or bool(frames and frames[-1].kind == "[")

    if state.in_string:
        word = text[state.string_start + 1 : cursor]
        insert_from = state.string_start
        completable = state.string_is_key or word.startswith("$")
    else:
        word = get_current_word(text, cursor)
        insert_from = cursor - len(word)
        completable = False

    expects_field_path = "$expr" in path or (kind in _EXPRESSION_KINDS and expecting_value)

    context = MongoContext(
        kind=kind,
        current_word=word,
        cursor=cursor,
        insert_from=insert_from,
        path=path,
        depth=len(frames),
        in_string=state.in_string,
        string_completable=completable,
        expecting_value=expecting_value,
        current_key=state.current_key if state.expecting_value else None,
        in_array=any(frame.kind == "[" for frame in frames),
        in_pipeline=pipeline_index is not None,
        current_stage=stage,
        expects_field_path=expects_field_path,
        collection=find_collection(text),
    )
    _logger.debug(
        "MongoDB context at %d: %s path=%s stage=%s",
        cursor,
        kind.value,
        "/".join(path),
        stage,
    )
    return context

"""Main MongoDB completion engine.

Resolves the JSON context at the cursor, runs the handler for its kind and
ranks the merged candidates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from querycomplete.shared.core.ranking import (
    Bucket,
    Completion,
    CompletionKind,
    CompletionLimits,
    CompletionResult,
    apply_smart_limits,
    dedupe,
)

from . import generators as gen
from .context import get_context
from .core import MongoContext, MongoContextKind, MongoMetadata
from .snippets import BOOLEAN_PROPERTIES

_logger = logging.getLogger(__name__)

Handler = Callable[[MongoContext, MongoMetadata, bool], list[Completion]]


def _wants_operator(context: MongoContext) -> bool:
    return not context.expecting_value or context.current_word.startswith("$")


def _root(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    if context.expecting_value:
        if context.current_key == "collection":
            return gen.collection_completions(context, metadata, word)
        if context.current_key in BOOLEAN_PROPERTIES:
            return gen.boolean_completions(context, metadata, word)
        return []
    candidates = gen.property_completions(context, metadata, word)
    if explicit or len(word) >= 2 or context.depth == 0:
        candidates.extend(gen.snippet_completions(context, metadata, word))
    return candidates


def _stages(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    return gen.stage_completions(context, metadata, context.current_word)


def _expression(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    if context.expecting_value or word.startswith("$"):
        return (
            gen.expression_completions(context, metadata, word)
            + gen.field_path_completions(context, metadata, word)
            + gen.variable_completions(context, metadata, word)
        )
    return gen.field_completions(context, metadata, word)


def _group(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    if context.expecting_value:
        return _expression(context, metadata, explicit)
    return gen.group_key_completions(context, metadata, word) + gen.field_completions(context, metadata, word)


def _accumulators(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    return gen.accumulator_completions(context, metadata, context.current_word)


def _query(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    candidates = []
    if _wants_operator(context):
        candidates.extend(gen.operator_completions(context, metadata, word))
    if context.expecting_value:
        candidates.extend(gen.literal_completions(context, metadata, word))
    else:
        candidates.extend(gen.field_completions(context, metadata, word))
    return candidates


def _update(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    if context.parent_key == "update":
        if _wants_operator(context):
            return gen.update_operator_completions(context, metadata, word)
        return []
    if context.expecting_value:
        return gen.literal_completions(context, metadata, word)
    return gen.field_completions(context, metadata, word)


def _sort(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    if context.expecting_value:
        return gen.sort_value_completions(context, metadata, context.current_word)
    return gen.field_completions(context, metadata, context.current_word)


def _projection(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    if context.expecting_value:
        return gen.projection_value_completions(context, metadata, context.current_word)
    return gen.field_completions(context, metadata, context.current_word)


def _value(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    candidates = gen.literal_completions(context, metadata, word)
    if context.expects_field_path:
        candidates.extend(gen.field_path_completions(context, metadata, word))
    return candidates


def _unknown(context: MongoContext, metadata: MongoMetadata, explicit: bool) -> list[Completion]:
    word = context.current_word
    candidates = []
    if word.startswith("$"):
        candidates.extend(gen.operator_completions(context, metadata, word))
    if context.expects_field_path:
        candidates.extend(gen.field_path_completions(context, metadata, word))
    else:
        candidates.extend(gen.field_completions(context, metadata, word))
    return candidates


# One handler per context kind; a missing entry is a bug caught by the tests
HANDLERS: dict[MongoContextKind, Handler] = {
    MongoContextKind.ROOT: _root,
    MongoContextKind.PIPELINE: _stages,
    MongoContextKind.STAGE: _stages,
    MongoContextKind.STAGE_BODY: _expression,
    MongoContextKind.PROJECT_EXPR: _expression,
    MongoContextKind.GROUP: _group,
    MongoContextKind.GROUP_ACCUMULATOR: _accumulators,
    MongoContextKind.QUERY: _query,
    MongoContextKind.UPDATE: _update,
    MongoContextKind.SORT: _sort,
    MongoContextKind.PROJECTION: _projection,
    MongoContextKind.VALUE: _value,
    MongoContextKind.UNKNOWN: _unknown,
}

_BUCKETS = {
    CompletionKind.FIELD: Bucket.COLUMN,
    CompletionKind.FIELD_PATH: Bucket.COLUMN,
    CompletionKind.COLLECTION: Bucket.TABLE,
    CompletionKind.STAGE: Bucket.FUNCTION,
    CompletionKind.ACCUMULATOR: Bucket.FUNCTION,
    CompletionKind.EXPRESSION: Bucket.FUNCTION,
    CompletionKind.OPERATOR: Bucket.KEYWORD,
    CompletionKind.KEYWORD: Bucket.KEYWORD,
    CompletionKind.PROPERTY: Bucket.KEYWORD,
}


def bucket_of(kind: CompletionKind) -> Bucket:
    return _BUCKETS.get(kind, Bucket.OTHER)


def get_completions(
    context: MongoContext,
    metadata: MongoMetadata | None = None,
    explicit: bool = False,
    limits: CompletionLimits | None = None,
) -> list[Completion]:
    """Generate, dedupe and limit candidates for a resolved context.

    Inside a plain string value nothing is returned unless ``explicit`` is set.
    Key strings and ``$``-prefixed strings are completed normally.
    """
    metadata = metadata or MongoMetadata()
    if context.opaque and not explicit:
        return []

    candidates = dedupe(HANDLERS[context.kind](context, metadata, explicit))
    limited = apply_smart_limits(candidates, context.current_word, bucket_of, limits)
    _logger.debug(
        "MongoDB completions for %s: %d generated, %d kept",
        context.kind.value,
        len(candidates),
        len(limited),
    )
    return limited


def complete(
    text: str,
    cursor: int,
    metadata: MongoMetadata | dict[str, Any] | None = None,
    explicit: bool = False,
    limits: CompletionLimits | None = None,
) -> CompletionResult:
    """Complete the MongoDB JSON command token at ``cursor``.

    Args:
        text: The full JSON command document
        cursor: Cursor offset; clamped into ``[0, len(text)]``
        metadata: Collection snapshot, or a JSON-style dict for ``MongoMetadata.from_dict``
        explicit: True when the user asked for completions
        limits: Result caps; defaults apply when omitted

    Returns:
        CompletionResult whose ``insert_from`` is the start of the typed word,
        or the opening quote when the cursor is inside a string.
    """
    if isinstance(metadata, dict):
        metadata = MongoMetadata.from_dict(metadata)
    context = get_context(text, cursor)
    candidates = get_completions(context, metadata, explicit=explicit, limits=limits)
    return CompletionResult(context.insert_from, candidates, context)

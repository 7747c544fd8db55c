"""Main SQL completion engine.

Orchestrates context detection, candidate generation and ranking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
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
from .core import Boost, ExpectedType, SqlContext, SqlMetadata

_logger = logging.getLogger(__name__)

Generator = Callable[[SqlContext, SqlMetadata, str], list[Completion]]

# One entry per expected type; a missing entry is a bug caught by the tests
GENERATORS: dict[ExpectedType, tuple[Generator, ...]] = {
    ExpectedType.COLUMN: (gen.column_completions, gen.keyword_completions),
    ExpectedType.COLUMN_OR_EXPRESSION: (
        gen.column_completions,
        gen.function_completions,
        gen.keyword_completions,
        gen.alias_completions,
    ),
    ExpectedType.TABLE_OR_SCHEMA: (
        gen.table_completions,
        gen.schema_completions,
        gen.cte_completions,
        gen.keyword_completions,
    ),
    ExpectedType.JOIN_CONDITION: (
        gen.join_condition_completions,
        gen.column_completions,
        gen.alias_completions,
    ),
    ExpectedType.OPERATOR: (gen.operator_completions,),
    ExpectedType.VALUE: (gen.value_completions, gen.function_completions, gen.column_completions),
    ExpectedType.KEYWORD: (gen.keyword_completions, gen.snippet_completions),
    ExpectedType.DATA_TYPE: (gen.data_type_completions,),
    ExpectedType.FUNCTION: (gen.function_completions,),
    ExpectedType.ANY: (
        gen.column_completions,
        gen.table_completions,
        gen.schema_completions,
        gen.function_completions,
        gen.keyword_completions,
        gen.snippet_completions,
    ),
}

_BUCKETS = {
    CompletionKind.COLUMN: Bucket.COLUMN,
    CompletionKind.TABLE: Bucket.TABLE,
    CompletionKind.CTE: Bucket.TABLE,
    CompletionKind.FUNCTION: Bucket.FUNCTION,
    CompletionKind.KEYWORD: Bucket.KEYWORD,
}


def bucket_of(kind: CompletionKind) -> Bucket:
    return _BUCKETS.get(kind, Bucket.OTHER)


def _boost_exact(candidates: list[Completion], prefix: str) -> list[Completion]:
    if not prefix:
        return candidates
    prefix_lower = prefix.lower()
    return [
        replace(c, boost=Boost.EXACT_MATCH) if c.label.lower() == prefix_lower else c
        for c in candidates
    ]


def get_completions(
    context: SqlContext,
    metadata: SqlMetadata | None = None,
    explicit: bool = False,
    limits: CompletionLimits | None = None,
) -> list[Completion]:
    """Generate, merge, dedupe and limit candidates for a resolved context.

    Inside a string or comment nothing is returned unless ``explicit`` is set,
    in which case the generic candidate set is offered.
    """
    metadata = metadata or SqlMetadata()
    prefix = context.current_word

    if context.opaque:
        if not explicit:
            return []
        context = replace(context, expected_type=ExpectedType.ANY)

    if context.resolved_qualifier is not None:
        candidates = gen.qualified_completions(context, metadata, prefix)
    else:
        candidates = []
        for generator in GENERATORS[context.expected_type]:
            candidates.extend(generator(context, metadata, prefix))

    candidates = dedupe(_boost_exact(candidates, prefix))
    limited = apply_smart_limits(candidates, prefix, bucket_of, limits)
    _logger.debug(
        "SQL completions for %s: %d generated, %d kept",
        context.expected_type.value,
        len(candidates),
        len(limited),
    )
    return limited


def complete(
    text: str,
    cursor: int,
    metadata: SqlMetadata | dict[str, Any] | None = None,
    explicit: bool = False,
    limits: CompletionLimits | None = None,
) -> CompletionResult:
    """Complete the SQL token at ``cursor``.

    Args:
        text: The full SQL document
        cursor: Cursor offset; clamped into ``[0, len(text)]``
        metadata: Schema snapshot, or a JSON-style dict for ``SqlMetadata.from_dict``
        explicit: True when the user asked for completions (e.g. Ctrl+Space)
        limits: Result caps; defaults apply when omitted

    Returns:
        CompletionResult whose ``insert_from`` marks the start of the typed word.
        An empty candidate list means the editor should fall back to its default.
    """
    if isinstance(metadata, dict):
        metadata = SqlMetadata.from_dict(metadata)
    context = get_context(text, cursor)
    candidates = get_completions(context, metadata, explicit=explicit, limits=limits)
    return CompletionResult(context.insert_from, candidates, context)

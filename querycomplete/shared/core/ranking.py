"""Ranking and limiting shared by the SQL and MongoDB completion pipelines.

Every generator emits ``Completion`` values with a boost. The provider merges
them, drops duplicates by (label, kind) and hands the result to
``apply_smart_limits`` which keeps the list small enough for an editor popup.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, NamedTuple


class CompletionKind(Enum):
    """Kinds of completion candidates across both query languages."""

    COLUMN = "column"
    TABLE = "table"
    SCHEMA = "schema"
    CTE = "cte"
    ALIAS = "alias"
    FUNCTION = "function"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    DATA_TYPE = "data_type"
    VALUE = "value"
    SNIPPET = "snippet"
    JOIN = "join"  # FK-derived join condition
    FIELD = "field"
    FIELD_PATH = "field_path"  # "$field" reference
    COLLECTION = "collection"
    STAGE = "stage"
    ACCUMULATOR = "accumulator"
    EXPRESSION = "expression"
    VARIABLE = "variable"
    PROPERTY = "property"  # top-level command key


class Bucket(Enum):
    """Limit buckets used when the typed prefix is short."""

    COLUMN = "column"
    TABLE = "table"
    FUNCTION = "function"
    KEYWORD = "keyword"
    OTHER = "other"


@dataclass(frozen=True)
class Completion:
    """A single ranked completion candidate."""

    label: str
    kind: CompletionKind
    detail: str | None = None
    info: str | None = None
    boost: int = 0
    insert_text: str | None = None

    @property
    def text(self) -> str:
        """Text the editor should insert."""
        return self.insert_text if self.insert_text is not None else self.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind.value,
            "detail": self.detail,
            "info": self.info,
            "boost": self.boost,
            "insertText": self.text,
        }


class CompletionResult(NamedTuple):
    """Result of one completion request.

    ``insert_from`` is the offset where the partial token begins; the editor
    replaces ``[insert_from, cursor)`` with the chosen candidate's text.
    """

    insert_from: int
    candidates: list[Completion]
    context: Any = None


@dataclass(frozen=True)
class CompletionLimits:
    """Caps applied to a merged candidate list."""

    max_total: int = 50
    max_columns: int = 30
    max_tables: int = 20
    max_functions: int = 25
    max_keywords: int = 20
    max_other: int = 10
    min_prefix_for_all: int = 2
    show_all_total: int = 100

    @classmethod
    def from_settings(cls, values: dict[str, Any] | None) -> CompletionLimits:
        """Build limits from a settings dict, ignoring unknown or invalid entries."""
        if not isinstance(values, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        overrides: dict[str, int] = {}
        for key, value in values.items():
            if key not in known:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                continue
            overrides[key] = value
        return cls(**overrides)

    def cap_for(self, bucket: Bucket) -> int:
        if bucket is Bucket.COLUMN:
            return self.max_columns
        if bucket is Bucket.TABLE:
            return self.max_tables
        if bucket is Bucket.FUNCTION:
            return self.max_functions
        if bucket is Bucket.KEYWORD:
            return self.max_keywords
        return self.max_other


DEFAULT_LIMITS = CompletionLimits()


def matches_prefix(label: str, prefix: str) -> bool:
    """Case-insensitive prefix test; an empty prefix matches everything."""
    if not prefix:
        return True
    return label.lower().startswith(prefix.lower())


def dedupe(candidates: Iterable[Completion]) -> list[Completion]:
    """Drop duplicates by (label, kind), keeping the highest boost.

    The surviving candidate takes the position of the first occurrence.
    """
    order: list[tuple[str, CompletionKind]] = []
    best: dict[tuple[str, CompletionKind], Completion] = {}
    for candidate in candidates:
        key = (candidate.label, candidate.kind)
        current = best.get(key)
        if current is None:
            order.append(key)
            best[key] = candidate
        elif candidate.boost > current.boost:
            best[key] = candidate
    return [best[key] for key in order]


def _by_boost(candidates: list[Completion]) -> list[Completion]:
    # sorted() is stable, so equal boosts keep generator order
    return sorted(candidates, key=lambda c: -c.boost)


def apply_smart_limits(
    candidates: list[Completion],
    prefix: str,
    bucket_of: Callable[[CompletionKind], Bucket],
    limits: CompletionLimits | None = None,
) -> list[Completion]:
    """Cap a deduplicated candidate list and order it by boost.

    With a prefix of at least ``min_prefix_for_all`` characters the user is
    filtering on purpose, so a larger list capped at ``show_all_total`` is
    returned. Otherwise each bucket keeps its best entries up to its cap and
    the merged list is capped at ``max_total``.
    """
    limits = limits or DEFAULT_LIMITS

    if len(prefix) >= limits.min_prefix_for_all:
        return _by_boost(candidates[: limits.show_all_total])

    buckets: dict[Bucket, list[Completion]] = {}
    for candidate in _by_boost(candidates):
        buckets.setdefault(bucket_of(candidate.kind), []).append(candidate)

    limited: list[Completion] = []
    for bucket in Bucket:
        limited.extend(buckets.get(bucket, [])[: limits.cap_for(bucket)])

    return _by_boost(limited)[: limits.max_total]

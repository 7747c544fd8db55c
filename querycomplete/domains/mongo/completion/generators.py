"""MongoDB candidate generators.

Generators take the resolved context, the metadata snapshot and the typed
prefix. Operator-style names are matched with their leading ``$`` ignored so
that ``g`` and ``$g`` both find ``$gt``.
"""

from __future__ import annotations

from collections.abc import Iterator

from querycomplete.shared.core.ranking import Completion, CompletionKind, matches_prefix

from .core import Boost, FieldInfo, MongoContext, MongoMetadata
from .operators import ALL_QUERY_OPERATORS, ALL_UPDATE_OPERATORS, MongoOperator
from .snippets import MONGO_SNIPPETS, ROOT_PROPERTIES
from .stages import (
    ALL_ACCUMULATORS,
    ALL_EXPRESSIONS,
    ALL_STAGES,
    SYSTEM_VARIABLES,
    AggregationEntry,
)

MAX_FIELDS = 20
MAX_COLLECTIONS = 15
MAX_EXPRESSIONS_WITHOUT_PREFIX = 30


def strip_dollar(value: str) -> str:
    return value[1:] if value.startswith("$") else value


def matches_operator(name: str, prefix: str) -> bool:
    """Prefix match that ignores one leading ``$`` on both sides."""
    return strip_dollar(name).lower().startswith(strip_dollar(prefix).lower())


def _entry_info(entry: AggregationEntry | MongoOperator) -> str:
    return f"{entry.description}\n\n{entry.syntax}\n{entry.example}"


def property_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return [
        Completion(
            label=prop.name,
            kind=CompletionKind.PROPERTY,
            detail=prop.detail,
            info=prop.info,
            boost=Boost.OPERATOR,
            insert_text=f'"{prop.name}": ',
        )
        for prop in ROOT_PROPERTIES
        if matches_prefix(prop.name, prefix)
    ]


def snippet_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    prefix_lower = prefix.lower()
    return [
        Completion(
            label=snippet.label,
            kind=CompletionKind.SNIPPET,
            detail=snippet.detail,
            info=snippet.info,
            boost=Boost.SNIPPET,
            insert_text=snippet.text,
        )
        for snippet in MONGO_SNIPPETS
        if prefix_lower in snippet.label.lower()
    ]


def collection_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    """Collections containing ``prefix`` anywhere in the name."""
    prefix_lower = prefix.lower()
    matches = [c for c in metadata.collections if prefix_lower in c.lower()]
    return [
        Completion(
            label=name,
            kind=CompletionKind.COLLECTION,
            detail="Collection",
            boost=Boost.COLLECTION,
            insert_text=f'"{name}"',
        )
        for name in matches[:MAX_COLLECTIONS]
    ]


def operator_completions(
    context: MongoContext,
    metadata: MongoMetadata,
    prefix: str,
    update: bool = False,
) -> list[Completion]:
    operators = ALL_UPDATE_OPERATORS if update else ALL_QUERY_OPERATORS
    return [
        Completion(
            label=op.name,
            kind=CompletionKind.OPERATOR,
            detail=f"{op.category} operator",
            info=_entry_info(op),
            boost=Boost.OPERATOR,
            insert_text=f'"{op.name}": ',
        )
        for op in operators
        if matches_operator(op.name, prefix)
    ]


def update_operator_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return operator_completions(context, metadata, prefix, update=True)


def stage_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    """Stage names; a bare pipeline position gets the whole ``{ "$stage": {} }`` object."""
    wrap = context.in_pipeline and context.current_stage is None and context.expecting_value
    candidates = []
    for stage in ALL_STAGES:
        if not matches_operator(stage.name, prefix):
            continue
        insert = f'{{ "{stage.name}": {{}} }}' if wrap else f'"{stage.name}": '
        candidates.append(
            Completion(
                label=stage.name,
                kind=CompletionKind.STAGE,
                detail=f"{stage.category} stage",
                info=_entry_info(stage),
                boost=Boost.STAGE,
                insert_text=insert,
            )
        )
    return candidates


def accumulator_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    candidates = []
    for acc in ALL_ACCUMULATORS:
        if not matches_operator(acc.name, prefix):
            continue
        if context.expecting_value:
            insert = f'{{ "{acc.name}": "$" }}'
        else:
            insert = f'"{acc.name}": '
        candidates.append(
            Completion(
                label=acc.name,
                kind=CompletionKind.ACCUMULATOR,
                detail=f"{acc.category} accumulator",
                info=_entry_info(acc),
                boost=Boost.ACCUMULATOR,
                insert_text=insert,
            )
        )
    return candidates


def expression_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    if strip_dollar(prefix):
        expressions = [e for e in ALL_EXPRESSIONS if matches_operator(e.name, prefix)]
    else:
        expressions = list(ALL_EXPRESSIONS[:MAX_EXPRESSIONS_WITHOUT_PREFIX])
    candidates = []
    for expr in expressions:
        if context.expecting_value:
            insert = f'{{ "{expr.name}": '
        else:
            insert = f'"{expr.name}": '
        candidates.append(
            Completion(
                label=expr.name,
                kind=CompletionKind.EXPRESSION,
                detail=f"{expr.category} expression",
                info=_entry_info(expr),
                boost=Boost.EXPRESSION,
                insert_text=insert,
            )
        )
    return candidates


def _field_paths(fields: tuple[FieldInfo, ...], parent: str = "") -> Iterator[tuple[str, FieldInfo]]:
    for info in fields:
        path = f"{parent}.{info.name}" if parent else info.name
        yield path, info
        if info.nested_fields:
            yield from _field_paths(info.nested_fields, path)


def _field_candidates(
    context: MongoContext,
    metadata: MongoMetadata,
    prefix: str,
    as_path: bool,
) -> list[Completion]:
    """Expand the whole field tree, then keep the first matches.

    Matching is a substring test with the leading ``$`` ignored, and happens
    after full expansion so nested fields compete with top-level ones.
    """
    needle = strip_dollar(prefix).lower()
    seen: set[str] = set()
    candidates = []
    for path, info in _field_paths(metadata.fields_for(context.collection)):
        if path in seen or needle not in path.lower():
            continue
        seen.add(path)
        detail = f"{info.type}[]" if info.is_array else info.type
        if as_path:
            candidate = Completion(
                label=f"${path}",
                kind=CompletionKind.FIELD_PATH,
                detail=detail,
                boost=Boost.FIELD_PATH,
                insert_text=f'"${path}"',
            )
        else:
            candidate = Completion(
                label=path,
                kind=CompletionKind.FIELD,
                detail=detail,
                boost=Boost.FIELD,
                insert_text=f'"{path}": ',
            )
        candidates.append(candidate)
        if len(candidates) >= MAX_FIELDS:
            break
    return candidates


def field_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _field_candidates(context, metadata, prefix, as_path=False)


def field_path_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _field_candidates(context, metadata, prefix, as_path=True)


def variable_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    prefix_lower = prefix.lower()
    return [
        Completion(
            label=var.name,
            kind=CompletionKind.VARIABLE,
            detail="System variable",
            info=var.description,
            boost=Boost.VARIABLE,
            insert_text=f'"{var.name}"',
        )
        for var in SYSTEM_VARIABLES
        if prefix_lower in var.name.lower()
    ]


def group_key_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    if not matches_prefix("_id", prefix):
        return []
    return [
        Completion(
            label="_id",
            kind=CompletionKind.PROPERTY,
            detail="Group key",
            boost=Boost.OPERATOR,
            insert_text='"_id": ',
        )
    ]


def _value_set(prefix: str, values: tuple[tuple[str, str], ...]) -> list[Completion]:
    return [
        Completion(label=label, kind=CompletionKind.VALUE, detail=detail, boost=Boost.VALUE)
        for label, detail in values
        if matches_prefix(label, prefix)
    ]


def literal_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _value_set(prefix, (("true", "Boolean"), ("false", "Boolean"), ("null", "Null")))


def boolean_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _value_set(prefix, (("true", "Boolean"), ("false", "Boolean")))


def sort_value_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _value_set(prefix, (("1", "Ascending"), ("-1", "Descending")))


def projection_value_completions(context: MongoContext, metadata: MongoMetadata, prefix: str) -> list[Completion]:
    return _value_set(prefix, (("1", "Include"), ("0", "Exclude")))

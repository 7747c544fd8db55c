"""Core MongoDB completion types.

Context kinds, the resolved cursor context and the caller-supplied metadata
snapshot (collections and sampled field trees).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from querycomplete.domains.sql.completion.core import MetadataError


class MongoContextKind(Enum):
    """Where the cursor sits inside a MongoDB JSON command."""

    ROOT = "root"
    PIPELINE = "pipeline"
    STAGE = "stage"
    STAGE_BODY = "stage_body"
    GROUP = "group"
    GROUP_ACCUMULATOR = "group_accumulator"
    PROJECT_EXPR = "project_expr"
    QUERY = "query"
    UPDATE = "update"
    PROJECTION = "projection"
    SORT = "sort"
    VALUE = "value"
    UNKNOWN = "unknown"


class Boost:
    """Ranking weights for MongoDB candidates (higher = more relevant)."""

    OPERATOR = 100
    STAGE = 95
    ACCUMULATOR = 90
    EXPRESSION = 85
    FIELD = 80
    FIELD_PATH = 78
    COLLECTION = 75
    SNIPPET = 70
    VARIABLE = 65
    VALUE = 60


class Frame(NamedTuple):
    """One open ``{`` or ``[`` and the key whose value it is (None in arrays and at root)."""

    kind: str
    key: str | None = None


@dataclass(frozen=True)
class MongoContext:
    """Classified cursor position for the MongoDB pipeline."""

    kind: MongoContextKind
    current_word: str
    cursor: int
    insert_from: int
    path: tuple[str, ...] = ()
    depth: int = 0
    in_string: bool = False
    string_completable: bool = False
    expecting_value: bool = False
    current_key: str | None = None
    in_array: bool = False
    in_pipeline: bool = False
    current_stage: str | None = None
    expects_field_path: bool = False
    collection: str | None = None

    @property
    def opaque(self) -> bool:
        """True when the cursor sits inside a plain string value."""
        return self.in_string and not self.string_completable

    @property
    def parent_key(self) -> str | None:
        return self.path[-1] if self.path else None

    def summary(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": list(self.path),
            "currentWord": self.current_word,
            "currentKey": self.current_key,
            "depth": self.depth,
            "inString": self.in_string,
            "expectingValue": self.expecting_value,
            "inPipeline": self.in_pipeline,
            "currentStage": self.current_stage,
            "expectsFieldPath": self.expects_field_path,
            "collection": self.collection,
        }


# ---------------------------------------------------------------------------
# Metadata snapshot supplied by the caller
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldInfo:
    """A sampled document field; ``nested_fields`` recurse to any depth."""

    name: str
    type: str = "mixed"
    is_array: bool = False
    nested_fields: tuple[FieldInfo, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> FieldInfo:
        if isinstance(data, str):
            return cls(name=data)
        if not isinstance(data, dict) or not data.get("name"):
            raise MetadataError(f"Field entry needs a name: {data!r}")
        nested = data.get("nestedFields", data.get("nested_fields")) or []
        return cls(
            name=str(data["name"]),
            type=str(data.get("type") or "mixed"),
            is_array=bool(data.get("isArray", data.get("is_array", False))),
            nested_fields=tuple(cls.from_dict(n) for n in nested),
        )


@dataclass(frozen=True)
class MongoMetadata:
    """Read-only collection snapshot for one completion request."""

    collections: tuple[str, ...] = ()
    fields: dict[str, tuple[FieldInfo, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MongoMetadata:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise MetadataError("MongoDB metadata must be an object")
        raw_fields = data.get("fields") or {}
        if not isinstance(raw_fields, dict):
            raise MetadataError("fields must map collection names to field lists")
        return cls(
            collections=tuple(str(c) for c in data.get("collections") or []),
            fields={
                str(name): tuple(FieldInfo.from_dict(f) for f in entries or [])
                for name, entries in raw_fields.items()
            },
        )

    def fields_for(self, collection: str | None = None) -> tuple[FieldInfo, ...]:
        """Fields of one collection, or of every collection when it is unknown."""
        if collection:
            for name, entries in self.fields.items():
                if name.lower() == collection.lower():
                    return entries
        merged: list[FieldInfo] = []
        for entries in self.fields.values():
            merged.extend(entries)
        return tuple(merged)

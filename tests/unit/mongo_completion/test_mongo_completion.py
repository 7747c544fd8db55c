"""Tests for MongoDB candidate generation and the complete() entry point."""

import pytest

from querycomplete.mongo_completion import (
    HANDLERS,
    MongoContextKind,
    MongoMetadata,
    bucket_of,
    complete,
    get_completions,
    get_context,
)
from querycomplete.shared.core.ranking import Bucket, CompletionKind


def _complete(text, metadata=None, **kwargs):
    return complete(text, len(text), metadata, **kwargs)


def _labels(result):
    return [c.label for c in result.candidates]


def _by_label(result, label):
    return next(c for c in result.candidates if c.label == label)


class TestDispatch:
    """Tests for the context-kind handler table."""

    def test_every_kind_has_a_handler(self):
        assert set(HANDLERS) == set(MongoContextKind)

    @pytest.mark.parametrize(
        ("kind", "bucket"),
        [
            (CompletionKind.FIELD, Bucket.COLUMN),
            (CompletionKind.FIELD_PATH, Bucket.COLUMN),
            (CompletionKind.COLLECTION, Bucket.TABLE),
            (CompletionKind.STAGE, Bucket.FUNCTION),
            (CompletionKind.OPERATOR, Bucket.KEYWORD),
            (CompletionKind.VALUE, Bucket.OTHER),
        ],
    )
    def test_buckets(self, kind, bucket):
        assert bucket_of(kind) == bucket


class TestRootCompletions:
    """Tests for top-level command keys and values."""

    def test_root_properties(self):
        result = _complete('{"')
        labels = _labels(result)
        assert {"collection", "find", "pipeline", "update"} <= set(labels)
        assert _by_label(result, "find").text == '"find": '

    def test_root_property_prefix(self):
        result = _complete('{"pro')
        assert "projection" in _labels(result)
        assert "find" not in _labels(result)

    def test_snippets_in_empty_document(self):
        result = complete("", 0)
        assert any(c.kind == CompletionKind.SNIPPET for c in result.candidates)

    def test_snippets_with_explicit_request(self):
        result = _complete('{"', explicit=True)
        assert any(c.kind == CompletionKind.SNIPPET for c in result.candidates)

    def test_collection_values(self, mongo_metadata):
        result = _complete('{"collection": ', mongo_metadata)
        assert set(_labels(result)) == {"users", "orders", "user_sessions"}
        assert _by_label(result, "users").text == '"users"'

    def test_collection_substring_match_on_explicit_request(self, mongo_metadata):
        """Collection names match anywhere, not only at the start."""
        text = '{"collection": "ses'
        result = _complete(text, mongo_metadata, explicit=True)
        assert _labels(result) == ["user_sessions"]
        assert result.insert_from == text.index('"ses')

    def test_plain_string_value_is_suppressed(self, mongo_metadata):
        result = _complete('{"collection": "us', mongo_metadata)
        assert result.candidates == []

    def test_boolean_property_values(self):
        result = _complete('{"update": {}, "upsert": ')
        assert _labels(result) == ["true", "false"]


class TestPipelineCompletions:
    """Tests for stages, accumulators and expressions."""

    def test_stage_objects_in_pipeline(self):
        result = _complete('{"pipeline": [')
        match = _by_label(result, "$match")
        assert match.kind == CompletionKind.STAGE
        assert match.text == '{ "$match": {} }'

    def test_stage_keys_inside_object(self):
        result = _complete('{"pipeline": [{"$ma')
        assert _labels(result) == ["$match"]
        assert _by_label(result, "$match").text == '"$match": '

    def test_stage_prefix_without_dollar(self):
        result = _complete('{"pipeline": [{"gro')
        assert "$group" in _labels(result)

    def test_group_accumulators(self):
        text = '{"aggregate": "orders", "pipeline": [{"$group": {"_id": "$status", "total": {"'
        result = _complete(text)
        labels = _labels(result)
        assert {"$sum", "$avg", "$push"} <= set(labels)
        assert not any(c.kind == CompletionKind.STAGE for c in result.candidates)

    def test_accumulator_object_at_value_position(self):
        result = _complete('{"pipeline": [{"$group": {"_id": null, "total": ')
        assert _by_label(result, "$sum").text == '{ "$sum": "$" }'

    def test_group_key_position_offers_id(self, mongo_metadata):
        result = _complete('{"pipeline": [{"$group": {"', mongo_metadata)
        labels = _labels(result)
        assert labels[0] == "_id"
        assert "status" in labels

    def test_project_value_offers_expressions_and_paths(self, mongo_metadata):
        result = _complete('{"collection": "orders", "pipeline": [{"$project": {"x": ', mongo_metadata)
        kinds = {c.kind for c in result.candidates}
        assert CompletionKind.EXPRESSION in kinds
        assert CompletionKind.FIELD_PATH in kinds
        assert CompletionKind.VARIABLE in kinds
        assert "$amount" in _labels(result)

    def test_field_path_in_dollar_string(self, mongo_metadata):
        result = _complete('{"collection": "users", "pipeline": [{"$project": {"x": "$na', mongo_metadata)
        name = _by_label(result, "$name")
        assert name.kind == CompletionKind.FIELD_PATH
        assert name.text == '"$name"'

    def test_expression_prefix(self):
        result = _complete('{"pipeline": [{"$project": {"x": {"$conc')
        assert "$concat" in _labels(result)

    def test_system_variables(self):
        result = _complete('{"pipeline": [{"$project": {"x": "$$R')
        assert "$$ROOT" in _labels(result)
        assert "$$REMOVE" in _labels(result)

    def test_facet_sub_pipeline_offers_stages(self):
        result = _complete('{"pipeline": [{"$facet": {"byStatus": [')
        assert "$match" in _labels(result)


class TestQueryCompletions:
    """Tests for find filters and $match bodies."""

    def test_query_operators(self):
        """$g inside a filter suggests $gt and $gte but not $lt."""
        text = '{"find": "users", "filter": {"age": {"$g'
        result = _complete(text)
        labels = _labels(result)
        assert "$gt" in labels
        assert "$gte" in labels
        assert "$lt" not in labels
        assert result.insert_from == text.index('"$g')
        assert _by_label(result, "$gt").text == '"$gt": '

    def test_query_operators_compact_find(self):
        labels = _labels(_complete('{"find":{"age":{"$g'))
        assert {"$gt", "$gte"} <= set(labels)
        assert "$lt" not in labels

    def test_query_fields(self, mongo_metadata):
        result = _complete('{"collection": "users", "filter": {"', mongo_metadata)
        labels = _labels(result)
        assert "age" in labels
        assert "address.city" in labels
        assert "status" not in labels

    def test_unknown_collection_merges_fields(self, mongo_metadata):
        result = _complete('{"filter": {"', mongo_metadata)
        labels = _labels(result)
        assert "age" in labels
        assert "status" in labels
        assert labels.count("_id") == 1

    def test_nested_field_substring(self, mongo_metadata):
        result = _complete('{"collection": "users", "filter": {"cit', mongo_metadata)
        assert _labels(result)[0] == "address.city"

    def test_array_field_detail(self, mongo_metadata):
        result = _complete('{"collection": "users", "filter": {"tag', mongo_metadata)
        assert _by_label(result, "tags").detail == "string[]"

    def test_query_value_literals(self):
        result = _complete('{"filter": {"active": ')
        assert {"true", "false", "null"} <= set(_labels(result))

    def test_match_stage_operators(self):
        result = _complete('{"pipeline": [{"$match": {"$o')
        assert "$or" in _labels(result)

    def test_field_cap(self):
        fields = {"big": [{"name": f"field{i:02d}"} for i in range(40)]}
        result = _complete('{"filter": {"', MongoMetadata.from_dict({"fields": fields}))
        field_candidates = [c for c in result.candidates if c.kind == CompletionKind.FIELD]
        assert len(field_candidates) == 20


class TestUpdateSortProjection:
    """Tests for update documents, sort and projection values."""

    def test_update_operators(self):
        result = _complete('{"update": {"$')
        labels = _labels(result)
        assert "$set" in labels
        assert "$inc" in labels
        assert "$gt" not in labels

    def test_update_fields(self, mongo_metadata):
        result = _complete('{"collection": "orders", "update": {"$set": {"', mongo_metadata)
        assert "amount" in _labels(result)

    def test_sort_values(self):
        result = _complete('{"sort": {"age": ')
        assert _labels(result) == ["1", "-1"]

    def test_projection_values(self):
        result = _complete('{"projection": {"name": ')
        assert _labels(result) == ["1", "0"]

    def test_sort_fields(self, mongo_metadata):
        result = _complete('{"collection": "orders", "sort": {"', mongo_metadata)
        assert set(_labels(result)) == {"_id", "status", "amount"}


class TestResultShape:
    """Tests for ranking, caps and determinism."""

    def test_sorted_by_boost(self, mongo_metadata):
        result = _complete('{"pipeline": [{"$project": {"x": ', mongo_metadata)
        boosts = [c.boost for c in result.candidates]
        assert boosts == sorted(boosts, reverse=True)

    def test_repeatable(self, mongo_metadata):
        text = '{"filter": {"'
        assert _complete(text, mongo_metadata) == _complete(text, mongo_metadata)

    def test_dict_metadata_accepted(self):
        result = _complete('{"collection": ', {"collections": ["events"]})
        assert _labels(result) == ["events"]

    def test_get_completions_without_metadata(self):
        context = get_context('{"', 2)
        assert get_completions(context)

    @pytest.mark.parametrize("cursor", range(0, 40, 3))
    def test_never_raises(self, mongo_metadata, cursor):
        text = '{"pipeline": [{"$group": {"_id": "$a"}}]}'
        result = complete(text, cursor, mongo_metadata)
        assert 0 <= result.insert_from <= min(cursor, len(text))

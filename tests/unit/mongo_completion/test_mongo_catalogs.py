"""Tests for the MongoDB operator, stage and snippet catalogs."""

import pytest

from querycomplete.mongo_completion import (
    ALL_ACCUMULATORS,
    ALL_EXPRESSIONS,
    ALL_OPERATORS,
    ALL_QUERY_OPERATORS,
    ALL_STAGES,
    ALL_UPDATE_OPERATORS,
    MONGO_SNIPPETS,
    ROOT_PROPERTIES,
    SYSTEM_VARIABLES,
    FieldInfo,
    MetadataError,
    MongoMetadata,
    get_accumulator,
    get_expression,
    get_operator,
    get_stage,
    search_accumulators,
    search_expressions,
    search_operators,
    search_query_operators,
    search_stages,
    search_update_operators,
)


class TestOperators:
    """Tests for query and update operators."""

    def test_lookup(self):
        op = get_operator("$gt")
        assert op.category == "comparison"

    def test_unknown_operator(self):
        assert get_operator("$nope") is None

    def test_search_keeps_table_order(self):
        names = [op.name for op in search_operators("$gt")]
        assert names == ["$gt", "$gte"]

    def test_search_is_case_insensitive(self):
        assert [op.name for op in search_query_operators("$ELEM")] == ["$elemMatch"]

    def test_query_and_update_are_disjoint(self):
        query = {op.name for op in ALL_QUERY_OPERATORS}
        update = {op.name for op in ALL_UPDATE_OPERATORS}
        assert not query & update

    def test_update_search(self):
        assert "$set" in [op.name for op in search_update_operators("$s")]

    def test_geospatial_included_in_query_operators(self):
        assert "$geoWithin" in {op.name for op in ALL_QUERY_OPERATORS}

    def test_all_operators_start_with_dollar(self):
        assert all(op.name.startswith("$") for op in ALL_OPERATORS)


class TestAggregation:
    """Tests for stages, accumulators, expressions and variables."""

    def test_stage_lookup(self):
        assert get_stage("$group").category == "group"

    def test_search_stages(self):
        assert [s.name for s in search_stages("$un")] == ["$unset", "$unwind", "$unionWith"]

    def test_accumulators(self):
        names = {a.name for a in ALL_ACCUMULATORS}
        assert {"$sum", "$avg", "$push", "$addToSet"} <= names
        assert get_accumulator("$sum") is not None

    def test_search_accumulators(self):
        assert [a.name for a in search_accumulators("$std")] == ["$stdDevPop", "$stdDevSamp"]

    def test_expressions(self):
        assert get_expression("$concat").category == "string"
        assert "$dateToString" in [e.name for e in search_expressions("$date")]

    def test_names_unique(self):
        for table in (ALL_STAGES, ALL_ACCUMULATORS, ALL_EXPRESSIONS):
            names = [entry.name for entry in table]
            assert len(names) == len(set(names))

    def test_system_variables_double_dollar(self):
        assert all(v.name.startswith("$$") for v in SYSTEM_VARIABLES)


class TestSnippetsAndProperties:
    """Tests for command snippets and root properties."""

    def test_snippet_text_rendered(self):
        for snippet in MONGO_SNIPPETS:
            assert "${" not in snippet.text

    def test_root_properties_unique(self):
        names = [p.name for p in ROOT_PROPERTIES]
        assert len(names) == len(set(names))
        assert "collection" in names


class TestMetadata:
    """Tests for MongoDB metadata parsing."""

    def test_none(self):
        assert MongoMetadata.from_dict(None) == MongoMetadata()

    def test_nested_fields(self):
        info = FieldInfo.from_dict(
            {"name": "address", "type": "object", "nestedFields": [{"name": "city"}]}
        )
        assert info.nested_fields[0].name == "city"
        assert info.nested_fields[0].type == "mixed"

    def test_string_field(self):
        assert FieldInfo.from_dict("age") == FieldInfo(name="age")

    def test_field_without_name(self):
        with pytest.raises(MetadataError):
            FieldInfo.from_dict({"type": "string"})

    def test_not_an_object(self):
        with pytest.raises(MetadataError):
            MongoMetadata.from_dict(["users"])

    def test_fields_not_a_mapping(self):
        with pytest.raises(MetadataError):
            MongoMetadata.from_dict({"fields": ["a"]})

    def test_fields_for_is_case_insensitive(self, mongo_metadata):
        names = [f.name for f in mongo_metadata.fields_for("ORDERS")]
        assert names == ["_id", "status", "amount"]

    def test_fields_for_unknown_merges(self, mongo_metadata):
        assert len(mongo_metadata.fields_for("missing")) == 8

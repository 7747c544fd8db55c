"""Tests for shared candidate ranking and limits."""

from querycomplete.shared.core.ranking import (
    Bucket,
    Completion,
    CompletionKind,
    CompletionLimits,
    apply_smart_limits,
    dedupe,
    matches_prefix,
)


def _bucket(kind):
    return Bucket.COLUMN if kind == CompletionKind.COLUMN else Bucket.OTHER


def _columns(count, boost=0):
    return [Completion(f"col{i:03d}", CompletionKind.COLUMN, boost=boost) for i in range(count)]


class TestCompletion:
    """Tests for the candidate value type."""

    def test_text_defaults_to_label(self):
        assert Completion("users", CompletionKind.TABLE).text == "users"

    def test_insert_text_wins(self):
        assert Completion("COUNT", CompletionKind.FUNCTION, insert_text="COUNT()").text == "COUNT()"

    def test_to_dict(self):
        data = Completion("id", CompletionKind.COLUMN, detail="integer", boost=50).to_dict()
        assert data == {
            "label": "id",
            "kind": "column",
            "detail": "integer",
            "info": None,
            "boost": 50,
            "insertText": "id",
        }


class TestPrefixMatching:
    """Tests for prefix filtering."""

    def test_empty_prefix_matches_everything(self):
        assert matches_prefix("anything", "")

    def test_case_insensitive(self):
        assert matches_prefix("Users", "us")

    def test_not_a_prefix(self):
        assert not matches_prefix("orders", "der")


class TestDedupe:
    """Tests for (label, kind) deduplication."""

    def test_keeps_highest_boost(self):
        result = dedupe(
            [
                Completion("a", CompletionKind.COLUMN, boost=1),
                Completion("a", CompletionKind.COLUMN, boost=5),
            ]
        )
        assert [(c.label, c.boost) for c in result] == [("a", 5)]

    def test_same_label_different_kind_kept(self):
        result = dedupe(
            [
                Completion("users", CompletionKind.TABLE),
                Completion("users", CompletionKind.ALIAS),
            ]
        )
        assert len(result) == 2

    def test_position_of_first_occurrence(self):
        result = dedupe(
            [
                Completion("a", CompletionKind.COLUMN, boost=1),
                Completion("b", CompletionKind.COLUMN, boost=2),
                Completion("a", CompletionKind.COLUMN, boost=9),
            ]
        )
        assert [c.label for c in result] == ["a", "b"]


class TestSmartLimits:
    """Tests for bucketed limits."""

    def test_bucket_cap_with_short_prefix(self):
        result = apply_smart_limits(_columns(40), "", _bucket)
        assert len(result) == CompletionLimits().max_columns

    def test_best_entries_survive_cap(self):
        candidates = _columns(40) + [Completion("best", CompletionKind.COLUMN, boost=99)]
        result = apply_smart_limits(candidates, "", _bucket)
        assert result[0].label == "best"

    def test_long_prefix_shows_more(self):
        result = apply_smart_limits(_columns(120), "co", _bucket)
        assert len(result) == CompletionLimits().show_all_total

    def test_total_cap(self):
        limits = CompletionLimits(max_total=5)
        result = apply_smart_limits(_columns(20), "", _bucket, limits)
        assert len(result) == 5

    def test_sorted_by_boost_stable(self):
        candidates = [
            Completion("low", CompletionKind.COLUMN, boost=1),
            Completion("first", CompletionKind.COLUMN, boost=5),
            Completion("second", CompletionKind.COLUMN, boost=5),
        ]
        result = apply_smart_limits(candidates, "", _bucket)
        assert [c.label for c in result] == ["first", "second", "low"]

    def test_empty_input(self):
        assert apply_smart_limits([], "", _bucket) == []


class TestLimitsFromSettings:
    """Tests for building limits from stored settings."""

    def test_defaults(self):
        assert CompletionLimits.from_settings(None) == CompletionLimits()

    def test_override(self):
        assert CompletionLimits.from_settings({"max_total": 10}).max_total == 10

    def test_invalid_values_ignored(self):
        limits = CompletionLimits.from_settings(
            {"max_total": -1, "max_columns": "5", "max_tables": True, "bogus": 3}
        )
        assert limits == CompletionLimits()

    def test_cap_for(self):
        limits = CompletionLimits(max_keywords=7)
        assert limits.cap_for(Bucket.KEYWORD) == 7
        assert limits.cap_for(Bucket.OTHER) == limits.max_other

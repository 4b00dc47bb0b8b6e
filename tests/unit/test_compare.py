"""Tests for the ratchet comparator."""

import pytest

from ratchet.core import compare
from ratchet.errors import EmptyInputError, NoComputedMeasuresError, NoStoredMeasuresError
from ratchet.types import EventKind, Measure, MeasureEvent


def m(name: str, value: int, baseline: int | None = None) -> Measure:
    return Measure(name=name, value=value, baseline=value if baseline is None else baseline)


class TestScenarios:
    def test_regression_beyond_slack(self):
        stored = [m("a", 10), m("b", 5)]
        computed = [m("a", 12), m("b", 5)]

        result = compare(stored, computed, slack=1)

        assert result.failing == ["a"]
        assert MeasureEvent(EventKind.REGRESSION, "a", delta=2) in result.events

    def test_regression_within_slack(self):
        stored = [m("a", 10), m("b", 5)]
        computed = [m("a", 12), m("b", 5)]

        result = compare(stored, computed, slack=2)

        assert result.failing == []
        assert not result.has_failures

    def test_value_equal_to_baseline_plus_slack_passes(self):
        assert compare([m("a", 10)], [m("a", 13)], slack=3).failing == []
        assert compare([m("a", 10)], [m("a", 14)], slack=3).failing == ["a"]

    def test_empty_computed(self):
        with pytest.raises(NoComputedMeasuresError):
            compare([m("a", 10)], [], slack=0)

    def test_empty_stored(self):
        with pytest.raises(NoStoredMeasuresError):
            compare([], [m("a", 10)], slack=0)

    def test_empty_both_reports_computed_first(self):
        with pytest.raises(EmptyInputError, match="No measures passed"):
            compare([], [], slack=0)


class TestProperties:
    def test_identical_sets_never_regress(self):
        measures = [m("a", 1, 3), m("b", 0), m("c", 7, 100)]

        result = compare(measures, list(measures), slack=0)

        assert [e for e in result.events if e.kind is EventKind.REGRESSION] == []

    def test_self_compare_above_own_baseline_regresses(self):
        measures = [m("a", 3, 1), m("b", 0)]

        result = compare(measures, list(measures), slack=0)

        assert result.failing == ["a"]
        assert result.events == [MeasureEvent(EventKind.REGRESSION, "a", delta=2)]

    def test_baselines_only_ratchet_down(self):
        stored = [m("a", 10, 8), m("b", 5, 5), m("c", 1, 9)]
        computed = [m("a", 7, 10), m("b", 5, 2), m("c", 3, 3)]

        result = compare(stored, computed, slack=0)

        stored_baselines = {s.name: s.baseline for s in stored}
        for measure in result.measures:
            assert measure.baseline <= stored_baselines[measure.name]
        assert [x.baseline for x in result.measures] == [8, 2, 3]

    def test_input_is_not_mutated(self):
        computed = [m("a", 5, 20)]

        result = compare([m("a", 5, 10)], computed, slack=0)

        assert computed == [m("a", 5, 20)]
        assert result.measures == [m("a", 5, 10)]

    def test_slack_is_monotonic(self):
        stored = [m("a", 10), m("b", 4)]
        computed = [m("a", 15), m("b", 6)]

        outcomes = [compare(stored, computed, slack=s).has_failures for s in range(10)]

        assert outcomes == [True] * 5 + [False] * 5


class TestMergeJoin:
    def test_missing_stored_measures_fail(self):
        stored = [m("a", 1), m("b", 1), m("c", 1)]
        computed = [m("b", 1)]

        result = compare(stored, computed, slack=0)

        assert result.failing == ["a", "c"]
        assert [e.kind for e in result.events] == [EventKind.MISSING, EventKind.MISSING]

    def test_new_measures_are_informational(self):
        stored = [m("b", 1)]
        computed = [m("a", 50), m("b", 1), m("c", 50)]

        result = compare(stored, computed, slack=0)

        assert result.failing == []
        assert [(e.kind, e.name) for e in result.events] == [(EventKind.NEW, "a"), (EventKind.NEW, "c")]

    def test_every_trailing_new_measure_reported_once(self):
        stored = [m("a", 1)]
        computed = [m("a", 1), m("b", 2), m("c", 3), m("d", 4)]

        result = compare(stored, computed, slack=0)

        new = [e.name for e in result.events if e.kind is EventKind.NEW]
        assert new == ["b", "c", "d"]

    def test_new_measure_baseline_is_not_clamped(self):
        result = compare([m("b", 1)], [m("a", 50), m("b", 1)], slack=0)

        assert result.measures[0] == m("a", 50)

    def test_failures_come_out_sorted(self):
        stored = [m("a", 1), m("b", 1), m("c", 1), m("d", 1)]
        computed = [m("b", 9), m("d", 9)]

        result = compare(stored, computed, slack=0)

        assert result.failing == ["a", "b", "c", "d"]
        assert result.failing == sorted(result.failing)

    def test_duplicate_computed_name_treated_as_new(self):
        result = compare([m("a", 1)], [m("a", 1), m("a", 9)], slack=0)

        assert result.failing == []
        assert [(e.kind, e.name) for e in result.events] == [(EventKind.NEW, "a")]

    def test_measures_returned_even_when_failing(self):
        computed = [m("a", 20, 20), m("z", 1)]

        result = compare([m("a", 10)], computed, slack=0)

        assert result.has_failures
        assert result.measures == [m("a", 20, 10), m("z", 1)]

"""
Unit Tests for Domain Entities.

Test Aspects Covered:
    ✅ Business Logic: Run state transitions never mutate
    ✅ Outcomes: Tagged tuple shapes
    ✅ Normalization: (record, reason) pairs vs bare records
"""

from __future__ import annotations

from etl_framework.domain.entities import (
    ErrorEntry,
    PipelineHalted,
    PipelineRunState,
    PipelineSuccess,
)
from etl_framework.pipeline.orchestrator import normalize_invalid_items


class TestPipelineRunState:
    """Test cases for run state transitions."""

    def test_with_metric_extends_without_mutating(self) -> None:
        state = PipelineRunState(value=1).with_metric("extract", 0.1)

        extended = state.with_metric("extract_validation", 0.2)

        assert state.metrics == {"extract": 0.1}
        assert extended.metrics == {"extract": 0.1, "extract_validation": 0.2}

    def test_advance_replaces_value_only(self) -> None:
        entry = ErrorEntry("extract", 1, "Invalid")
        state = PipelineRunState(value=1, errors=(entry,), metrics={"extract": 0.1})

        advanced = state.advance(2)

        assert advanced.value == 2
        assert advanced.errors == (entry,)
        assert advanced.metrics == {"extract": 0.1}
        assert advanced.metrics is not state.metrics

    def test_collect_appends_in_order(self) -> None:
        first = ErrorEntry("extract", 1, "Invalid")
        second = ErrorEntry("transform", 2, "bad")
        state = PipelineRunState(value=[1], errors=(first,))

        collected = state.collect([second], value=[])

        assert collected.errors == (first, second)
        assert collected.value == []
        assert state.errors == (first,)


class TestOutcomes:
    """Test cases for run outcome shapes."""

    def test_success_tuple(self) -> None:
        outcome = PipelineSuccess(
            value=9,
            errors=(ErrorEntry("transform", 9, "Invalid"),),
            metrics={"extract": 0.1},
        )

        assert outcome.ok
        assert outcome.as_tuple() == ("ok", 9, [("transform", 9, "Invalid")], {"extract": 0.1})

    def test_halted_tuple(self) -> None:
        outcome = PipelineHalted(step="extract", reason="boom", errors=(), metrics={})

        assert not outcome.ok
        assert outcome.as_tuple() == ("error", "extract", "boom", [], {})


class TestNormalizeInvalidItems:
    """Test cases for error entry normalization."""

    def test_pairs_keep_reason(self) -> None:
        entries = normalize_invalid_items("extract", [({"id": 2}, "Invalid age")])

        assert entries == [ErrorEntry("extract", {"id": 2}, "Invalid age")]

    def test_bare_records_get_default_reason(self) -> None:
        entries = normalize_invalid_items("transform", [9, 12])

        assert entries == [
            ErrorEntry("transform", 9, "Invalid"),
            ErrorEntry("transform", 12, "Invalid"),
        ]

    def test_non_pair_tuples_are_records(self) -> None:
        entries = normalize_invalid_items("load", [(1, 2, 3)])

        assert entries == [ErrorEntry("load", (1, 2, 3), "Invalid")]

    def test_non_string_reason_is_stringified(self) -> None:
        entries = normalize_invalid_items("load", [("rec", 404)])

        assert entries[0].reason == "404"

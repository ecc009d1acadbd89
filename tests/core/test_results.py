"""Tests for the per-request result types."""

from __future__ import annotations

import pytest

from sqlconsole.core.results import ExecutionOutcome, QueryResult, ResultGrid


def test_grid_and_error_are_mutually_exclusive() -> None:
    with pytest.raises(ValueError):
        QueryResult(grid=ResultGrid(columns=["Row"]), error="boom")


def test_status_reflects_populated_slot() -> None:
    assert QueryResult.failed("boom").status == "error"
    assert QueryResult.from_grid(ResultGrid(columns=["Row"])).status == "rows"
    assert QueryResult().status == "ok"


def test_from_outcome_keeps_error_only() -> None:
    result = QueryResult.from_outcome(ExecutionOutcome(error="denied", rows_affected=3))

    assert result.error == "denied"
    assert result.grid is None
    assert result.rows_affected is None


def test_from_outcome_success_has_no_grid_and_no_error() -> None:
    result = QueryResult.from_outcome(ExecutionOutcome(rows_affected=2))

    assert result.grid is None
    assert result.error is None
    assert result.rows_affected == 2

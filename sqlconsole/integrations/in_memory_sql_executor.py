"""Lightweight, in-memory SQL executor for tests and offline prototypes.

This executor does not parse SQL or connect to a database. It returns canned
responses registered per statement text, mimicking what a real engine would
produce. Unknown statements fail the way a database would reject them.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

from sqlconsole.core.errors import DatabaseExecutionError
from sqlconsole.core.results import ExecutionOutcome


class StaticRowSource:
    """Row source over a fixed list of rows; counts how many were fetched."""

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        self._columns = list(columns)
        self._rows = [tuple(row) for row in rows]
        self.fetched = 0

    def columns(self) -> Sequence[str]:
        return list(self._columns)

    def fetch_row(self) -> Sequence[Any] | None:
        if self.fetched >= len(self._rows):
            return None
        row = self._rows[self.fetched]
        self.fetched += 1
        return row


@dataclass(slots=True)
class _CannedQuery:
    columns: list[str]
    rows: list[tuple[Any, ...]]


@dataclass(slots=True)
class InMemorySQLExecutor:
    """Mapping-based executor that satisfies the `SQLExecutor` protocol."""

    queries: dict[str, _CannedQuery] = field(default_factory=dict)
    statements: dict[str, int | None] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)

    @contextmanager
    def run_query(self, statement: str) -> Iterator[StaticRowSource]:
        """Yield a row source over the canned result for *statement*."""

        self._record(statement)
        canned = self.queries.get(statement)
        if canned is None:
            raise DatabaseExecutionError(f"no canned result for query: {statement}")
        yield StaticRowSource(canned.columns, canned.rows)

    def run_statement(self, statement: str) -> ExecutionOutcome:
        """Return the canned acknowledgment for *statement*."""

        self._record(statement)
        if statement not in self.statements:
            raise DatabaseExecutionError(f"no canned result for statement: {statement}")
        return ExecutionOutcome(rows_affected=self.statements[statement])

    def prime_query(
        self,
        statement: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> None:
        """Register a canned result set for a future `run_query` call."""

        self.queries[statement] = _CannedQuery(list(columns), [tuple(row) for row in rows])

    def prime_statement(self, statement: str, rows_affected: int | None = None) -> None:
        """Register a canned acknowledgment for a future `run_statement` call."""

        self.statements[statement] = rows_affected

    def prime_error(self, statement: str, message: str) -> None:
        """Make *statement* fail with *message* on either entry point."""

        self.errors[statement] = message

    def _record(self, statement: str) -> None:
        self.history.append(statement)
        message = self.errors.get(statement)
        if message is not None:
            raise DatabaseExecutionError(message)

"""Assemble executor and materializer results into per-request page data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ContextManager, Protocol
from uuid import uuid4

from sqlconsole.core.display import DEFAULT_NULL_TEXT
from sqlconsole.core.errors import DatabaseExecutionError
from sqlconsole.core.materializer import RowSource, materialize
from sqlconsole.core.observability import AuditSink
from sqlconsole.core.results import ExecutionOutcome, PageRender, QueryResult

LOGGER = logging.getLogger(__name__)


class SQLExecutor(Protocol):
    """Executes SQL text against a database."""

    def run_query(self, statement: str) -> ContextManager[RowSource]:  # pragma: no cover - interface
        """Yield a row source over the result of *statement*."""

    def run_statement(self, statement: str) -> ExecutionOutcome:  # pragma: no cover - interface
        """Execute *statement* expecting no rows."""


@dataclass
class ConsoleService:
    """Runs one query or statement per call and pairs the result with its SQL."""

    executor: SQLExecutor
    row_limit: int
    null_text: str = DEFAULT_NULL_TEXT
    audit: AuditSink | None = None

    def query(self, sql: str) -> PageRender:
        request_id = _new_request_id()
        self._audit(request_id, "query_started", {"sql": sql, "row_limit": self.row_limit})
        try:
            with self.executor.run_query(sql) as source:
                result = materialize(source, self.row_limit, null_text=self.null_text)
        except DatabaseExecutionError as exc:
            result = QueryResult.failed(str(exc))

        if result.error is not None:
            LOGGER.info("Query %s failed: %s", request_id, result.error)
        self._audit(
            request_id,
            "query_completed",
            {
                "status": result.status,
                "row_count": result.grid.row_count if result.grid is not None else None,
                "error": result.error,
            },
        )
        return PageRender(sql=sql, result=result)

    def execute(self, sql: str) -> PageRender:
        request_id = _new_request_id()
        self._audit(request_id, "statement_started", {"sql": sql})
        try:
            outcome = self.executor.run_statement(sql)
        except DatabaseExecutionError as exc:
            outcome = ExecutionOutcome(error=str(exc))

        if outcome.error is not None:
            LOGGER.info("Statement %s failed: %s", request_id, outcome.error)
        self._audit(
            request_id,
            "statement_completed",
            {
                "status": "ok" if outcome.succeeded else "error",
                "rows_affected": outcome.rows_affected,
                "error": outcome.error,
            },
        )
        return PageRender(sql=sql, result=QueryResult.from_outcome(outcome))

    def _audit(self, request_id: str, event: str, payload: dict[str, Any]) -> None:
        if self.audit is not None:
            self.audit.log_event(request_id, event, payload)


def _new_request_id() -> str:
    return uuid4().hex[:8]

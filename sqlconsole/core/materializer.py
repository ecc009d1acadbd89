"""Drain a live row source into a bounded, display-ready grid.

The materializer knows nothing about the schema of the result it is handed:
column labels are read from the source once, and every value is normalized to
a string through :func:`sqlconsole.core.display.to_display`. Row ordinals start
at 1 and the loop runs only while the ordinal is strictly below the row limit,
so a limit of ``L`` yields at most ``L - 1`` rows and a limit of 0 or 1 yields
none.

Failures are all-or-nothing. If the column labels cannot be read, or any row
fails to fetch or convert, the rows collected so far are dropped and the
returned :class:`QueryResult` carries only the error message.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from sqlconsole.core.display import DEFAULT_NULL_TEXT, row_to_display
from sqlconsole.core.errors import ConsoleError
from sqlconsole.core.results import ROW_LABEL, QueryResult, ResultGrid

LOGGER = logging.getLogger(__name__)


class RowSource(Protocol):
    """Forward-only cursor over a result set."""

    def columns(self) -> Sequence[str]:  # pragma: no cover - interface
        """Return the column labels of the result set."""

    def fetch_row(self) -> Sequence[Any] | None:  # pragma: no cover - interface
        """Return the next row, or ``None`` once the source is exhausted."""


def materialize(
    source: RowSource,
    row_limit: int,
    *,
    null_text: str = DEFAULT_NULL_TEXT,
) -> QueryResult:
    """Convert *source* into a :class:`QueryResult` holding at most ``row_limit - 1`` rows."""

    try:
        columns = [str(label) for label in source.columns()]
    except ConsoleError as exc:
        LOGGER.debug("Reading column labels failed: %s", exc)
        return QueryResult.failed(str(exc))

    rows: list[list[str]] = []
    ordinal = 1
    try:
        while ordinal < row_limit:
            values = source.fetch_row()
            if values is None:
                break
            rows.append([str(ordinal), *row_to_display(values, null_text)])
            ordinal += 1
    except ConsoleError as exc:
        LOGGER.debug("Materialization failed after %s rows: %s", len(rows), exc)
        return QueryResult.failed(str(exc))

    return QueryResult.from_grid(ResultGrid(columns=[ROW_LABEL, *columns], rows=rows))

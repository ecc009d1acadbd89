"""Per-request result types handed from the service to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field

ROW_LABEL = "Row"


@dataclass(slots=True)
class ResultGrid:
    """Bounded, string-normalized view of a result set."""

    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(slots=True)
class ExecutionOutcome:
    """Acknowledgment of a statement that produces no rows."""

    error: str | None = None
    rows_affected: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class QueryResult:
    """Either a populated grid or an error message, never both."""

    grid: ResultGrid | None = None
    error: str | None = None
    rows_affected: int | None = None

    def __post_init__(self) -> None:
        if self.grid is not None and self.error is not None:
            raise ValueError("QueryResult cannot carry both a grid and an error")

    @classmethod
    def failed(cls, error: str) -> "QueryResult":
        return cls(error=error)

    @classmethod
    def from_grid(cls, grid: ResultGrid) -> "QueryResult":
        return cls(grid=grid)

    @classmethod
    def from_outcome(cls, outcome: ExecutionOutcome) -> "QueryResult":
        if outcome.error is not None:
            return cls(error=outcome.error)
        return cls(rows_affected=outcome.rows_affected)

    @property
    def status(self) -> str:
        if self.error is not None:
            return "error"
        if self.grid is not None:
            return "rows"
        return "ok"


@dataclass(slots=True)
class PageRender:
    """The submitted SQL text paired with its result, for a single response."""

    sql: str
    result: QueryResult | None = None

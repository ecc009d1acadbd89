"""SQL executor backed by a pooled SQLAlchemy engine.

Statement text is passed to the driver untouched through
``Connection.exec_driver_sql`` with ``no_parameters`` set, so the cursor is
called without a parameter collection and colons or percent signs in the SQL
are never treated as bind markers, whatever the driver's paramstyle. The
engine runs in ``AUTOCOMMIT`` isolation: each submitted statement is its own
transaction and nothing here opens or closes transaction boundaries.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, CursorResult, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from sqlconsole.core.config import DatabaseSettings
from sqlconsole.core.errors import DatabaseExecutionError
from sqlconsole.core.logging_utils import redact_literals
from sqlconsole.core.results import ExecutionOutcome

LOGGER = logging.getLogger(__name__)

_MEMORY_DATABASES = {None, "", ":memory:"}
_NO_PARAMETERS = {"no_parameters": True}

# database/sql driver names mapped to SQLAlchemy backend names
_LEGACY_DRIVER_NAMES = {
    "postgres": "postgresql",
    "pgx": "postgresql",
    "sqlite3": "sqlite",
}


def normalize_driver_name(name: str) -> str:
    return _LEGACY_DRIVER_NAMES.get(name.lower(), name)


def build_engine(settings: DatabaseSettings) -> Engine:
    """Create the process-wide engine described by *settings*.

    Connections are opened lazily, so an unreachable database surfaces on the
    first statement rather than here.
    """

    url = make_url(settings.resolve_url())
    if settings.driver_name:
        url = url.set(drivername=normalize_driver_name(settings.driver_name))

    options: dict[str, Any] = {"isolation_level": "AUTOCOMMIT"}
    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in _MEMORY_DATABASES:
            # one shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True

    LOGGER.info("Creating database engine for %s", url.render_as_string(hide_password=True))
    return create_engine(url, **options)


class CursorRowSource:
    """Adapts a SQLAlchemy cursor result to the materializer's row source."""

    def __init__(self, result: CursorResult[Any]) -> None:
        self._result = result

    def columns(self) -> Sequence[str]:
        if not self._result.returns_rows:
            return []
        try:
            return list(self._result.keys())
        except SQLAlchemyError as exc:
            raise DatabaseExecutionError.from_exception(exc) from exc

    def fetch_row(self) -> Sequence[Any] | None:
        if not self._result.returns_rows:
            return None
        try:
            row = self._result.fetchone()
        except SQLAlchemyError as exc:
            raise DatabaseExecutionError.from_exception(exc) from exc
        return None if row is None else tuple(row)


@dataclass(slots=True)
class SQLAlchemyExecutor:
    """Runs operator-supplied SQL against a shared engine."""

    engine: Engine
    log_statements: bool = True
    redact_literals: bool = False

    @contextmanager
    def run_query(self, statement: str) -> Iterator[CursorRowSource]:
        """Execute *statement* and yield a row source over its result.

        The connection goes back to the pool when the block exits, whether or
        not every row was read.
        """

        self._log_statement("querying", statement)
        with self._connect() as connection:
            result = self._execute(connection, statement)
            try:
                yield CursorRowSource(result)
            finally:
                result.close()

    def run_statement(self, statement: str) -> ExecutionOutcome:
        """Execute *statement* without reading rows and report the affected count."""

        self._log_statement("executing", statement)
        with self._connect() as connection:
            result = self._execute(connection, statement)
            rowcount = result.rowcount
            result.close()
        return ExecutionOutcome(rows_affected=rowcount if rowcount >= 0 else None)

    def _connect(self) -> Connection:
        try:
            return self.engine.connect()
        except SQLAlchemyError as exc:
            raise DatabaseExecutionError.from_exception(exc) from exc

    def _execute(self, connection: Connection, statement: str) -> CursorResult[Any]:
        try:
            return connection.exec_driver_sql(statement, execution_options=_NO_PARAMETERS)
        except SQLAlchemyError as exc:
            raise DatabaseExecutionError.from_exception(exc) from exc

    def _log_statement(self, action: str, statement: str) -> None:
        if not self.log_statements:
            LOGGER.info("%s: <statement text not logged>", action)
            return
        text = redact_literals(statement) if self.redact_literals else statement
        LOGGER.info("%s: %s", action, text)

"""Factory helpers for constructing console dependencies from settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from sqlalchemy.engine import Engine

from sqlconsole.core.config import Settings
from sqlconsole.core.observability import AuditSink, JSONLAuditLogger
from sqlconsole.core.service import ConsoleService, SQLExecutor
from sqlconsole.integrations.sqlalchemy_executor import SQLAlchemyExecutor, build_engine


@dataclass(slots=True)
class ConsoleDependencies:
    """Process-wide objects shared by every request."""

    executor: SQLExecutor
    audit: AuditSink | None = None
    engine: Engine | None = None

    def build_service(self, settings: Settings) -> ConsoleService:
        return ConsoleService(
            executor=self.executor,
            row_limit=settings.query.rows_limit,
            null_text=settings.query.null_text,
            audit=self.audit,
        )


def build_dependencies(settings: Settings, *, engine: Engine | None = None) -> ConsoleDependencies:
    """Create dependency instances based on *settings*."""

    engine = engine or build_engine(settings.database)
    executor = SQLAlchemyExecutor(
        engine=engine,
        log_statements=settings.audit.log_statements,
        redact_literals=settings.audit.redact_literals,
    )
    return ConsoleDependencies(
        executor=executor,
        audit=_build_audit_logger(settings),
        engine=engine,
    )


def _build_audit_logger(settings: Settings) -> AuditSink | None:
    if not settings.audit.logs_dir:
        return None
    return JSONLAuditLogger(
        base_dir=Path(settings.audit.logs_dir),
        session_id=f"session-{uuid4().hex[:8]}",
        include_sql=settings.audit.log_statements,
        redact=settings.audit.redact_literals,
    )

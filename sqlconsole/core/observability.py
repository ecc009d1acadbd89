"""JSONL-backed audit trail for submitted SQL."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from sqlconsole.core.logging_utils import audit_filename, redact_literals, utc_now_iso


class AuditSink(Protocol):
    """Records lifecycle events for each submitted statement."""

    def log_event(self, request_id: str, event: str, payload: dict[str, Any]) -> None:  # pragma: no cover - interface
        ...


def _build_event(request_id: str, event: str, payload: dict[str, Any]) -> dict[str, Any]:
    enriched = {key: value for key, value in payload.items() if value is not None}
    enriched.setdefault("request_id", request_id)
    enriched.setdefault("event", event)
    enriched.setdefault("timestamp", utc_now_iso())
    return enriched


@dataclass(slots=True)
class JSONLAuditLogger(AuditSink):
    """Appends audit events for one server session to a single JSONL file.

    The file is named once, when the logger is created. With ``include_sql``
    off the ``sql`` field is dropped from every event; with ``redact`` on,
    quoted literals inside it are masked.
    """

    base_dir: Path
    session_id: str
    include_sql: bool = True
    redact: bool = False
    path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.base_dir / audit_filename(self.session_id)

    def log_event(self, request_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        cleaned = dict(payload)
        sql = cleaned.pop("sql", None)
        if sql is not None and self.include_sql:
            cleaned["sql"] = redact_literals(sql) if self.redact else sql
        with self.path.open("a", encoding="utf-8") as handle:
            json.dump(_build_event(request_id, event, cleaned), handle, ensure_ascii=False)
            handle.write("\n")

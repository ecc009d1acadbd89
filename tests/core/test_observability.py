"""Tests for the JSONL audit trail."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from sqlconsole.core.logging_utils import audit_filename, redact_literals
from sqlconsole.core.observability import JSONLAuditLogger


def _load_events(path: Path) -> list[dict[str, str]]:
    with path.open("r", encoding="utf-8") as handle:
        return [json.loads(line) for line in handle]


def test_audit_logger_appends_events_for_a_session(tmp_path: Path) -> None:
    logger = JSONLAuditLogger(base_dir=tmp_path, session_id="S-1")

    logger.log_event("r1", "query_started", {"sql": "SELECT 1", "row_limit": 50})
    logger.log_event("r1", "query_completed", {"status": "rows", "error": None})

    files = sorted(tmp_path.glob("*.jsonl"))
    assert len(files) == 1
    assert files[0].name.endswith("-S-1.jsonl")
    events = _load_events(files[0])
    assert [event["event"] for event in events] == ["query_started", "query_completed"]
    assert events[0]["sql"] == "SELECT 1"
    assert events[0]["request_id"] == "r1"
    assert "error" not in events[1]
    assert "timestamp" in events[1]


def test_audit_logger_redacts_literals(tmp_path: Path) -> None:
    logger = JSONLAuditLogger(base_dir=tmp_path, session_id="S-2", redact=True)

    logger.log_event("r2", "statement_started", {"sql": "UPDATE u SET pw = 'it''s secret'"})

    events = _load_events(next(tmp_path.glob("*-S-2.jsonl")))
    assert events[0]["sql"] == "UPDATE u SET pw = '?'"


def test_audit_logger_can_omit_sql(tmp_path: Path) -> None:
    logger = JSONLAuditLogger(base_dir=tmp_path, session_id="S-3", include_sql=False)

    logger.log_event("r3", "statement_started", {"sql": "DELETE FROM t"})

    events = _load_events(next(tmp_path.glob("*-S-3.jsonl")))
    assert "sql" not in events[0]
    assert events[0]["event"] == "statement_started"


def test_redact_literals_leaves_identifiers() -> None:
    assert redact_literals("SELECT \"name\" FROM t WHERE a = 'x' AND b = 3") == (
        "SELECT \"name\" FROM t WHERE a = '?' AND b = 3"
    )


def test_audit_filename_is_timestamped_and_sanitized() -> None:
    started = datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=UTC)

    assert audit_filename("web session/1", started) == "20240501T123015123-web-session-1.jsonl"
    assert audit_filename("  ", started) == "20240501T123015123-session.jsonl"


def test_each_logger_owns_its_session_file(tmp_path: Path) -> None:
    first = JSONLAuditLogger(base_dir=tmp_path / "audit", session_id="alpha")
    second = JSONLAuditLogger(base_dir=tmp_path / "audit", session_id="beta")

    first.log_event("r1", "query_started", {"sql": "SELECT 1"})
    second.log_event("r2", "query_started", {"sql": "SELECT 2"})
    first.log_event("r3", "query_completed", {"status": "rows"})

    assert first.path.parent == tmp_path / "audit"
    assert first.path.name.endswith("-alpha.jsonl")
    assert second.path.name.endswith("-beta.jsonl")
    assert [event["request_id"] for event in _load_events(first.path)] == ["r1", "r3"]
    assert [event["request_id"] for event in _load_events(second.path)] == ["r2"]

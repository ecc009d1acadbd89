"""Shared helpers for statement logging and audit file naming."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

_STRING_LITERAL_RE = re.compile(r"'(?:[^']|'')*'")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(debug: bool) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        if debug:
            root_logger.setLevel(logging.DEBUG)
        return
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def redact_literals(statement: str) -> str:
    """Replace quoted string literals in *statement* with ``'?'``."""

    return _STRING_LITERAL_RE.sub("'?'", statement)


def audit_filename(session_id: str, started: datetime | None = None) -> str:
    """Return a sortable ``<UTC timestamp>-<session>.jsonl`` file name."""

    moment = started or datetime.now(UTC)
    slug = moment.strftime("%Y%m%dT%H%M%S%f")[:-3]
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "-", session_id.strip()) or "session"
    return f"{slug}-{cleaned}.jsonl"


def utc_now_iso() -> str:
    """Return the current UTC time in ISO-8601 with millisecond precision."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")

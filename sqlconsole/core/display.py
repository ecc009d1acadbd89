"""Helpers for turning arbitrary column values into display text."""

from __future__ import annotations

import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from sqlconsole.core.errors import ValueConversionError

DEFAULT_NULL_TEXT = "NULL"


def to_display(value: Any, null_text: str = DEFAULT_NULL_TEXT) -> str:
    """Return the display string for a single column *value*."""

    if value is None:
        return null_text
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _binary_to_display(bytes(value))
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
        except (TypeError, ValueError) as exc:
            raise ValueConversionError(type(value).__name__, str(exc)) from exc
    try:
        return str(value)
    except Exception as exc:
        raise ValueConversionError(type(value).__name__, str(exc)) from exc


def row_to_display(values: Any, null_text: str = DEFAULT_NULL_TEXT) -> list[str]:
    return [to_display(value, null_text) for value in values]


def _binary_to_display(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return "0x" + data.hex()

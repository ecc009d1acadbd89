"""Exception hierarchy shared by the executor, materializer and service."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for errors surfaced to the operator as a result message."""


class DatabaseExecutionError(ConsoleError):
    """Raised when the database rejects or fails a statement.

    The message is the database's own error text, unmodified.
    """

    @classmethod
    def from_exception(cls, exc: BaseException) -> "DatabaseExecutionError":
        return cls(describe_database_error(exc))


class ValueConversionError(ConsoleError):
    """Raised when a column value cannot be rendered as display text."""

    def __init__(self, value_type: str, reason: str) -> None:
        self.value_type = value_type
        super().__init__(f"cannot display value of type {value_type}: {reason}")


def describe_database_error(exc: BaseException) -> str:
    """Return the driver-level message for *exc* when one is available."""

    original = getattr(exc, "orig", None)
    source = original if original is not None else exc
    message = str(source).strip()
    return message or type(source).__name__

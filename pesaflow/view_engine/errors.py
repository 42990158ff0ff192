# This file defines the exception types raised by the tabular view engine.
# Lookup and key errors signal programming mistakes in page wiring and are never caught by the engine.
# Export errors carry structured details so the presentation layer can surface them to the user.

from __future__ import annotations

from typing import Any


class UnknownColumnError(LookupError):
    """Raised when a page asks for a column its accessor table does not define."""

    def __init__(self, column: str, *, known_columns: tuple[str, ...] = ()) -> None:
        supported = ", ".join(sorted(known_columns))
        super().__init__(f"Unknown column '{column}'. Supported columns: {supported}")
        self.column = column


class DuplicateRecordKeyError(ValueError):
    """Raised when a record set would contain the same key twice."""


class RecordNotFoundError(KeyError):
    """Raised when an update or removal targets a key that is not in the record set."""


class ExportError(RuntimeError):
    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}

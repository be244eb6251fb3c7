"""Unified error and warning model for tudu."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        if self.path and self.line is not None and self.column is not None:
            return f"{self.path}:{self.line}:{self.column}"
        if self.path and self.line is not None:
            return f"{self.path}:{self.line}"
        if self.line is not None and self.column is not None:
            return f"{self.line}:{self.column}"
        if self.path:
            return self.path
        return "unknown location"


class TuduError(Exception):
    """Base class for all errors surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        self.path = path
        self.line = line
        self.column = column
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class ConfigurationError(TuduError):
    """Raised when a comment syntax or workspace configuration is unusable."""

    code = "TUDU_CONFIG_ERROR"


class WarningKind(Enum):
    """Recoverable problems found while scanning."""

    UNTERMINATED_COMMENT = "UNTERMINATED_COMMENT"
    MALFORMED_ATTRIBUTE_SECTION = "MALFORMED_ATTRIBUTE_SECTION"
    DUPLICATE_ATTRIBUTE_KEY = "DUPLICATE_ATTRIBUTE_KEY"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScanWarning:
    """A non-fatal problem attached to a scan or to a single record.

    ``marker`` holds the rendered marker id (``TASK-123``) when the warning
    belongs to a tracked record, so callers can report it without looking
    the record up again.
    """

    kind: WarningKind
    message: str
    offset: int
    line: int
    column: int
    marker: Optional[str] = None

    @property
    def code(self) -> str:
        return self.kind.value

    def format(self, path: Optional[str] = None) -> str:
        location = ErrorLocation(path=path, line=self.line, column=self.column).describe()
        return f"{location}: warning: {self.message} [{self.code}]"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "offset": self.offset,
            "line": self.line,
            "column": self.column,
            "marker": self.marker,
        }


__all__ = [
    "ErrorLocation",
    "TuduError",
    "ConfigurationError",
    "WarningKind",
    "ScanWarning",
]

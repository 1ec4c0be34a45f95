"""Shared typed models for the uploader."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ColumnType(str, Enum):
    """Notion property types the uploader knows about."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    OTHER = "other"

    @classmethod
    def from_api(cls, value: Any) -> ColumnType:
        """Map a raw Notion property type string, falling back to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Column types that insert writes without --extended-types.
CORE_COLUMN_TYPES: frozenset[ColumnType] = frozenset({
    ColumnType.TITLE,
    ColumnType.RICH_TEXT,
    ColumnType.NUMBER,
})

# Drop reasons reported by the coercer.
NOT_IN_SCHEMA = "not_in_schema"
TYPE_MISMATCH = "type_mismatch"
UNSUPPORTED_TYPE = "unsupported_type"


@dataclass(frozen=True, slots=True)
class Column:
    """One typed column of a Notion database."""

    name: str
    type: ColumnType
    raw_type: str


@dataclass(frozen=True, slots=True)
class DatabaseSchema:
    """Column definitions of one database, fetched once per run."""

    database_id: str
    title: str
    columns: dict[str, Column]

    def column_type(self, name: str) -> ColumnType | None:
        column = self.columns.get(name)
        return column.type if column is not None else None


@dataclass(frozen=True, slots=True)
class DroppedField:
    name: str
    reason: str


@dataclass(slots=True)
class CoercionResult:
    """Notion-ready properties for one record plus the fields left out."""

    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    dropped: list[DroppedField] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)


@dataclass(slots=True)
class RecordOutcome:
    """Result of submitting one input record."""

    index: int
    success: bool
    url: str = ""
    error: str = ""
    dropped_fields: int = 0


@dataclass(slots=True)
class InsertSummary:
    outcomes: list[RecordOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def dropped_fields(self) -> int:
        return sum(outcome.dropped_fields for outcome in self.outcomes)

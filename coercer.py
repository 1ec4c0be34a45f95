"""Schema-aware conversion of raw JSON records into Notion page properties."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Callable

from errors import MalformedRecordError
from models import (
    CORE_COLUMN_TYPES,
    NOT_IN_SCHEMA,
    TYPE_MISMATCH,
    UNSUPPORTED_TYPE,
    CoercionResult,
    ColumnType,
    DatabaseSchema,
    DroppedField,
)

# Notion rejects rich text runs with more content than this.
MAX_TEXT_RUN_LENGTH = 2000

PropertyBuilder = Callable[[Any], "dict[str, Any] | None"]


def coerce_record(
    raw: Any,
    schema: DatabaseSchema,
    *,
    extended_types: bool = False,
) -> CoercionResult:
    """Convert one raw record into Notion properties for ``schema``.

    Fields are looked up by exact column name. Unknown fields, values whose
    JSON type does not fit the column, and columns without a builder are
    dropped and reported in ``CoercionResult.dropped``; none of these raise.

    Only title, rich_text and number columns are written unless
    ``extended_types`` is set.

    Raises:
        MalformedRecordError: ``raw`` has no object under ``"properties"``.
    """
    if not isinstance(raw, dict):
        raise MalformedRecordError(f"expected a JSON object, got {type(raw).__name__}")
    fields = raw.get("properties")
    if not isinstance(fields, dict):
        raise MalformedRecordError("expected key 'properties' in data, got none")

    result = CoercionResult()
    for name, value in fields.items():
        column_type = schema.column_type(name)
        if column_type is None:
            result.dropped.append(DroppedField(name, NOT_IN_SCHEMA))
            continue

        builder = _builder_for(column_type, extended_types)
        if builder is None:
            result.dropped.append(DroppedField(name, UNSUPPORTED_TYPE))
            continue

        payload = builder(value)
        if payload is None:
            result.dropped.append(DroppedField(name, TYPE_MISMATCH))
            continue

        result.properties[name] = payload

    return result


def writable_column_types(extended_types: bool = False) -> frozenset[ColumnType]:
    """Column types that coerce_record can produce a value for."""
    if extended_types:
        return frozenset(_BUILDERS)
    return CORE_COLUMN_TYPES


def _builder_for(column_type: ColumnType, extended_types: bool) -> PropertyBuilder | None:
    if column_type not in writable_column_types(extended_types):
        return None
    return _BUILDERS.get(column_type)


def _text_runs(text: str) -> list[dict[str, Any]]:
    if len(text) <= MAX_TEXT_RUN_LENGTH:
        return [{"text": {"content": text}}]
    return [
        {"text": {"content": text[start : start + MAX_TEXT_RUN_LENGTH]}}
        for start in range(0, len(text), MAX_TEXT_RUN_LENGTH)
    ]


def _title(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, str):
        return None
    return {"title": _text_runs(value)}


def _rich_text(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, str):
        return None
    return {"rich_text": _text_runs(value)}


def _number(value: Any) -> dict[str, Any] | None:
    # bool is an int subclass but JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return {"number": value}


def _select(value: Any) -> dict[str, Any] | None:
    name = _non_empty_str(value)
    if name is None:
        return None
    return {"select": {"name": name}}


def _multi_select(value: Any) -> dict[str, Any] | None:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None

    options: list[dict[str, str]] = []
    for item in value:
        name = _non_empty_str(item)
        if name is None:
            return None
        options.append({"name": name})
    return {"multi_select": options}


def _date(value: Any) -> dict[str, Any] | None:
    if isinstance(value, str):
        start, end = value, None
    elif isinstance(value, dict):
        start, end = value.get("start"), value.get("end")
    else:
        return None

    if not _is_iso_date(start):
        return None
    if end is not None and not _is_iso_date(end):
        return None
    return {"date": {"start": start.strip(), "end": end.strip() if end else None}}


def _checkbox(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, bool):
        return None
    return {"checkbox": value}


def _url(value: Any) -> dict[str, Any] | None:
    url = _non_empty_str(value)
    return {"url": url} if url is not None else None


def _email(value: Any) -> dict[str, Any] | None:
    email = _non_empty_str(value)
    if email is None or "@" not in email:
        return None
    return {"email": email}


def _phone_number(value: Any) -> dict[str, Any] | None:
    phone = _non_empty_str(value)
    return {"phone_number": phone} if phone is not None else None


def _non_empty_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    text = value.strip()
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


_BUILDERS: dict[ColumnType, PropertyBuilder] = {
    ColumnType.TITLE: _title,
    ColumnType.RICH_TEXT: _rich_text,
    ColumnType.NUMBER: _number,
    ColumnType.SELECT: _select,
    ColumnType.MULTI_SELECT: _multi_select,
    ColumnType.DATE: _date,
    ColumnType.CHECKBOX: _checkbox,
    ColumnType.URL: _url,
    ColumnType.EMAIL: _email,
    ColumnType.PHONE_NUMBER: _phone_number,
}

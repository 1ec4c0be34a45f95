"""Text report for the ``inspect`` command."""

from __future__ import annotations

import json
from typing import Any

from coercer import writable_column_types
from models import ColumnType, DatabaseSchema

TYPE_LABELS: dict[ColumnType, str] = {
    ColumnType.TITLE: "Title",
    ColumnType.RICH_TEXT: "Rich Text",
    ColumnType.NUMBER: "Number",
    ColumnType.SELECT: "Select",
    ColumnType.MULTI_SELECT: "Multi Select",
    ColumnType.DATE: "Date",
    ColumnType.CHECKBOX: "Checkbox",
    ColumnType.URL: "URL",
    ColumnType.EMAIL: "Email",
    ColumnType.PHONE_NUMBER: "Phone Number",
}

# Input values in the shape coerce_record accepts for each column type.
SAMPLE_VALUES: dict[ColumnType, Any] = {
    ColumnType.TITLE: "Sample Title",
    ColumnType.RICH_TEXT: "Sample text",
    ColumnType.NUMBER: 42,
    ColumnType.SELECT: "Option Name",
    ColumnType.MULTI_SELECT: ["Option 1", "Option 2"],
    ColumnType.DATE: "2023-01-01",
    ColumnType.CHECKBOX: True,
    ColumnType.URL: "https://example.com",
    ColumnType.EMAIL: "example@example.com",
    ColumnType.PHONE_NUMBER: "+1 234 567 8900",
}


def type_label(column_type: ColumnType, raw_type: str) -> str:
    """Human label for a column type; unknown types show the raw API name."""
    return TYPE_LABELS.get(column_type, raw_type)


def sample_record(schema: DatabaseSchema, *, extended_types: bool = False) -> dict[str, Any]:
    """Build an example input record covering every writable column."""
    writable = writable_column_types(extended_types)
    properties = {
        name: SAMPLE_VALUES[column.type]
        for name, column in schema.columns.items()
        if column.type in writable
    }
    return {"properties": properties}


def render_schema(schema: DatabaseSchema, *, extended_types: bool = False) -> str:
    writable = writable_column_types(extended_types)
    lines = [
        f"Database Title: {schema.title}",
        "",
        "Properties (columns) available:",
        "-" * 29,
    ]
    skipped = 0
    for name, column in schema.columns.items():
        line = f"{name} (Type: {type_label(column.type, column.raw_type)})"
        if column.type not in writable:
            line += " [skipped on insert]"
            skipped += 1
        lines.append(line)

    lines.append("")
    if skipped and not extended_types:
        lines.append(
            f"{skipped} column(s) are skipped on insert; run insert with --extended-types "
            "to write select, date, checkbox, url, email and phone columns."
        )
        lines.append("")

    lines.append(
        "When creating your JSON data file, make sure property names exactly match these column names."
    )
    lines.append("Example for this database:")
    lines.append("```")
    lines.append(json.dumps(sample_record(schema, extended_types=extended_types), indent=2, ensure_ascii=False))
    lines.append("```")
    return "\n".join(lines)

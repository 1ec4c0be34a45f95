"""Normalization of Notion database identifiers given on the command line."""

from __future__ import annotations

import re

from errors import ValidationError

_UUID_PATTERN = re.compile(
    r"^[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}$"
)
_HEX32_PATTERN = re.compile(r"^[a-fA-F0-9]{32}$")
_HEX32_RUN = re.compile(r"[a-fA-F0-9]{32}")

EXAMPLE_ID = "f1a2b3c4-d5e6-7f8a-9b0c-1d2e3f4a5b6c"


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID_PATTERN.match(value))


def clean_database_id(value: str) -> str:
    """Extract a dashed UUID from a raw id, a dash-less id or a Notion URL.

    Values that already contain a dash are returned untouched; anything that
    cannot be turned into a better shape is returned as given.
    """
    if "-" in value:
        return value

    candidate = value.strip()

    if _HEX32_PATTERN.match(candidate):
        return _with_dashes(candidate)

    if "/" in candidate:
        trailing = candidate.rstrip("/").rsplit("/", 1)[-1]
        if len(trailing) >= 32:
            return clean_database_id(trailing)
        return candidate

    # e.g. "1d4a5e7fe23180b98df2ddce1ea05ddf?v=..." copied from the address bar
    match = _HEX32_RUN.search(candidate)
    if match:
        return _with_dashes(match.group(0))

    return candidate


def normalize_database_id(value: str) -> str:
    """Return the dashed UUID for ``value`` or raise ValidationError."""
    database_id = clean_database_id(value)
    if not is_valid_uuid(database_id):
        raise ValidationError(
            "The database ID must be in UUID format.\n"
            f"Example: {EXAMPLE_ID}\n"
            "You can find this in your Notion URL when viewing the database."
        )
    return database_id


def _with_dashes(hex32: str) -> str:
    return f"{hex32[0:8]}-{hex32[8:12]}-{hex32[12:16]}-{hex32[16:20]}-{hex32[20:32]}"

"""Loading of raw records from the JSON data file."""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from errors import InputFileError

LOGGER = logging.getLogger(__name__)


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Read ``path`` and return its records in file order.

    The file holds either a single JSON object or an array of objects.
    """
    data_path = Path(path)
    LOGGER.info("Reading data from %s...", data_path)
    try:
        content = data_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(f"Error reading data file {data_path}: {exc}") from exc

    LOGGER.debug("Raw JSON content:\n%s", content)
    return parse_records(content)


def parse_records(content: str) -> list[dict[str, Any]]:
    try:
        parsed = json.loads(content)
    except (JSONDecodeError, RecursionError) as exc:
        raise InputFileError(
            f"Error parsing JSON data: {exc}\n"
            "Make sure your JSON is valid and contains property data for Notion."
        ) from exc

    if isinstance(parsed, dict):
        return [parsed]

    if isinstance(parsed, list):
        for position, item in enumerate(parsed, start=1):
            if not isinstance(item, dict):
                raise InputFileError(
                    f"Error parsing JSON data: item {position} is a {type(item).__name__}, expected an object"
                )
        return parsed

    raise InputFileError("Error parsing JSON data: expected an object or an array of objects")

"""Sequential submission of coerced records to a Notion database."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from coercer import coerce_record
from errors import MalformedRecordError, NotionAPIError
from models import NOT_IN_SCHEMA, DatabaseSchema, InsertSummary, RecordOutcome
from notion_api import ACCESS_HELP_TEXT, create_page

LOGGER = logging.getLogger(__name__)


def insert_records(
    records: Iterable[Any],
    schema: DatabaseSchema,
    *,
    api_key: str,
    extended_types: bool = False,
) -> InsertSummary:
    """Coerce and create one page per record, in input order.

    A record that is malformed or rejected by the API is logged and
    recorded as failed; the remaining records are still attempted.
    """
    summary = InsertSummary()
    available = ", ".join(schema.columns) or "(none)"
    access_help_shown = False

    for index, raw in enumerate(records, start=1):
        LOGGER.debug("Processing record %s...", index)
        try:
            result = coerce_record(raw, schema, extended_types=extended_types)
        except MalformedRecordError as exc:
            exc.record_index = index
            summary.outcomes.append(_failed_conversion(exc))
            continue

        for dropped in result.dropped:
            if dropped.reason == NOT_IN_SCHEMA:
                LOGGER.debug(
                    "Record %s: property %r does not exist in the database schema; available properties are: %s",
                    index,
                    dropped.name,
                    available,
                )
            else:
                LOGGER.debug("Record %s: dropped field %r (%s)", index, dropped.name, dropped.reason)
        if result.dropped_count:
            LOGGER.info("Record %s: %s field(s) dropped", index, result.dropped_count)

        try:
            url = create_page(schema.database_id, result.properties, api_key=api_key)
        except NotionAPIError as exc:
            LOGGER.error("Inserting record %s failed: %s", index, exc)
            if exc.access_denied and not access_help_shown:
                LOGGER.error("%s", ACCESS_HELP_TEXT)
                access_help_shown = True
            summary.outcomes.append(
                RecordOutcome(
                    index=index,
                    success=False,
                    error=str(exc),
                    dropped_fields=result.dropped_count,
                )
            )
            continue

        LOGGER.info("Inserted record %s%s", index, f": {url}" if url else "")
        summary.outcomes.append(
            RecordOutcome(index=index, success=True, url=url, dropped_fields=result.dropped_count)
        )

    LOGGER.info(
        "Insert complete. succeeded=%s failed=%s total=%s dropped_fields=%s",
        summary.succeeded,
        summary.failed,
        summary.total,
        summary.dropped_fields,
    )
    return summary


def _failed_conversion(exc: MalformedRecordError) -> RecordOutcome:
    LOGGER.error("Error converting record %s: %s", exc.record_index, exc)
    return RecordOutcome(index=exc.record_index or 0, success=False, error=str(exc))

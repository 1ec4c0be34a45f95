"""
Exception hierarchy for the uploader.

Everything raised on purpose inherits from UploaderError so the CLI can
separate fatal run errors from per-record failures.
"""

from __future__ import annotations

# Notion error codes meaning the database is missing or not shared with the integration.
ACCESS_DENIED_CODES = frozenset({"object_not_found", "restricted_resource"})


class UploaderError(Exception):
    """Base exception for all uploader errors."""


class ValidationError(UploaderError):
    """Bad command-line flags, database identifier or credential."""


class InputFileError(UploaderError):
    """The data file could not be read or parsed."""


class NotionAPIError(UploaderError):
    """A Notion API call failed.

    ``status`` is the HTTP status (None for network failures) and ``code``
    the machine-readable error code from the Notion error body, when present.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        self.status = status
        self.code = code
        super().__init__(message)

    @property
    def access_denied(self) -> bool:
        return self.code in ACCESS_DENIED_CODES


class SchemaFetchError(NotionAPIError):
    """The database schema could not be retrieved."""


class NotFoundError(SchemaFetchError):
    """Database does not exist or is not shared with the integration."""


class TransportError(SchemaFetchError):
    """Network, authentication or server failure while fetching the schema."""


class RecordError(UploaderError):
    """A single input record could not be processed."""

    def __init__(self, message: str, *, record_index: int | None = None) -> None:
        self.record_index = record_index
        super().__init__(message)


class MalformedRecordError(RecordError):
    """Record is not an object with a ``properties`` field map."""

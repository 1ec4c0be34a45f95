"""Notion API integration: database schema lookup and page creation."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import requests

from errors import NotFoundError, NotionAPIError, TransportError
from models import Column, ColumnType, DatabaseSchema

# NOTION_API_BASE_URL, NOTION_VERSION and NOTION_TIMEOUT_SECONDS override these per request.
DEFAULT_API_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_TIMEOUT_SECONDS = 30.0

LOGGER = logging.getLogger(__name__)

ACCESS_HELP_TEXT = """Permission Error: Your integration doesn't have access to this database.
To fix this:
1. Go to your database in Notion
2. Click the "..." menu in the top right corner
3. Select "Add connections"
4. Find and select your integration name

Also verify that your Database ID is correct."""


def fetch_database_schema(database_id: str, api_key: str) -> DatabaseSchema:
    """Retrieve the title and column definitions of a Notion database.

    Raises:
        NotFoundError: the database does not exist or is not shared with the integration.
        TransportError: any other failure (network, auth, server, bad payload).
    """
    try:
        body = _request(
            method="GET",
            url=f"{_base_url()}/databases/{database_id}",
            headers=_headers(api_key),
        )
    except NotionAPIError as exc:
        error_cls = NotFoundError if exc.access_denied else TransportError
        raise error_cls(str(exc), status=exc.status, code=exc.code) from exc

    properties = body.get("properties")
    if not isinstance(properties, dict):
        raise TransportError("Unexpected Notion database payload: missing 'properties'")

    columns: dict[str, Column] = {}
    for name, config in properties.items():
        raw_type = config.get("type") if isinstance(config, dict) else None
        raw_type = raw_type if isinstance(raw_type, str) else "unknown"
        columns[name] = Column(name=name, type=ColumnType.from_api(raw_type), raw_type=raw_type)

    schema = DatabaseSchema(
        database_id=database_id,
        title=_plain_text(body.get("title")) or "Untitled",
        columns=columns,
    )
    LOGGER.debug("Fetched schema for database %s: %s columns", database_id, len(columns))
    return schema


def create_page(database_id: str, properties: dict[str, Any], api_key: str) -> str:
    """Create one page in the database and return its URL (may be empty)."""
    payload = {"parent": {"database_id": database_id}, "properties": properties}
    LOGGER.debug("Request JSON:\n%s", json.dumps(payload, indent=2, ensure_ascii=False))

    body = _request(
        method="POST",
        url=f"{_base_url()}/pages",
        headers=_headers(api_key),
        json_payload=payload,
    )
    url = body.get("url")
    return url if isinstance(url, str) else ""


def _plain_text(runs: Any) -> str:
    if not isinstance(runs, list):
        return ""
    parts: list[str] = []
    for run in runs:
        if not isinstance(run, dict):
            continue
        text = run.get("plain_text")
        if not isinstance(text, str):
            content = run.get("text") if isinstance(run.get("text"), dict) else {}
            text = content.get("content")
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def _base_url() -> str:
    return (os.getenv("NOTION_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/")


def _timeout_seconds() -> float:
    raw = os.getenv("NOTION_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError as exc:
        raise NotionAPIError(f"NOTION_TIMEOUT_SECONDS must be a number, got {raw!r}") from exc


def _headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Notion-Version": os.getenv("NOTION_VERSION") or DEFAULT_NOTION_VERSION,
        "Content-Type": "application/json",
    }


def _request(
    *,
    method: str,
    url: str,
    headers: dict[str, str],
    json_payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Send one Notion request and return the decoded JSON object."""
    try:
        response = requests.request(
            method=method,
            url=url,
            headers=headers,
            json=json_payload,
            timeout=_timeout_seconds(),
        )
    except requests.RequestException as exc:
        raise NotionAPIError(f"Notion API request failed: {exc}") from exc

    if not response.ok:
        raise _error_from_response(response)

    try:
        body = response.json()
    except ValueError as exc:
        raise NotionAPIError(
            f"Notion API returned a non-JSON response: {response.text[:200]}",
            status=response.status_code,
        ) from exc

    if not isinstance(body, dict):
        raise NotionAPIError("Notion API returned an unexpected payload", status=response.status_code)
    return body


def _error_from_response(response: requests.Response) -> NotionAPIError:
    code: str | None = None
    message = response.text
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get("code"), str):
            code = body["code"]
        if isinstance(body.get("message"), str):
            message = body["message"]

    details = f"{code}: {message}" if code else message
    return NotionAPIError(
        f"Notion API request failed with status {response.status_code} ({details})",
        status=response.status_code,
        code=code,
    )

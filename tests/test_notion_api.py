from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from dotenv import load_dotenv

import notion_api
from errors import NotFoundError, NotionAPIError, TransportError
from models import ColumnType

DATABASE_ID = "f1a2b3c4-d5e6-7f8a-9b0c-1d2e3f4a5b6c"


@pytest.fixture(autouse=True)
def clear_notion_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NOTION_API_BASE_URL", "NOTION_VERSION", "NOTION_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def _mock_resp(status: int = 200, payload: object = None) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status
    mock.ok = status < 400
    mock.text = "" if payload is None else str(payload)
    if payload is None:
        mock.json.side_effect = ValueError("no json")
    else:
        mock.json.return_value = payload
    return mock


_DATABASE_PAYLOAD = {
    "object": "database",
    "id": DATABASE_ID,
    "title": [{"plain_text": "Team "}, {"text": {"content": "Tasks"}}],
    "properties": {
        "Name": {"id": "title", "type": "title", "title": {}},
        "Age": {"id": "a1", "type": "number", "number": {"format": "number"}},
        "Stage": {"id": "s1", "type": "status", "status": {}},
        "Tags": {"id": "t1", "type": "multi_select", "multi_select": {"options": []}},
    },
}


def test_fetch_database_schema_parses_columns() -> None:
    with patch("notion_api.requests.request", return_value=_mock_resp(payload=_DATABASE_PAYLOAD)) as mock_request:
        schema = notion_api.fetch_database_schema(DATABASE_ID, "secret")

    assert schema.database_id == DATABASE_ID
    assert schema.title == "Team Tasks"
    assert schema.column_type("Name") == ColumnType.TITLE
    assert schema.column_type("Age") == ColumnType.NUMBER
    assert schema.column_type("Tags") == ColumnType.MULTI_SELECT
    assert schema.column_type("Stage") == ColumnType.OTHER
    assert schema.columns["Stage"].raw_type == "status"
    assert schema.column_type("Missing") is None

    kwargs = mock_request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"].endswith(f"/databases/{DATABASE_ID}")
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["headers"]["Notion-Version"] == notion_api.DEFAULT_NOTION_VERSION


def test_fetch_database_schema_untitled_database() -> None:
    payload = {"title": [], "properties": {}}
    with patch("notion_api.requests.request", return_value=_mock_resp(payload=payload)):
        schema = notion_api.fetch_database_schema(DATABASE_ID, "secret")

    assert schema.title == "Untitled"
    assert schema.columns == {}


@pytest.mark.parametrize("code, status", [
    ("object_not_found", 404),
    ("restricted_resource", 403),
])
def test_fetch_database_schema_access_errors_raise_not_found(code: str, status: int) -> None:
    payload = {"object": "error", "status": status, "code": code, "message": "Could not find database with ID"}
    with patch("notion_api.requests.request", return_value=_mock_resp(status, payload)):
        with pytest.raises(NotFoundError) as excinfo:
            notion_api.fetch_database_schema(DATABASE_ID, "secret")

    assert excinfo.value.code == code
    assert excinfo.value.status == status
    assert excinfo.value.access_denied is True


def test_fetch_database_schema_unauthorized_is_transport_error() -> None:
    payload = {"object": "error", "status": 401, "code": "unauthorized", "message": "API token is invalid."}
    with patch("notion_api.requests.request", return_value=_mock_resp(401, payload)):
        with pytest.raises(TransportError, match="API token is invalid"):
            notion_api.fetch_database_schema(DATABASE_ID, "bad")


def test_fetch_database_schema_network_failure_is_transport_error() -> None:
    with patch("notion_api.requests.request", side_effect=requests.ConnectionError("offline")):
        with pytest.raises(TransportError, match="offline") as excinfo:
            notion_api.fetch_database_schema(DATABASE_ID, "secret")

    assert excinfo.value.status is None


def test_fetch_database_schema_server_error_without_json_body() -> None:
    with patch("notion_api.requests.request", return_value=_mock_resp(502)):
        with pytest.raises(TransportError, match="status 502"):
            notion_api.fetch_database_schema(DATABASE_ID, "secret")


def test_fetch_database_schema_makes_single_attempt() -> None:
    with patch("notion_api.requests.request", side_effect=requests.Timeout("slow")) as mock_request:
        with pytest.raises(TransportError):
            notion_api.fetch_database_schema(DATABASE_ID, "secret")

    assert mock_request.call_count == 1


def test_create_page_posts_parent_and_properties() -> None:
    properties = {"Name": {"title": [{"text": {"content": "A"}}]}}
    page = {"object": "page", "id": "p1", "url": "https://www.notion.so/p1"}

    with patch("notion_api.requests.request", return_value=_mock_resp(payload=page)) as mock_request:
        url = notion_api.create_page(DATABASE_ID, properties, api_key="secret")

    assert url == "https://www.notion.so/p1"
    kwargs = mock_request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"].endswith("/pages")
    assert kwargs["json"] == {"parent": {"database_id": DATABASE_ID}, "properties": properties}


def test_create_page_without_url_returns_empty_string() -> None:
    with patch("notion_api.requests.request", return_value=_mock_resp(payload={"object": "page"})):
        assert notion_api.create_page(DATABASE_ID, {}, api_key="secret") == ""


def test_create_page_validation_error_raises_notion_api_error() -> None:
    payload = {"object": "error", "status": 400, "code": "validation_error", "message": "Name is not a property"}
    with patch("notion_api.requests.request", return_value=_mock_resp(400, payload)):
        with pytest.raises(NotionAPIError) as excinfo:
            notion_api.create_page(DATABASE_ID, {}, api_key="secret")

    assert excinfo.value.code == "validation_error"
    assert excinfo.value.access_denied is False
    assert not isinstance(excinfo.value, TransportError)


def test_environment_overrides_are_read_per_request(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTION_API_BASE_URL", "https://notion.example.test/v9/")
    monkeypatch.setenv("NOTION_VERSION", "2099-01-01")
    monkeypatch.setenv("NOTION_TIMEOUT_SECONDS", "5")

    with patch("notion_api.requests.request", return_value=_mock_resp(payload=_DATABASE_PAYLOAD)) as mock_request:
        notion_api.fetch_database_schema(DATABASE_ID, "secret")

    kwargs = mock_request.call_args.kwargs
    assert kwargs["url"] == f"https://notion.example.test/v9/databases/{DATABASE_ID}"
    assert kwargs["headers"]["Notion-Version"] == "2099-01-01"
    assert kwargs["timeout"] == 5.0


def test_dotenv_values_apply_after_import(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("NOTION_VERSION=2099-01-01\n", encoding="utf-8")
    # Registered with monkeypatch so the value loaded below is undone after the test.
    monkeypatch.setenv("NOTION_VERSION", "")
    load_dotenv(env_file, override=True)

    with patch("notion_api.requests.request", return_value=_mock_resp(payload={"object": "page"})) as mock_request:
        notion_api.create_page(DATABASE_ID, {}, api_key="secret")

    assert mock_request.call_args.kwargs["headers"]["Notion-Version"] == "2099-01-01"


def test_invalid_timeout_setting_is_a_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTION_TIMEOUT_SECONDS", "soon")

    with patch("notion_api.requests.request") as mock_request:
        with pytest.raises(TransportError, match="NOTION_TIMEOUT_SECONDS"):
            notion_api.fetch_database_schema(DATABASE_ID, "secret")

    mock_request.assert_not_called()

from pathlib import Path

import pytest

from errors import InputFileError
from records import load_records, parse_records


def test_array_of_objects_keeps_order(tmp_path: Path) -> None:
    data = tmp_path / "data.json"
    data.write_text('[{"properties": {"Name": "A"}}, {"properties": {"Name": "B"}}]', encoding="utf-8")

    records = load_records(data)

    assert [r["properties"]["Name"] for r in records] == ["A", "B"]


def test_single_object_becomes_one_record(tmp_path: Path) -> None:
    data = tmp_path / "data.json"
    data.write_text('{"properties": {"Unknown": "x"}}', encoding="utf-8")

    assert load_records(data) == [{"properties": {"Unknown": "x"}}]


def test_empty_array_yields_no_records() -> None:
    assert parse_records("[]") == []


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(InputFileError, match="Error reading data file"):
        load_records(tmp_path / "nope.json")


@pytest.mark.parametrize("content", [
    "{not json",
    "",
    '[{"properties": {}},]',
])
def test_invalid_json_raises(content: str) -> None:
    with pytest.raises(InputFileError, match="Error parsing JSON data"):
        parse_records(content)


@pytest.mark.parametrize("content", [
    '"just a string"',
    "42",
    '[{"properties": {}}, 3]',
    "[[]]",
])
def test_wrong_top_level_shape_raises(content: str) -> None:
    with pytest.raises(InputFileError):
        parse_records(content)


def test_object_without_properties_is_still_loaded() -> None:
    # Structural checks on each record happen at coercion time.
    assert parse_records('[{"Name": "A"}]') == [{"Name": "A"}]


def test_non_utf8_file_raises(tmp_path: Path) -> None:
    data = tmp_path / "data.json"
    data.write_bytes(b'[{"properties": {"Name": "\xff\xfe"}}]')

    with pytest.raises(InputFileError, match="Error reading data file"):
        load_records(data)


def test_deeply_nested_json_raises() -> None:
    with pytest.raises(InputFileError, match="Error parsing JSON data"):
        parse_records("[" * 100000 + "]" * 100000)

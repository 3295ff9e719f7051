"""Unit tests for roster response parsing."""

import json
import logging

from pytest import mark, raises

from conftest import ROSTER_DATA, frame
from shared_locations import ExtractionFailure, LocationRecord
from shared_locations.parser import (
    extract_user_location,
    parse_location_data,
    parse_roster_response,
    strip_framing,
)

NOW = 1700000123


def test_strip_framing_drops_first_and_last_line():
    assert strip_framing("PREFIX\n[1,\n2]\nSUFFIX") == "[1,2]"


def test_framed_body_parses_like_bare_json():
    payload = json.dumps(ROSTER_DATA)

    framed = parse_roster_response(f"PREFIX\n{payload}\nSUFFIX", now=NOW)
    bare = parse_location_data(json.loads(payload), now=NOW)

    assert framed == bare
    assert len(framed) == 2


def test_single_record_index_mapping():
    data = [[[["id1", "photo1", None, "Alice"], [None, [None, 12.5, 55.1]]]]]

    (record,) = parse_location_data(data, now=NOW)

    assert record == LocationRecord(
        timestamp=NOW,
        id="id1",
        name="Alice",
        photo_url="photo1",
        latitude=55.1,
        longitude=12.5,
    )


def test_empty_roster_yields_no_records():
    assert parse_location_data([[]], now=NOW) == []


def test_missing_roster_yields_no_records():
    assert parse_location_data([None, "x"], now=NOW) == []
    assert parse_location_data([], now=NOW) == []
    assert parse_roster_response(frame("[]")) == []


def test_timestamp_assigned_at_parse_time(monkeypatch):
    monkeypatch.setattr("shared_locations.parser.time.time", lambda: 1234.9)

    records = parse_location_data(ROSTER_DATA)

    assert {r.timestamp for r in records} == {1234}


def test_malformed_entry_is_skipped_with_warning(caplog):
    data = [
        [
            [["broken"]],
            [["id2", "photo2", None, "Bob"], [None, [None, 1.0, 2.0]]],
        ]
    ]

    with caplog.at_level(logging.WARNING):
        records = parse_location_data(data, now=NOW)

    assert [r.id for r in records] == ["id2"]
    assert "Skipping roster entry 0" in caplog.text


def test_extract_user_location_raises_on_short_entry():
    with raises(ExtractionFailure):
        extract_user_location([["id", "photo"]], NOW)


def test_invalid_json_raises():
    with raises(ExtractionFailure, match="Invalid roster response"):
        parse_roster_response("<html>\nnot json\n</html>")


def test_as_row_output_order():
    record = LocationRecord(NOW, "id1", "Alice", "photo1", 55.1, 12.5)
    assert record.as_row() == (NOW, "id1", 55.1, 12.5, "Alice", "photo1")


@mark.parametrize("roster", ["[5]", "[true]", "[1.5]", '["abc"]', '[{"a": 1}]'])
def test_roster_that_is_not_a_list_raises(roster):
    with raises(ExtractionFailure, match="Roster is not a list"):
        parse_roster_response(frame(roster))

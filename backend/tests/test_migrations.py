import copy

from guildboard.services.board.migrations import CURRENT_SCHEMA_VERSION, detect_schema_version, upgrade_room
from guildboard.services.board.room import blank_matrix

from tests.helpers import THIS_WEEK, make_room


def test_detects_versions():
    assert detect_schema_version({"players": [], "availability": {}}) == 1
    assert detect_schema_version(None) == 1
    assert detect_schema_version({"players": [], "weeks": {}}) == CURRENT_SCHEMA_VERSION


def test_legacy_availability_moves_under_current_week():
    matrix = blank_matrix()
    matrix[5][12]["state"] = "free"
    legacy = {"players": [{"id": "a", "name": "A"}], "availability": {"a": matrix}}
    original = copy.deepcopy(legacy)

    room = upgrade_room(legacy, THIS_WEEK)

    assert legacy == original
    assert room["players"] == [{"id": "a", "name": "A"}]
    assert room["weeks"] == {THIS_WEEK: {"availability": {"a": matrix}}}
    assert room["events"] == {}
    assert "availability" not in room


def test_events_written_into_legacy_blob_survive_upgrade():
    legacy = {"players": [], "availability": {}, "events": {THIS_WEEK: [{"id": "1", "title": "raid"}]}}
    room = upgrade_room(legacy, THIS_WEEK)
    assert room["events"][THIS_WEEK][0]["title"] == "raid"


def test_current_shape_is_copied_unchanged():
    stored = make_room(THIS_WEEK, {"A": {0: {0: "busy"}}})
    room = upgrade_room(stored, "2030-01-07")
    assert room == stored
    assert room is not stored


def test_missing_top_level_fields_are_filled():
    assert upgrade_room({"weeks": {}}, THIS_WEEK) == {"players": [], "weeks": {}, "events": {}}
    assert upgrade_room({"weeks": None, "players": None, "events": None}, THIS_WEEK) == {
        "players": [],
        "weeks": {},
        "events": {},
    }
    assert upgrade_room(None, THIS_WEEK) == {"players": [], "weeks": {THIS_WEEK: {"availability": {}}}, "events": {}}

import copy

import pytest

from guildboard.core.constants import DAYS_PER_WEEK, HOURS_PER_DAY, STATES
from guildboard.core.errors import PlayerNotFound
from guildboard.services.board import room as room_ops

from tests.helpers import NEXT_WEEK, THIS_WEEK, WEDNESDAY, make_room


def _shape_ok(matrix) -> bool:
    return len(matrix) == DAYS_PER_WEEK and all(len(day) == HOURS_PER_DAY for day in matrix)


def test_seed_room_has_one_player_and_current_week():
    room = room_ops.seed_room(WEDNESDAY, "Já")
    assert [p["name"] for p in room["players"]] == ["Já"]
    pid = room["players"][0]["id"]
    matrix = room["weeks"][THIS_WEEK]["availability"][pid]
    assert _shape_ok(matrix)
    assert all(c == {"state": "empty", "note": ""} for day in matrix for c in day)
    assert room["events"] == {}


def test_cycle_four_times_returns_to_start():
    room = make_room(THIS_WEEK, {"A": {2: {5: "maybe"}}})
    seen = []
    for _ in range(4):
        room = room_ops.cycle_cell(room, THIS_WEEK, 2, 5, "A")
        seen.append(room_ops.get_cell(room, THIS_WEEK, 2, 5, "A")["state"])
    assert seen == ["busy", "empty", "free", "maybe"]


@pytest.mark.parametrize("state", STATES)
def test_next_state_is_a_four_cycle(state):
    s = state
    for _ in range(4):
        s = room_ops.next_state(s)
    assert s == state


def test_mutations_copy_on_write():
    room = make_room(THIS_WEEK, {"A": {}})
    before = copy.deepcopy(room)
    nxt = room_ops.cycle_cell(room, THIS_WEEK, 0, 0, "A")
    nxt = room_ops.set_cell_note(nxt, THIS_WEEK, 0, 0, "A", "late")
    assert room == before
    assert nxt is not room
    assert room_ops.get_cell(nxt, THIS_WEEK, 0, 0, "A") == {"state": "free", "note": "late"}


def test_note_is_trimmed_and_empty_clears():
    room = make_room(THIS_WEEK, {"A": {}})
    room = room_ops.set_cell_note(room, THIS_WEEK, 1, 1, "A", "  after work  ")
    assert room_ops.get_cell(room, THIS_WEEK, 1, 1, "A")["note"] == "after work"
    room = room_ops.set_cell_note(room, THIS_WEEK, 1, 1, "A", "   ")
    assert room_ops.get_cell(room, THIS_WEEK, 1, 1, "A")["note"] == ""


def test_get_cell_never_fails_on_missing_parts():
    room = make_room(THIS_WEEK, {"A": {}})
    empty = {"state": "empty", "note": ""}
    assert room_ops.get_cell(room, THIS_WEEK, 0, 0, "nobody") == empty
    assert room_ops.get_cell(room, NEXT_WEEK, 0, 0, "A") == empty
    assert room_ops.get_cell(room, THIS_WEEK, 7, 0, "A") == empty
    assert room_ops.get_cell(room, THIS_WEEK, 0, 16, "A") == empty
    assert room_ops.get_cell(room, THIS_WEEK, -1, 0, "A") == empty
    assert room_ops.get_cell(room, THIS_WEEK, 0, 0, None) == empty
    assert room_ops.get_cell({}, THIS_WEEK, 0, 0, "A") == empty


def test_edit_outside_grid_is_rejected():
    room = make_room(THIS_WEEK, {"A": {}})
    with pytest.raises(IndexError):
        room_ops.cycle_cell(room, THIS_WEEK, 7, 0, "A")
    with pytest.raises(IndexError):
        room_ops.cycle_cell(room, THIS_WEEK, 0, -1, "A")


def test_edit_unknown_player():
    room = make_room(THIS_WEEK, {"A": {}})
    with pytest.raises(PlayerNotFound):
        room_ops.cycle_cell(room, THIS_WEEK, 0, 0, "B")


def test_editing_unseen_week_creates_it_for_every_player():
    room = make_room(THIS_WEEK, {"A": {}, "B": {}})
    room = room_ops.cycle_cell(room, NEXT_WEEK, 4, 10, "B")
    week = room["weeks"][NEXT_WEEK]["availability"]
    assert set(week) == {"A", "B"}
    assert _shape_ok(week["A"]) and _shape_ok(week["B"])
    assert week["B"][4][10]["state"] == "free"


def test_ensure_week_fills_missing_players_only():
    room = make_room(THIS_WEEK, {"A": {0: {0: "busy"}}})
    room["players"].append({"id": "B", "name": "B"})
    room = room_ops.ensure_week(room, THIS_WEEK)
    assert room["weeks"][THIS_WEEK]["availability"]["A"][0][0]["state"] == "busy"
    assert _shape_ok(room["weeks"][THIS_WEEK]["availability"]["B"])


def test_add_player_gets_blank_matrix_in_every_week():
    room = room_ops.ensure_week(make_room(THIS_WEEK, {"A": {}}), NEXT_WEEK)
    room, player = room_ops.add_player(room, "  Shadowheart ")
    assert player["name"] == "Shadowheart"
    assert room["players"][-1] == player
    for key in (THIS_WEEK, NEXT_WEEK):
        assert _shape_ok(room["weeks"][key]["availability"][player["id"]])


def test_add_blank_player_name_rejected():
    with pytest.raises(ValueError):
        room_ops.add_player(make_room(THIS_WEEK, {}), "   ")


def test_remove_player_from_roster_and_all_weeks():
    room = room_ops.ensure_week(make_room(THIS_WEEK, {"A": {}, "B": {}}), NEXT_WEEK)
    room = room_ops.remove_player(room, "A")
    assert [p["id"] for p in room["players"]] == ["B"]
    for key in (THIS_WEEK, NEXT_WEEK):
        assert "A" not in room["weeks"][key]["availability"]
    with pytest.raises(PlayerNotFound):
        room_ops.remove_player(room, "A")


def test_reset_clears_states_and_notes_but_keeps_events():
    room = make_room(THIS_WEEK, {"A": {0: {0: "free"}}})
    room = room_ops.set_cell_note(room, THIS_WEEK, 0, 0, "A", "x")
    room, _ = room_ops.append_event(room, THIS_WEEK, title="raid", day=5, start_hour=20, end_hour=24, created_by="u")
    room = room_ops.reset_availability(room)
    assert room_ops.get_cell(room, THIS_WEEK, 0, 0, "A") == {"state": "empty", "note": ""}
    assert len(room_ops.events_for_week(room, THIS_WEEK)) == 1


def test_append_event_keeps_insertion_order():
    room = room_ops.empty_room()
    room, first = room_ops.append_event(room, THIS_WEEK, title="a", day=0, start_hour=8, end_hour=9, created_by="x")
    room, second = room_ops.append_event(room, THIS_WEEK, title="b", day=0, start_hour=8, end_hour=9, created_by="x")
    events = room_ops.events_for_week(room, THIS_WEEK)
    assert [e["title"] for e in events] == ["a", "b"]
    assert first["id"] != second["id"]
    assert events[0]["createdBy"] == "x"
    assert room_ops.events_for_week(room, NEXT_WEEK) == []


def test_default_min_free():
    assert room_ops.default_min_free(room_ops.empty_room()) == 1
    assert room_ops.default_min_free(make_room(THIS_WEEK, {"A": {}, "B": {}, "C": {}})) == 3


def test_set_cell_state_explicit():
    room = make_room(THIS_WEEK, {"A": {}})
    room = room_ops.set_cell_state(room, THIS_WEEK, 6, 15, "A", "busy")
    assert room_ops.get_cell(room, THIS_WEEK, 6, 15, "A")["state"] == "busy"
    with pytest.raises(ValueError):
        room_ops.set_cell_state(room, THIS_WEEK, 6, 15, "A", "sleeping")


@pytest.mark.parametrize("events", [None, {THIS_WEEK: None}])
def test_append_event_tolerates_null_event_lists(events):
    room = {"players": [], "weeks": {}, "events": events}
    nxt, event = room_ops.append_event(room, THIS_WEEK, title="a", day=1, start_hour=18, end_hour=20, created_by="x")
    assert room_ops.events_for_week(nxt, THIS_WEEK) == [event]
    assert room["events"] == events

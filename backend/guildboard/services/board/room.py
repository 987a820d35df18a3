"""
Room operations: seed, players, cells, events.

Every mutation deep-copies the room and returns the copy; the room passed in is never
touched, so callers can keep the previous value for comparison or rollback.
"""
import copy
import secrets
import time
import uuid
from datetime import date, datetime, timezone

from guildboard.core.constants import (
    DAYS_PER_WEEK,
    HOURS_PER_DAY,
    STATE_EMPTY,
    STATES,
)
from guildboard.core.errors import PlayerNotFound
from guildboard.services.board.types import Cell, Event, Matrix, Player, RoomData
from guildboard.services.board.weeks import this_week_key


def new_player_id() -> str:
    return uuid.uuid4().hex


def new_event_id() -> str:
    """Millisecond timestamp plus random hex, e.g. "1736190000000-9f2c4e1ab3d0"."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def empty_cell() -> Cell:
    return {"state": STATE_EMPTY, "note": ""}


def blank_matrix() -> Matrix:
    return [[empty_cell() for _ in range(HOURS_PER_DAY)] for _ in range(DAYS_PER_WEEK)]


def empty_room() -> RoomData:
    """Seed used by writers that must not invent a player (bot path)."""
    return {"players": [], "weeks": {}, "events": {}}


def seed_room(now: date | datetime, player_name: str) -> RoomData:
    """First-access room: one default player and a blank current week."""
    player: Player = {"id": new_player_id(), "name": player_name}
    return {
        "players": [player],
        "weeks": {this_week_key(now): {"availability": {player["id"]: blank_matrix()}}},
        "events": {},
    }


def clone(room: RoomData) -> RoomData:
    return copy.deepcopy(room)


def find_player(room: RoomData, player_id: str) -> Player | None:
    for p in room.get("players") or []:
        if p["id"] == player_id:
            return p
    return None


def default_min_free(room: RoomData) -> int:
    return max(1, len(room.get("players") or []))


def _ensure_week_in_place(room: RoomData, key: str) -> None:
    weeks = room.setdefault("weeks", {})
    entry = weeks.setdefault(key, {"availability": {}})
    availability = entry.setdefault("availability", {})
    for p in room.get("players") or []:
        if p["id"] not in availability:
            availability[p["id"]] = blank_matrix()


def ensure_week(room: RoomData, key: str) -> RoomData:
    """Return a copy where week `key` exists with a blank matrix for every player missing one."""
    nxt = clone(room)
    _ensure_week_in_place(nxt, key)
    return nxt


def ensure_weeks(room: RoomData, keys: list[str]) -> RoomData:
    nxt = clone(room)
    for key in keys:
        _ensure_week_in_place(nxt, key)
    return nxt


def _check_slot(day: int, hour: int) -> None:
    # Negative indexes would silently address the last day/hour
    if not 0 <= day < DAYS_PER_WEEK:
        raise IndexError(f"day index {day} outside 0..{DAYS_PER_WEEK - 1}")
    if not 0 <= hour < HOURS_PER_DAY:
        raise IndexError(f"hour index {hour} outside 0..{HOURS_PER_DAY - 1}")


def get_cell(room: RoomData, key: str, day: int, hour: int, player_id: str | None) -> Cell:
    """Cell for (week, day, hour, player); an empty cell when any part is missing. Never raises."""
    if not player_id:
        return empty_cell()
    try:
        matrix = room["weeks"][key]["availability"][player_id]
        if day < 0 or hour < 0:
            return empty_cell()
        cell = matrix[day][hour]
    except (KeyError, IndexError, TypeError):
        return empty_cell()
    return {"state": cell.get("state") or STATE_EMPTY, "note": cell.get("note") or ""}


def next_state(state: str | None) -> str:
    """empty -> free -> maybe -> busy -> empty. Unknown states restart the cycle at free."""
    try:
        idx = STATES.index(state or STATE_EMPTY)
    except ValueError:
        idx = 0
    return STATES[(idx + 1) % len(STATES)]


def _editable_cell(room: RoomData, key: str, day: int, hour: int, player_id: str) -> Cell:
    """Cell inside `room` (already a private copy) to be mutated."""
    _check_slot(day, hour)
    if find_player(room, player_id) is None:
        raise PlayerNotFound(player_id)
    _ensure_week_in_place(room, key)
    return room["weeks"][key]["availability"][player_id][day][hour]


def cycle_cell(room: RoomData, key: str, day: int, hour: int, player_id: str) -> RoomData:
    """Advance one cell to the next state in the cycle."""
    nxt = clone(room)
    cell = _editable_cell(nxt, key, day, hour, player_id)
    cell["state"] = next_state(cell.get("state"))
    return nxt


def set_cell_state(room: RoomData, key: str, day: int, hour: int, player_id: str, state: str) -> RoomData:
    if state not in STATES:
        raise ValueError(f"Unknown cell state {state!r}")
    nxt = clone(room)
    _editable_cell(nxt, key, day, hour, player_id)["state"] = state
    return nxt


def set_cell_note(room: RoomData, key: str, day: int, hour: int, player_id: str, note: str) -> RoomData:
    """Overwrite the note with trimmed text; an empty string clears it."""
    nxt = clone(room)
    _editable_cell(nxt, key, day, hour, player_id)["note"] = (note or "").strip()
    return nxt


def add_player(room: RoomData, name: str) -> tuple[RoomData, Player]:
    """Append a player and give them a blank matrix in every existing week."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Player name must not be blank")
    nxt = clone(room)
    player: Player = {"id": new_player_id(), "name": name}
    nxt.setdefault("players", []).append(player)
    for entry in (nxt.get("weeks") or {}).values():
        entry.setdefault("availability", {})[player["id"]] = blank_matrix()
    return nxt, player


def remove_player(room: RoomData, player_id: str) -> RoomData:
    """Drop a player from the roster and delete their matrix from every week."""
    if find_player(room, player_id) is None:
        raise PlayerNotFound(player_id)
    nxt = clone(room)
    nxt["players"] = [p for p in nxt["players"] if p["id"] != player_id]
    for entry in (nxt.get("weeks") or {}).values():
        (entry.get("availability") or {}).pop(player_id, None)
    return nxt


def reset_availability(room: RoomData) -> RoomData:
    """Blank every player's states and notes in every week. Events are kept."""
    nxt = clone(room)
    for entry in (nxt.get("weeks") or {}).values():
        availability = entry.setdefault("availability", {})
        for p in nxt.get("players") or []:
            availability[p["id"]] = blank_matrix()
    return nxt


def append_event(
    room: RoomData,
    key: str,
    *,
    title: str,
    day: int,
    start_hour: int,
    end_hour: int,
    created_by: str,
    created_at: datetime | None = None,
) -> tuple[RoomData, Event]:
    """Append an event to week `key` (insertion order is kept; events are never edited)."""
    nxt = clone(room)
    event: Event = {
        "id": new_event_id(),
        "title": title,
        "day": day,
        "startHour": start_hour,
        "endHour": end_hour,
        "createdAt": (created_at or datetime.now(timezone.utc)).isoformat(),
        "createdBy": created_by,
    }
    # Stored blobs may carry null for the whole map or for one week
    events = nxt.get("events") or {}
    events[key] = list(events.get(key) or []) + [event]
    nxt["events"] = events
    return nxt, event


def events_for_week(room: RoomData, key: str) -> list[Event]:
    return list((room.get("events") or {}).get(key) or [])

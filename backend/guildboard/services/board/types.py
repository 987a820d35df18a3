"""
Typed definitions for the persisted room blob.

The whole room is stored as one JSON document (see models.room.Room.data):

    {
      "players": [{"id", "name"}],
      "weeks":   {"<YYYY-MM-DD>": {"availability": {"<player_id>": [[Cell x16] x7]}}},
      "events":  {"<YYYY-MM-DD>": [Event, ...]}
    }

Keys are camelCase where the stored document uses camelCase (events), so blobs written
by older clients stay readable.
"""

from typing import TypedDict


class Player(TypedDict):
    id: str
    name: str


class Cell(TypedDict):
    state: str  # one of core.constants.STATES
    note: str


# 7 days x 16 hours, never jagged
Matrix = list[list[Cell]]


class WeekEntry(TypedDict):
    availability: dict[str, Matrix]


class Event(TypedDict):
    id: str
    title: str
    day: int  # 0 = Monday
    startHour: int
    endHour: int  # exclusive
    createdAt: str  # ISO-8601 UTC
    createdBy: str


class RoomData(TypedDict, total=False):
    players: list[Player]
    weeks: dict[str, WeekEntry]
    events: dict[str, list[Event]]


class ParsedEvent(TypedDict):
    """Bot command after parsing: what to add, relative to this week."""
    day: int
    startHour: int
    endHour: int
    title: str
    weekOffset: int


class Block(TypedDict):
    """Maximal run of hours on one day where at least min_free players are available."""
    day: int
    dayLabel: str
    startHour: int  # clock hour, e.g. 20
    endHour: int  # clock hour, exclusive, e.g. 24
    fullyAvailable: list[str]
    partiallyAvailable: list[str]
    unavailable: list[str]

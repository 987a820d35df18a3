from datetime import datetime

from guildboard.services.board.room import blank_matrix

# Wednesday; its week starts Monday 2025-01-06
WEDNESDAY = datetime(2025, 1, 8, 14, 30)
THIS_WEEK = "2025-01-06"
NEXT_WEEK = "2025-01-13"


def make_room(week_key: str, players: dict[str, dict[int, dict[int, str]]]) -> dict:
    """
    Room with one week. players: name -> {day: {hour_index: state}}; ids are the names.
    Cells not listed stay empty.
    """
    availability = {}
    for name, days in players.items():
        matrix = blank_matrix()
        for day, hours in days.items():
            for hour, state in hours.items():
                matrix[day][hour]["state"] = state
        availability[name] = matrix
    return {
        "players": [{"id": name, "name": name} for name in players],
        "weeks": {week_key: {"availability": availability}},
        "events": {},
    }

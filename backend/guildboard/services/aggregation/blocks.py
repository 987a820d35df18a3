"""
Find maximal runs of hours where at least `min_free` players are available (free or maybe)
and classify every player over each run.

Per day, scan hours left to right. A block opens at the first hour meeting the threshold and
extends while each following hour still meets it; scanning resumes right after the block.
Greedy leftmost-start is the defined behavior: blocks on a day never overlap, come out in
start order, and none can be extended without dropping below the threshold.

Classification uses the set of states a player had over the whole block:
  fully available      {free} only
  partially available  contains free or maybe, but is not {free}
  unavailable          neither free nor maybe (busy / empty throughout)
"""
import logging
from typing import Any

from guildboard.core.constants import (
    AVAILABLE_STATES,
    DAY_LABELS,
    DAYS_PER_WEEK,
    HOURS,
    HOURS_PER_DAY,
    STATE_EMPTY,
    STATE_FREE,
)
from guildboard.services.board.room import events_for_week
from guildboard.services.board.types import Block, Matrix, Player, RoomData
from guildboard.services.board.weeks import format_week_label

logger = logging.getLogger(__name__)


def _week_matrices(room: RoomData, week_key: str) -> dict[str, Matrix]:
    week = (room.get("weeks") or {}).get(week_key) or {}
    return week.get("availability") or {}


def _state_at(matrix: Matrix | None, day: int, hour: int) -> str:
    """State of one cell; missing matrix/day/hour reads as empty."""
    if not matrix:
        return STATE_EMPTY
    try:
        return matrix[day][hour].get("state") or STATE_EMPTY
    except (IndexError, AttributeError):
        return STATE_EMPTY


def _classify(players: list[Player], seen: dict[str, set[str]]) -> tuple[list[str], list[str], list[str]]:
    fully: list[str] = []
    partially: list[str] = []
    unavailable: list[str] = []
    for p in players:
        states = seen[p["id"]]
        if states == {STATE_FREE}:
            fully.append(p["name"])
        elif states & AVAILABLE_STATES:
            partially.append(p["name"])
        else:
            unavailable.append(p["name"])
    return fully, partially, unavailable


def compute_blocks(room: RoomData, week_key: str, min_free: int) -> list[Block]:
    """
    Blocks for one week, ordered by day then start hour.
    startHour/endHour are clock hours (end exclusive). Name lists follow roster order.
    Raises ValueError when min_free < 1.
    """
    if min_free < 1:
        raise ValueError(f"min_free must be at least 1, got {min_free}")
    players: list[Player] = list(room.get("players") or [])
    matrices = _week_matrices(room, week_key)
    by_player = [(p["id"], matrices.get(p["id"])) for p in players]

    def states_at(day: int, hour: int) -> list[tuple[str, str]]:
        return [(pid, _state_at(m, day, hour)) for pid, m in by_player]

    def available_count(hour_states: list[tuple[str, str]]) -> int:
        return sum(1 for _, s in hour_states if s in AVAILABLE_STATES)

    blocks: list[Block] = []
    for day in range(DAYS_PER_WEEK):
        h = 0
        while h < HOURS_PER_DAY:
            first = states_at(day, h)
            if available_count(first) < min_free:
                h += 1
                continue

            start = h
            end = h + 1
            # per player: every state seen across the block
            seen: dict[str, set[str]] = {p["id"]: set() for p in players}
            for pid, s in first:
                seen[pid].add(s)
            while end < HOURS_PER_DAY:
                nxt = states_at(day, end)
                if available_count(nxt) < min_free:
                    break
                for pid, s in nxt:
                    seen[pid].add(s)
                end += 1

            fully, partially, unavailable = _classify(players, seen)
            blocks.append(
                {
                    "day": day,
                    "dayLabel": DAY_LABELS[day],
                    "startHour": HOURS[start],
                    "endHour": HOURS[end - 1] + 1,
                    "fullyAvailable": fully,
                    "partiallyAvailable": partially,
                    "unavailable": unavailable,
                }
            )
            h = end
    return blocks


def count_all_free_hours(room: RoomData, week_key: str) -> int:
    """
    Hours in the week where every player is exactly free (maybe does not count).
    Independent of compute_blocks and its threshold; 0 when the roster is empty.
    """
    players = room.get("players") or []
    if not players:
        return 0
    matrices = _week_matrices(room, week_key)
    count = 0
    for day in range(DAYS_PER_WEEK):
        for hour in range(HOURS_PER_DAY):
            if all(_state_at(matrices.get(p["id"]), day, hour) == STATE_FREE for p in players):
                count += 1
    return count


def build_overlap(room: RoomData, week_key: str, min_free: int) -> dict[str, Any]:
    """Payload for the overlap view of one week."""
    blocks = compute_blocks(room, week_key, min_free)
    logger.debug("Overlap %s min_free=%s: %s blocks", week_key, min_free, len(blocks))
    return {
        "week_key": week_key,
        "week_label": format_week_label(week_key),
        "min_free": min_free,
        "blocks": blocks,
        "all_free_hours": count_all_free_hours(room, week_key),
        "events": events_for_week(room, week_key),
    }

"""
Load-time schema upgrade for stored room blobs.

Version 1 (first release): {"players": [...], "availability": {player_id: matrix}}
  - a single implicit week, no events.
Version 2 (current): {"players": [...], "weeks": {key: {"availability": ...}}, "events": {...}}

Stored blobs carry no version field; the shape is detected. Each step is a pure function
returning a new dict, applied once when a room is loaded.
"""
import copy
import logging
from typing import Any, Callable

from guildboard.services.board.types import RoomData

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2


def detect_schema_version(blob: dict[str, Any] | None) -> int:
    if isinstance(blob, dict) and "weeks" in blob:
        return 2
    return 1


def _upgrade_v1_to_v2(blob: dict[str, Any] | None, week_key: str) -> dict[str, Any]:
    """Wrap the legacy single-week availability under `week_key`."""
    blob = blob or {}
    out: dict[str, Any] = {
        "players": copy.deepcopy(blob.get("players") or []),
        "weeks": {week_key: {"availability": copy.deepcopy(blob.get("availability") or {})}},
        "events": copy.deepcopy(blob.get("events") or {}),
    }
    return out


# from_version -> step producing from_version + 1
MIGRATIONS: dict[int, Callable[[dict[str, Any] | None, str], dict[str, Any]]] = {
    1: _upgrade_v1_to_v2,
}


def upgrade_room(blob: dict[str, Any] | None, week_key: str) -> RoomData:
    """
    Return `blob` in the current shape. `week_key` is where legacy single-week data lands
    (the current week at load time). The input is not modified.
    """
    version = detect_schema_version(blob)
    out = copy.deepcopy(blob) if version == CURRENT_SCHEMA_VERSION else blob
    while version < CURRENT_SCHEMA_VERSION:
        logger.info("Upgrading room blob from schema v%s", version)
        out = MIGRATIONS[version](out, week_key)
        version += 1
    # Bot-created rooms and partial writes may lack (or null) any of the top-level fields
    for field, empty in (("players", []), ("weeks", {}), ("events", {})):
        if out.get(field) is None:
            out[field] = empty
    return out

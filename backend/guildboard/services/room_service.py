"""
Open a room for reading or editing: load (seeding unseen slugs), upgrade the stored shape,
make sure this week and next week exist for every player.
"""
from datetime import datetime

from sqlalchemy.orm import Session

from guildboard.services.board.migrations import upgrade_room
from guildboard.services.board.room import ensure_weeks, seed_room
from guildboard.services.board.types import RoomData
from guildboard.services.board.weeks import next_week_key, this_week_key
from guildboard.services.room_store import load_room


def open_room(db: Session, slug: str, now: datetime, player_name: str) -> RoomData:
    """
    Room ready for the board. The ensured weeks are not written back; they are persisted with
    the next edit.
    """
    stored = load_room(db, slug, seed_room(now, player_name))
    room = upgrade_room(stored, this_week_key(now))
    return ensure_weeks(room, [this_week_key(now), next_week_key(now)])

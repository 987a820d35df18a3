"""
Rooms: read-only views of a room (opened on first access) and its overlap for a week.
"""
import logging
from datetime import datetime
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from guildboard.api.deps import get_now, get_settings
from guildboard.config import Settings
from guildboard.core.errors import error_to_http
from guildboard.db.session import get_db
from guildboard.services.aggregation import build_overlap
from guildboard.services.board.room import default_min_free
from guildboard.services.board.weeks import next_week_key, parse_week_key, this_week_key
from guildboard.services.room_service import open_room

router = APIRouter()
logger = logging.getLogger(__name__)


def _handle_error(exc: Exception, log_message: str) -> NoReturn:
    logger.warning("%s: %s", log_message, exc, exc_info=True)
    raise error_to_http(exc) from exc


@router.get("/{slug}")
def get_room(
    slug: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Room data with this week and next week present for every player."""
    try:
        room = open_room(db, slug, now, settings.default_player_name)
    except Exception as e:
        _handle_error(e, f"Load room {slug} failed")
    return {
        "slug": slug,
        "this_week_key": this_week_key(now),
        "next_week_key": next_week_key(now),
        "room": room,
    }


@router.get("/{slug}/overlap")
def get_room_overlap(
    slug: str,
    week_key: str | None = Query(None, description="Monday YYYY-MM-DD; default this week"),
    min_free: int | None = Query(None, ge=1, description="Default: number of players"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Availability blocks, all-free hour count and events for one week."""
    try:
        key = week_key or this_week_key(now)
        parse_week_key(key)
        room = open_room(db, slug, now, settings.default_player_name)
        return build_overlap(room, key, min_free or default_min_free(room))
    except Exception as e:
        _handle_error(e, f"Overlap for room {slug} failed")

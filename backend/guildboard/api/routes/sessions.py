"""
Board sessions: open a room for editing, click cells, edit notes and the roster.

Edits are applied to the session's copy of the room and saved after a short quiet period;
POST /{session_id}/flush and DELETE /{session_id} write immediately.
"""
import logging
from datetime import datetime
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session, sessionmaker

from guildboard.api.deps import get_now, get_registry, get_settings
from guildboard.config import Settings
from guildboard.core.constants import DAYS_PER_WEEK, HOURS_PER_DAY
from guildboard.core.errors import error_to_http
from guildboard.db.session import get_db, get_session_factory
from guildboard.services.board.weeks import parse_week_key
from guildboard.services.board_session import BoardSession, SessionRegistry

router = APIRouter()
logger = logging.getLogger(__name__)


class OpenSessionRequest(BaseModel):
    room: str | None = Field(None, description="Room slug; default room when omitted")


class CellRequest(BaseModel):
    week_key: str
    day: int = Field(..., ge=0, lt=DAYS_PER_WEEK)
    hour: int = Field(..., ge=0, lt=HOURS_PER_DAY, description="Grid row: 0 = 08:00")


class NoteRequest(CellRequest):
    note: str = ""


class AddPlayerRequest(BaseModel):
    name: str


class SelectPlayerRequest(BaseModel):
    player_id: str


class MinFreeRequest(BaseModel):
    min_free: int = Field(..., ge=1)


def _handle_error(exc: Exception, log_message: str) -> NoReturn:
    logger.warning("%s: %s", log_message, exc)
    raise error_to_http(exc) from exc


def _session(session_id: str, registry: SessionRegistry) -> BoardSession:
    try:
        return registry.get(session_id)
    except Exception as e:
        _handle_error(e, "Session lookup failed")


@router.post("")
def open_session(
    body: OpenSessionRequest,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
    registry: SessionRegistry = Depends(get_registry),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Open (and on first access create) a room; returns the session state."""
    slug = (body.room or "").strip() or settings.default_room
    try:
        session = registry.open(db, session_factory, slug, now, settings.default_player_name)
    except Exception as e:
        _handle_error(e, f"Open room {slug} failed")
    return session.snapshot()


@router.get("/{session_id}")
def read_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> dict[str, Any]:
    return _session(session_id, registry).snapshot()


@router.post("/{session_id}/cells/cycle")
def cycle_cell(
    session_id: str,
    body: CellRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Advance the active player's cell: empty -> free -> maybe -> busy -> empty."""
    session = _session(session_id, registry)
    try:
        parse_week_key(body.week_key)
        cell = session.cycle_cell(body.week_key, body.day, body.hour)
    except Exception as e:
        _handle_error(e, "Cycle cell failed")
    return {"cell": cell, "status": session.status}


@router.put("/{session_id}/cells/note")
def set_note(
    session_id: str,
    body: NoteRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Set the active player's note on a cell; empty text clears it."""
    session = _session(session_id, registry)
    try:
        parse_week_key(body.week_key)
        cell = session.set_note(body.week_key, body.day, body.hour, body.note)
    except Exception as e:
        _handle_error(e, "Set note failed")
    return {"cell": cell, "status": session.status}


@router.post("/{session_id}/players")
def add_player(
    session_id: str,
    body: AddPlayerRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = _session(session_id, registry)
    try:
        player = session.add_player(body.name)
    except Exception as e:
        _handle_error(e, "Add player failed")
    return {"player": player, "active_player_id": session.active_player_id, "min_free": session.min_free}


@router.delete("/{session_id}/players/{player_id}")
def remove_player(
    session_id: str,
    player_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = _session(session_id, registry)
    try:
        session.remove_player(player_id)
    except Exception as e:
        _handle_error(e, "Remove player failed")
    return {"ok": True, "active_player_id": session.active_player_id, "min_free": session.min_free}


@router.put("/{session_id}/active-player")
def select_player(
    session_id: str,
    body: SelectPlayerRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = _session(session_id, registry)
    try:
        session.select_player(body.player_id)
    except Exception as e:
        _handle_error(e, "Select player failed")
    return {"ok": True, "active_player_id": session.active_player_id}


@router.put("/{session_id}/min-free")
def set_min_free(
    session_id: str,
    body: MinFreeRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = _session(session_id, registry)
    session.set_min_free(body.min_free)
    return {"ok": True, "min_free": session.min_free}


@router.post("/{session_id}/reset")
def reset_board(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> dict[str, Any]:
    """Clear every state and note for every player in every week (events stay)."""
    session = _session(session_id, registry)
    session.reset()
    return {"ok": True, "status": session.status}


@router.get("/{session_id}/overlap")
def session_overlap(
    session_id: str,
    week_key: str | None = Query(None, description="Monday YYYY-MM-DD; default this week"),
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = _session(session_id, registry)
    try:
        if week_key:
            parse_week_key(week_key)
        return session.overlap(week_key)
    except Exception as e:
        _handle_error(e, "Overlap failed")


@router.post("/{session_id}/flush")
def flush_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> dict[str, Any]:
    session = _session(session_id, registry)
    try:
        saved = session.flush()
    except Exception as e:
        _handle_error(e, "Flush failed")
    return {"saved": saved, "status": session.status}


@router.delete("/{session_id}")
def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> dict[str, Any]:
    """Write pending edits and end the session."""
    try:
        registry.close(session_id)
    except Exception as e:
        _handle_error(e, "Close session failed")
    return {"ok": True}

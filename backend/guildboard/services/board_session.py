"""
Board sessions: one editor's in-memory copy of a room.

A session is opened when a client opens a room and closed when it navigates away. Edits go
through copy-on-write room operations, replace the session's room and schedule a debounced
save. Two sessions on the same room do not coordinate: the later save wins.
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import Any

from apscheduler.schedulers.base import BaseScheduler
from sqlalchemy.orm import Session, sessionmaker

from guildboard.core.constants import STATUS_ERROR, STATUS_OK, STATUS_SAVING
from guildboard.core.errors import PlayerNotFound, SessionNotFound
from guildboard.scheduler.room_save_job import DebouncedSaver
from guildboard.services.aggregation import build_overlap
from guildboard.services.board import room as room_ops
from guildboard.services.board.types import Cell, Player, RoomData
from guildboard.services.board.weeks import format_week_label, next_week_key, this_week_key
from guildboard.services.room_service import open_room

logger = logging.getLogger(__name__)


class BoardSession:
    """Room copy, active player, min-free threshold and save status for one editor."""

    def __init__(self, session_id: str, slug: str, room: RoomData, now: datetime, saver: DebouncedSaver) -> None:
        self.session_id = session_id
        self.slug = slug
        self.room = room
        self.this_week_key = this_week_key(now)
        self.next_week_key = next_week_key(now)
        players = room.get("players") or []
        self.active_player_id: str | None = players[0]["id"] if players else None
        self.min_free = room_ops.default_min_free(room)
        self.status = STATUS_OK
        self.saver = saver
        saver.on_saved = self._on_saved
        saver.on_failed = self._on_failed
        self._lock = threading.RLock()

    # --- save status ---

    def _on_saved(self) -> None:
        if not self.saver.has_pending:
            self.status = STATUS_OK

    def _on_failed(self, exc: Exception) -> None:
        self.status = STATUS_ERROR

    def _persist(self, nxt: RoomData) -> None:
        self.room = nxt
        self.status = STATUS_SAVING
        self.saver.schedule(nxt)

    # --- reads ---

    def cell(self, week_key: str, day: int, hour: int, player_id: str | None = None) -> Cell:
        return room_ops.get_cell(self.room, week_key, day, hour, player_id or self.active_player_id)

    def active_player(self) -> Player | None:
        if not self.active_player_id:
            return None
        return room_ops.find_player(self.room, self.active_player_id)

    def overlap(self, week_key: str | None = None) -> dict[str, Any]:
        return build_overlap(self.room, week_key or self.this_week_key, self.min_free)

    def snapshot(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "slug": self.slug,
            "status": self.status,
            "active_player_id": self.active_player_id,
            "active_player": self.active_player(),
            "min_free": self.min_free,
            "this_week_key": self.this_week_key,
            "this_week_label": format_week_label(self.this_week_key),
            "next_week_key": self.next_week_key,
            "next_week_label": format_week_label(self.next_week_key),
            "room": self.room,
        }

    # --- edits ---

    def cycle_cell(self, week_key: str, day: int, hour: int) -> Cell:
        """Advance the active player's cell. No active player: nothing changes."""
        with self._lock:
            if not self.active_player_id:
                return room_ops.empty_cell()
            self._persist(room_ops.cycle_cell(self.room, week_key, day, hour, self.active_player_id))
            return self.cell(week_key, day, hour)

    def set_note(self, week_key: str, day: int, hour: int, note: str) -> Cell:
        with self._lock:
            if not self.active_player_id:
                return room_ops.empty_cell()
            self._persist(room_ops.set_cell_note(self.room, week_key, day, hour, self.active_player_id, note))
            return self.cell(week_key, day, hour)

    def add_player(self, name: str) -> Player:
        """Add and select a player; the threshold follows the new roster size."""
        with self._lock:
            nxt, player = room_ops.add_player(self.room, name)
            self._persist(nxt)
            self.active_player_id = player["id"]
            self.min_free = room_ops.default_min_free(nxt)
            return player

    def remove_player(self, player_id: str | None = None) -> None:
        """Remove a player (the active one by default); selection falls back to the first player left."""
        with self._lock:
            pid = player_id or self.active_player_id
            if not pid:
                return
            nxt = room_ops.remove_player(self.room, pid)
            self._persist(nxt)
            if self.active_player_id == pid or room_ops.find_player(nxt, self.active_player_id or "") is None:
                players = nxt.get("players") or []
                self.active_player_id = players[0]["id"] if players else None
            self.min_free = room_ops.default_min_free(nxt)

    def select_player(self, player_id: str) -> None:
        with self._lock:
            if room_ops.find_player(self.room, player_id) is None:
                raise PlayerNotFound(player_id)
            self.active_player_id = player_id

    def set_min_free(self, min_free: int) -> None:
        if min_free < 1:
            raise ValueError(f"min_free must be at least 1, got {min_free}")
        with self._lock:
            self.min_free = min_free

    def reset(self) -> None:
        with self._lock:
            self._persist(room_ops.reset_availability(self.room))

    def flush(self) -> bool:
        """Write pending edits now. Raises StoreError (status becomes error)."""
        try:
            return self.saver.flush()
        except Exception as e:
            self._on_failed(e)
            raise


class SessionRegistry:
    """Open board sessions by id. Thread-safe; shared by all requests of the process."""

    def __init__(self, scheduler: BaseScheduler, debounce_seconds: float) -> None:
        self.scheduler = scheduler
        self.debounce_seconds = debounce_seconds
        self._sessions: dict[str, BoardSession] = {}
        self._lock = threading.Lock()

    def open(
        self,
        db: Session,
        session_factory: sessionmaker,
        slug: str,
        now: datetime,
        player_name: str,
    ) -> BoardSession:
        """Load the room (seeding it on first access) and start a session on it. Raises StoreError."""
        room = open_room(db, slug, now, player_name)
        session_id = uuid.uuid4().hex
        saver = DebouncedSaver(
            self.scheduler,
            session_factory,
            slug,
            job_key=session_id,
            delay_seconds=self.debounce_seconds,
        )
        session = BoardSession(session_id, slug, room, now, saver)
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Board session %s opened on room %s", session_id, slug)
        return session

    def get(self, session_id: str) -> BoardSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def close(self, session_id: str) -> None:
        """
        Flush pending edits and forget the session. Raises StoreError if the final write fails;
        the session then stays open so the close can be retried.
        """
        session = self.get(session_id)
        session.flush()
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.info("Board session %s closed", session_id)

    def close_all(self) -> None:
        """Shutdown: flush every session; failures are logged so the rest still get written."""
        with self._lock:
            ids = list(self._sessions)
        for session_id in ids:
            try:
                self.close(session_id)
            except Exception as e:
                logger.warning("Final save of board session %s failed: %s", session_id, e, exc_info=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

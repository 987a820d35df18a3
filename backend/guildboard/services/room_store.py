"""
Room store: load/save a room's whole blob by slug (rooms table).

load_room seeds unseen slugs; when two first-access requests race, the loser's insert hits the
slug primary key, rolls back and re-reads the winner's data. save_room is last-write-wins.
Any other database failure is raised as StoreError.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from guildboard.core.errors import StoreError
from guildboard.models.room import Room

logger = logging.getLogger(__name__)


def _select_room_data(db: Session, slug: str) -> dict[str, Any] | None:
    row = db.query(Room.data).filter(Room.slug == slug).first()
    return row[0] if row else None


def load_room(db: Session, slug: str, seed: dict[str, Any]) -> dict[str, Any]:
    """
    Return the stored blob for `slug`. Unseen slug: store `seed` and return it, unless another
    writer created the room first, in which case return theirs.
    """
    try:
        data = _select_room_data(db, slug)
        if data is not None:
            return data

        db.add(Room(slug=slug, data=seed))
        try:
            db.commit()
            logger.info("Room %s created from seed", slug)
            return seed
        except IntegrityError:
            # Someone else created it in the meantime -> just read again
            db.rollback()
            logger.info("Room %s was created concurrently; re-reading", slug)

        data = _select_room_data(db, slug)
        if data is None:
            raise StoreError(slug, "load", RuntimeError("room vanished after concurrent create"))
        return data
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError(slug, "load", e) from e


def save_room(db: Session, slug: str, data: dict[str, Any]) -> None:
    """Overwrite the stored blob (creates the row if missing). No concurrency token: last write wins."""
    try:
        row = db.query(Room).filter(Room.slug == slug).first()
        now = datetime.now(timezone.utc)
        if row:
            row.data = data
            row.updated_at = now
        else:
            db.add(Room(slug=slug, data=data, updated_at=now))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError(slug, "save", e) from e

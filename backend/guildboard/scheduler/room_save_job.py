"""
Debounced room save: one APScheduler "date" job per board session.

Every edit replaces the pending job (same id, replace_existing=True), so edits inside the
window collapse into a single write of the latest room. flush() writes immediately.
"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from sqlalchemy.orm import sessionmaker

from guildboard.core.constants import SAVE_JOB_ID_PREFIX
from guildboard.services.room_store import save_room

logger = logging.getLogger(__name__)


class DebouncedSaver:
    """Holds the latest unsaved room for one slug and writes it after `delay_seconds` of quiet."""

    def __init__(
        self,
        scheduler: BaseScheduler,
        session_factory: sessionmaker,
        slug: str,
        job_key: str,
        delay_seconds: float,
        on_saved: Callable[[], None] | None = None,
        on_failed: Callable[[Exception], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.session_factory = session_factory
        self.slug = slug
        self.job_id = SAVE_JOB_ID_PREFIX + job_key
        self.delay_seconds = delay_seconds
        self.on_saved = on_saved
        self.on_failed = on_failed
        self._pending: dict[str, Any] | None = None
        self._lock = threading.RLock()

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, data: dict[str, Any]) -> None:
        """Remember `data` as the room to write and (re)start the quiet-period timer."""
        with self._lock:
            self._pending = data
            run_date = datetime.now(timezone.utc) + timedelta(seconds=self.delay_seconds)
            self.scheduler.add_job(
                self._run,
                "date",
                run_date=run_date,
                id=self.job_id,
                replace_existing=True,
                misfire_grace_time=None,
            )

    def _remove_job(self) -> None:
        try:
            self.scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass

    def cancel(self) -> None:
        """Drop the pending write without saving."""
        with self._lock:
            self._remove_job()
            self._pending = None

    def flush(self) -> bool:
        """Write the pending room now. Returns False when nothing was pending. Raises StoreError."""
        with self._lock:
            self._remove_job()
            data = self._pending
            if data is None:
                return False
            db = self.session_factory()
            try:
                save_room(db, self.slug, data)
            finally:
                db.close()
            self._pending = None
        logger.debug("Room %s saved", self.slug)
        if self.on_saved:
            self.on_saved()
        return True

    def _run(self) -> None:
        """Scheduler entry point: errors are logged and reported, not raised."""
        try:
            self.flush()
        except Exception as e:
            logger.warning("Debounced save of room %s failed: %s", self.slug, e, exc_info=True)
            if self.on_failed:
                self.on_failed(e)

"""
Process-wide APScheduler instance. Started and stopped by the FastAPI lifespan in main.py.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler()


def get_scheduler() -> BackgroundScheduler:
    return _scheduler


def start_scheduler() -> BackgroundScheduler:
    if not _scheduler.running:
        _scheduler.start()
        logger.info("Scheduler started")
    return _scheduler


def shutdown_scheduler() -> None:
    if _scheduler.running:
        # Pending debounced saves are flushed by SessionRegistry.close_all before this
        _scheduler.shutdown(wait=False)

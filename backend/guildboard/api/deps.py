"""
Shared FastAPI dependencies. Tests override these with app.dependency_overrides.
"""
from datetime import datetime

from guildboard.config import Settings, settings
from guildboard.scheduler.runner import get_scheduler
from guildboard.services.board_session import SessionRegistry

_registry: SessionRegistry | None = None


def get_now() -> datetime:
    """Reference time for week keys (local time; weeks start Monday at local midnight)."""
    return datetime.now()


def get_settings() -> Settings:
    return settings


def get_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry(get_scheduler(), settings.save_debounce_seconds)
    return _registry

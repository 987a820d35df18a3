from guildboard.db.base import Base
from guildboard.db.session import get_db, get_session_factory, engine, SessionLocal
from guildboard.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "get_session_factory", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]

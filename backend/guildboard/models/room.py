"""One row per room slug: the whole board (players, weeks, events) as a single JSON blob.

slug is the primary key; its uniqueness is what a concurrent first-access insert trips over.
"""
from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from guildboard.db.base import Base


class Room(Base):
    __tablename__ = "rooms"

    slug = Column(String(128), primary_key=True)
    data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

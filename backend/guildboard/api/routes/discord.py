"""
Discord interactions endpoint for the slash command.

Replies immediately; storing the event runs as a background task after the response is sent.
Request signature verification and command registration are handled outside this service.
"""
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from sqlalchemy.orm import sessionmaker

from guildboard.api.deps import get_now, get_settings
from guildboard.config import Settings
from guildboard.db.session import get_session_factory
from guildboard.services.bot import handle_interaction, store_bot_event

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/discord")
def discord_interaction(
    background_tasks: BackgroundTasks,
    interaction: dict[str, Any] = Body(...),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> dict[str, Any]:
    logger.debug("Discord interaction type=%s", interaction.get("type"))
    reply, pending = handle_interaction(interaction, now, settings)
    if pending is not None:
        background_tasks.add_task(store_bot_event, session_factory, pending)
    return reply


@router.get("/discord")
def discord_health() -> dict[str, Any]:
    return {"ok": True, "where": "/api/discord"}

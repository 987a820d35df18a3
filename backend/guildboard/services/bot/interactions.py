"""
Discord slash-command interactions: "/bg3 event: so 20-24 raid" adds an event to the room.

Discord expects an answer within a few seconds, so handle_interaction only parses and builds
the immediate reply; the load-append-save runs afterwards as a detached task
(store_bot_event). Failures there are logged; the user already has their reply.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.orm import sessionmaker

from guildboard.config import Settings
from guildboard.core.constants import DAY_LABELS
from guildboard.core.errors import ParseError
from guildboard.services.board.commands import parse_event_command
from guildboard.services.board.room import append_event, empty_room
from guildboard.services.board.types import ParsedEvent
from guildboard.services.board.weeks import format_hour_range, week_key_for_offset
from guildboard.services.room_store import load_room, save_room

logger = logging.getLogger(__name__)

# Discord interaction / response types
INTERACTION_PING = 1
INTERACTION_APPLICATION_COMMAND = 2
RESPONSE_PONG = 1
RESPONSE_CHANNEL_MESSAGE_WITH_SOURCE = 4

DEFAULT_CREATOR = "discord"


@dataclass(frozen=True)
class PendingBotEvent:
    """Work left for the background task after the immediate reply."""
    slug: str
    week_key: str
    event: ParsedEvent
    created_by: str


def _message(content: str) -> dict[str, Any]:
    return {"type": RESPONSE_CHANNEL_MESSAGE_WITH_SOURCE, "data": {"content": content}}


def _option_value(interaction: dict[str, Any], name: str) -> Any:
    for opt in (interaction.get("data") or {}).get("options") or []:
        if opt.get("name") == name:
            return opt.get("value")
    return None


def _created_by(interaction: dict[str, Any]) -> str:
    member_user = (interaction.get("member") or {}).get("user") or {}
    user = interaction.get("user") or {}
    return member_user.get("username") or user.get("username") or DEFAULT_CREATOR


def handle_interaction(
    interaction: dict[str, Any],
    now: datetime,
    settings: Settings,
) -> tuple[dict[str, Any], PendingBotEvent | None]:
    """
    Immediate response for one interaction, plus the event to store (None when nothing to store).
    Never raises for bad user input; parse errors become the reply text.
    """
    if interaction.get("type") == INTERACTION_PING:
        return {"type": RESPONSE_PONG}, None

    data = interaction.get("data") or {}
    if interaction.get("type") != INTERACTION_APPLICATION_COMMAND or data.get("name") != settings.bot_command_name:
        return _message(f"Použij `/{settings.bot_command_name} {settings.bot_option_name}: so 20-24 raid`"), None

    try:
        parsed = parse_event_command(_option_value(interaction, settings.bot_option_name), settings.default_event_title)
    except ParseError as e:
        return _message(f"❌ {e.message}"), None

    key = week_key_for_offset(now, parsed["weekOffset"])
    pending = PendingBotEvent(
        slug=settings.default_room,
        week_key=key,
        event=parsed,
        created_by=_created_by(interaction),
    )
    reply = _message(
        f"⏳ Ukládám (týden {key}): {DAY_LABELS[parsed['day']]} "
        f"{format_hour_range(parsed['startHour'], parsed['endHour'])} • {parsed['title']}"
    )
    return reply, pending


def store_bot_event(session_factory: sessionmaker, pending: PendingBotEvent) -> None:
    """Background task: load the room, append the event, save immediately. No retry."""
    db = session_factory()
    try:
        room = load_room(db, pending.slug, empty_room())
        nxt, event = append_event(
            room,
            pending.week_key,
            title=pending.event["title"],
            day=pending.event["day"],
            start_hour=pending.event["startHour"],
            end_hour=pending.event["endHour"],
            created_by=pending.created_by,
        )
        save_room(db, pending.slug, nxt)
        logger.info("Bot event %s stored in room %s week %s", event["id"], pending.slug, pending.week_key)
    except Exception as e:
        logger.error("Bot async save failed for room %s: %s", pending.slug, e, exc_info=True)
    finally:
        db.close()

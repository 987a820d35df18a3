"""
Bot command text -> event descriptor.

Supported:
  "so 20-24 raid"      this week, Saturday 20:00-24:00, title "raid"
  "+1 so 20-24 raid"   next week
  "+2 ut 18–20"        in two weeks, en-dash, default title
"""
import re

from guildboard.core.constants import (
    DAY_TOKENS,
    MAX_END_HOUR,
    MAX_START_HOUR,
    MAX_WEEK_OFFSET,
    MIN_END_HOUR,
    MIN_START_HOUR,
)
from guildboard.core.errors import ParseError
from guildboard.services.board.types import ParsedEvent

COMMAND_RE = re.compile(r"^(?:\+(\d+)\s+)?(\S+)\s+(\d{1,2})\s*[-–]\s*(\d{1,2})\s*(.*)$", re.IGNORECASE)


def parse_event_command(text: str | None, default_title: str) -> ParsedEvent:
    """
    Parse "[+N ]<day> <start>-<end>[ <title>]".
    Raises ParseError (kind format / week_offset / day / time_range); its message is user-facing.
    """
    cleaned = str(text or "").strip()
    m = COMMAND_RE.match(cleaned)
    if not m:
        raise ParseError(ParseError.FORMAT)

    week_offset = int(m.group(1)) if m.group(1) else 0
    if not 0 <= week_offset <= MAX_WEEK_OFFSET:
        raise ParseError(ParseError.WEEK_OFFSET)

    day = DAY_TOKENS.get(m.group(2).lower())
    if day is None:
        raise ParseError(ParseError.DAY)

    start = int(m.group(3))
    end = int(m.group(4))
    if not (MIN_START_HOUR <= start <= MAX_START_HOUR and MIN_END_HOUR <= end <= MAX_END_HOUR and end > start):
        raise ParseError(ParseError.TIME_RANGE)

    title = (m.group(5) or "").strip() or default_title
    return {"day": day, "startHour": start, "endHour": end, "title": title, "weekOffset": week_offset}

"""
Week keys: the Monday (local midnight) of a calendar week as YYYY-MM-DD.

All functions take the reference time explicitly; nothing here reads the clock.
"""
from datetime import date, datetime, timedelta

from guildboard.core.constants import HOURS, MAX_WEEK_OFFSET


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def get_monday(now: date | datetime) -> date:
    """Monday of the week containing `now`. Sunday belongs to the week that started 6 days earlier."""
    d = _as_date(now)
    # date.weekday(): Monday=0 .. Sunday=6
    return d - timedelta(days=d.weekday())


def week_key(monday: date | datetime) -> str:
    return _as_date(monday).isoformat()


def parse_week_key(key: str) -> date:
    """Inverse of week_key. Raises ValueError for malformed keys or keys that are not a Monday."""
    d = date.fromisoformat(key)
    if d.weekday() != 0:
        raise ValueError(f"Week key {key!r} is not a Monday")
    return d


def this_week_key(now: date | datetime) -> str:
    return week_key(get_monday(now))


def next_week_key(now: date | datetime) -> str:
    return week_key_for_offset(now, 1)


def week_key_for_offset(now: date | datetime, offset: int) -> str:
    """Week key `offset` weeks after this week (0..52)."""
    if not 0 <= offset <= MAX_WEEK_OFFSET:
        raise ValueError(f"Week offset must be 0..{MAX_WEEK_OFFSET}, got {offset}")
    return week_key(get_monday(now) + timedelta(days=7 * offset))


def week_range(monday: date) -> tuple[date, date]:
    """(Monday, Sunday) of the week."""
    return monday, monday + timedelta(days=6)


def format_cz_date(d: date) -> str:
    # cs-CZ short date: "6. 1. 2025"
    return f"{d.day}. {d.month}. {d.year}"


def format_week_label(key: str) -> str:
    start, end = week_range(parse_week_key(key))
    return f"{format_cz_date(start)} – {format_cz_date(end)}"


def format_hour_range(start_hour: int, end_hour: int) -> str:
    return f"{start_hour:02d}:00–{end_hour:02d}:00"


def hour_label(hour_index: int) -> str:
    """Row label for a grid hour index (0 -> "08:00")."""
    return f"{HOURS[hour_index]:02d}:00"

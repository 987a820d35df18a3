#!/usr/bin/env python3
"""Print a room's overlap for a week: blocks, who is in, all-free hours, events.

Run from backend: python scripts/show_overlap.py --room bg3 --min-free 3
Next week: add --week-offset 1

Or with backend running: curl -s "http://127.0.0.1:8000/rooms/bg3/overlap?min_free=3" | jq
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from guildboard.config import settings
from guildboard.core.constants import DAY_LABELS
from guildboard.db.session import SessionLocal
from guildboard.services.aggregation import build_overlap
from guildboard.services.board.room import default_min_free
from guildboard.services.board.weeks import format_hour_range, week_key_for_offset
from guildboard.services.room_service import open_room


def main():
    parser = argparse.ArgumentParser(description="Show availability blocks for a room")
    parser.add_argument("--room", default=settings.default_room, help="Room slug")
    parser.add_argument("--week-offset", type=int, default=0, help="0 = this week, 1 = next week, ...")
    parser.add_argument("--min-free", type=int, default=None, help="Default: number of players")
    args = parser.parse_args()

    now = datetime.now()
    key = week_key_for_offset(now, args.week_offset)
    db = SessionLocal()
    try:
        room = open_room(db, args.room, now, settings.default_player_name)
    finally:
        db.close()

    out = build_overlap(room, key, args.min_free or default_min_free(room))
    print(f"Room {args.room}, week {out['week_label']} (min free {out['min_free']})")
    print("=" * 60)
    if not out["blocks"]:
        print("No blocks.")
    for b in out["blocks"]:
        print(f"{b['dayLabel']} {format_hour_range(b['startHour'], b['endHour'])}")
        print(f"  all:   {', '.join(b['fullyAvailable']) or '—'}")
        print(f"  some:  {', '.join(b['partiallyAvailable']) or '—'}")
        print(f"  never: {', '.join(b['unavailable']) or '—'}")
    print()
    print(f"Hours with everyone free: {out['all_free_hours']}")
    for e in out["events"]:
        print(f"Event: {DAY_LABELS[e['day']]} {format_hour_range(e['startHour'], e['endHour'])} • {e['title']} ({e['createdBy']})")


if __name__ == "__main__":
    main()
    sys.exit(0)

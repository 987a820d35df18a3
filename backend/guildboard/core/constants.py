"""
Fixed shape of the board: 7 days x 16 hours (08:00-23:00), cell state cycle, Czech labels.

Change the grid here instead of scattering literals across services and routes.
"""

# Day labels, Monday first (index 0..6)
DAY_LABELS = ("Po", "Út", "St", "Čt", "Pá", "So", "Ne")
DAYS_PER_WEEK = len(DAY_LABELS)

# Hour rows: index 0 is 08:00, index 15 is 23:00
FIRST_HOUR = 8
HOURS_PER_DAY = 16
HOURS = tuple(range(FIRST_HOUR, FIRST_HOUR + HOURS_PER_DAY))

# Cell states in click order; cycling past the last wraps to the first
STATE_EMPTY = "empty"
STATE_FREE = "free"
STATE_MAYBE = "maybe"
STATE_BUSY = "busy"
STATES = (STATE_EMPTY, STATE_FREE, STATE_MAYBE, STATE_BUSY)

# Counted toward the min-free threshold (maybe is optimistic)
AVAILABLE_STATES = frozenset((STATE_FREE, STATE_MAYBE))

# Bot day tokens (lowercased) -> day index; with and without diacritics
DAY_TOKENS = {
    "po": 0,
    "ut": 1,
    "út": 1,
    "st": 2,
    "ct": 3,
    "čt": 3,
    "pa": 4,
    "pá": 4,
    "so": 5,
    "ne": 6,
}

# Bot week prefix "+N": 0 = this week
MAX_WEEK_OFFSET = 52

# Bot hour range (clock hours, end exclusive)
MIN_START_HOUR = 0
MAX_START_HOUR = 23
MIN_END_HOUR = 1
MAX_END_HOUR = 24

# Board session status indicator
STATUS_OK = "ok"
STATUS_SAVING = "saving"
STATUS_ERROR = "error"

# Scheduler job id prefix for debounced session saves (one job per session)
SAVE_JOB_ID_PREFIX = "board_save:"

"""
Centralized error types and their HTTP mapping.
Routes stay thin: raise domain errors in services, convert here.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_UNPROCESSABLE = 422  # bad bot command / bad input
STATUS_NOT_FOUND = 404
STATUS_SERVICE_UNAVAILABLE = 503  # store down
STATUS_INTERNAL_ERROR = 500

MSG_FORMAT = "Formát: `so 20-24 raid` nebo `+1 so 20-24 raid`"
MSG_WEEK_OFFSET = "Prefix týdne: `+0` až `+52` (např. `+1 so 20-24 raid`)."
MSG_DAY = "Den použij: `po út st čt pá so ne`"
MSG_TIME_RANGE = "Čas: start 0–23, end 1–24 a end > start (např. 20-24)"
MSG_STORE_UNAVAILABLE = "Room storage is unavailable, try again later."


# ---------------------------------------------------------------------------
# Error types
# ---------------------------------------------------------------------------


class ParseError(ValueError):
    """Bot command text did not parse. Always recoverable: show `message` to the user."""

    FORMAT = "format"
    DAY = "day"
    WEEK_OFFSET = "week_offset"
    TIME_RANGE = "time_range"

    _MESSAGES = {
        FORMAT: MSG_FORMAT,
        DAY: MSG_DAY,
        WEEK_OFFSET: MSG_WEEK_OFFSET,
        TIME_RANGE: MSG_TIME_RANGE,
    }

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.message = self._MESSAGES[kind]
        super().__init__(self.message)


class StoreError(RuntimeError):
    """Room load/save failed in the underlying database."""

    def __init__(self, slug: str, action: str, cause: Exception | None = None) -> None:
        self.slug = slug
        self.action = action
        super().__init__(f"Room {action} failed for {slug!r}: {cause}")


class PlayerNotFound(LookupError):
    """Player id is not on the room roster."""

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"Player {player_id!r} not found")


class SessionNotFound(LookupError):
    """No open board session with this id."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Board session {session_id!r} not found")


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code, detail or None for str(exc))
# First match wins; add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

ERROR_RULES: list[tuple[type[Exception], int, str | None]] = [
    (ParseError, STATUS_UNPROCESSABLE, None),
    (ValueError, STATUS_UNPROCESSABLE, None),  # bad week key, blank player name, min_free < 1
    (SessionNotFound, STATUS_NOT_FOUND, None),
    (PlayerNotFound, STATUS_NOT_FOUND, None),
    (StoreError, STATUS_SERVICE_UNAVAILABLE, MSG_STORE_UNAVAILABLE),
]


def error_to_http(exc: Exception) -> HTTPException:
    """
    Map a service exception into an HTTPException.
    Uses ERROR_RULES for known types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code, detail in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=detail or str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))

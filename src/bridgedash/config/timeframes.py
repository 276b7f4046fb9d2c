"""Timeframe keywords -> fixed millisecond windows."""

from __future__ import annotations

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

TIMEFRAMES_MS: dict[str, int] = {
    "1h": HOUR_MS,
    "24h": DAY_MS,
    "7d": 7 * DAY_MS,
    "30d": 30 * DAY_MS,
    "1m": 30 * DAY_MS,
    "90d": 90 * DAY_MS,
    "all": 365 * DAY_MS,
}


class UnknownTimeframeError(ValueError):
    """Raised for a timeframe keyword with no fixed window."""

    def __init__(self, timeframe: str) -> None:
        self.timeframe = timeframe
        allowed = ", ".join(TIMEFRAMES_MS)
        super().__init__(f"Unknown timeframe {timeframe!r} (expected one of: {allowed})")


def timeframe_ms(timeframe: str) -> int:
    """Window length in ms for a keyword like '24h' or '7d'."""
    key = (timeframe or "").strip().lower()
    if key not in TIMEFRAMES_MS:
        raise UnknownTimeframeError(timeframe)
    return TIMEFRAMES_MS[key]


def window_start(timeframe: str, now_ms: int) -> int:
    """fromTimestamp for the window ending at now_ms."""
    return now_ms - timeframe_ms(timeframe)

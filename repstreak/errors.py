"""Typed errors raised by RepStreak. Missing or malformed data never raises."""

from __future__ import annotations


class RepStreakError(Exception):
    """Base class for RepStreak errors."""


class InvalidDateRangeError(RepStreakError, ValueError):
    def __init__(self, start: str, end: str, reason: str = "end before start"):
        super().__init__(f"invalid date range {start!r}..{end!r}: {reason}")
        self.start = start
        self.end = end


class InvalidFreezeWeekError(RepStreakError, ValueError):
    def __init__(self, week_key: str, reason: str):
        super().__init__(f"cannot freeze week {week_key!r}: {reason}")
        self.week_key = week_key


class StorageError(RepStreakError):
    """Read or write against the SQLite store failed."""

"""Local calendar-day helpers and display formatting.

Dates are plain ``YYYY-MM-DD`` strings in the user's local timezone. Lexicographic
comparison of these strings is a valid date comparison, so range filters compare
strings directly and only shifting/bucketing goes through ``datetime.date``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

DAY_FORMAT = "%Y-%m-%d"


def parse_day(day: str) -> date:
    return datetime.strptime(day, DAY_FORMAT).date()


def format_day(d: date) -> str:
    return d.strftime(DAY_FORMAT)


def shift_day(day: str, days: int) -> str:
    """Return ``day`` moved by ``days`` calendar days (negative = earlier)."""
    return format_day(parse_day(day) + timedelta(days=days))


def days_between(start: str, end: str) -> int:
    return (parse_day(end) - parse_day(start)).days


def week_start(d: date) -> date:
    """Sunday on or before ``d``."""
    # date.weekday(): Monday = 0 ... Sunday = 6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_key(day: str | date) -> str:
    d = parse_day(day) if isinstance(day, str) else day
    return format_day(week_start(d))


def next_week_key(today: date) -> str:
    """Sunday that starts the week after ``today``'s week."""
    return format_day(week_start(today) + timedelta(days=7))


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def format_volume(volume: float) -> str:
    """12450.4 -> '12,450 lbs'."""
    return f"{round(volume):,} lbs"


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"

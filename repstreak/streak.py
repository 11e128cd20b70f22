"""Weekly-goal streak with a one-per-month freeze.

The streak is derived from raw history on every call, never updated incrementally.
Weeks are keyed by their Sunday (YYYY-MM-DD). The current week is still in progress,
so it is never counted for or against the streak. Weeks with no sessions are
not visited.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Iterable

from .dates import month_key, week_key
from .errors import InvalidFreezeWeekError
from .models import FreezeReservation, FreezeState, StreakState, WorkoutSession
from .normalize import normalize_date

logger = logging.getLogger(__name__)

FREEZES_PER_MONTH = 1


def apply_monthly_reset(freeze: FreezeState, month: str) -> FreezeState:
    """Restore the monthly freeze once per calendar month. Frozen and pending weeks are kept."""
    if freeze.last_reset_month == month:
        return freeze
    return freeze.model_copy(update={"freezes_available": FREEZES_PER_MONTH, "last_reset_month": month})


def bucket_weeks(history: Iterable[WorkoutSession]) -> dict[str, int]:
    """Workout count per Sunday-anchored week."""
    counts: Counter[str] = Counter()
    for session in history:
        try:
            counts[week_key(session.date)] += 1
        except ValueError:
            logger.warning("skipping session %s with invalid date %r", session.id, session.date)
    return dict(counts)


def _completed_weeks_newest_first(buckets: dict[str, int], current_week: str) -> list[str]:
    """Week keys with at least one session, before the current week, newest first.

    Weeks without any session are not visited, so they neither extend nor break the streak.
    """
    return sorted((k for k in buckets if k < current_week), reverse=True)


def compute_streak(
    history: Iterable[WorkoutSession],
    freeze: FreezeState,
    weekly_goal: int,
    today: date,
    stored_longest: int = 0,
) -> tuple[StreakState, FreezeState]:
    """Walk completed weeks newest-first and return the new streak and freeze state.

    A week counts when it hit ``weekly_goal`` or is frozen. The first missed week
    consumes the month's freeze if one is left; the next miss ends the streak.
    Inputs are not mutated.
    """
    freeze = apply_monthly_reset(freeze, month_key(today))
    buckets = bucket_weeks(history)
    current_week = week_key(today)

    frozen = list(freeze.frozen_weeks)
    freezes_available = freeze.freezes_available
    freeze_used_this_walk = False

    current = 0
    longest = 0
    last_completed: str | None = None

    for week in _completed_weeks_newest_first(buckets, current_week):
        count = buckets[week]
        if count >= weekly_goal or week in frozen:
            pass
        elif freezes_available > 0 and not freeze_used_this_walk:
            logger.info("auto-applying streak freeze to week %s (%d/%d workouts)", week, count, weekly_goal)
            frozen.append(week)
            freezes_available = 0
            freeze_used_this_walk = True
        else:
            break
        current += 1
        longest = max(longest, current)
        if last_completed is None:
            last_completed = week

    if freeze_used_this_walk:
        freeze = freeze.model_copy(update={"freezes_available": freezes_available, "frozen_weeks": frozen})

    state = StreakState(
        current_streak=current,
        longest_streak=max(longest, stored_longest),
        last_completed_week=last_completed,
    )
    return state, freeze


def reserve_freeze(freeze: FreezeState, week_start: str | date, today: date) -> FreezeReservation:
    """Spend this month's freeze ahead of time on a future week.

    Any day of the target week may be passed; it is normalized to the week's Sunday.
    When no freeze is left (or the week is already frozen) the state comes back unchanged.
    """
    if isinstance(week_start, str):
        day = normalize_date(week_start)
        if day is None:
            raise InvalidFreezeWeekError(week_start, "not a calendar day")
        week_start = day
    key = week_key(week_start)
    current_week = week_key(today)
    if key <= current_week:
        raise InvalidFreezeWeekError(key, f"must start after the current week ({current_week})")
    freeze = apply_monthly_reset(freeze, month_key(today))

    if key in freeze.frozen_weeks:
        return FreezeReservation(
            reserved=False,
            week_start=key,
            freeze_state=freeze,
            message=f"Week of {key} is already protected.",
        )
    if freeze.freezes_available <= 0:
        return FreezeReservation(
            reserved=False,
            week_start=key,
            freeze_state=freeze,
            message="You have already used your freeze this month. Freezes reset on the 1st of each month.",
        )

    updated = freeze.model_copy(update={
        "freezes_available": 0,
        "frozen_weeks": [*freeze.frozen_weeks, key],
        "pending_freeze_week": key,
    })
    return FreezeReservation(
        reserved=True,
        week_start=key,
        freeze_state=updated,
        message=f"Your streak is protected for the week of {key}.",
    )


def this_week_workouts(history: Iterable[WorkoutSession], today: date) -> int:
    current_week = week_key(today)
    return sum(1 for s in history if week_key(s.date) == current_week)

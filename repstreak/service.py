"""Entry points: one read from storage, a pure computation, at most one write back."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from .analysis import analyze_rolling_week, compare_custom, validate_range
from .comparison import generate_workout_comparison
from .dates import month_key, next_week_key
from .history import load_preferences, read_history
from .models import (
    CustomPeriodComparison,
    FreezeReservation,
    FreezeState,
    ProgressionSuggestion,
    WeeklyAnalysisResult,
    WeeklyStreakData,
    WorkoutSession,
)
from .progression import suggest_for_exercise
from .storage import Storage
from .streak import compute_streak, reserve_freeze, this_week_workouts

logger = logging.getLogger(__name__)


def analyze_last_week(storage: Storage, user_key: str, today: Optional[date] = None) -> WeeklyAnalysisResult:
    """Rolling 7-day analysis for the user's check-in screen."""
    today = today or date.today()
    history = read_history(storage, user_key)
    return analyze_rolling_week(history, today)


def compare_custom_periods(
    storage: Storage,
    user_key: str,
    current_start: str,
    current_end: str,
    previous_start: str,
    previous_end: str,
) -> CustomPeriodComparison:
    # Reject bad ranges before touching storage
    validate_range(current_start, current_end)
    validate_range(previous_start, previous_end)
    history = read_history(storage, user_key)
    return compare_custom(history, current_start, current_end, previous_start, previous_end)


def refresh_weekly_streak(storage: Storage, user_key: str, today: Optional[date] = None) -> WeeklyStreakData:
    """Recompute the streak from history and persist streak/freeze fields only when they changed.

    Last writer wins if two refreshes for the same user overlap.
    """
    today = today or date.today()
    prefs = load_preferences(storage, user_key)
    history = read_history(storage, user_key)

    stored_freeze = prefs.streak_freeze_data
    freeze = stored_freeze or FreezeState.initial(month_key(today))
    state, freeze = compute_streak(
        history,
        freeze,
        prefs.weekly_workout_goal,
        today,
        stored_longest=prefs.weekly_streak_data.longest_streak,
    )

    update: dict = {}
    if state != prefs.weekly_streak_data:
        update["weekly_streak_data"] = state.model_dump()
    if freeze != stored_freeze:
        update["streak_freeze_data"] = freeze.model_dump()
    if update:
        logger.debug("persisting %s for %s", sorted(update), user_key)
        storage.set_preferences(user_key, update)

    return WeeklyStreakData(
        streak=state.current_streak,
        longest_streak=state.longest_streak,
        total_workouts=len(history),
        this_week_workouts=this_week_workouts(history, today),
        freezes_available=freeze.freezes_available,
        frozen_weeks=list(freeze.frozen_weeks),
    )


def use_streak_freeze(
    storage: Storage,
    user_key: str,
    week_start: Optional[str] = None,
    today: Optional[date] = None,
) -> FreezeReservation:
    """Reserve this month's freeze for a future week (next week by default)."""
    today = today or date.today()
    prefs = load_preferences(storage, user_key)
    stored_freeze = prefs.streak_freeze_data
    freeze = stored_freeze or FreezeState.initial(month_key(today))

    result = reserve_freeze(freeze, week_start or next_week_key(today), today)
    if result.freeze_state != stored_freeze:
        storage.set_preferences(user_key, {"streak_freeze_data": result.freeze_state.model_dump()})
    return result


def log_workout(storage: Storage, user_key: str, session: WorkoutSession) -> Optional[str]:
    """Store a finished session and return its comparison with the last one from the same template."""
    prefs = load_preferences(storage, user_key)
    history = read_history(storage, user_key)
    storage.store_session(user_key, session)
    return generate_workout_comparison(session, history, prefs.unit_system)


def suggest_next_weight(storage: Storage, user_key: str, exercise: str) -> Optional[ProgressionSuggestion]:
    """Progressive overload suggestion for the next session of one exercise (None when disabled)."""
    prefs = load_preferences(storage, user_key)
    history = read_history(storage, user_key)
    return suggest_for_exercise(history, exercise, prefs)

"""Deterministic period metrics: per-exercise aggregation, period totals, trend classification."""

from __future__ import annotations

from typing import Iterable

from .models import AggregatedExerciseStats, PeriodSummary, TrendResult, WorkoutSession
from .normalize import is_valid_set

# Dead-zone around zero so small week-to-week noise reads as "flat"
TREND_THRESHOLD_PERCENT = 5.0


def _in_range(date_str: str, start: str, end: str) -> bool:
    return start <= date_str <= end


def sessions_in_range(history: Iterable[WorkoutSession], start: str, end: str) -> list[WorkoutSession]:
    return [s for s in history if _in_range(s.date, start, end)]


def session_volume(session: WorkoutSession) -> float:
    """Sum of weight*reps over the session's valid sets."""
    total = 0.0
    for ex in session.exercises:
        for s in ex.sets:
            if is_valid_set(s.weight, s.reps):
                total += s.weight * s.reps
    return total


def aggregate(
    history: Iterable[WorkoutSession],
    start: str,
    end: str,
) -> dict[str, AggregatedExerciseStats]:
    """Merge every instance of each exercise name across all sessions in [start, end].

    Names are matched exactly (case-sensitive); the dict keeps first-seen order.
    """
    out: dict[str, AggregatedExerciseStats] = {}
    for session in sessions_in_range(history, start, end):
        for ex in session.exercises:
            stats = out.get(ex.name)
            if stats is None:
                stats = out[ex.name] = AggregatedExerciseStats()
            for s in ex.sets:
                stats.total_sets += 1
                if s.completed:
                    stats.completed_sets += 1
                if is_valid_set(s.weight, s.reps):
                    if s.weight > stats.max_weight:
                        stats.max_weight = s.weight
                    stats.total_volume += s.weight * s.reps
                    stats.total_reps += s.reps
    return out


def summarize_period(history: Iterable[WorkoutSession], start: str, end: str) -> PeriodSummary:
    """Whole-period totals: sessions (not deduplicated), volume, sets, duration."""
    history = list(history)
    per_exercise = aggregate(history, start, end)
    sessions = sessions_in_range(history, start, end)
    return PeriodSummary(
        start_date=start,
        end_date=end,
        workout_count=len(sessions),
        total_volume=sum(st.total_volume for st in per_exercise.values()),
        total_sets=sum(st.total_sets for st in per_exercise.values()),
        total_duration_minutes=sum(s.duration_minutes for s in sessions),
    )


def volume_change_percent(current: float, previous: float) -> float:
    """Percent change; a zero baseline with new volume counts as +100, both zero as 0."""
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


def classify(
    current_volume: float,
    previous_volume: float,
    current_workouts: int,
    previous_workouts: int,
) -> TrendResult:
    change = volume_change_percent(current_volume, previous_volume)
    delta = current_workouts - previous_workouts
    if change > TREND_THRESHOLD_PERCENT:
        return TrendResult(
            direction="up",
            emoji="📈",
            title="You're on a Roll",
            subtitle=f"+{round(change)}% volume vs last week",
            volume_change_percent=change,
            workout_count_delta=delta,
        )
    if change < -TREND_THRESHOLD_PERCENT:
        return TrendResult(
            direction="down",
            emoji="📉",
            title="Let's Regroup",
            subtitle=f"{round(change)}% volume vs last week",
            volume_change_percent=change,
            workout_count_delta=delta,
        )
    return TrendResult(
        direction="flat",
        emoji="→",
        title="Steady Progress",
        subtitle="Volume consistent with last week",
        volume_change_percent=change,
        workout_count_delta=delta,
    )


def no_data_trend() -> TrendResult:
    return TrendResult(
        direction="flat",
        emoji="📊",
        title="No Data Yet",
        subtitle="Complete some workouts to see your progress",
    )

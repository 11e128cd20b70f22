"""Rolling-week analysis and custom period comparison over a workout history."""

from __future__ import annotations

import logging
from datetime import date

from .dates import days_between, format_day, shift_day
from .errors import InvalidDateRangeError
from .metrics import (
    aggregate,
    classify,
    no_data_trend,
    session_volume,
    sessions_in_range,
    summarize_period,
    volume_change_percent,
)
from .models import (
    AggregatedExerciseStats,
    CustomPeriodComparison,
    DateRange,
    DayToDayComparison,
    ExerciseAnalysis,
    ExerciseChange,
    ExerciseComparison,
    ExercisePeriodChange,
    ExercisePeriodStats,
    ExerciseWeekStats,
    PeriodOverview,
    PeriodTotals,
    WeeklyAnalysisResult,
    WorkoutSession,
)
from .normalize import normalize_date

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7


def rolling_windows(today: date) -> tuple[DateRange, DateRange]:
    """(current, previous): the 7 days ending today and the 7 days before that."""
    end = format_day(today)
    start = shift_day(end, -(WINDOW_DAYS - 1))
    previous_end = shift_day(start, -1)
    previous_start = shift_day(previous_end, -(WINDOW_DAYS - 1))
    return DateRange(start=start, end=end), DateRange(start=previous_start, end=previous_end)


def validate_range(start: str, end: str) -> DateRange:
    """Normalize both boundaries; reject malformed days or end < start."""
    norm_start, norm_end = normalize_date(start), normalize_date(end)
    if norm_start is None or norm_end is None:
        raise InvalidDateRangeError(start, end, "boundaries must be YYYY-MM-DD")
    if norm_end < norm_start:
        raise InvalidDateRangeError(norm_start, norm_end)
    return DateRange(start=norm_start, end=norm_end)


def _sorted_history(history: list[WorkoutSession]) -> list[WorkoutSession]:
    return sorted(history, key=lambda s: s.date, reverse=True)


def day_to_day_comparison(
    history: list[WorkoutSession],
    current_start: str,
    previous_start: str,
    previous_end: str,
    today: str,
) -> DayToDayComparison:
    """This week so far vs the same number of days of last week, plus progress toward last week's total."""
    elapsed = days_between(current_start, today) + 1
    same_span_end = shift_day(previous_start, elapsed - 1)

    so_far = sessions_in_range(history, current_start, today)
    same_span = sessions_in_range(history, previous_start, same_span_end)
    last_full = sessions_in_range(history, previous_start, previous_end)

    so_far_volume = sum(session_volume(s) for s in so_far)
    same_span_volume = sum(session_volume(s) for s in same_span)
    last_full_volume = sum(session_volume(s) for s in last_full)

    return DayToDayComparison(
        last_week_same_day_workouts=len(same_span),
        last_week_same_day_volume=same_span_volume,
        this_week_so_far_workouts=len(so_far),
        this_week_so_far_volume=so_far_volume,
        workouts_delta=len(so_far) - len(same_span),
        volume_delta=so_far_volume - same_span_volume,
        volume_percent_change=volume_change_percent(so_far_volume, same_span_volume),
        last_week_full_total=len(last_full),
        last_week_full_volume=last_full_volume,
        progress_percent=(so_far_volume / last_full_volume * 100) if last_full_volume > 0 else 0.0,
        remaining_workouts=max(0, len(last_full) - len(so_far)),
        remaining_volume=max(0.0, last_full_volume - so_far_volume),
    )


def _week_stats(stats: AggregatedExerciseStats) -> ExerciseWeekStats:
    return ExerciseWeekStats(
        total_volume=stats.total_volume,
        total_sets=stats.total_sets,
        max_weight=stats.max_weight,
        avg_reps=stats.avg_reps,
    )


def analyze_rolling_week(
    history: list[WorkoutSession],
    today: date,
    weekly_goal: int | None = None,  # accepted for callers; not used by the analysis
) -> WeeklyAnalysisResult:
    """Analyze the rolling 7-day window ending today against the 7 days before it."""
    current, previous = rolling_windows(today)
    if not history:
        return WeeklyAnalysisResult(date_range=current, trend=no_data_trend())

    history = _sorted_history(history)
    logger.debug(
        "weekly analysis: %d sessions, current %s..%s, previous %s..%s",
        len(history), current.start, current.end, previous.start, previous.end,
    )

    current_ex = aggregate(history, current.start, current.end)
    previous_ex = aggregate(history, previous.start, previous.end)
    cur = summarize_period(history, current.start, current.end)
    prev = summarize_period(history, previous.start, previous.end)

    trend = classify(cur.total_volume, prev.total_volume, cur.workout_count, prev.workout_count)
    day_to_day = day_to_day_comparison(history, current.start, previous.start, previous.end, current.end)

    exercises: list[ExerciseAnalysis] = []
    for name, cur_stats in current_ex.items():
        prev_stats = previous_ex.get(name)
        if prev_stats is not None:
            last_week = _week_stats(prev_stats)
            change = ExerciseChange(
                weight_delta=cur_stats.max_weight - prev_stats.max_weight,
                volume_percent=volume_change_percent(cur_stats.total_volume, prev_stats.total_volume),
                is_new=False,
            )
        else:
            last_week = None
            change = ExerciseChange(weight_delta=cur_stats.max_weight, volume_percent=100.0, is_new=True)
        exercises.append(ExerciseAnalysis(
            name=name, this_week=_week_stats(cur_stats), last_week=last_week, change=change,
        ))
    exercises.sort(key=lambda e: e.this_week.total_volume, reverse=True)

    return WeeklyAnalysisResult(
        workouts_completed=cur.workout_count,
        total_volume=cur.total_volume,
        total_sets=cur.total_sets,
        total_duration=cur.total_duration_minutes,
        exercises=exercises,
        date_range=current,
        trend=trend,
        previous_week=PeriodTotals(
            workouts_completed=prev.workout_count,
            total_volume=prev.total_volume,
            total_sets=prev.total_sets,
        ),
        day_to_day_comparison=day_to_day,
    )


def _period_stats(stats: AggregatedExerciseStats | None) -> ExercisePeriodStats:
    if stats is None:
        return ExercisePeriodStats()
    return ExercisePeriodStats(
        total_volume=stats.total_volume,
        total_sets=stats.total_sets,
        max_weight=stats.max_weight,
        avg_reps=stats.avg_reps,
        completed_sets=stats.completed_sets,
    )


def compare_custom(
    history: list[WorkoutSession],
    current_start: str,
    current_end: str,
    previous_start: str,
    previous_end: str,
) -> CustomPeriodComparison:
    """Exercise-by-exercise diff between two caller-supplied ranges (any length, may overlap)."""
    current = validate_range(current_start, current_end)
    previous = validate_range(previous_start, previous_end)

    if not history:
        return CustomPeriodComparison(
            current_period=PeriodOverview(start_date=current.start, end_date=current.end),
            previous_period=PeriodOverview(start_date=previous.start, end_date=previous.end),
            trend=no_data_trend(),
        )

    current_ex = aggregate(history, current.start, current.end)
    previous_ex = aggregate(history, previous.start, previous.end)
    cur = summarize_period(history, current.start, current.end)
    prev = summarize_period(history, previous.start, previous.end)
    trend = classify(cur.total_volume, prev.total_volume, cur.workout_count, prev.workout_count)

    names = list(current_ex)
    names.extend(n for n in previous_ex if n not in current_ex)

    exercises: list[ExerciseComparison] = []
    for name in names:
        cur_block = _period_stats(current_ex.get(name))
        prev_block = _period_stats(previous_ex.get(name))
        exercises.append(ExerciseComparison(
            name=name,
            current=cur_block,
            previous=prev_block,
            change=ExercisePeriodChange(
                weight_delta=cur_block.max_weight - prev_block.max_weight,
                volume_delta=cur_block.total_volume - prev_block.total_volume,
                volume_percent=volume_change_percent(cur_block.total_volume, prev_block.total_volume),
                is_new=name in current_ex and name not in previous_ex,
            ),
        ))
    exercises.sort(key=lambda e: e.current.total_volume, reverse=True)

    return CustomPeriodComparison(
        current_period=PeriodOverview(
            start_date=current.start,
            end_date=current.end,
            workouts_completed=cur.workout_count,
            total_volume=cur.total_volume,
            total_sets=cur.total_sets,
        ),
        previous_period=PeriodOverview(
            start_date=previous.start,
            end_date=previous.end,
            workouts_completed=prev.workout_count,
            total_volume=prev.total_volume,
            total_sets=prev.total_sets,
        ),
        exercises=exercises,
        trend=trend,
    )

"""Pydantic models for RepStreak: workout history, preferences, analysis and streak results."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .normalize import normalize_date, parse_reps, parse_weight

DEFAULT_WEEKLY_GOAL = 4


# --- Workout history (read-only source data) ---

class SetEntry(BaseModel):
    weight: float = 0.0
    reps: int = 0
    completed: bool = False

    @field_validator("weight", mode="before")
    @classmethod
    def _coerce_weight(cls, v: object) -> float:
        return parse_weight(v)

    @field_validator("reps", mode="before")
    @classmethod
    def _coerce_reps(cls, v: object) -> int:
        return parse_reps(v)

    @field_validator("completed", mode="before")
    @classmethod
    def _coerce_completed(cls, v: object) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes", "done")
        return bool(v)


class ExerciseEntry(BaseModel):
    name: str  # exact, case-sensitive identity key
    sets: list[SetEntry] = Field(default_factory=list)


class WorkoutSession(BaseModel):
    id: str
    date: str  # YYYY-MM-DD, user's local calendar day
    duration_minutes: int = Field(default=0, validation_alias=AliasChoices("duration_minutes", "duration"))
    template_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("template_id", "templateId"))
    template_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("template_name", "templateName"))
    exercises: list[ExerciseEntry] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: object) -> str:
        return str(v) if v is not None else v

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, v: object) -> str:
        day = normalize_date(v) if isinstance(v, str) else None
        if day is None:
            raise ValueError(f"date must be a calendar day (YYYY-MM-DD), got {v!r}")
        return day

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _coerce_duration(cls, v: object) -> int:
        return max(0, parse_reps(v))


# --- Aggregation ---

class AggregatedExerciseStats(BaseModel):
    total_volume: float = 0.0  # sum of weight*reps over valid sets
    total_sets: int = 0  # every set, valid or not
    completed_sets: int = 0
    max_weight: float = 0.0  # over valid sets
    total_reps: int = 0  # over valid sets

    @property
    def avg_reps(self) -> float:
        # Valid-set reps over all sets; intentionally not a pure valid-set average
        return self.total_reps / self.total_sets if self.total_sets > 0 else 0.0


class PeriodSummary(BaseModel):
    start_date: str
    end_date: str
    workout_count: int = 0
    total_volume: float = 0.0
    total_sets: int = 0
    total_duration_minutes: int = 0


class TrendResult(BaseModel):
    direction: Literal["up", "down", "flat"]
    emoji: str
    title: str
    subtitle: str
    volume_change_percent: float = 0.0
    workout_count_delta: int = 0


# --- Weekly analysis ---

class DateRange(BaseModel):
    start: str  # YYYY-MM-DD
    end: str    # YYYY-MM-DD


class ExerciseWeekStats(BaseModel):
    total_volume: float = 0.0
    total_sets: int = 0
    max_weight: float = 0.0
    avg_reps: float = 0.0


class ExerciseChange(BaseModel):
    weight_delta: float = 0.0
    volume_percent: float = 0.0
    is_new: bool = False


class ExerciseAnalysis(BaseModel):
    name: str
    this_week: ExerciseWeekStats
    last_week: Optional[ExerciseWeekStats] = None
    change: ExerciseChange


class PeriodTotals(BaseModel):
    workouts_completed: int = 0
    total_volume: float = 0.0
    total_sets: int = 0


class DayToDayComparison(BaseModel):
    last_week_same_day_workouts: int = 0
    last_week_same_day_volume: float = 0.0
    this_week_so_far_workouts: int = 0
    this_week_so_far_volume: float = 0.0
    workouts_delta: int = 0
    volume_delta: float = 0.0
    volume_percent_change: float = 0.0
    last_week_full_total: int = 0
    last_week_full_volume: float = 0.0
    progress_percent: float = 0.0
    remaining_workouts: int = 0  # never negative
    remaining_volume: float = 0.0  # never negative


class WeeklyAnalysisResult(BaseModel):
    workouts_completed: int = 0
    total_volume: float = 0.0
    total_sets: int = 0
    total_duration: int = 0  # minutes
    exercises: list[ExerciseAnalysis] = Field(default_factory=list)
    date_range: DateRange
    trend: TrendResult
    previous_week: PeriodTotals = Field(default_factory=PeriodTotals)
    day_to_day_comparison: DayToDayComparison = Field(default_factory=DayToDayComparison)


# --- Custom period comparison ---

class ExercisePeriodStats(BaseModel):
    total_volume: float = 0.0
    total_sets: int = 0
    max_weight: float = 0.0
    avg_reps: float = 0.0
    completed_sets: int = 0


class ExercisePeriodChange(BaseModel):
    weight_delta: float = 0.0
    volume_delta: float = 0.0
    volume_percent: float = 0.0
    is_new: bool = False


class ExerciseComparison(BaseModel):
    name: str
    current: ExercisePeriodStats
    previous: ExercisePeriodStats
    change: ExercisePeriodChange


class PeriodOverview(BaseModel):
    start_date: str
    end_date: str
    workouts_completed: int = 0
    total_volume: float = 0.0
    total_sets: int = 0


class CustomPeriodComparison(BaseModel):
    current_period: PeriodOverview
    previous_period: PeriodOverview
    exercises: list[ExerciseComparison] = Field(default_factory=list)
    trend: TrendResult


# --- Streak & freeze ---

class FreezeState(BaseModel):
    """One freeze per calendar month; frozen weeks are Sunday keys (YYYY-MM-DD)."""
    freezes_available: int = 1  # 0 or 1
    last_reset_month: str  # YYYY-MM
    frozen_weeks: list[str] = Field(default_factory=list)
    pending_freeze_week: Optional[str] = None

    @classmethod
    def initial(cls, month: str) -> "FreezeState":
        return cls(freezes_available=1, last_reset_month=month)


class StreakState(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_week: Optional[str] = None  # Sunday key


class FreezeReservation(BaseModel):
    reserved: bool
    week_start: str
    freeze_state: FreezeState
    message: str


class WeeklyStreakData(BaseModel):
    streak: int = 0
    longest_streak: int = 0
    total_workouts: int = 0
    this_week_workouts: int = 0
    freezes_available: int = 0
    frozen_weeks: list[str] = Field(default_factory=list)


# --- Preferences record ---

PrimaryGoal = Literal["muscle_gain", "strength", "weight_loss", "athletic_performance", "general_fitness"]


class RepRange(BaseModel):
    min: int = 8
    max: int = 12


class ProgressiveOverloadConfig(BaseModel):
    """Add ``weight_increment`` once the best set reaches ``increase_at_reps``."""
    weight_increment: float = 5.0
    target_rep_range: RepRange = Field(default_factory=RepRange)  # reference only
    increase_at_reps: int = Field(default=12, ge=1)


class ProgressionSuggestion(BaseModel):
    should_progress: bool
    suggested_weight: float
    reason: str


class Preferences(BaseModel):
    """Fields of the user's preferences record the engine reads or writes."""
    weekly_workout_goal: int = DEFAULT_WEEKLY_GOAL
    unit_system: Literal["lbs", "kg"] = "lbs"
    primary_goal: PrimaryGoal = "muscle_gain"
    enable_progressive_overload: bool = False
    progressive_overload_config: ProgressiveOverloadConfig = Field(default_factory=ProgressiveOverloadConfig)
    weekly_streak_data: StreakState = Field(default_factory=StreakState)
    streak_freeze_data: Optional[FreezeState] = None  # absent on older records

    @field_validator("weekly_workout_goal", mode="before")
    @classmethod
    def _default_goal(cls, v: object) -> object:
        # Unset, zero or negative goal falls back to the default
        if v is None or isinstance(v, bool):
            return DEFAULT_WEEKLY_GOAL
        if isinstance(v, str):
            v = parse_reps(v)
        if isinstance(v, (int, float)) and v < 1:
            return DEFAULT_WEEKLY_GOAL
        return v


# --- Tool inputs ---

class LogWorkoutInput(BaseModel):
    user_key: str
    session: WorkoutSession


class AnalyzeWeekInput(BaseModel):
    user_key: str
    today: Optional[str] = None  # YYYY-MM-DD, defaults to local today


class ComparePeriodsInput(BaseModel):
    user_key: str
    current: DateRange
    previous: DateRange


class WeeklyStreakInput(BaseModel):
    user_key: str
    today: Optional[str] = None


class UseFreezeInput(BaseModel):
    user_key: str
    week_start: Optional[str] = None  # any day in the target week; defaults to next week
    today: Optional[str] = None


class SuggestProgressionInput(BaseModel):
    user_key: str
    exercise: str  # exact exercise name as logged

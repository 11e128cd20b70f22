"""Progressive overload: suggest next session's weight from the previous session's best set."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from .models import Preferences, ProgressionSuggestion, SetEntry, WorkoutSession

# Increment multiplier per primary goal; strength speeds up further when well past the threshold
GOAL_MULTIPLIERS = {
    "strength": 1.2,
    "muscle_gain": 1.0,
    "weight_loss": 0.75,
    "athletic_performance": 0.9,
    "general_fitness": 1.0,
}
STRENGTH_SURPLUS_REPS = 2
STRENGTH_SURPLUS_MULTIPLIER = 1.5


def goal_multiplier(goal: str, reps: int, increase_at_reps: int) -> float:
    if goal == "strength" and reps >= increase_at_reps + STRENGTH_SURPLUS_REPS:
        return STRENGTH_SURPLUS_MULTIPLIER
    return GOAL_MULTIPLIERS.get(goal, 1.0)


def best_set(sets: list[SetEntry]) -> SetEntry:
    """Heaviest set; reps break ties; the earliest set wins a full tie."""
    best = sets[0]
    for s in sets[1:]:
        if s.weight > best.weight or (s.weight == best.weight and s.reps > best.reps):
            best = s
    return best


def _round_half_up(x: float) -> float:
    return float(math.floor(x + 0.5))


def _fmt(w: float) -> str:
    return f"{w:g}"


def suggest_progression(previous_sets: list[SetEntry], prefs: Preferences) -> ProgressionSuggestion:
    """Decide whether to add weight, based on the best set of the previous workout.

    Every logged set is considered, completed or not. The increment is scaled by the
    user's primary goal and rounded to a whole unit.
    """
    if not previous_sets:
        return ProgressionSuggestion(should_progress=False, suggested_weight=0.0, reason="No previous workout data")

    cfg = prefs.progressive_overload_config
    unit = prefs.unit_system
    top = best_set(previous_sets)
    if top.reps <= 0 or top.weight <= 0:
        return ProgressionSuggestion(
            should_progress=False,
            suggested_weight=top.weight,
            reason="Invalid previous workout data",
        )

    if top.reps < cfg.increase_at_reps:
        return ProgressionSuggestion(
            should_progress=False,
            suggested_weight=top.weight,
            reason=f"Keep working at {_fmt(top.weight)} {unit} ({top.reps}/{cfg.increase_at_reps} reps)",
        )

    multiplier = goal_multiplier(prefs.primary_goal, top.reps, cfg.increase_at_reps)
    increment = _round_half_up(cfg.weight_increment * multiplier)
    note = ""
    if multiplier != 1.0:
        style = "aggressive" if increment > cfg.weight_increment else "conservative"
        note = f" ({prefs.primary_goal} focus: {style})"
    return ProgressionSuggestion(
        should_progress=True,
        suggested_weight=top.weight + increment,
        reason=f"Hit {top.reps} reps at {_fmt(top.weight)} {unit} (threshold: {cfg.increase_at_reps}){note}",
    )


def last_sets_for(history: Iterable[WorkoutSession], exercise: str) -> list[SetEntry]:
    """Sets of ``exercise`` from the most recent session that logged it (history newest first)."""
    for session in history:
        for ex in session.exercises:
            if ex.name == exercise and ex.sets:
                return list(ex.sets)
    return []


def suggest_for_exercise(
    history: Iterable[WorkoutSession], exercise: str, prefs: Preferences
) -> Optional[ProgressionSuggestion]:
    """Suggestion for the next session of ``exercise``; None when the user has overload turned off."""
    if not prefs.enable_progressive_overload:
        return None
    return suggest_progression(last_sets_for(history, exercise), prefs)

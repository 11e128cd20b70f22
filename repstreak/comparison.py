"""Post-workout summary: how a finished session compares with the last one from the same template."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import ExerciseEntry, WorkoutSession
from .dates import days_between


def _completed_stats(session: WorkoutSession) -> tuple[float, int]:
    """(volume, sets) over completed sets only."""
    volume = 0.0
    sets = 0
    for ex in session.exercises:
        for s in ex.sets:
            if s.completed:
                volume += s.weight * s.reps
                sets += 1
    return volume, sets


def _e1rm(weight: float, reps: int) -> float:
    return weight * (1 + reps / 30.0)


def _best_set(session: WorkoutSession) -> tuple[str, float, int]:
    """Completed set with the highest estimated 1RM: (exercise, weight, reps)."""
    best = ("", 0.0, 0)
    for ex in session.exercises:
        for s in ex.sets:
            if s.completed and _e1rm(s.weight, s.reps) > _e1rm(best[1], best[2]):
                best = (ex.name, s.weight, s.reps)
    return best


def _heaviest_completed(ex: ExerciseEntry) -> float:
    return max((s.weight for s in ex.sets if s.completed), default=0.0)


def _improvements(current: WorkoutSession, previous: WorkoutSession) -> list[tuple[str, float, float]]:
    """(name, old max, new max) for exercises whose heaviest completed set went up."""
    prev_by_name = {ex.name: ex for ex in previous.exercises}
    out = []
    for ex in current.exercises:
        prev = prev_by_name.get(ex.name)
        if prev is None:
            continue
        new_max, old_max = _heaviest_completed(ex), _heaviest_completed(prev)
        if new_max > 0 and old_max > 0 and new_max > old_max:
            out.append((ex.name, old_max, new_max))
    return out


def _fmt_weight(w: float) -> str:
    return f"{w:g}"


def generate_workout_comparison(
    current: WorkoutSession,
    history: Iterable[WorkoutSession],
    unit_system: str = "lbs",
) -> Optional[str]:
    """Short markdown summary for a just-finished session, or None without a template name."""
    if not current.template_name:
        return None
    name = current.template_name.upper()
    candidates = [
        w for w in history
        if w.template_id is not None
        and w.template_id == current.template_id
        and w.id != current.id
        and w.date <= current.date
    ]
    previous = max(candidates, key=lambda w: w.date, default=None)

    volume, _sets = _completed_stats(current)
    if previous is None:
        lines = [f"**FIRST {name}**", "", f"💪 {volume / 1000:.1f}k {unit_system} crushed"]
        ex_name, weight, reps = _best_set(current)
        if ex_name:
            lines.append(f"🔥 {ex_name}: {_fmt_weight(weight)}×{reps}")
        if current.duration_minutes > 0:
            lines.append(f"⚡ {current.duration_minutes} min - solid pace")
        return "\n".join(lines)

    prev_volume, _prev_sets = _completed_stats(previous)
    change = volume - prev_volume
    percent = round(change / prev_volume * 100) if prev_volume > 0 else 0

    lines = [f"**COMPARED TO LAST {name}**", ""]
    if percent > 0:
        lines.append(f"💪 Crushed +{abs(change):.0f} {unit_system} (↑{percent}%)")
    elif percent < 0:
        lines.append(f"📉 {abs(change):.0f} {unit_system} down ({percent}%)")
    else:
        lines.append(f"💪 Matched {volume / 1000:.1f}k {unit_system}")

    for ex_name, old, new in _improvements(current, previous)[:2]:
        lines.append(f"🔥 {ex_name}: {_fmt_weight(old)}→{_fmt_weight(new)} {unit_system}")

    if current.duration_minutes > 0 and previous.duration_minutes > 0:
        saved = previous.duration_minutes - current.duration_minutes
        if saved > 0:
            lines.append(f"⚡ {saved} min faster")

    days = days_between(previous.date, current.date)
    if days > 0:
        lines.append(f"📅 {days} day{'s' if days != 1 else ''} since last time")
    return "\n".join(lines)

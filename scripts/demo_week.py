#!/usr/bin/env python3
"""
Seed a throwaway DB with a few weeks of sessions, then print the weekly analysis and streak.
Usage: python scripts/demo_week.py [YYYY-MM-DD]
"""
from __future__ import annotations

import sys
import tempfile
from datetime import timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from repstreak.dates import format_day, format_duration, format_volume, parse_day
from repstreak.models import WorkoutSession
from repstreak.service import analyze_last_week, refresh_weekly_streak
from repstreak.storage import Storage

USER = "demo"


def _seed(storage: Storage, today_str: str) -> None:
    today = parse_day(today_str)
    # Four sessions a week for five weeks, lighter the further back
    for week in range(5):
        for i, offset in enumerate((0, 2, 3, 5)):
            day = today - timedelta(days=week * 7 + offset)
            load = 185 - week * 5
            storage.store_session(USER, WorkoutSession.model_validate({
                "id": f"w{week}-{i}",
                "date": format_day(day),
                "duration_minutes": 50 + i * 5,
                "exercises": [
                    {"name": "Bench Press", "sets": [{"weight": load, "reps": 8, "completed": True}] * 3},
                    {"name": "Row", "sets": [{"weight": load - 40, "reps": 10, "completed": True}] * 3},
                ],
            }))
    storage.set_preferences(USER, {"weekly_workout_goal": 3})


def main() -> None:
    today_str = sys.argv[1] if len(sys.argv) > 1 else format_day(parse_day("2025-01-15"))
    today = parse_day(today_str)
    with tempfile.TemporaryDirectory() as tmp:
        storage = Storage(Path(tmp) / "demo.db")
        _seed(storage, today_str)
        week = analyze_last_week(storage, USER, today=today)
        streak = refresh_weekly_streak(storage, USER, today=today)
        storage.close()

    print("=" * 60)
    print("WEEKLY ANALYSIS")
    print("=" * 60)
    print(f"Range: {week.date_range.start} to {week.date_range.end}")
    print(f"Workouts: {week.workouts_completed}  Volume: {format_volume(week.total_volume)}  "
          f"Time: {format_duration(week.total_duration)}")
    print(f"Trend: {week.trend.emoji} {week.trend.title} ({week.trend.subtitle})")
    for ex in week.exercises:
        tag = "new" if ex.change.is_new else f"{ex.change.volume_percent:+.0f}%"
        print(f"  {ex.name}: {format_volume(ex.this_week.total_volume)}  max={ex.this_week.max_weight:g}  {tag}")
    d2d = week.day_to_day_comparison
    print(f"Progress vs last week: {d2d.progress_percent:.0f}%  remaining={format_volume(d2d.remaining_volume)}")

    print("\n" + "=" * 60)
    print("STREAK")
    print("=" * 60)
    print(f"Streak: {streak.streak} weeks  (longest {streak.longest_streak})")
    print(f"This week: {streak.this_week_workouts}  Total: {streak.total_workouts}")
    print(f"Freezes left: {streak.freezes_available}  Frozen weeks: {streak.frozen_weeks}")


if __name__ == "__main__":
    main()

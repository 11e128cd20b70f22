"""Boundary parsing of logged values and the date/format helpers."""

import pytest
from pydantic import ValidationError

from repstreak.dates import (
    days_between,
    format_duration,
    format_volume,
    month_key,
    next_week_key,
    parse_day,
    shift_day,
)
from repstreak.history import sessions_from_documents
from repstreak.metrics import session_volume
from repstreak.models import Preferences, SetEntry, WorkoutSession
from repstreak.normalize import normalize_date, parse_reps, parse_weight


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("185", 185.0), ("185.5", 185.5), ("", 0.0), ("abc", 0.0), ("185lbs", 185.0), (None, 0.0), (95, 95.0),
        ("9" * 400, 0.0), (float("inf"), 0.0), (10 ** 400, 0.0),
    ],
)
def test_parse_weight(raw: object, expected: float) -> None:
    assert parse_weight(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("10", 10), ("8.5", 8), ("", 0), ("x", 0), (12, 12), (None, 0), ("9" * 400, int("9" * 400))],
)
def test_parse_reps(raw: object, expected: int) -> None:
    assert parse_reps(raw) == expected


def test_oversized_numbers_do_not_break_history() -> None:
    """A session with absurdly long numeric strings still loads; the oversized weight becomes 0."""
    sessions = sessions_from_documents([{
        "id": "s1",
        "date": "2025-01-06",
        "exercises": [{"name": "Squat", "sets": [
            {"weight": "9" * 400, "reps": "9" * 400, "completed": True},
            {"weight": "100", "reps": "5", "completed": True},
        ]}],
    }])
    assert len(sessions) == 1
    first, second = sessions[0].exercises[0].sets
    assert first.weight == 0.0
    assert first.reps > 0
    assert second.weight == 100.0
    assert session_volume(sessions[0]) == 500.0


def test_set_entry_coerces_strings() -> None:
    s = SetEntry.model_validate({"weight": "", "reps": "10", "completed": True})
    assert s.weight == 0.0
    assert s.reps == 10
    assert s.completed is True


def test_normalize_date() -> None:
    assert normalize_date("2025-01-06") == "2025-01-06"
    assert normalize_date("2025-01-06T18:30:00") == "2025-01-06"
    assert normalize_date("01/06/2025") == "2025-01-06"
    assert normalize_date("2025-02-30") is None
    assert normalize_date("") is None
    assert normalize_date(None) is None


def test_session_rejects_bad_date() -> None:
    with pytest.raises(ValidationError):
        WorkoutSession.model_validate({"id": "s1", "date": "yesterday"})


def test_session_accepts_exported_keys() -> None:
    """Exports with camelCase keys and a plain `duration` still load."""
    s = WorkoutSession.model_validate({
        "id": 17,
        "date": "2025-01-06",
        "duration": 45,
        "templateId": "push",
        "templateName": "Push Day",
        "exercises": [{"name": "Bench Press", "sets": [{"weight": "185", "reps": "8", "completed": True}]}],
    })
    assert s.id == "17"
    assert s.duration_minutes == 45
    assert s.template_id == "push"
    assert s.template_name == "Push Day"
    assert s.exercises[0].sets[0].weight == 185.0


def test_preferences_defaults() -> None:
    prefs = Preferences()
    assert prefs.weekly_workout_goal == 4
    assert prefs.streak_freeze_data is None
    assert Preferences.model_validate({"weekly_workout_goal": None}).weekly_workout_goal == 4


@pytest.mark.parametrize("raw,expected", [(None, 4), (0, 4), (-2, 4), ("-1", 4), ("3", 3), (5, 5)])
def test_weekly_goal_below_one_falls_back(raw: object, expected: int) -> None:
    """Unset, zero or negative goals revert to the default."""
    assert Preferences.model_validate({"weekly_workout_goal": raw}).weekly_workout_goal == expected


def test_date_helpers() -> None:
    assert shift_day("2025-01-01", -1) == "2024-12-31"
    assert shift_day("2024-02-28", 1) == "2024-02-29"
    assert days_between("2025-01-09", "2025-01-15") == 6
    assert month_key(parse_day("2025-01-15")) == "2025-01"
    assert next_week_key(parse_day("2025-01-15")) == "2025-01-19"
    # Sunday itself: next week starts 7 days later
    assert next_week_key(parse_day("2025-01-12")) == "2025-01-19"


def test_format_helpers() -> None:
    assert format_volume(12450.4) == "12,450 lbs"
    assert format_duration(45) == "45 min"
    assert format_duration(90) == "1h 30m"
    assert format_duration(120) == "2h"

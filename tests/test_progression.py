"""Progressive overload suggestions from the previous session's best set."""

import tempfile
from pathlib import Path

import pytest

from repstreak.models import Preferences, ProgressiveOverloadConfig, SetEntry, WorkoutSession
from repstreak.progression import best_set, goal_multiplier, last_sets_for, suggest_progression
from repstreak.service import suggest_next_weight
from repstreak.storage import Storage

USER = "lifter@example.com"


def _sets(*pairs: tuple) -> list[SetEntry]:
    return [SetEntry(weight=w, reps=r, completed=True) for (w, r) in pairs]


def _prefs(goal: str = "muscle_gain", increment: float = 5, at: int = 12, **extra) -> Preferences:
    return Preferences.model_validate({
        "primary_goal": goal,
        "progressive_overload_config": {"weight_increment": increment, "increase_at_reps": at},
        **extra,
    })


def test_best_set_prefers_weight_then_reps() -> None:
    assert best_set(_sets((185, 8), (195, 5), (195, 6), (175, 12))) == SetEntry(weight=195, reps=6, completed=True)
    first = SetEntry(weight=100, reps=10, completed=True)
    assert best_set([first, SetEntry(weight=100, reps=10)]) is first


def test_threshold_reached_adds_increment() -> None:
    s = suggest_progression(_sets((185, 12), (185, 10)), _prefs())
    assert s.should_progress is True
    assert s.suggested_weight == 190
    assert s.reason == "Hit 12 reps at 185 lbs (threshold: 12)"


def test_below_threshold_keeps_weight() -> None:
    s = suggest_progression(_sets((185, 10)), _prefs(unit_system="kg"))
    assert s.should_progress is False
    assert s.suggested_weight == 185
    assert s.reason == "Keep working at 185 kg (10/12 reps)"


@pytest.mark.parametrize(
    "goal,reps,expected_weight,note",
    [
        ("strength", 12, 106, " (strength focus: aggressive)"),           # 5 * 1.2 = 6
        ("strength", 14, 108, " (strength focus: aggressive)"),           # 5 * 1.5 = 7.5 -> 8
        ("weight_loss", 12, 104, " (weight_loss focus: conservative)"),   # 5 * 0.75 = 3.75 -> 4
        ("athletic_performance", 12, 105, " (athletic_performance focus: conservative)"),  # 4.5 -> 5
        ("general_fitness", 12, 105, ""),
    ],
)
def test_goal_scales_increment(goal: str, reps: int, expected_weight: float, note: str) -> None:
    s = suggest_progression(_sets((100, reps)), _prefs(goal=goal))
    assert s.should_progress is True
    assert s.suggested_weight == expected_weight
    assert s.reason.endswith(note or "(threshold: 12)")


def test_goal_multiplier() -> None:
    assert goal_multiplier("strength", 13, 12) == 1.2
    assert goal_multiplier("strength", 14, 12) == 1.5
    assert goal_multiplier("muscle_gain", 20, 12) == 1.0


def test_no_data_and_invalid_best_set() -> None:
    empty = suggest_progression([], _prefs())
    assert (empty.should_progress, empty.suggested_weight, empty.reason) == (False, 0.0, "No previous workout data")

    bodyweight = suggest_progression(_sets((0, 15)), _prefs())
    assert bodyweight.should_progress is False
    assert bodyweight.reason == "Invalid previous workout data"


def test_config_defaults() -> None:
    cfg = Preferences().progressive_overload_config
    assert cfg == ProgressiveOverloadConfig()
    assert (cfg.weight_increment, cfg.increase_at_reps) == (5.0, 12)
    assert (cfg.target_rep_range.min, cfg.target_rep_range.max) == (8, 12)
    assert Preferences().enable_progressive_overload is False


def test_last_sets_for_uses_latest_session_with_exercise() -> None:
    history = [
        WorkoutSession.model_validate({"id": "b", "date": "2025-01-14", "exercises": [{"name": "Row", "sets": []}]}),
        WorkoutSession.model_validate({
            "id": "a", "date": "2025-01-10",
            "exercises": [{"name": "Row", "sets": [{"weight": 135, "reps": 12}]}],
        }),
    ]
    assert [(s.weight, s.reps) for s in last_sets_for(history, "Row")] == [(135.0, 12)]
    assert last_sets_for(history, "row") == []


def test_suggest_next_weight_from_storage() -> None:
    """Disabled by default; once enabled the stored preferences drive the suggestion."""
    with tempfile.TemporaryDirectory() as tmp:
        storage = Storage(Path(tmp) / "p.db")
        storage.store_session(USER, WorkoutSession.model_validate({
            "id": "a", "date": "2025-01-10",
            "exercises": [{"name": "Bench Press", "sets": [{"weight": 80, "reps": 12, "completed": True}]}],
        }))
        assert suggest_next_weight(storage, USER, "Bench Press") is None

        storage.set_preferences(USER, {
            "enable_progressive_overload": True,
            "primary_goal": "strength",
            "unit_system": "kg",
            "progressive_overload_config": {"weight_increment": 2.5, "increase_at_reps": 10},
        })
        s = suggest_next_weight(storage, USER, "Bench Press")
        storage.close()
    assert s is not None
    # 12 reps is 2 past the threshold: 2.5 * 1.5 = 3.75 -> 4
    assert s.suggested_weight == 84
    assert s.reason == "Hit 12 reps at 80 kg (threshold: 10) (strength focus: aggressive)"

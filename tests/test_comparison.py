"""Post-workout comparison message."""

from repstreak.comparison import generate_workout_comparison
from repstreak.models import WorkoutSession


def _push(sid: str, day: str, sets: list[tuple], duration: int) -> WorkoutSession:
    return WorkoutSession.model_validate({
        "id": sid,
        "date": day,
        "duration_minutes": duration,
        "template_id": "push",
        "template_name": "Push Day",
        "exercises": [{"name": "Bench Press", "sets": [{"weight": w, "reps": r, "completed": c} for (w, r, c) in sets]}],
    })


def test_first_workout_highlights() -> None:
    """No earlier session of the template: volume, best set by estimated 1RM, duration."""
    current = _push("a", "2025-01-14", [(185, 8, True), (205, 3, True), (225, 1, False)], 45)
    msg = generate_workout_comparison(current, [current])
    assert msg == "\n".join([
        "**FIRST PUSH DAY**",
        "",
        "💪 2.1k lbs crushed",
        "🔥 Bench Press: 185×8",
        "⚡ 45 min - solid pace",
    ])


def test_compared_to_last_session() -> None:
    previous = _push("a", "2025-01-10", [(175, 8, True)], 50)
    current = _push("b", "2025-01-14", [(185, 8, True)], 45)
    msg = generate_workout_comparison(current, [current, previous], unit_system="lbs")
    assert msg == "\n".join([
        "**COMPARED TO LAST PUSH DAY**",
        "",
        "💪 Crushed +80 lbs (↑6%)",
        "🔥 Bench Press: 175→185 lbs",
        "⚡ 5 min faster",
        "📅 4 days since last time",
    ])


def test_volume_drop_in_kg() -> None:
    previous = _push("a", "2025-01-10", [(100, 10, True)], 0)
    current = _push("b", "2025-01-11", [(80, 10, True)], 0)
    msg = generate_workout_comparison(current, [previous], unit_system="kg")
    assert msg is not None
    lines = msg.splitlines()
    assert lines[2] == "📉 200 kg down (-20%)"
    assert "📅 1 day since last time" in lines


def test_no_template_name() -> None:
    s = WorkoutSession(id="x", date="2025-01-14")
    assert generate_workout_comparison(s, []) is None

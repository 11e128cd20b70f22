"""MCP server: weekly analysis, period comparison, streak/freeze tools and read-only resources."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path

from fastmcp import FastMCP

from .dates import parse_day
from .history import load_preferences, read_history
from .models import (
    AnalyzeWeekInput,
    ComparePeriodsInput,
    LogWorkoutInput,
    SuggestProgressionInput,
    UseFreezeInput,
    WeeklyStreakInput,
)
from .service import (
    analyze_last_week,
    compare_custom_periods,
    log_workout,
    refresh_weekly_streak,
    suggest_next_weight,
    use_streak_freeze,
)
from .storage import Storage

logger = logging.getLogger(__name__)

# Default DB next to the package (or use REPSTREAK_DB_PATH)
_db_path = os.environ.get("REPSTREAK_DB_PATH", str(Path(__file__).parent.parent / "repstreak.db"))
_storage = Storage(_db_path)

mcp = FastMCP(name="repstreak")


def _today(value: str | None) -> date | None:
    return parse_day(value) if value else None


@mcp.tool(name="repstreak.log_workout")
def repstreak_log_workout(payload: dict) -> dict:
    """
    Store one workout session for a user: { user_key, session: { id, date, duration_minutes, exercises } }.
    Sets carry weight, reps and completed; empty or unparseable weight/reps are stored as 0.
    Returns a short comparison with the last session of the same template when template_name is set.
    """
    inp = LogWorkoutInput.model_validate(payload)
    summary = log_workout(_storage, inp.user_key, inp.session)
    return {"status": "ok", "user_key": inp.user_key, "session_id": inp.session.id, "summary": summary}


@mcp.tool(name="repstreak.analyze_week")
def repstreak_analyze_week(payload: dict) -> dict:
    """
    Rolling 7-day analysis ending today (or `today`, YYYY-MM-DD) vs the 7 days before.
    Returns totals, per-exercise changes, the trend label and the day-to-day progress block.
    """
    inp = AnalyzeWeekInput.model_validate(payload)
    return analyze_last_week(_storage, inp.user_key, today=_today(inp.today)).model_dump()


@mcp.tool(name="repstreak.compare_periods")
def repstreak_compare_periods(payload: dict) -> dict:
    """
    Compare two arbitrary inclusive date ranges: { user_key, current: {start, end}, previous: {start, end} }.
    Every exercise from either period is listed with both stat blocks.
    """
    inp = ComparePeriodsInput.model_validate(payload)
    result = compare_custom_periods(
        _storage,
        inp.user_key,
        inp.current.start,
        inp.current.end,
        inp.previous.start,
        inp.previous.end,
    )
    return result.model_dump()


@mcp.tool(name="repstreak.weekly_streak")
def repstreak_weekly_streak(payload: dict) -> dict:
    """
    Recompute the weekly-goal streak. May auto-apply this month's freeze to save a missed week.
    Streak and freeze fields are written back to preferences only when they change.
    """
    inp = WeeklyStreakInput.model_validate(payload)
    return refresh_weekly_streak(_storage, inp.user_key, today=_today(inp.today)).model_dump()


@mcp.tool(name="repstreak.use_freeze")
def repstreak_use_freeze(payload: dict) -> dict:
    """
    Reserve this month's streak freeze for a future week (default: next week).
    Returns reserved=false with the unchanged state when the freeze is already spent.
    """
    inp = UseFreezeInput.model_validate(payload)
    result = use_streak_freeze(_storage, inp.user_key, week_start=inp.week_start, today=_today(inp.today))
    return result.model_dump()


@mcp.tool(name="repstreak.suggest_progression")
def repstreak_suggest_progression(payload: dict) -> dict:
    """
    Progressive overload hint for one exercise: { user_key, exercise }.
    Looks at the best set of the last session that logged the exercise and the user's
    threshold, increment and primary goal. Returns enabled=false when the user turned it off.
    """
    inp = SuggestProgressionInput.model_validate(payload)
    suggestion = suggest_next_weight(_storage, inp.user_key, inp.exercise)
    if suggestion is None:
        return {"enabled": False, "exercise": inp.exercise}
    return {"enabled": True, "exercise": inp.exercise, **suggestion.model_dump()}


@mcp.resource("user://{user_key}/preferences", mime_type="application/json")
def resource_user_preferences(user_key: str) -> str:
    """Read-only: the user's preferences merged over defaults."""
    return load_preferences(_storage, user_key).model_dump_json(indent=2)


@mcp.resource("user://{user_key}/history", mime_type="application/json")
def resource_user_history(user_key: str) -> str:
    """Read-only: the user's valid workout sessions, newest first."""
    sessions = read_history(_storage, user_key)
    return json.dumps([s.model_dump() for s in sessions], indent=2)


def run() -> None:
    """Run the MCP server with stdio transport (default)."""
    logging.basicConfig(level=os.environ.get("REPSTREAK_LOG_LEVEL", "WARNING").upper())
    logger.info("repstreak server using %s", _db_path)
    mcp.run()

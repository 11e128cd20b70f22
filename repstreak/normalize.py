"""Normalization of raw logged values: weights, reps, session dates."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

# Leading number only, like a lenient form parser: "185lbs" -> 185, "8.5" reps -> 8
_WEIGHT_RE = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")
_REPS_RE = re.compile(r"^\s*([-+]?\d+)")


def _parse_number(value: Any, pattern: re.Pattern[str], cast: type, field: str) -> Any:
    if value is None or isinstance(value, bool):
        return cast(0)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            logger.warning("unparseable %s %r treated as 0", field, value)
            return cast(0)
        try:
            return cast(value)
        except OverflowError:
            logger.warning("out-of-range %s treated as 0", field)
            return cast(0)
    s = str(value)
    if not s.strip():
        logger.debug("empty %s treated as 0", field)
        return cast(0)
    m = pattern.match(s)
    if not m:
        logger.warning("unparseable %s %r treated as 0", field, value)
        return cast(0)
    try:
        # reps pattern carries no fraction, so int() parses it directly
        num = cast(m.group(1))
    except ValueError:
        # int() refuses strings past the interpreter's digit limit
        logger.warning("unparseable %s %r treated as 0", field, value)
        return cast(0)
    if isinstance(num, float) and not math.isfinite(num):
        logger.warning("out-of-range %s %r treated as 0", field, s[:20])
        return cast(0)
    return num


def parse_weight(value: Any) -> float:
    """Weight as float; empty or unparseable -> 0.0."""
    return _parse_number(value, _WEIGHT_RE, float, "weight")


def parse_reps(value: Any) -> int:
    """Reps as int (truncated); empty or unparseable -> 0."""
    return _parse_number(value, _REPS_RE, int, "reps")


def is_valid_set(weight: float, reps: int) -> bool:
    """A set counts toward volume, max weight and reps only when both are positive."""
    return weight > 0 and reps > 0


def normalize_date(value: str | None) -> str | None:
    """Return YYYY-MM-DD or None if invalid."""
    if not value or not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    # ISO timestamp: keep the calendar day as written (already local time)
    if re.match(r"^\d{4}-\d{2}-\d{2}T", s):
        s = s[:10]
    for fmt in ("%Y-%m-%d", "%m/%d/%Y"):
        try:
            return datetime.strptime(s, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    return None

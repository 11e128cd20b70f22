"""History and preferences reader: turns stored documents into validated models.

Absent or corrupt data becomes an empty history or default preferences. Storage
failures are not absent data and propagate as StorageError.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from .models import Preferences, WorkoutSession
from .storage import Storage

logger = logging.getLogger(__name__)


def sessions_from_documents(docs: Iterable[Any] | None) -> list[WorkoutSession]:
    """Validate session documents one by one; malformed ones are logged and skipped.

    Result is sorted by date, newest first.
    """
    sessions: list[WorkoutSession] = []
    for i, doc in enumerate(docs or []):
        try:
            sessions.append(WorkoutSession.model_validate(doc))
        except ValidationError as e:
            ident = doc.get("id") if isinstance(doc, dict) else None
            logger.warning(
                "skipping malformed session %s (index %d): %s",
                ident, i, "; ".join(err["msg"] for err in e.errors()),
            )
    sessions.sort(key=lambda s: s.date, reverse=True)
    return sessions


def read_history(storage: Storage, user_key: str) -> list[WorkoutSession]:
    docs = storage.get_history(user_key)
    if docs is None:
        logger.debug("no workout history for %s", user_key)
        return []
    return sessions_from_documents(docs)


def parse_preferences(doc: dict | None) -> Preferences:
    """Merge a stored record over the defaults; unknown keys are ignored."""
    if not doc:
        return Preferences()
    known = {k: v for k, v in doc.items() if k in Preferences.model_fields}
    try:
        return Preferences.model_validate(known)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning("invalid preference fields %s replaced by defaults", sorted(map(str, bad)))
        return Preferences.model_validate({k: v for k, v in known.items() if k not in bad})


def load_preferences(storage: Storage, user_key: str) -> Preferences:
    return parse_preferences(storage.get_preferences(user_key))

"""SQLite storage layer for workout history and preferences."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from .errors import StorageError
from .models import WorkoutSession

logger = logging.getLogger(__name__)


def _dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    return {col[0]: row[i] for i, col in enumerate(cursor.description)}


class Storage:
    """SQLite-backed history and preferences store, keyed by user.

    Every write is a single statement; there is no cross-call transaction, so two
    concurrent read-modify-write cycles on the same user's preferences resolve as
    last-writer-wins.
    """

    def __init__(self, db_path: str | Path = "repstreak.db"):
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(str(self.db_path))
            except sqlite3.Error as e:
                raise StorageError(f"cannot open {self.db_path}: {e}") from e
            self._conn.row_factory = _dict_factory
            try:
                self._ensure_schema()
            except StorageError:
                self._conn.close()
                self._conn = None
                raise
        return self._conn

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _ensure_schema(self) -> None:
        conn = self.connect()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS sessions (
                    user_key TEXT NOT NULL,
                    session_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    session_json TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT (datetime('now')),
                    PRIMARY KEY (user_key, session_id)
                );
                CREATE TABLE IF NOT EXISTS preferences (
                    user_key TEXT PRIMARY KEY,
                    prefs_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
                );
                CREATE INDEX IF NOT EXISTS idx_sessions_user_date ON sessions(user_key, date);
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot create schema in {self.db_path}: {e}") from e

    def store_session(self, user_key: str, session: WorkoutSession) -> None:
        """Insert a session, replacing any earlier copy with the same id."""
        conn = self.connect()
        try:
            conn.execute(
                """
                INSERT INTO sessions (user_key, session_id, date, session_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_key, session_id) DO UPDATE SET
                    date = excluded.date,
                    session_json = excluded.session_json
                """,
                (user_key, session.id, session.date, session.model_dump_json()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot store session {session.id}: {e}") from e

    def store_raw_session(self, user_key: str, session_id: str, date: str, document: Any) -> None:
        """Store a session document as-is (imports of external exports, test fixtures)."""
        conn = self.connect()
        blob = document if isinstance(document, str) else json.dumps(document)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO sessions (user_key, session_id, date, session_json) VALUES (?, ?, ?, ?)",
                (user_key, session_id, date, blob),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot store session {session_id}: {e}") from e

    def get_history(self, user_key: str) -> Optional[list[dict]]:
        """Return the user's session documents (newest first), or None when there are none.

        Rows whose JSON cannot be decoded are logged and left out.
        """
        conn = self.connect()
        try:
            rows = conn.execute(
                "SELECT session_id, session_json FROM sessions WHERE user_key = ? ORDER BY date DESC",
                (user_key,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"cannot read history for {user_key}: {e}") from e
        if not rows:
            return None
        out = []
        for row in rows:
            try:
                doc = json.loads(row["session_json"])
            except json.JSONDecodeError:
                logger.warning("corrupt session %s for %s skipped", row["session_id"], user_key)
                continue
            out.append(doc)
        return out

    def get_preferences(self, user_key: str) -> Optional[dict]:
        conn = self.connect()
        try:
            row = conn.execute(
                "SELECT prefs_json FROM preferences WHERE user_key = ?", (user_key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"cannot read preferences for {user_key}: {e}") from e
        if not row:
            return None
        try:
            doc = json.loads(row["prefs_json"])
        except json.JSONDecodeError:
            logger.warning("corrupt preferences for %s ignored", user_key)
            return None
        return doc if isinstance(doc, dict) else None

    def set_preferences(self, user_key: str, update: dict) -> dict:
        """Shallow-merge ``update`` into the stored record and return the merged record."""
        merged = {**(self.get_preferences(user_key) or {}), **update}
        conn = self.connect()
        try:
            conn.execute(
                """
                INSERT INTO preferences (user_key, prefs_json)
                VALUES (?, ?)
                ON CONFLICT(user_key) DO UPDATE SET
                    prefs_json = excluded.prefs_json,
                    updated_at = datetime('now')
                """,
                (user_key, json.dumps(merged)),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot write preferences for {user_key}: {e}") from e
        return merged

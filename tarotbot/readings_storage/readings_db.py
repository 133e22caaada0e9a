"""SQLite storage for completed readings (question, cards, answer)."""

import json
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..conversation_memory import StoreError
from ..models import Reading


class ReadingsDB:
    """Append-only audit trail of readings, keyed by user."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = str(db_path)
        self.init_db()

    def init_db(self) -> None:
        """Initialize the readings table."""
        parent = os.path.dirname(self.db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS readings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user TEXT NOT NULL,
                        question TEXT NOT NULL,
                        card_names TEXT NOT NULL,
                        answer TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_readings_user ON readings(user, id)")
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialize readings table at {self.db_path}: {e}") from e

    def append_reading(self, user: str, question: str, card_names: Sequence[str], answer: str) -> Reading:
        """Persist one reading. Raises StoreError on failure."""
        created_at = datetime.now(timezone.utc).isoformat()
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("""
                    INSERT INTO readings (user, question, card_names, answer, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (user, question, json.dumps(list(card_names)), answer, created_at))
                conn.commit()
                reading_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StoreError(f"Could not append reading for {user}: {e}") from e

        return Reading(
            id=reading_id,
            user=user,
            question=question,
            card_names=list(card_names),
            answer=answer,
            created_at=created_at,
        )

    def recent_readings(self, user: str, limit: int = 5) -> List[Reading]:
        """Most recent readings for a user, newest first."""
        if limit <= 0:
            return []
        return self._select(
            "WHERE user = ? ORDER BY id DESC LIMIT ?",
            (user, limit),
        )

    def latest_with_question(self, user: str, question: str) -> Optional[Reading]:
        rows = self._select(
            "WHERE user = ? AND question = ? ORDER BY id DESC LIMIT 1",
            (user, question),
        )
        return rows[0] if rows else None

    def _select(self, where: str, params: tuple) -> List[Reading]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.execute(
                    "SELECT id, user, question, card_names, answer, created_at FROM readings " + where,
                    params,
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not read readings: {e}") from e

        readings = []
        for row in rows:
            data = dict(row)
            data["card_names"] = json.loads(data["card_names"] or "[]")
            readings.append(Reading(**data))
        return readings

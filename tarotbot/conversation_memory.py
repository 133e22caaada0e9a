"""Per-user conversation turns using SQLite."""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from .models import Role, Turn


class StoreError(RuntimeError):
    """A durable read or write failed. Never swallowed by the store."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversationMemory:
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = str(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        """Create the turns table if needed."""
        parent = os.path.dirname(self.db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS turns (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user TEXT NOT NULL,
                        role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
                        content TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_turns_user ON turns(user, id)")
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialize turns table at {self.db_path}: {e}") from e

    def append_turn(self, user: str, role: Role, content: str) -> Turn:
        """Append a turn. Raises StoreError on failure."""
        created_at = _now()
        conn = self._connect()
        try:
            cursor = conn.execute(
                "INSERT INTO turns (user, role, content, created_at) VALUES (?, ?, ?, ?)",
                (user, role, content, created_at),
            )
            conn.commit()
            turn_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StoreError(f"Could not append {role} turn for {user}: {e}") from e
        finally:
            conn.close()
        return Turn(id=turn_id, user=user, role=role, content=content, created_at=created_at)

    def recent_turns(self, user: str, limit: int) -> List[Turn]:
        """At most `limit` most recent turns, oldest first."""
        if limit <= 0:
            return []
        conn = self._connect()
        try:
            cursor = conn.execute(
                "SELECT id, user, role, content, created_at FROM turns "
                "WHERE user = ? ORDER BY id DESC LIMIT ?",
                (user, limit),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not read turns for {user}: {e}") from e
        finally:
            conn.close()
        rows.reverse()
        return [
            Turn(id=r[0], user=r[1], role=r[2], content=r[3], created_at=r[4])
            for r in rows
        ]

    def has_turns(self, user: str) -> bool:
        conn = self._connect()
        try:
            row = conn.execute("SELECT 1 FROM turns WHERE user = ? LIMIT 1", (user,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Could not read turns for {user}: {e}") from e
        finally:
            conn.close()
        return row is not None

"""Per-user session state: in-process session map over durable turns/readings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .conversation_memory import ConversationMemory, StoreError
from .models import Reading, Role, Session, Turn
from .readings_storage.readings_db import ReadingsDB

log = logging.getLogger("tarotbot.session_store")

SHUFFLE_QUESTION = "/shuffle"

__all__ = ["SessionStore", "StoreError", "SHUFFLE_QUESTION"]


class SessionStore:
    """Single access point for everything keyed by user.

    Sessions (greeted flag, last spread) live in memory; turns and readings
    are durable. A user with persisted turns but no in-memory session (e.g.
    after a restart) is rehydrated from the database on first lookup.
    """

    def __init__(self, memory: ConversationMemory, readings: ReadingsDB):
        self.memory = memory
        self.readings = readings
        self._sessions: Dict[str, Session] = {}

    @classmethod
    def open(cls, db_path: Union[str, Path]) -> "SessionStore":
        return cls(ConversationMemory(db_path), ReadingsDB(db_path))

    # -- session lifecycle -------------------------------------------------

    def has_session(self, user: str) -> bool:
        if user in self._sessions:
            return True
        if self.memory.has_turns(user):
            self._hydrate(user)
            return True
        return False

    def init_session(self, user: str) -> Session:
        session = self._sessions.get(user)
        if session is None:
            session = Session(user=user, has_greeted=True)
            self._sessions[user] = session
        return session

    def _hydrate(self, user: str) -> None:
        last = self.readings.latest_with_question(user, SHUFFLE_QUESTION)
        self._sessions[user] = Session(
            user=user,
            has_greeted=True,
            last_spread=list(last.card_names) if last else None,
        )
        log.info("session restored from storage user=%s has_spread=%s", user, last is not None)

    def _session(self, user: str) -> Optional[Session]:
        if user not in self._sessions and not self.has_session(user):
            return None
        return self._sessions[user]

    # -- spread ------------------------------------------------------------

    def record_spread(self, user: str, card_names: Sequence[str]) -> None:
        session = self._session(user) or self.init_session(user)
        session.last_spread = list(card_names)

    def get_spread(self, user: str) -> Optional[List[str]]:
        session = self._session(user)
        if session is None or not session.last_spread:
            return None
        return list(session.last_spread)

    # -- durable records ---------------------------------------------------

    def append_turn(self, user: str, role: Role, content: str) -> Turn:
        return self.memory.append_turn(user, role, content)

    def recent_turns(self, user: str, limit: int) -> List[Turn]:
        return self.memory.recent_turns(user, limit)

    def append_reading(self, user: str, question: str, card_names: Sequence[str], answer: str) -> Reading:
        return self.readings.append_reading(user, question, card_names, answer)

    def recent_readings(self, user: str, limit: int) -> List[Reading]:
        return self.readings.recent_readings(user, limit)

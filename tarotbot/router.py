"""Command routing and deterministic command handlers."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from .deck import Deck
from .messages import NO_CARDS_YET, NO_HISTORY, format_history, format_last_spread, format_spread, text_for
from .models import Action, CommandKind, Language
from .session_store import SHUFFLE_QUESTION, SessionStore

log = logging.getLogger("tarotbot.router")

SPREAD_SIZE = 3
HISTORY_LIMIT = 5

# Exact-match vocabulary. New commands are new entries here, never patterns,
# so free text can't be mistaken for a command.
COMMANDS: Dict[str, CommandKind] = {
    SHUFFLE_QUESTION: CommandKind.SHUFFLE,
    "/last": CommandKind.SHOW_LAST,
    "/history": CommandKind.SHOW_HISTORY,
}


def normalize(text: str) -> str:
    return (text or "").strip().lower()


class CommandRouter:
    def __init__(self, commands: Optional[Dict[str, CommandKind]] = None):
        self.commands = dict(COMMANDS if commands is None else commands)

    def route(self, user: str, text: str) -> Action:
        kind = self.commands.get(normalize(text))
        if kind is None:
            return Action(kind=CommandKind.AI_FALLBACK, text=text.strip())
        log.debug("routed user=%s command=%s", user, kind.value)
        return Action(kind=kind)


class CommandHandlers:
    """Executes the deterministic actions and returns the reply text.

    The caller persists the reply as an assistant turn and delivers it.
    """

    def __init__(self, deck: Deck, store: SessionStore):
        self.deck = deck
        self.store = store
        self._table: Dict[CommandKind, Callable[[str, Language], str]] = {
            CommandKind.SHUFFLE: self.shuffle,
            CommandKind.SHOW_LAST: self.show_last,
            CommandKind.SHOW_HISTORY: self.show_history,
        }

    def handles(self, kind: CommandKind) -> bool:
        return kind in self._table

    def execute(self, action: Action, user: str, language: Language) -> str:
        try:
            handler = self._table[action.kind]
        except KeyError:
            raise ValueError(f"No deterministic handler for {action.kind.value}") from None
        return handler(user, language)

    def shuffle(self, user: str, language: Language) -> str:
        cards = self.deck.sample(SPREAD_SIZE)
        names = [c.name for c in cards]
        reply = format_spread(cards)
        self.store.append_reading(user, SHUFFLE_QUESTION, names, reply)
        self.store.record_spread(user, names)
        log.info("spread drawn user=%s cards=%s", user, names)
        return reply

    def show_last(self, user: str, language: Language) -> str:
        names = self.store.get_spread(user)
        if not names:
            return text_for(NO_CARDS_YET, language)
        return format_last_spread(names, language)

    def show_history(self, user: str, language: Language) -> str:
        readings = self.store.recent_readings(user, HISTORY_LIMIT)
        if not readings:
            return text_for(NO_HISTORY, language)
        return format_history(readings, language)

"""Prompt assembly for the AI reader: active spread + bounded chat history."""

from __future__ import annotations

from typing import List, Sequence

from .deck import Deck
from .models import Card, ChatMessage, Language, ReadingContext, Turn
from .router import SPREAD_SIZE
from .session_store import SessionStore

CONTEXT_TURNS = 6

_LANGUAGE_NAMES = {"pt": "Brazilian Portuguese", "en": "English"}


def build_system_prompt(spread: Sequence[Card], language: Language) -> str:
    card_lines = "\n".join(f"{i}. {c.name}: {c.meaning}" for i, c in enumerate(spread, 1))
    return f"""You are an experienced, intuitive tarot reader chatting over WhatsApp.

Cards in play:
{card_lines}

Rules:
- Ground every answer in the cards above
- NEVER echo the user's question
- Reply in {_LANGUAGE_NAMES.get(language, "English")}
- Keep it natural and warm, like a real reader
- Separate distinct messages with a blank line; each paragraph is sent on its own
- Maximum 3 short paragraphs"""


class ContextBuilder:
    def __init__(self, deck: Deck, store: SessionStore, max_turns: int = CONTEXT_TURNS):
        self.deck = deck
        self.store = store
        self.max_turns = max_turns

    def resolve_spread(self, user: str) -> List[Card]:
        """Cards of the user's last spread, or an implicit draw for this turn.

        Last-spread cards come back in catalog order, not draw order. An
        implicit draw is not recorded as the user's spread.
        """
        names = self.store.get_spread(user)
        if names:
            return self.deck.filter_by_names(names)
        return self.deck.sample(SPREAD_SIZE)

    def history(self, user: str, text: str) -> List[Turn]:
        # The current message is usually already stored as the newest turn;
        # fetch one extra so dropping it still leaves max_turns of history.
        turns = self.store.recent_turns(user, self.max_turns + 1)
        if turns and turns[-1].role == "user" and turns[-1].content.strip() == text.strip():
            turns = turns[:-1]
        return turns[-self.max_turns:] if self.max_turns > 0 else []

    def build(self, user: str, text: str, language: Language = "en") -> ReadingContext:
        spread = self.resolve_spread(user)
        messages = [ChatMessage(role="system", content=build_system_prompt(spread, language))]
        messages.extend(ChatMessage(role=t.role, content=t.content) for t in self.history(user, text))
        messages.append(ChatMessage(role="user", content=text))
        return ReadingContext(spread=spread, messages=messages)

"""Per-message dialogue flow: greeting, turn persistence, routing, containment.

Session states:  NEW_USER -> GREETED (once per user)
Turn states:     RECEIVED -> ROUTED -> REPLIED

handle() is the single place that decides what the user sees when something
fails. It never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .ai import ChatGenerator
from .context_builder import ContextBuilder
from .deck import Deck
from .dispatcher import ReplyDispatcher
from .language import LanguageDetector
from .messages import AI_APOLOGY, GREETING, STORE_ERROR, text_for
from .models import CommandKind, InboundMessage, Language
from .router import CommandHandlers, CommandRouter
from .session_store import SessionStore, StoreError
from .transport import OutboundTransport

log = logging.getLogger("tarotbot.orchestrator")


class SessionState(str, Enum):
    NEW_USER = "new_user"
    GREETED = "greeted"


class TurnState(str, Enum):
    RECEIVED = "received"
    ROUTED = "routed"
    REPLIED = "replied"


@dataclass
class TurnOutcome:
    user: str
    ignored: bool = False
    language: Optional[Language] = None
    session_state: Optional[SessionState] = None
    states: List[TurnState] = field(default_factory=list)
    action: Optional[CommandKind] = None
    replies: List[str] = field(default_factory=list)
    failed_deliveries: int = 0
    error: Optional[str] = None


class DialogueOrchestrator:
    def __init__(
        self,
        deck: Deck,
        store: SessionStore,
        languages: LanguageDetector,
        transport: OutboundTransport,
        generator: ChatGenerator,
        router: Optional[CommandRouter] = None,
    ):
        self.deck = deck
        self.store = store
        self.languages = languages
        self.transport = transport
        self.generator = generator
        self.router = router or CommandRouter()
        self.handlers = CommandHandlers(deck, store)
        self.context_builder = ContextBuilder(deck, store)
        self.dispatcher = ReplyDispatcher(transport, store)

    def handle_message(self, message: Optional[InboundMessage]) -> TurnOutcome:
        if message is None:
            return TurnOutcome(user="", ignored=True)
        return self.handle(message.sender, message.text)

    def handle(self, sender: Optional[str], text: Optional[str]) -> TurnOutcome:
        text = (text or "").strip()
        if not sender or not text:
            # status callbacks and empty messages: no reply, nothing stored
            return TurnOutcome(user=sender or "", ignored=True)

        outcome = TurnOutcome(user=sender, states=[TurnState.RECEIVED])
        language = self.languages.resolve_language(sender, text)
        outcome.language = language

        try:
            if not self.store.has_session(sender):
                outcome.session_state = SessionState.NEW_USER
                self._greet(sender, language, outcome)
                return outcome
            outcome.session_state = SessionState.GREETED

            self.store.append_turn(sender, "user", text)
            action = self.router.route(sender, text)
            outcome.action = action.kind
            outcome.states.append(TurnState.ROUTED)

            if self.handlers.handles(action.kind):
                reply = self.handlers.execute(action, sender, language)
                self._reply(sender, reply, outcome)
            else:
                self._ai_fallback(sender, action.text or text, language, outcome)
            outcome.states.append(TurnState.REPLIED)
        except StoreError:
            log.exception("store failure user=%s", sender)
            outcome.error = "store_error"
            self._notify(sender, text_for(STORE_ERROR, language), outcome)
        except Exception:
            log.exception("unexpected failure handling message user=%s", sender)
            outcome.error = "unexpected_error"
        return outcome

    # ------------------------------------------------------------------

    def _notify(self, user: str, body: str, outcome: TurnOutcome) -> bool:
        """Send without recording a turn. Failures are logged only."""
        outcome.replies.append(body)
        try:
            result = self.transport.send(user, body)
        except Exception:
            outcome.failed_deliveries += 1
            log.exception("delivery raised", extra={"context": {"user": user}})
            return False
        if not result.ok:
            outcome.failed_deliveries += 1
            log.warning(
                "delivery failed",
                extra={"context": {"user": user, "code": result.error_code, "error": result.error}},
            )
        return result.ok

    def _reply(self, user: str, body: str, outcome: TurnOutcome) -> None:
        self._notify(user, body, outcome)
        self.store.append_turn(user, "assistant", body)

    def _greet(self, user: str, language: Language, outcome: TurnOutcome) -> None:
        self._reply(user, text_for(GREETING, language), outcome)
        self.store.init_session(user)
        outcome.session_state = SessionState.GREETED
        outcome.states.append(TurnState.REPLIED)
        log.info("greeted new user=%s lang=%s", user, language)

    def _ai_fallback(self, user: str, text: str, language: Language, outcome: TurnOutcome) -> None:
        context = self.context_builder.build(user, text, language)
        try:
            reply = self.generator.generate(context.as_payload())
        except Exception:
            log.exception("AI generation failed user=%s", user)
            outcome.error = "ai_error"
            self._reply(user, text_for(AI_APOLOGY, language), outcome)
            return

        report = self.dispatcher.dispatch(user, text, reply, [c.name for c in context.spread])
        outcome.replies.extend(report.segments)
        outcome.failed_deliveries += report.failed
        log.info(
            "AI reply dispatched user=%s segments=%d failed=%d",
            user, len(report.segments), report.failed,
        )

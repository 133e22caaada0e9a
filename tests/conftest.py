from typing import Dict, List, Optional

import pytest

from tarotbot.ai import AIError, ChatGenerator
from tarotbot.deck import load_deck
from tarotbot.language import LanguageDetector
from tarotbot.orchestrator import DialogueOrchestrator
from tarotbot.result import Result
from tarotbot.session_store import SessionStore
from tarotbot.transport import OutboundTransport
from tarotbot.utils.rng import seeded_random


class RecordingTransport(OutboundTransport):
    """Records every send; bodies listed in fail_bodies come back as failures."""

    def __init__(self):
        self.sent: List[tuple] = []
        self.fail_bodies: set = set()
        self.fail_all = False

    def send(self, to: str, body: str) -> Result[str]:
        self.sent.append((to, body))
        if self.fail_all or body in self.fail_bodies:
            return Result.failure("provider unavailable", "delivery_error")
        return Result.success(f"wamid.{len(self.sent)}")

    def bodies_for(self, to: str) -> List[str]:
        return [body for (dest, body) in self.sent if dest == to]


class ScriptedGenerator(ChatGenerator):
    def __init__(self):
        self.reply = "The cards speak of change."
        self.error: Optional[Exception] = None
        self.calls: List[List[Dict[str, str]]] = []

    def generate(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "tarotbot.sqlite"


@pytest.fixture
def store(db_path):
    return SessionStore.open(db_path)


@pytest.fixture
def deck():
    return load_deck(rng=seeded_random("test-seed"))


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def failing_generator(generator):
    generator.error = AIError("quota exceeded")
    return generator


@pytest.fixture
def orchestrator(deck, store, transport, generator):
    return DialogueOrchestrator(
        deck=deck,
        store=store,
        languages=LanguageDetector(),
        transport=transport,
        generator=generator,
    )

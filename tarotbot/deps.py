import threading

from fastapi import Request

from .ai import OpenAIChatGenerator
from .config import Settings
from .deck import load_deck
from .language import LanguageDetector
from .orchestrator import DialogueOrchestrator
from .session_store import SessionStore
from .transport import WhatsAppTransport


def build_orchestrator(settings: Settings) -> DialogueOrchestrator:
    """Wire the components once per process."""
    return DialogueOrchestrator(
        deck=load_deck(),
        store=SessionStore.open(settings.db_path),
        languages=LanguageDetector(),
        transport=WhatsAppTransport(
            phone_number_id=settings.phone_number_id or "",
            access_token=settings.whatsapp_token or "",
            api_version=settings.graph_api_version,
            timeout_seconds=settings.whatsapp_timeout_seconds,
        ),
        generator=OpenAIChatGenerator(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.openai_timeout_seconds,
        ),
    )


_build_lock = threading.Lock()


def get_orchestrator(request: Request) -> DialogueOrchestrator:
    """Built lazily so importing the app never touches disk or credentials."""
    state = request.app.state
    if getattr(state, "orchestrator", None) is None:
        with _build_lock:
            if getattr(state, "orchestrator", None) is None:
                state.orchestrator = build_orchestrator(state.settings)
    return state.orchestrator

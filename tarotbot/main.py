from typing import Optional

from fastapi import FastAPI

from tarotbot.config import Settings
from tarotbot.logging_config import setup_logging
from tarotbot.orchestrator import DialogueOrchestrator
from tarotbot.routes.deck_routes import router as deck_router
from tarotbot.routes.reading_routes import router as reading_router
from tarotbot.routes.webhook import router as webhook_router


def create_app(
    orchestrator: Optional[DialogueOrchestrator] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title="Tarot WhatsApp Bot", version="0.1.0")
    # None means: build from settings on the first request (see deps.get_orchestrator)
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.include_router(webhook_router)
    app.include_router(deck_router)
    app.include_router(reading_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()

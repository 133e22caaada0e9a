"""FastAPI routes for the card catalog.

Endpoints:
- GET /deck
- GET /deck/cards/{name}
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..deck import DeckError
from ..deps import get_orchestrator
from ..orchestrator import DialogueOrchestrator

router = APIRouter(prefix="/deck", tags=["deck"])


@router.get("")
def deck(orchestrator: DialogueOrchestrator = Depends(get_orchestrator)) -> Dict[str, Any]:
    cards = [c.model_dump() for c in orchestrator.deck]
    return {"card_count": len(cards), "cards": cards}


@router.get("/cards/{name}")
def card(name: str, orchestrator: DialogueOrchestrator = Depends(get_orchestrator)) -> Dict[str, Any]:
    try:
        c = orchestrator.deck.get(name)
    except DeckError:
        raise HTTPException(status_code=404, detail=f"Unknown card: {name}")
    return {"card": c.model_dump()}

"""FastAPI routes for the reading audit trail."""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..conversation_memory import StoreError
from ..deps import get_orchestrator
from ..models import ReadingOut, ReadingsResponse
from ..orchestrator import DialogueOrchestrator

router = APIRouter(prefix="/readings", tags=["reading"])


@router.get("/{user}", response_model=ReadingsResponse)
def get_readings_for_user(
    user: str,
    limit: int = Query(5, ge=1, le=50, description="Number of readings to return (1-50)"),
    orchestrator: DialogueOrchestrator = Depends(get_orchestrator),
) -> ReadingsResponse:
    """Most recent readings for a user, newest first."""
    try:
        readings = orchestrator.store.recent_readings(user, limit)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Reading storage unavailable: {e}")

    return ReadingsResponse(
        user=user,
        readings=[
            ReadingOut(
                question=r.question,
                card_names=r.card_names,
                answer=r.answer,
                created_at=r.created_at,
            )
            for r in readings
        ],
    )

"""Inbound webhook: acknowledge at once, handle the message in the background."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from pydantic import ValidationError

from ..deps import get_orchestrator
from ..models import WebhookAck, WebhookPayload
from ..orchestrator import DialogueOrchestrator

log = logging.getLogger("tarotbot.webhook")
router = APIRouter(tags=["webhook"])


@router.post("/webhook", response_model=WebhookAck)
def receive_webhook(
    background_tasks: BackgroundTasks,
    body: Any = Body(None),
    orchestrator: DialogueOrchestrator = Depends(get_orchestrator),
):
    log.debug("webhook payload=%s", json.dumps(body, ensure_ascii=False))
    if not isinstance(body, dict):
        return WebhookAck(ok=True, queued=False)

    try:
        message = WebhookPayload.model_validate(body).first_message()
    except ValidationError as e:
        log.info("webhook payload ignored, not a message event: %s", e.error_count())
        return WebhookAck(ok=True, queued=False)

    if message is None:
        # delivery/read status callbacks, media messages, empty text
        return WebhookAck(ok=True, queued=False)

    background_tasks.add_task(orchestrator.handle_message, message)
    return WebhookAck(ok=True, queued=True)

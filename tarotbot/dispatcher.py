"""Splits a generated reply into separate messages, sends and records them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .session_store import SessionStore
from .transport import OutboundTransport

log = logging.getLogger("tarotbot.dispatcher")

_BLANK_LINES = re.compile(r"\n{2,}")


def split_reply(reply: str) -> List[str]:
    """Split on blank-line boundaries; empty segments are dropped."""
    text = (reply or "").replace("\r\n", "\n")
    return [seg.strip() for seg in _BLANK_LINES.split(text) if seg.strip()]


@dataclass
class DispatchReport:
    segments: List[str] = field(default_factory=list)
    delivered: int = 0
    failed: int = 0

    @property
    def complete(self) -> bool:
        return self.failed == 0


class ReplyDispatcher:
    def __init__(self, transport: OutboundTransport, store: SessionStore):
        self.transport = transport
        self.store = store

    def dispatch(self, user: str, question: str, reply: str, card_names: Sequence[str]) -> DispatchReport:
        """Deliver each segment in order, then record one reading with the full reply.

        A failed delivery is logged and the remaining segments are still
        attempted. Every segment is stored as an assistant turn either way.
        Store errors propagate.
        """
        report = DispatchReport(segments=split_reply(reply))
        total = len(report.segments)
        for i, segment in enumerate(report.segments, 1):
            context = {"user": user, "segment": i, "segments": total}
            try:
                result = self.transport.send(user, segment)
            except Exception:
                report.failed += 1
                log.exception("segment delivery raised", extra={"context": context})
            else:
                if result.ok:
                    report.delivered += 1
                else:
                    report.failed += 1
                    context.update(code=result.error_code, error=result.error)
                    log.warning("segment delivery failed", extra={"context": context})
            self.store.append_turn(user, "assistant", segment)

        self.store.append_reading(user, question, card_names, reply)
        return report

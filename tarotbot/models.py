from enum import Enum
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]
Language = Literal["pt", "en"]


class Card(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    meaning: str


class Turn(BaseModel):
    id: int
    user: str
    role: Role
    content: str
    created_at: str


class Reading(BaseModel):
    id: int
    user: str
    question: str
    card_names: List[str] = Field(default_factory=list)
    answer: str
    created_at: str


class Session(BaseModel):
    user: str
    last_spread: Optional[List[str]] = None
    has_greeted: bool = False


class InboundMessage(BaseModel):
    sender: str
    text: str


class CommandKind(str, Enum):
    SHUFFLE = "shuffle"
    SHOW_LAST = "show_last"
    SHOW_HISTORY = "show_history"
    AI_FALLBACK = "ai_fallback"


class Action(BaseModel):
    kind: CommandKind
    text: Optional[str] = None  # only set for AI_FALLBACK


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ReadingContext(BaseModel):
    spread: List[Card]
    messages: List[ChatMessage]

    def as_payload(self) -> List[dict]:
        return [m.model_dump() for m in self.messages]


# Inbound webhook payload (WhatsApp Cloud API shape). Everything optional:
# status callbacks and non-text messages must parse and then be ignored.

class WebhookText(BaseModel):
    body: Optional[str] = None


class WebhookMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(None, alias="from")
    type: Optional[str] = None
    text: Optional[WebhookText] = None


class WebhookValue(BaseModel):
    messages: List[WebhookMessage] = Field(default_factory=list)


class WebhookChange(BaseModel):
    value: Optional[WebhookValue] = None


class WebhookEntry(BaseModel):
    changes: List[WebhookChange] = Field(default_factory=list)


class WebhookPayload(BaseModel):
    object: Optional[str] = None
    entry: List[WebhookEntry] = Field(default_factory=list)

    def first_message(self) -> Optional[InboundMessage]:
        """Normalize to the first user text message, or None."""
        if not self.entry or not self.entry[0].changes:
            return None
        value = self.entry[0].changes[0].value
        if value is None or not value.messages:
            return None
        msg = value.messages[0]
        sender = msg.from_
        text = (msg.text.body if msg.text else None) or ""
        if not sender or not text.strip():
            return None
        return InboundMessage(sender=sender, text=text)


class ReadingOut(BaseModel):
    question: str
    card_names: List[str]
    answer: str
    created_at: str


class ReadingsResponse(BaseModel):
    user: str
    readings: List[ReadingOut]


class WebhookAck(BaseModel):
    ok: bool = True
    queued: bool = False

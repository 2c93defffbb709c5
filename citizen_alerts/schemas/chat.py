"""Pydantic schemas for the chatbot."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class MessageType(str, Enum):
    TEXT = "text"
    QUICK_REPLY = "quick_reply"
    ALERT_CARD = "alert_card"


class ChatAlertCard(BaseModel):
    """Alert summary attached to a bot reply."""

    title: str
    location: str
    description: str
    severity: str


class ChatMessage(BaseModel):
    """A single chat message from the user or the bot."""

    id: UUID = Field(default_factory=uuid4)
    content: str
    is_user: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    message_type: MessageType = MessageType.TEXT
    image_count: int = 0
    quick_replies: list[str] | None = None
    alert_card: ChatAlertCard | None = None


class ChatRequest(BaseModel):
    """User message posted to the chatbot."""

    text: str
    image_count: int = Field(0, ge=0)

"""Conversation domain models for the coaching agent."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Conversation:
    """Conversation thread between a user and the coach."""

    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime
    title: str | None = None
    context: dict[str, object] | None = None


@dataclass(frozen=True)
class Message:
    """Persisted conversation message."""

    id: UUID
    conversation_id: UUID
    role: str
    content: str
    created_at: datetime
    metadata: dict[str, object] | None = None


@dataclass(frozen=True)
class AgentResponse:
    """Reply returned to the caller for one chat turn."""

    message: str
    confidence: float
    created_at: datetime
    tools_used: list[str] = field(default_factory=list)

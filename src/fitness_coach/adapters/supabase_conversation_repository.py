"""Supabase repository for coach conversations and messages."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from fitness_coach.domain.conversations import Conversation, Message
from fitness_coach.services.agent import ConversationRepository


@dataclass
class SupabaseConversationRepository(ConversationRepository):
    """Supabase implementation for conversations."""

    client: Client

    def list_recent_by_user(self, user_id: UUID, limit: int) -> list[Conversation]:
        """Return conversations ordered by last update."""
        response = (
            self.client.table("conversations")
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_conversation(row) for row in response.data or []]

    def create_conversation(self, conversation: Conversation) -> UUID:
        """Create a conversation row and return its id."""
        response = (
            self.client.table("conversations")
            .insert(
                {
                    "id": str(conversation.id),
                    "user_id": str(conversation.user_id),
                    "title": conversation.title,
                    "context": conversation.context,
                    "created_at": conversation.created_at.isoformat(),
                    "updated_at": conversation.updated_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create conversation")
        return UUID(response.data[0]["id"])

    def append_message(self, message: Message) -> None:
        """Insert a message and bump the conversation's updated_at."""
        self.client.table("messages").insert(
            {
                "id": str(message.id),
                "conversation_id": str(message.conversation_id),
                "role": message.role,
                "content": message.content,
                "metadata": message.metadata,
                "created_at": message.created_at.isoformat(),
            }
        ).execute()
        self.client.table("conversations").update(
            {"updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(message.conversation_id)).execute()

    def get_latest_messages(self, conversation_id: UUID, limit: int) -> list[Message]:
        """Return the newest messages in chronological order."""
        response = (
            self.client.table("messages")
            .select("*")
            .eq("conversation_id", str(conversation_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        messages = [_parse_message(row) for row in response.data or []]
        return list(reversed(messages))

    def list_messages(
        self, conversation_id: UUID, limit: int, offset: int
    ) -> list[Message]:
        """Return a page of messages in chronological order."""
        response = (
            self.client.table("messages")
            .select("*")
            .eq("conversation_id", str(conversation_id))
            .order("created_at")
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_message(row) for row in response.data or []]


def _parse_conversation(row: dict[str, object]) -> Conversation:
    return Conversation(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=row.get("title"),
        context=row.get("context"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )


def _parse_message(row: dict[str, object]) -> Message:
    return Message(
        id=UUID(str(row["id"])),
        conversation_id=UUID(str(row["conversation_id"])),
        role=str(row.get("role", "")),
        content=str(row.get("content", "")),
        metadata=row.get("metadata"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )

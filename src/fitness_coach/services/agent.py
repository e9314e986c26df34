"""Conversational coaching agent with tool calling."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from fitness_coach.domain.completions import ChatMessage, CompletionResult
from fitness_coach.domain.conversations import AgentResponse, Conversation, Message
from fitness_coach.domain.nutrition import DAILY_TARGETS
from fitness_coach.services.agent_tools import AgentToolbox
from fitness_coach.services.completions import CompletionGateway
from fitness_coach.services.tracking import TrackingService

_logger = logging.getLogger(__name__)

HISTORY_WINDOW = 20
MAX_MODEL_CALLS = 5
ACTIVITY_WINDOW_DAYS = 7
NEW_CONVERSATION_TITLE = "New Conversation"
MAX_ITERATIONS_MESSAGE = "Maximum tool iterations reached"
CONTEXT_UNAVAILABLE = "User context unavailable"
# Fixed until replies carry a real confidence signal.
AGENT_RESPONSE_CONFIDENCE = 0.85

SYSTEM_PROMPT_TEMPLATE = """You are a fitness and nutrition coach assistant with access to the user's tracking data.

User Context:
{context}

Guidelines:
- Be concise but thorough
- Reference user's actual data when relevant
- Provide evidence-based advice
- ALWAYS use tools to get accurate data before answering
- Never hallucinate meal or workout history

When user asks about progress, meals, or workouts, use the appropriate tool first."""


class ConversationRepository(Protocol):
    """Persistence interface for conversations and their messages."""

    def list_recent_by_user(self, user_id: UUID, limit: int) -> list[Conversation]:
        """Return the user's conversations, most recently updated first."""

    def create_conversation(self, conversation: Conversation) -> UUID:
        """Persist a conversation and return its id."""

    def append_message(self, message: Message) -> None:
        """Persist a message and touch its conversation."""

    def get_latest_messages(self, conversation_id: UUID, limit: int) -> list[Message]:
        """Return the newest ``limit`` messages, oldest first."""

    def list_messages(
        self, conversation_id: UUID, limit: int, offset: int
    ) -> list[Message]:
        """Return a page of messages, oldest first."""


@dataclass
class AgentService:
    """Runs chat turns against the model, executing requested tools."""

    completions: CompletionGateway
    conversations: ConversationRepository
    tracking: TrackingService
    toolbox: AgentToolbox
    model: str | None = None

    async def send_message(self, user_id: UUID, text: str) -> AgentResponse:
        """Answer one user message, persisting the exchange."""
        _logger.info("Processing chat message for user %s", user_id)
        conversation = self._current_conversation(user_id)
        history = self.conversations.get_latest_messages(conversation.id, HISTORY_WINDOW)

        messages = [
            ChatMessage.system(
                SYSTEM_PROMPT_TEMPLATE.format(context=self._build_user_context(user_id))
            ),
            *(ChatMessage(role=message.role, content=message.content) for message in history),
            ChatMessage.user(text),
        ]
        reply, tools_used = await self._run_tool_loop(user_id, messages)

        self._persist(
            Message(
                id=uuid4(),
                conversation_id=conversation.id,
                role="user",
                content=text,
                created_at=datetime.now(UTC),
            )
        )
        self._persist(
            Message(
                id=uuid4(),
                conversation_id=conversation.id,
                role="assistant",
                content=reply,
                created_at=datetime.now(UTC),
                metadata={"tools_used": list(tools_used)},
            )
        )
        return AgentResponse(
            message=reply,
            confidence=AGENT_RESPONSE_CONFIDENCE,
            created_at=datetime.now(UTC),
            tools_used=tools_used,
        )

    def get_history(self, user_id: UUID, limit: int = 50, offset: int = 0) -> list[Message]:
        """Return messages of the user's current conversation, oldest first."""
        conversations = self.conversations.list_recent_by_user(user_id, 1)
        if not conversations:
            return []
        return self.conversations.list_messages(conversations[0].id, limit, offset)

    async def _run_tool_loop(
        self, user_id: UUID, messages: list[ChatMessage]
    ) -> tuple[str, list[str]]:
        tools = self.toolbox.definitions
        tools_used: list[str] = []
        for _ in range(MAX_MODEL_CALLS):
            result = await self.completions.complete(messages, tools=tools, model=self.model)
            if not result.tool_calls:
                return result.content, tools_used
            messages.append(ChatMessage.assistant(result.content or None, result.tool_calls))
            messages.extend(self._execute_tools(user_id, result, tools_used))
        _logger.warning("Tool loop hit %s model calls for user %s", MAX_MODEL_CALLS, user_id)
        return MAX_ITERATIONS_MESSAGE, tools_used

    def _execute_tools(
        self, user_id: UUID, result: CompletionResult, tools_used: list[str]
    ) -> list[ChatMessage]:
        replies = []
        for call in result.tool_calls:
            _logger.info("Executing tool %s with args %s", call.name, call.arguments)
            try:
                output = self.toolbox.execute(call.name, call.arguments, user_id)
            except Exception as exc:
                _logger.warning("Tool %s failed: %s", call.name, exc)
                output = f"Error: {exc}"
            tools_used.append(call.name)
            replies.append(ChatMessage.tool(call.id, output))
        return replies

    def _current_conversation(self, user_id: UUID) -> Conversation:
        conversations = self.conversations.list_recent_by_user(user_id, 1)
        if conversations:
            return conversations[0]
        now = datetime.now(UTC)
        conversation = Conversation(
            id=uuid4(),
            user_id=user_id,
            title=NEW_CONVERSATION_TITLE,
            created_at=now,
            updated_at=now,
        )
        conversation_id = self.conversations.create_conversation(conversation)
        if conversation_id == conversation.id:
            return conversation
        return replace(conversation, id=conversation_id)

    def _build_user_context(self, user_id: UUID) -> str:
        sections = []
        try:
            profile = self.tracking.get_profile(user_id)
            sections.append(f"User: {profile.full_name}")
        except Exception as exc:
            _logger.warning("Failed to load profile for user %s: %s", user_id, exc)

        try:
            goals = self.tracking.get_goals(user_id, "active")
            if goals:
                lines = ["Active Goals:"]
                lines.extend(
                    f"- {goal.goal_type}: {goal.description} "
                    f"(target: {goal.target_value:.1f} {goal.unit})"
                    for goal in goals
                )
                sections.append("\n".join(lines))
        except Exception as exc:
            _logger.warning("Failed to load goals for user %s: %s", user_id, exc)

        try:
            summary = self.tracking.get_daily_summary(user_id)
            sections.append(
                "\n".join(
                    [
                        "Today's Nutrition:",
                        f"- Calories: {summary.total_calories:.0f} / "
                        f"{DAILY_TARGETS.calories:.0f}",
                        f"- Protein: {summary.total_protein:.1f}g / "
                        f"{DAILY_TARGETS.protein:.1f}g",
                        f"- Carbs: {summary.total_carbohydrates:.1f}g / "
                        f"{DAILY_TARGETS.carbohydrates:.1f}g",
                        f"- Fat: {summary.total_fat:.1f}g / {DAILY_TARGETS.fat:.1f}g",
                    ]
                )
            )
        except Exception as exc:
            _logger.warning("Failed to load daily summary for user %s: %s", user_id, exc)

        try:
            activities = self.tracking.get_activities(user_id, ACTIVITY_WINDOW_DAYS)
            if activities:
                sections.append(
                    f"Recent Activity (last {ACTIVITY_WINDOW_DAYS} days): "
                    f"{len(activities)} activities logged"
                )
        except Exception as exc:
            _logger.warning("Failed to load activities for user %s: %s", user_id, exc)

        return "\n\n".join(sections) if sections else CONTEXT_UNAVAILABLE

    def _persist(self, message: Message) -> None:
        try:
            self.conversations.append_message(message)
        except Exception as exc:
            _logger.warning("Failed to save %s message: %s", message.role, exc)

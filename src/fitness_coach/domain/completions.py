"""Chat-completion request and response models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ToolCall:
    """Function call requested by the model."""

    id: str
    name: str
    arguments: str = "{}"

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the call."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ChatMessage:
    """Role-tagged message sent to the completion endpoint."""

    role: str
    content: str | list[dict[str, object]] | None
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: str | None = None

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str | list[dict[str, object]]) -> "ChatMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls, content: str | None, tool_calls: tuple[ToolCall, ...] = ()
    ) -> "ChatMessage":
        return cls(role="assistant", content=content, tool_calls=tool_calls)

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "ChatMessage":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the message."""
        payload: dict[str, object] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_payload() for call in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        return payload


@dataclass(frozen=True)
class ToolDefinition:
    """Function schema advertised to the model."""

    name: str
    description: str
    parameters: dict[str, object]

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class CompletionResult:
    """First choice of a chat completion."""

    content: str
    tool_calls: tuple[ToolCall, ...] = ()
    usage: TokenUsage = field(default_factory=TokenUsage)
    finish_reason: str | None = None
    model: str | None = None

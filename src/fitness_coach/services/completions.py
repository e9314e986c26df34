"""Completion gateway with bounded retries over a chat-completions client."""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

from fitness_coach.domain.completions import (
    ChatMessage,
    CompletionResult,
    TokenUsage,
    ToolCall,
    ToolDefinition,
)
from fitness_coach.domain.errors import (
    ParseError,
    UpstreamAPIError,
    UpstreamTransportError,
)

_logger = logging.getLogger(__name__)

_RETRYABLE_ERRORS = (httpx.HTTPError, UpstreamTransportError)


class CompletionClient(Protocol):
    """Interface for the upstream chat-completions endpoint."""

    async def create_chat_completion(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Send a request body and return the decoded 200 response body."""


@dataclass
class CompletionGateway:
    """Sends chat requests upstream, retrying transient failures."""

    client: CompletionClient
    default_model: str
    temperature: float = 0.7
    max_tokens: int = 4096
    max_attempts: int = 3
    retry_delay_seconds: float = 2.0

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
    ) -> CompletionResult:
        """Return the first choice of a chat completion.

        Transport failures are retried with a linear backoff; an error object
        in a 200 body is raised immediately as ``UpstreamAPIError``. Task
        cancellation propagates as ``asyncio.CancelledError`` at any point,
        including while waiting between attempts.
        """
        payload: dict[str, object] = {
            "model": model or self.default_model,
            "messages": [message.to_payload() for message in messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            payload["tools"] = [tool.to_payload() for tool in tools]

        body = await self._send_with_retry(payload)
        error = body.get("error")
        if isinstance(error, dict):
            raise UpstreamAPIError(
                str(error.get("message", "")),
                error_type=_optional_str(error.get("type")),
                code=_optional_str(error.get("code")),
            )
        return _parse_completion(body)

    async def _send_with_retry(self, payload: dict[str, object]) -> dict[str, object]:
        last_error: Exception | None = None
        for attempt in range(self.max_attempts):
            if attempt > 0:
                _logger.warning(
                    "Completion retry %s/%s after error: %s",
                    attempt + 1,
                    self.max_attempts,
                    last_error,
                )
                await asyncio.sleep(self.retry_delay_seconds * attempt)
            try:
                return await self.client.create_chat_completion(payload)
            except _RETRYABLE_ERRORS as exc:
                last_error = exc
        raise UpstreamTransportError(
            f"completion failed after {self.max_attempts} attempts: {last_error}",
            status_code=_status_code_from_exception(last_error),
        ) from last_error


def _parse_completion(body: dict[str, object]) -> CompletionResult:
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ParseError("completion response contained no choices")
    choice = choices[0] if isinstance(choices[0], dict) else {}
    message = choice.get("message") or {}
    tool_calls = tuple(
        ToolCall(
            id=str(raw.get("id", "")),
            name=str((raw.get("function") or {}).get("name", "")),
            arguments=_arguments_json((raw.get("function") or {}).get("arguments")),
        )
        for raw in message.get("tool_calls") or []
        if isinstance(raw, dict)
    )
    usage = body.get("usage") or {}
    result = CompletionResult(
        content=str(message.get("content") or ""),
        tool_calls=tool_calls,
        usage=TokenUsage(
            prompt_tokens=int(usage.get("prompt_tokens") or 0),
            completion_tokens=int(usage.get("completion_tokens") or 0),
            total_tokens=int(usage.get("total_tokens") or 0),
        ),
        finish_reason=_optional_str(choice.get("finish_reason")),
        model=_optional_str(body.get("model")),
    )
    _logger.info(
        "Completion ok: content_length=%s tool_calls=%s finish_reason=%s tokens=%s",
        len(result.content),
        len(result.tool_calls),
        result.finish_reason,
        result.usage.total_tokens,
    )
    return result


def _status_code_from_exception(exc: Exception | None) -> int | None:
    """Extract an HTTP status code from a transport failure, if available."""
    if isinstance(exc, UpstreamTransportError):
        return exc.status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    return status_code if isinstance(status_code, int) else None


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def _arguments_json(value: object) -> str:
    """Return tool-call arguments as a JSON string, encoding object forms."""
    if value is None or value == "":
        return "{}"
    if isinstance(value, str):
        return value
    return json.dumps(value)

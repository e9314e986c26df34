"""OpenRouter chat-completions client."""

from dataclasses import dataclass

import httpx

from fitness_coach.domain.errors import UpstreamTransportError
from fitness_coach.services.completions import CompletionClient

_APP_REFERER = "https://fitness-coach-app.com"
_APP_TITLE = "Fitness Coach AI"


@dataclass
class HttpxOpenRouterClient(CompletionClient):
    """HTTPX-backed OpenRouter client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout: float = 60.0
    ) -> "HttpxOpenRouterClient":
        """Create an OpenRouter client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def create_chat_completion(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """POST a chat-completions request and return the decoded body."""
        response = await self.http_client.post(
            f"{self.base_url.rstrip('/')}/chat/completions",
            json=payload,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "HTTP-Referer": _APP_REFERER,
                "X-Title": _APP_TITLE,
            },
            timeout=self.timeout,
        )
        if response.status_code != httpx.codes.OK:
            raise UpstreamTransportError(
                f"OpenRouter returned status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamTransportError(
                "OpenRouter returned an undecodable body",
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise UpstreamTransportError(
                "OpenRouter returned a non-object body",
                status_code=response.status_code,
            )
        return body

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

"""Groq adapter - OpenAI-compatible /chat/completions with strict JSON output."""

import logging

import httpx

from repo_health.domain.ports.config import GroqConfig
from repo_health.domain.ports.llm import (
    STRICT_JSON_SYSTEM_PROMPT,
    Completion,
    LLMMessage,
    ProviderError,
    ProviderName,
)

logger = logging.getLogger(__name__)


def _first_message_content(data: object) -> str:
    """choices[0].message.content, or "" for any other shape."""
    choices = data.get("choices") if isinstance(data, dict) else None
    choice = choices[0] if isinstance(choices, list) and choices else None
    message = choice.get("message") if isinstance(choice, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


class GroqProvider:
    """Groq completion provider - implements CompletionProvider."""

    name = ProviderName.GROQ

    def __init__(self, config: GroqConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize with Groq config. `transport` is for tests (httpx.MockTransport)."""
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json"}
        if config.api_key:
            self._headers["Authorization"] = f"Bearer {config.api_key}"
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._config.model

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create persistent async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client (call during app shutdown)."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _chat_body(self, messages: list[LLMMessage]) -> dict:
        """Build request body: temperature pinned to 0, JSON object response format."""
        body: dict = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": 0,
            "response_format": {"type": "json_object"},
        }
        if self._config.max_tokens is not None:
            body["max_tokens"] = self._config.max_tokens
        return body

    async def attempt_completion(self, prompt: str) -> Completion:
        """One chat completion. Any failure is raised as ProviderError."""
        body = self._chat_body([
            LLMMessage(role="system", content=STRICT_JSON_SYSTEM_PROMPT),
            LLMMessage(role="user", content=prompt),
        ])
        try:
            resp = await self._get_client().post(f"{self._base_url}/chat/completions", json=body)
        except httpx.HTTPError as e:
            logger.warning("Groq transport error: %s", e)
            raise ProviderError(self.name, f"Groq request failed: {e}") from e

        if not resp.is_success:
            logger.error("Groq API error %s: %s", resp.status_code, resp.text[:500])
            raise ProviderError(self.name, f"Groq request failed ({resp.status_code}): {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(self.name, "Groq returned a non-JSON envelope.") from e

        content = _first_message_content(data)
        if not content.strip():
            raise ProviderError(self.name, "Groq returned an empty response.")
        return Completion(provider=self.name, text=content, model=self.model)

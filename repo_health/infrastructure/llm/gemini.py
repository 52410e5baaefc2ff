"""Gemini adapter - generateContent with JSON response MIME type."""

import logging

import httpx

from repo_health.domain.ports.config import GeminiConfig
from repo_health.domain.ports.llm import (
    STRICT_JSON_SYSTEM_PROMPT,
    Completion,
    ProviderError,
    ProviderName,
)

logger = logging.getLogger(__name__)


def _join_candidate_text(data: object) -> str:
    """Concatenate candidates[0].content.parts[*].text; "" for any other shape."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    first = candidates[0] if isinstance(candidates, list) and candidates else None
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


class GeminiProvider:
    """Google Gemini completion provider - implements CompletionProvider."""

    name = ProviderName.GEMINI

    def __init__(self, config: GeminiConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json"}
        if config.api_key:
            self._headers["x-goog-api-key"] = config.api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._config.model

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _generate_body(self, prompt: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": STRICT_JSON_SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0,
                "responseMimeType": "application/json",
            },
        }

    async def attempt_completion(self, prompt: str) -> Completion:
        """One generateContent call. Any failure is raised as ProviderError."""
        url = f"{self._base_url}/models/{self.model}:generateContent"
        try:
            resp = await self._get_client().post(url, json=self._generate_body(prompt))
        except httpx.HTTPError as e:
            logger.warning("Gemini transport error: %s", e)
            raise ProviderError(self.name, f"Gemini request failed: {e}") from e

        if not resp.is_success:
            logger.error("Gemini API error %s: %s", resp.status_code, resp.text[:500])
            raise ProviderError(self.name, f"Gemini request failed ({resp.status_code}): {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(self.name, "Gemini returned a non-JSON envelope.") from e

        text = _join_candidate_text(data)
        if not text.strip():
            raise ProviderError(self.name, "Gemini returned an empty response.")
        return Completion(provider=self.name, text=text, model=self.model)

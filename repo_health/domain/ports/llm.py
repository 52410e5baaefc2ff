"""Completion Provider Port - interface for AI report enrichment providers."""

from enum import Enum
from typing import Protocol

from pydantic import BaseModel

STRICT_JSON_SYSTEM_PROMPT = "You are a strict JSON API. Return only valid JSON with no markdown."


class ProviderName(str, Enum):
    """Closed set of supported completion providers, in fallback priority order."""

    GEMINI = "gemini"
    GROQ = "groq"


class LLMMessage(BaseModel):
    """Single message in a completion request."""

    role: str  # "system" | "user"
    content: str


class Completion(BaseModel):
    """Raw text returned by a provider, before JSON extraction."""

    provider: ProviderName
    text: str
    model: str


class ProviderError(RuntimeError):
    """A single provider call failed (transport, HTTP status, empty or non-JSON text)."""

    def __init__(self, provider: ProviderName | str, message: str) -> None:
        super().__init__(message)
        self.provider = ProviderName(provider) if not isinstance(provider, ProviderName) else provider


class CompletionProvider(Protocol):
    """One completion provider. Each concrete adapter is a variant of ProviderName."""

    name: ProviderName
    model: str

    async def attempt_completion(self, prompt: str) -> Completion:
        """Run one deterministic (temperature 0) JSON completion.

        Raises:
            ProviderError: On any failure. Callers never see transport exceptions.
        """
        ...

    async def close(self) -> None:
        """Release HTTP resources."""
        ...

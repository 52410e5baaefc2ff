"""Provider registry - credentialed providers in fixed priority order."""

from repo_health.domain.ports.config import AppConfig
from repo_health.domain.ports.llm import CompletionProvider, ProviderName
from repo_health.infrastructure.llm.gemini import GeminiProvider
from repo_health.infrastructure.llm.groq import GroqProvider


def build_providers(config: AppConfig) -> dict[ProviderName, CompletionProvider]:
    """Instantiate every provider that has an API key. Order follows ProviderName."""
    providers: dict[ProviderName, CompletionProvider] = {}
    for name in ProviderName:
        if name is ProviderName.GEMINI and config.gemini.api_key.strip():
            providers[name] = GeminiProvider(config.gemini)
        elif name is ProviderName.GROQ and config.groq.api_key.strip():
            providers[name] = GroqProvider(config.groq)
    return providers

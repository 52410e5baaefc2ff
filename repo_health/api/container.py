"""Dependency Injection Container - centralized service management."""

from functools import cached_property

from repo_health.application.report.orchestrator import AIEnhancementOrchestrator
from repo_health.application.report.use_case import ReportBuilder
from repo_health.domain.entities.report import ScoreWeights
from repo_health.domain.ports.config import AppConfig
from repo_health.domain.ports.llm import CompletionProvider, ProviderName
from repo_health.infrastructure.analyzer.local_analyzer import LocalHeuristicAnalyzer
from repo_health.infrastructure.config import load_config
from repo_health.infrastructure.llm.registry import build_providers


class Container:
    """Dependency Injection Container with lazy initialization.

    All dependencies are created on first access and cached. Config is read
    once; every request sees the same immutable values.

    Usage:
        container = Container()
        report = await container.report_builder.build(snapshot)
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        providers: dict[ProviderName, CompletionProvider] | None = None,
    ):
        """Initialize container with optional config and provider overrides (tests)."""
        self._config_override = config
        self._providers_override = providers

    @cached_property
    def config(self) -> AppConfig:
        """Application configuration."""
        if self._config_override:
            return self._config_override
        return load_config()

    @cached_property
    def providers(self) -> dict[ProviderName, CompletionProvider]:
        """Credentialed completion providers, priority order."""
        if self._providers_override is not None:
            return self._providers_override
        return build_providers(self.config)

    @cached_property
    def score_weights(self) -> ScoreWeights:
        return ScoreWeights.from_local(self.config.ai.local_weight)

    @cached_property
    def analyzer(self) -> LocalHeuristicAnalyzer:
        return LocalHeuristicAnalyzer()

    @cached_property
    def orchestrator(self) -> AIEnhancementOrchestrator:
        """AI enhancement orchestrator (mode, weights and timeout from config)."""
        return AIEnhancementOrchestrator(
            providers=self.providers,
            mode=self.config.ai.mode,
            weights=self.score_weights,
            provider_timeout=self.config.ai.provider_timeout_seconds,
        )

    @cached_property
    def report_builder(self) -> ReportBuilder:
        return ReportBuilder(analyzer=self.analyzer, orchestrator=self.orchestrator)

    def reset(self) -> None:
        """Reset all cached instances (useful for testing)."""
        for attr in list(self.__dict__.keys()):
            if not attr.startswith("_"):
                delattr(self, attr)


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """Get or create global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    """Install a prebuilt container (tests)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset global container (for testing)."""
    global _container
    if _container:
        _container.reset()
    _container = None

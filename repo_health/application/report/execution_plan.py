"""Execution plan resolution - which providers to call, and how."""

from dataclasses import dataclass, field
from enum import Enum

from repo_health.domain.ports.llm import ProviderName

HYBRID_MODES = frozenset({"hybrid", "both", "ensemble"})
AUTO_MODE = "auto"

DEGRADED_HYBRID_REASON = "Hybrid mode requested, but only one provider key is configured."
NO_PROVIDER_REASON = "No AI provider key configured. Set GEMINI_API_KEY or GROQ_API_KEY."


class ExecutionTopology(str, Enum):
    SEQUENTIAL = "sequential"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class ExecutionPlan:
    """Resolved plan. An empty `providers` tuple means local heuristics only."""

    topology: ExecutionTopology
    providers: tuple[ProviderName, ...] = field(default_factory=tuple)
    requested: str = AUTO_MODE

    @property
    def hybrid_requested(self) -> bool:
        return self.requested in HYBRID_MODES

    @property
    def degraded_hybrid(self) -> bool:
        """Hybrid was asked for but fewer than two providers are credentialed."""
        return self.hybrid_requested and self.topology is ExecutionTopology.SEQUENTIAL

    @property
    def is_empty(self) -> bool:
        return not self.providers


def resolve_execution_plan(mode: str, available: set[ProviderName] | list[ProviderName]) -> ExecutionPlan:
    """Pure decision from the requested mode and the credentialed providers.

    Unknown modes behave like "auto".
    """
    requested = (mode or AUTO_MODE).strip().lower() or AUTO_MODE
    ordered = tuple(name for name in ProviderName if name in set(available))

    if requested in HYBRID_MODES:
        if len(ordered) >= 2:
            return ExecutionPlan(ExecutionTopology.HYBRID, ordered, requested)
        return ExecutionPlan(ExecutionTopology.SEQUENTIAL, ordered, requested)

    single = next((name for name in ProviderName if name.value == requested), None)
    if single is not None:
        providers = (single,) if single in ordered else ()
        return ExecutionPlan(ExecutionTopology.SEQUENTIAL, providers, requested)

    return ExecutionPlan(ExecutionTopology.SEQUENTIAL, ordered, requested)

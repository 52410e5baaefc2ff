"""AI Enhancement Orchestrator - provider topology, failure handling, merge.

Sequential: providers are tried in priority order, one at a time, each at
most once; the first success is merged and returned.

Hybrid: every provider runs concurrently and all of them settle before the
merge; no short-circuit on first success or first failure.

Whatever happens, a valid Report comes back: the baseline is the floor.
"""

import asyncio
from collections.abc import Mapping

import structlog

from repo_health.application.report.execution_plan import (
    DEGRADED_HYBRID_REASON,
    NO_PROVIDER_REASON,
    ExecutionPlan,
    ExecutionTopology,
    resolve_execution_plan,
)
from repo_health.application.report.merge import merge_consensus, merge_single, with_meta
from repo_health.application.report.prompts import build_report_prompt
from repo_health.domain.entities.candidate import CandidateRecord
from repo_health.domain.entities.report import LOCAL_MODEL, LOCAL_PROVIDER, Report, ScoreWeights
from repo_health.domain.entities.snapshot import Snapshot
from repo_health.domain.ports.llm import CompletionProvider, ProviderError, ProviderName
from repo_health.infrastructure.llm.json_parser import parse_json_response

log = structlog.get_logger()

ALL_SEQUENTIAL_FAILED = "AI generation failed on all configured providers."
ALL_HYBRID_FAILED = "Hybrid AI failed on all providers."
ONE_HYBRID_FAILED = "One provider failed during hybrid analysis."
PARTIAL_HYBRID_FAILED = "Hybrid completed with partial provider failures."


def build_failure_reason(failures: list[BaseException], prefix: str) -> str | None:
    """"<prefix> <msg> | <msg>", or None when nothing failed."""
    if not failures:
        return None
    details = [str(f) for f in failures if str(f)]
    if not details:
        return prefix
    return f"{prefix} {' | '.join(details)}"


class AIEnhancementOrchestrator:
    """Enrich a baseline report with zero or more AI providers.

    Configuration (mode, weights, timeout) is fixed per instance and
    weights can be overridden per call; nothing here is shared between
    requests except the provider HTTP clients.
    """

    def __init__(
        self,
        providers: Mapping[ProviderName, CompletionProvider],
        mode: str = "auto",
        weights: ScoreWeights | None = None,
        provider_timeout: float | None = 90.0,
    ) -> None:
        self._providers = dict(providers)
        self._mode = mode
        self._weights = weights or ScoreWeights.from_local(0.7)
        self._timeout = provider_timeout

    def plan(self) -> ExecutionPlan:
        return resolve_execution_plan(self._mode, list(self._providers))

    async def enhance(
        self,
        snapshot: Snapshot,
        baseline: Report,
        weights: ScoreWeights | None = None,
    ) -> Report:
        """Return the final (pre-stamp) report for this snapshot."""
        weights = weights or self._weights
        plan = self.plan()
        log.info(
            "ai_plan_resolved",
            requested=plan.requested,
            topology=plan.topology.value,
            providers=[p.value for p in plan.providers],
        )

        if plan.is_empty:
            return self._local(baseline, NO_PROVIDER_REASON, weights)

        prompt = build_report_prompt(snapshot, baseline)
        if plan.topology is ExecutionTopology.HYBRID:
            return await self._run_hybrid(plan, prompt, baseline, weights)
        return await self._run_sequential(plan, prompt, baseline, weights)

    async def _attempt(self, name: ProviderName, prompt: str) -> CandidateRecord:
        """One provider call plus JSON extraction. Every failure becomes ProviderError."""
        provider = self._providers[name]
        try:
            if self._timeout:
                completion = await asyncio.wait_for(provider.attempt_completion(prompt), timeout=self._timeout)
            else:
                completion = await provider.attempt_completion(prompt)
        except ProviderError:
            raise
        except TimeoutError as e:
            raise ProviderError(name, f"{name.value} timed out after {self._timeout}s") from e
        except Exception as e:
            log.warning("provider_unexpected_error", provider=name.value, error=str(e))
            raise ProviderError(name, f"{name.value} failed: {e}") from e

        try:
            payload = parse_json_response(completion.text)
        except ValueError as e:
            raise ProviderError(name, f"{name.value} returned malformed JSON: {e}") from e
        return CandidateRecord(payload, provider=name.value, model=completion.model)

    async def _run_sequential(
        self,
        plan: ExecutionPlan,
        prompt: str,
        baseline: Report,
        weights: ScoreWeights,
    ) -> Report:
        last_error: ProviderError | None = None
        for name in plan.providers:
            try:
                candidate = await self._attempt(name, prompt)
            except ProviderError as e:
                log.warning("provider_failed", provider=name.value, error=str(e))
                last_error = e
                continue

            log.info("provider_succeeded", provider=name.value, model=candidate.model)
            return with_meta(
                merge_single(baseline, candidate, weights),
                provider=name.value,
                model=candidate.model,
                fallback_used=plan.degraded_hybrid,
                fallback_reason=DEGRADED_HYBRID_REASON if plan.degraded_hybrid else None,
                weights=weights,
            )

        reason = str(last_error) if last_error and str(last_error) else ALL_SEQUENTIAL_FAILED
        if plan.degraded_hybrid:
            reason = f"{DEGRADED_HYBRID_REASON} {reason}"
        return self._local(baseline, reason, weights)

    async def _run_hybrid(
        self,
        plan: ExecutionPlan,
        prompt: str,
        baseline: Report,
        weights: ScoreWeights,
    ) -> Report:
        settled = await asyncio.gather(
            *(self._attempt(name, prompt) for name in plan.providers),
            return_exceptions=True,
        )
        successes = [item for item in settled if isinstance(item, CandidateRecord)]
        failures = [item for item in settled if isinstance(item, BaseException)]
        log.info(
            "hybrid_settled",
            succeeded=[c.provider for c in successes],
            failed=len(failures),
        )

        if not successes:
            return self._local(baseline, build_failure_reason(failures, ALL_HYBRID_FAILED), weights)

        if len(successes) == 1:
            only = successes[0]
            return with_meta(
                merge_single(baseline, only, weights),
                provider=f"hybrid-partial:{only.provider}",
                model=only.model,
                fallback_used=True,
                fallback_reason=build_failure_reason(failures, ONE_HYBRID_FAILED),
                weights=weights,
            )

        return with_meta(
            merge_consensus(baseline, successes, weights),
            provider="hybrid:" + "+".join(c.provider for c in successes),
            model=" + ".join(c.model for c in successes),
            fallback_used=bool(failures),
            fallback_reason=build_failure_reason(failures, PARTIAL_HYBRID_FAILED),
            weights=weights,
        )

    def _local(self, baseline: Report, reason: str | None, weights: ScoreWeights) -> Report:
        log.info("ai_fallback_local", reason=reason)
        return with_meta(
            baseline,
            provider=LOCAL_PROVIDER,
            model=LOCAL_MODEL,
            fallback_used=True,
            fallback_reason=reason,
            weights=weights,
        )

    async def close(self) -> None:
        """Close every provider client (app shutdown)."""
        for provider in self._providers.values():
            await provider.close()

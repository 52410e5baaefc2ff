"""Tests for AIEnhancementOrchestrator (sequential, hybrid, fallbacks)."""

import asyncio
import json

import pytest

from repo_health.application.report.execution_plan import DEGRADED_HYBRID_REASON, NO_PROVIDER_REASON
from repo_health.application.report.merge import merge_single
from repo_health.application.report.orchestrator import (
    ALL_HYBRID_FAILED,
    ONE_HYBRID_FAILED,
    PARTIAL_HYBRID_FAILED,
    AIEnhancementOrchestrator,
    build_failure_reason,
)
from repo_health.domain.entities.candidate import CandidateRecord
from repo_health.domain.entities.report import LOCAL_PROVIDER, ScoreWeights
from repo_health.domain.ports.llm import ProviderError, ProviderName
from repo_health.domain.services.scoring import compute_overall_score


GEMINI, GROQ = ProviderName.GEMINI, ProviderName.GROQ
W = ScoreWeights.from_local(0.8)
SECURITY_90 = json.dumps({"summary": "AI view.", "categories": {"security": 90}})


def _orchestrator(*providers, mode="auto", timeout=5.0):
    return AIEnhancementOrchestrator(
        {p.name: p for p in providers},
        mode=mode,
        weights=W,
        provider_timeout=timeout,
    )


class TestNoProviders:
    """Zero credentials: pure local mode."""

    @pytest.mark.asyncio
    async def test_returns_baseline_tagged_local(self, clean_snapshot, baseline):
        report = await _orchestrator(mode="hybrid").enhance(clean_snapshot, baseline)
        meta = report.analysis_meta
        assert meta.provider == LOCAL_PROVIDER
        assert meta.fallback_used is True
        assert meta.fallback_reason == NO_PROVIDER_REASON
        assert report.categories == baseline.categories


class TestSequential:
    """Tests for the sequential fallback chain."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, clean_snapshot, baseline, make_provider):
        gemini = make_provider(GEMINI, SECURITY_90)
        groq = make_provider(GROQ, SECURITY_90)
        report = await _orchestrator(gemini, groq).enhance(clean_snapshot, baseline)

        assert report.analysis_meta.provider == "gemini"
        assert report.analysis_meta.fallback_used is False
        assert report.analysis_meta.fallback_reason is None
        assert report.categories.security == 66
        groq.attempt_completion.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_through_to_next_provider(self, clean_snapshot, baseline, make_provider):
        gemini = make_provider(GEMINI, error=ProviderError(GEMINI, "Gemini request failed (500): boom"))
        groq = make_provider(GROQ, SECURITY_90, model="llama")
        report = await _orchestrator(gemini, groq).enhance(clean_snapshot, baseline)

        assert report.analysis_meta.provider == "groq"
        assert report.analysis_meta.model == "llama"
        gemini.attempt_completion.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_all_fail_keeps_last_error(self, clean_snapshot, baseline, make_provider):
        gemini = make_provider(GEMINI, text="not json at all")
        groq = make_provider(GROQ, error=ProviderError(GROQ, "Groq returned an empty response."))
        report = await _orchestrator(gemini, groq).enhance(clean_snapshot, baseline)

        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert report.analysis_meta.fallback_used is True
        assert report.analysis_meta.fallback_reason == "Groq returned an empty response."
        assert report.categories == baseline.categories

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, clean_snapshot, baseline, make_provider):
        groq = make_provider(GROQ, error=RuntimeError("socket exploded"))
        report = await _orchestrator(groq).enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert "socket exploded" in report.analysis_meta.fallback_reason

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(self, clean_snapshot, baseline, make_provider):
        slow = make_provider(GEMINI, SECURITY_90)

        async def never_finishes(prompt):
            await asyncio.sleep(10)

        slow.attempt_completion.side_effect = never_finishes
        report = await _orchestrator(slow, timeout=0.01).enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert "timed out" in report.analysis_meta.fallback_reason

    @pytest.mark.asyncio
    async def test_degraded_hybrid_is_reported(self, clean_snapshot, baseline, make_provider):
        groq = make_provider(GROQ, SECURITY_90)
        report = await _orchestrator(groq, mode="hybrid").enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == "groq"
        assert report.analysis_meta.fallback_used is True
        assert report.analysis_meta.fallback_reason == DEGRADED_HYBRID_REASON

    @pytest.mark.asyncio
    async def test_prompt_sent_to_provider(self, clean_snapshot, baseline, make_provider):
        groq = make_provider(GROQ, SECURITY_90)
        await _orchestrator(groq).enhance(clean_snapshot, baseline)
        prompt = groq.attempt_completion.await_args.args[0]
        assert "BASELINE REPORT" in prompt
        assert "src/app.ts" in prompt


class TestHybrid:
    """Tests for hybrid consensus."""

    @pytest.mark.asyncio
    async def test_both_succeed(self, clean_snapshot, baseline, make_provider):
        """Both at security 90 with baseline 60 and weight 0.8 -> 66."""
        gemini = make_provider(GEMINI, SECURITY_90, model="g-1")
        groq = make_provider(GROQ, SECURITY_90, model="q-1")
        report = await _orchestrator(gemini, groq, mode="hybrid").enhance(clean_snapshot, baseline)

        meta = report.analysis_meta
        assert meta.provider == "hybrid:gemini+groq"
        assert meta.model == "g-1 + q-1"
        assert meta.fallback_used is False
        assert meta.fallback_reason is None
        assert report.categories.security == 66
        assert report.overall_score == compute_overall_score(report.categories)

    @pytest.mark.asyncio
    async def test_one_malformed_equals_single_merge(self, clean_snapshot, baseline, make_provider):
        """Malformed + valid: single-candidate merge of the valid one, tagged partial."""
        gemini = make_provider(GEMINI, "Sorry, I can't help with that.")
        groq = make_provider(GROQ, SECURITY_90, model="q-1")
        report = await _orchestrator(gemini, groq, mode="hybrid").enhance(clean_snapshot, baseline)

        expected = merge_single(baseline, CandidateRecord(json.loads(SECURITY_90)), W)
        meta = report.analysis_meta
        assert meta.provider == "hybrid-partial:groq"
        assert meta.model == "q-1"
        assert meta.fallback_used is True
        assert meta.fallback_reason.startswith(ONE_HYBRID_FAILED)
        assert "gemini" in meta.fallback_reason
        assert report.model_dump(exclude={"analysis_meta"}) == expected.model_dump(exclude={"analysis_meta"})

    @pytest.mark.asyncio
    async def test_all_fail(self, clean_snapshot, baseline, make_provider):
        gemini = make_provider(GEMINI, error=ProviderError(GEMINI, "g down"))
        groq = make_provider(GROQ, error=ProviderError(GROQ, "q down"))
        report = await _orchestrator(gemini, groq, mode="hybrid").enhance(clean_snapshot, baseline)

        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert report.analysis_meta.fallback_reason == f"{ALL_HYBRID_FAILED} g down | q down"

    @pytest.mark.asyncio
    async def test_waits_for_every_provider(self, clean_snapshot, baseline, make_provider):
        """A fast failure does not cancel a slower success."""
        gemini = make_provider(GEMINI, error=ProviderError(GEMINI, "fast failure"))
        groq = make_provider(GROQ, SECURITY_90)
        finished = []

        async def slow_success(prompt):
            await asyncio.sleep(0.05)
            finished.append("groq")
            return groq.attempt_completion.return_value

        groq.attempt_completion.side_effect = slow_success
        report = await _orchestrator(gemini, groq, mode="hybrid").enhance(clean_snapshot, baseline)
        assert finished == ["groq"]
        assert report.analysis_meta.provider == "hybrid-partial:groq"


class TestBuildFailureReason:
    """Tests for build_failure_reason."""

    def test_none_without_failures(self):
        assert build_failure_reason([], PARTIAL_HYBRID_FAILED) is None

    def test_joins_messages(self):
        reason = build_failure_reason([RuntimeError("a"), RuntimeError("b")], "Prefix.")
        assert reason == "Prefix. a | b"


class TestClose:
    """Tests for close()."""

    @pytest.mark.asyncio
    async def test_closes_every_provider(self, make_provider):
        gemini = make_provider(GEMINI, SECURITY_90)
        groq = make_provider(GROQ, SECURITY_90)
        await _orchestrator(gemini, groq).close()
        gemini.close.assert_awaited_once()
        groq.close.assert_awaited_once()


class TestHostilePayloads:
    """Payloads that parse but cannot be scored must never break report production."""

    HUGE_SECURITY = '{"categories": {"security": 1' + "0" * 400 + "}}"
    DEEP_NESTING = '{"summary": "x", "a": ' + "[" * 100000 + "]" * 100000 + "}"

    @pytest.mark.asyncio
    async def test_huge_integer_sequential(self, clean_snapshot, baseline, make_provider):
        """An integer too large for a float is treated as an absent category."""
        groq = make_provider(GROQ, self.HUGE_SECURITY)
        report = await _orchestrator(groq).enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == "groq"
        assert report.categories.security == baseline.categories.security

    @pytest.mark.asyncio
    async def test_huge_integer_hybrid(self, clean_snapshot, baseline, make_provider):
        gemini = make_provider(GEMINI, self.HUGE_SECURITY)
        groq = make_provider(GROQ, self.HUGE_SECURITY)
        report = await _orchestrator(gemini, groq, mode="hybrid").enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == "hybrid:gemini+groq"
        assert report.categories.security == baseline.categories.security

    @pytest.mark.asyncio
    async def test_deep_nesting_falls_back(self, clean_snapshot, baseline, make_provider):
        """Nesting too deep to decode is a provider failure, not a crash."""
        groq = make_provider(GROQ, self.DEEP_NESTING)
        report = await _orchestrator(groq).enhance(clean_snapshot, baseline)
        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert report.analysis_meta.fallback_used is True
        assert "malformed JSON" in report.analysis_meta.fallback_reason

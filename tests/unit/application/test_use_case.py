"""Tests for ReportBuilder."""

import pytest

from repo_health.application.report.orchestrator import AIEnhancementOrchestrator
from repo_health.application.report.use_case import ReportBuilder, utc_now_iso
from repo_health.domain.entities.report import LOCAL_PROVIDER, ScoreWeights
from repo_health.domain.entities.snapshot import EmptySnapshotError, Snapshot
from repo_health.infrastructure.analyzer.local_analyzer import LocalHeuristicAnalyzer


def _builder(providers=None, mode="auto") -> ReportBuilder:
    return ReportBuilder(
        analyzer=LocalHeuristicAnalyzer(),
        orchestrator=AIEnhancementOrchestrator(providers or {}, mode=mode),
        clock=lambda: "2026-01-01T00:00:00Z",
    )


class TestReportBuilder:
    """Tests for ReportBuilder.build."""

    @pytest.mark.asyncio
    async def test_stamps_version_and_time(self, risky_snapshot):
        report = await _builder().build(risky_snapshot)
        assert report.report_version == "2.0"
        assert report.generated_at == "2026-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_local_only_report(self, risky_snapshot):
        """No credentials: complete report from the rule engine, flagged as fallback."""
        report = await _builder().build(risky_snapshot)
        assert report.analysis_meta.provider == LOCAL_PROVIDER
        assert report.analysis_meta.fallback_used is True
        assert report.analysis_meta.stability_mode == "anchored"
        assert any(i.title == "Potential hardcoded credential" for i in report.top_issues)

    @pytest.mark.asyncio
    async def test_empty_snapshot_rejected(self):
        with pytest.raises(EmptySnapshotError):
            await _builder().build(Snapshot())

    @pytest.mark.asyncio
    async def test_weights_override(self, clean_snapshot):
        weights = ScoreWeights.from_local(0.9)
        report = await _builder().build(clean_snapshot, weights=weights)
        assert report.analysis_meta.score_weights == weights

    def test_utc_now_iso(self):
        assert utc_now_iso().endswith("Z")

"""Report Builder use case - Snapshot in, stamped Report out."""

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from repo_health.application.report.orchestrator import AIEnhancementOrchestrator
from repo_health.domain.entities.report import REPORT_VERSION, Report, ScoreWeights
from repo_health.domain.entities.snapshot import Snapshot
from repo_health.infrastructure.analyzer.local_analyzer import LocalHeuristicAnalyzer

log = structlog.get_logger()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ReportBuilder:
    """Local analysis, then AI enhancement, then version/timestamp stamping."""

    def __init__(
        self,
        analyzer: LocalHeuristicAnalyzer,
        orchestrator: AIEnhancementOrchestrator,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._analyzer = analyzer
        self._orchestrator = orchestrator
        self._clock = clock

    async def build(self, snapshot: Snapshot, weights: ScoreWeights | None = None) -> Report:
        """Build the final report.

        Raises:
            EmptySnapshotError: Snapshot has no files (the only failure mode).
        """
        snapshot.ensure_not_empty()
        project = snapshot.project
        repo = project.full_name or f"{project.owner}/{project.repo}"
        with structlog.contextvars.bound_contextvars(repo=repo):
            baseline = self._analyzer.analyze(snapshot)
            report = await self._orchestrator.enhance(snapshot, baseline, weights=weights)
            log.info(
                "report_built",
                provider=report.analysis_meta.provider,
                overall=report.overall_score,
                fallback_used=report.analysis_meta.fallback_used,
            )
        return report.model_copy(update={"report_version": REPORT_VERSION, "generated_at": self._clock()})

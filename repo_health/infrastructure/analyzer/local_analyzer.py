"""Local Heuristic Analyzer - deterministic rule-based scoring of a Snapshot.

Pure function of the snapshot: no I/O, no clock, no randomness. This is the
last-resort path, so it must produce a complete Report for any snapshot that
has at least one file.
"""

import logging

from repo_health.domain.entities.report import (
    LOCAL_MODEL,
    LOCAL_PROVIDER,
    MAX_HEATMAP,
    MAX_PRIORITY_FIXES,
    MAX_TOP_ISSUES,
    SEVERITY_RANK,
    AnalysisMeta,
    CategoryScores,
    HeatmapEntry,
    PriorityFix,
    Report,
    RiskProfile,
    TopIssue,
)
from repo_health.domain.entities.snapshot import Snapshot
from repo_health.domain.services.scoring import (
    RISK_MAX,
    RISK_MIN,
    clamp,
    compute_overall_score,
    derive_grade,
    derive_risk_level,
    round_half_up,
)
from repo_health.infrastructure.analyzer.file_metrics import LARGE_FILE_LOC, compute_file_analysis
from repo_health.infrastructure.analyzer.models import AggregateSignals, FileAnalysis, RankedIssue
from repo_health.infrastructure.analyzer.recommendations import (
    build_dominant_risks,
    build_milestones,
    build_quick_wins,
    build_strengths,
    build_summary,
    estimate_effort,
)

logger = logging.getLogger(__name__)

LOW_COMMENT_RATIO = 0.03
LOW_COMMENT_MIN_LOC = 80
MAX_DIRECTORY_ROOTS = 6


def aggregate_signals(analyses: list[FileAnalysis]) -> AggregateSignals:
    """Fold per-file results into the signals the category formulas use."""
    signals = AggregateSignals(file_count=len(analyses))
    if not analyses:
        return signals

    signals.total_loc = sum(a.loc for a in analyses)
    signals.average_complexity = sum(a.complexity_score for a in analyses) / len(analyses)
    issue_total = 0
    for analysis in analyses:
        for issue in analysis.issues:
            issue_total += 1
            signals.issue_counts[issue.severity] += 1
            if issue.category == "security":
                signals.security_findings += 1
            elif issue.category == "reliability":
                signals.reliability_findings += 1

    signals.large_files = sum(1 for a in analyses if a.loc > LARGE_FILE_LOC)
    signals.low_comment_files = sum(
        1 for a in analyses if a.comment_ratio < LOW_COMMENT_RATIO and a.loc > LOW_COMMENT_MIN_LOC
    )
    signals.comment_ratio_sum = sum(a.comment_ratio for a in analyses)
    signals.issue_density = issue_total / len(analyses)

    roots: dict[str, int] = {}
    for analysis in analyses:
        roots[analysis.root] = roots.get(analysis.root, 0) + 1
    signals.root_count = len(roots)
    signals.concentration = max(roots.values()) / len(analyses)
    return signals


def score_categories(signals: AggregateSignals) -> CategoryScores:
    """Closed-form category scores. Floors and ceilings keep any one file from dominating."""
    counts = signals.issue_counts
    files = signals.file_count

    maintainability = 96 - signals.average_complexity * 6 - signals.issue_density * 5 - signals.large_files * 2
    reliability = 95 - counts["Critical"] * 14 - counts["High"] * 8 - signals.reliability_findings * 4
    security = 96 - counts["Critical"] * 18 - signals.security_findings * 8 - counts["High"] * 3
    documentation = (
        70 + signals.comment_ratio_sum * (180 / files if files else 0) - signals.low_comment_files * 5
    )

    if files:
        architecture = clamp(
            round_half_up(
                92
                - signals.concentration * 26
                - signals.large_files * 3
                + min(signals.root_count, MAX_DIRECTORY_ROOTS) * 2
            ),
            25,
            96,
        )
    else:
        architecture = 40

    return CategoryScores(
        maintainability=clamp(round_half_up(maintainability), 20, 98),
        reliability=clamp(round_half_up(reliability), 15, 97),
        security=clamp(round_half_up(security), 10, 98),
        documentation=clamp(round_half_up(documentation), 20, 96),
        architecture=architecture,
    )


def score_risk(overall_score: int, signals: AggregateSignals) -> int:
    counts = signals.issue_counts
    raw = (
        (100 - overall_score) * 0.65
        + counts["Critical"] * 12
        + counts["High"] * 7
        + signals.security_findings * 4
    )
    return int(clamp(round_half_up(raw), RISK_MIN, RISK_MAX))


def estimate_confidence(file_count: int, total_loc: int) -> int:
    """Sample coverage, not code quality."""
    raw = 42 + min(file_count, 28) * 1.7 + min(total_loc, 9000) / 180
    return int(clamp(round_half_up(raw), 45, 96))


def rank_issues(analyses: list[FileAnalysis]) -> list[TopIssue]:
    ranked = [
        RankedIssue(file=a.path, complexity_score=a.complexity_score, issue=issue)
        for a in analyses
        for issue in a.issues
    ]
    ranked.sort(key=lambda r: (-SEVERITY_RANK[r.issue.severity], -r.complexity_score))
    return [
        TopIssue(
            file=r.file,
            title=r.issue.title,
            description=r.issue.description,
            severity=r.issue.severity,
            recommendation=r.issue.recommendation,
        )
        for r in ranked[:MAX_TOP_ISSUES]
    ]


def derive_priority_fixes(top_issues: list[TopIssue]) -> list[PriorityFix]:
    """One fix per leading issue."""
    return [
        PriorityFix(
            file=issue.file,
            suggestion=issue.recommendation,
            impact="High" if issue.severity in ("Critical", "High") else "Medium",
            effort=estimate_effort(issue),
            rationale=issue.title,
        )
        for issue in top_issues[:MAX_PRIORITY_FIXES]
    ]


def build_heatmap(analyses: list[FileAnalysis]) -> list[HeatmapEntry]:
    hottest = sorted(analyses, key=lambda a: (-a.complexity_score, -a.loc))
    return [
        HeatmapEntry(
            file=a.path,
            complexity_score=a.complexity_score,
            issues=len(a.issues),
            loc=a.loc,
            risk=derive_risk_level(clamp(a.complexity_score * 10 + len(a.issues) * 4, RISK_MIN, RISK_MAX)),
        )
        for a in hottest[:MAX_HEATMAP]
    ]


class LocalHeuristicAnalyzer:
    """Rule engine producing a complete baseline Report with zero external calls."""

    provider = LOCAL_PROVIDER
    model = LOCAL_MODEL

    def analyze(self, snapshot: Snapshot) -> Report:
        """Score a snapshot.

        Args:
            snapshot: Non-empty snapshot (emptiness is checked upstream).

        Returns:
            Baseline Report tagged local-heuristics, fallbackUsed=False.
        """
        analyses = [compute_file_analysis(f.path, f.content) for f in snapshot.files]
        signals = aggregate_signals(analyses)
        categories = score_categories(signals)
        overall_score = compute_overall_score(categories)
        risk_score = score_risk(overall_score, signals)
        top_issues = rank_issues(analyses)

        logger.info(
            "Local analysis: files=%d loc=%d overall=%d risk=%d issues=%d",
            signals.file_count,
            signals.total_loc,
            overall_score,
            risk_score,
            sum(signals.issue_counts.values()),
        )

        return Report(
            project=snapshot.project,
            overall_score=overall_score,
            grade=derive_grade(overall_score),
            confidence=estimate_confidence(signals.file_count, signals.total_loc),
            summary=build_summary(overall_score, risk_score, signals, top_issues),
            categories=categories,
            risk=RiskProfile(
                score=risk_score,
                level=derive_risk_level(risk_score),
                dominant_risks=build_dominant_risks(signals),
            ),
            heatmap=build_heatmap(analyses),
            top_issues=top_issues,
            priority_fixes=derive_priority_fixes(top_issues),
            quick_wins=build_quick_wins(top_issues, signals),
            strengths=build_strengths(signals, categories),
            next_milestones=build_milestones(categories),
            analysis_meta=AnalysisMeta(
                provider=self.provider,
                model=self.model,
                fallback_used=False,
                files_analyzed=signals.file_count,
                estimated_loc=signals.total_loc,
                sampling=snapshot.stats,
            ),
        )

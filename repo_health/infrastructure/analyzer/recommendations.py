"""Narrative sections of the local report.

Each builder checks named conditions in a fixed priority order, contributes
at most one canned line per condition, and always returns at least one line.
"""

from repo_health.domain.entities.report import CategoryScores, TopIssue
from repo_health.domain.services.scoring import derive_risk_level
from repo_health.infrastructure.analyzer.models import AggregateSignals

MAX_LOCAL_QUICK_WINS = 5
MAX_LOCAL_STRENGTHS = 4
MAX_LOCAL_MILESTONES = 4
MAX_LOCAL_DOMINANT_RISKS = 4


def build_dominant_risks(signals: AggregateSignals) -> list[str]:
    risks: list[str] = []
    if signals.security_findings > 0 or signals.issue_counts["Critical"] > 0:
        risks.append("Security hardening required in critical paths")
    if signals.average_complexity >= 6:
        risks.append("High branching complexity in core files")
    if signals.large_files > 2:
        risks.append("Large file surfaces increase regression probability")
    if signals.low_comment_files > 0:
        risks.append("Sparse documentation around implementation details")
    if signals.severe_issues >= 4:
        risks.append("Several high-severity issues need prioritized remediation")
    return risks[:MAX_LOCAL_DOMINANT_RISKS]


def build_summary(
    overall_score: int,
    risk_score: int,
    signals: AggregateSignals,
    top_issues: list[TopIssue],
) -> str:
    if not top_issues:
        return (
            f"Codebase health is strong with an overall score of {overall_score}/100. "
            "No major red flags were found in sampled files."
        )

    key_issue = top_issues[0]
    counts = signals.issue_counts
    return (
        f"Overall score is {overall_score}/100 with {derive_risk_level(risk_score).lower()} operational risk. "
        f"Average complexity sits at {signals.average_complexity:.1f}/10; "
        f'highest-priority concern is "{key_issue.title}" ({key_issue.severity}). '
        f"Issue distribution: {counts['Critical']} critical, {counts['High']} high, {counts['Medium']} medium."
    )


def build_quick_wins(top_issues: list[TopIssue], signals: AggregateSignals) -> list[str]:
    wins: list[str] = []
    if any("Debug residue" in issue.title for issue in top_issues):
        wins.append("Remove debug logs/TODO markers from production code paths.")
    if any("Loose typing" in issue.title for issue in top_issues):
        wins.append("Replace high-traffic `any` types with explicit interfaces.")
    if signals.low_comment_files > 0:
        wins.append(f"Add concise comments to {signals.low_comment_files} low-context file(s).")
    if signals.file_count > 20:
        wins.append("Create ownership tags for key modules to improve review velocity.")

    if not wins:
        wins.append("Introduce a CI quality gate for linting and vulnerability checks.")
    return wins[:MAX_LOCAL_QUICK_WINS]


def build_strengths(signals: AggregateSignals, categories: CategoryScores) -> list[str]:
    strengths: list[str] = []
    if signals.average_complexity <= 4:
        strengths.append("Core files maintain manageable complexity levels.")
    if signals.security_findings == 0:
        strengths.append("No direct high-confidence secret leakage patterns were detected.")
    if signals.issue_counts["Critical"] == 0 and signals.issue_counts["High"] <= 1:
        strengths.append("High-severity defect density is currently low.")
    if categories.architecture >= 75:
        strengths.append("File distribution suggests healthy modular boundaries.")

    if not strengths:
        strengths.append("Core repository structure is analyzable and remediation-ready.")
    return strengths[:MAX_LOCAL_STRENGTHS]


def build_milestones(categories: CategoryScores) -> list[str]:
    milestones: list[str] = []
    if categories.security < 75:
        milestones.append("Run a focused security hardening sprint on auth/input/output boundaries.")
    if categories.maintainability < 75:
        milestones.append("Refactor high-complexity files into smaller modules with test coverage.")
    if categories.documentation < 70:
        milestones.append("Add architecture notes and contributor-facing onboarding docs.")
    if categories.reliability < 75:
        milestones.append("Add failure-path observability and stronger error handling contracts.")

    if not milestones:
        milestones.append("Automate weekly trend reporting to keep quality improvements visible.")
    return milestones[:MAX_LOCAL_MILESTONES]


def estimate_effort(issue: TopIssue) -> str:
    if issue.severity == "Critical":
        return "Medium"
    if "Oversized file" in issue.title:
        return "High"
    if issue.severity == "High":
        return "Medium"
    return "Low"

"""Local Heuristic Analyzer module."""

from repo_health.infrastructure.analyzer.file_metrics import compute_file_analysis
from repo_health.infrastructure.analyzer.issue_rules import ISSUE_PATTERNS, detect_issues
from repo_health.infrastructure.analyzer.local_analyzer import LocalHeuristicAnalyzer
from repo_health.infrastructure.analyzer.models import (
    AggregateSignals,
    FileAnalysis,
    FileIssue,
)

__all__ = [
    "LocalHeuristicAnalyzer",
    "FileAnalysis",
    "FileIssue",
    "AggregateSignals",
    "ISSUE_PATTERNS",
    "compute_file_analysis",
    "detect_issues",
]

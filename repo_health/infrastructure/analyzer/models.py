"""Local analyzer data models.

Dataclasses for intermediate analyzer results: FileIssue, FileAnalysis,
AggregateSignals. Used by LocalHeuristicAnalyzer; never leave the analyzer.
"""

from dataclasses import dataclass, field


@dataclass
class FileIssue:
    """Rule hit in one file."""
    severity: str  # Critical, High, Medium, Low
    title: str
    description: str
    recommendation: str
    category: str  # security, reliability, quality, documentation


@dataclass
class FileAnalysis:
    """Metrics for one file."""
    path: str
    loc: int = 0
    comment_lines: int = 0
    comment_ratio: float = 0.0
    complexity_signals: int = 0
    complexity_score: int = 1  # 1-10
    issues: list[FileIssue] = field(default_factory=list)

    @property
    def root(self) -> str:
        """Top-level directory, or "(root)" for files at repository root."""
        return self.path.split("/", 1)[0] if "/" in self.path else "(root)"


@dataclass
class RankedIssue:
    """FileIssue flattened with its file and that file's complexity."""
    file: str
    complexity_score: int
    issue: FileIssue


@dataclass
class AggregateSignals:
    """Repository-wide signals the category formulas are written against."""
    file_count: int = 0
    total_loc: int = 0
    average_complexity: float = 0.0
    issue_counts: dict[str, int] = field(
        default_factory=lambda: {"Critical": 0, "High": 0, "Medium": 0, "Low": 0}
    )
    security_findings: int = 0
    reliability_findings: int = 0
    large_files: int = 0
    low_comment_files: int = 0
    comment_ratio_sum: float = 0.0
    issue_density: float = 0.0
    root_count: int = 0
    concentration: float = 0.0

    @property
    def severe_issues(self) -> int:
        return self.issue_counts["Critical"] + self.issue_counts["High"]

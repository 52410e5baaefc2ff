"""File metrics and complexity calculation for the local analyzer.

Computes FileAnalysis (loc, comment ratio, complexity score, issues) from a
path and in-memory content. Lexical only: content is never parsed or run,
so every language in the snapshot is scored the same way.
"""

import re

from repo_health.domain.services.scoring import clamp, round_half_up
from repo_health.infrastructure.analyzer.issue_rules import count_matches, detect_issues
from repo_health.infrastructure.analyzer.models import FileAnalysis

COMMENT_LINE = re.compile(r"^\s*(//|#|\*|/\*|\*/)")

COMPLEXITY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\bif\s*\("),
    re.compile(r"\belse\s+if\s*\("),
    re.compile(r"\bfor\s*\("),
    re.compile(r"\bwhile\s*\("),
    re.compile(r"\bswitch\s*\("),
    re.compile(r"\bcatch\s*\("),
    re.compile(r"\bcase\s+"),
    re.compile(r"\?\s*[^:]+:"),
    re.compile(r"&&|\|\|"),
]

# Branch signals per line are small; scale them onto the 1-10 range.
COMPLEXITY_SCALE = 140
LONG_FILE_LOC = 260
LARGE_FILE_LOC = 320
HUGE_FILE_LOC = 500


def count_complexity_signals(content: str) -> int:
    return sum(count_matches(pattern, content) for pattern in COMPLEXITY_PATTERNS)


def estimate_complexity(signals: int, loc: int) -> int:
    """Branch density scaled to 1-10, with a size bonus for long files."""
    density = signals / max(loc, 1)
    score = clamp(round_half_up(density * COMPLEXITY_SCALE + (2 if loc > LONG_FILE_LOC else 0)), 1, 10)
    if loc > HUGE_FILE_LOC:
        score = clamp(score + 2, 1, 10)
    elif loc > LARGE_FILE_LOC:
        score = clamp(score + 1, 1, 10)
    return int(score)


def compute_file_analysis(path: str, content: str) -> FileAnalysis:
    """Analyze one file.

    Args:
        path: Repository-relative path as reported by the snapshot.
        content: Full file text.

    Returns:
        FileAnalysis with metrics and de-duplicated issues.
    """
    lines = content.split("\n")
    loc = len(lines)
    comment_lines = sum(1 for line in lines if COMMENT_LINE.match(line))
    comment_ratio = comment_lines / loc if loc > 0 else 0.0
    signals = count_complexity_signals(content)

    return FileAnalysis(
        path=path,
        loc=loc,
        comment_lines=comment_lines,
        comment_ratio=comment_ratio,
        complexity_signals=signals,
        complexity_score=estimate_complexity(signals, loc),
        issues=detect_issues(content, loc, comment_ratio),
    )

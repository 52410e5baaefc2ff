"""Issue rules for the local analyzer.

Scans file content for a fixed, ordered list of risky patterns (dynamic code
execution, HTML injection, credentials, etc.) and synthesizes size and
documentation issues. Each rule yields at most one FileIssue per file; the
match count goes into the description.
"""

import re

from repo_health.infrastructure.analyzer.models import FileIssue

# (pattern, flags, severity, title, description, recommendation, category)
ISSUE_PATTERNS: list[tuple[str, int, str, str, str, str, str]] = [
    (
        r"\beval\s*\(",
        0,
        "Critical",
        "Dynamic code execution detected",
        "Using eval can execute untrusted input and creates severe security risk.",
        "Remove eval and replace it with explicit parsing or whitelisted handlers.",
        "security",
    ),
    (
        r"\b(innerHTML|dangerouslySetInnerHTML)\b",
        0,
        "High",
        "Unsafe HTML injection surface",
        "Direct HTML injection can expose cross-site scripting vulnerabilities if input is not sanitized.",
        "Use safe rendering patterns and sanitize user-sourced content.",
        "security",
    ),
    (
        r"\b(console\.log|print\()|TODO|FIXME",
        re.IGNORECASE,
        "Low",
        "Debug residue found",
        "Debug statements and TODO markers indicate unfinished cleanup.",
        "Remove debug traces and convert TODOs into tracked issues.",
        "quality",
    ),
    (
        r"\bany\b",
        0,
        "Medium",
        "Loose typing hotspots",
        "Frequent use of any reduces type safety and increases runtime defect risk.",
        "Replace any with stricter, explicit types for critical flows.",
        "reliability",
    ),
    (
        r"\btry\s*\{[\s\S]{0,200}catch\s*\(\w*\)\s*\{\s*\}",
        0,
        "Medium",
        "Silent exception handling",
        "Empty catch blocks suppress failures and make incidents hard to debug.",
        "Log context, propagate recoverable errors, and return actionable failure states.",
        "reliability",
    ),
    (
        r"\b(password|secret|api[_-]?key|token)\b\s*[:=]\s*['\"`][^'\"`]{6,}['\"`]",
        re.IGNORECASE,
        "Critical",
        "Potential hardcoded credential",
        "Credential-like literals were detected in source code and may leak sensitive access.",
        "Move secrets to environment variables and rotate exposed keys.",
        "security",
    ),
]

# Pre-compiled at module load
_COMPILED_PATTERNS: list[tuple[re.Pattern[str], str, str, str, str, str]] = [
    (re.compile(pattern, flags), severity, title, description, rec, category)
    for pattern, flags, severity, title, description, rec, category in ISSUE_PATTERNS
]

OVERSIZED_LOC = 600
LARGE_LOC = 380
LOW_DOC_RATIO = 0.02
LOW_DOC_MIN_LOC = 120


def count_matches(pattern: re.Pattern[str], content: str) -> int:
    return sum(1 for _ in pattern.finditer(content))


def match_pattern_rules(content: str) -> list[FileIssue]:
    """Run every pattern rule once against the whole file."""
    issues: list[FileIssue] = []
    for compiled, severity, title, description, recommendation, category in _COMPILED_PATTERNS:
        hits = count_matches(compiled, content)
        if not hits:
            continue
        issues.append(FileIssue(
            severity=severity,
            title=title,
            description=f"{description} Found {hits} indicator(s) in this file.",
            recommendation=recommendation,
            category=category,
        ))
    return issues


def size_issues(loc: int, comment_ratio: float) -> list[FileIssue]:
    """Issues derived from file size and comment density rather than content."""
    issues: list[FileIssue] = []
    if loc > OVERSIZED_LOC:
        issues.append(FileIssue(
            severity="High",
            title="Oversized file complexity",
            description=f"This file exceeds {OVERSIZED_LOC} lines, which raises maintenance cost and review latency.",
            recommendation="Refactor into focused modules with clearer ownership boundaries.",
            category="quality",
        ))
    elif loc > LARGE_LOC:
        issues.append(FileIssue(
            severity="Medium",
            title="Large file needs decomposition",
            description="The file is large enough to increase regression risk during changes.",
            recommendation="Split responsibilities by domain or layer to reduce cognitive load.",
            category="quality",
        ))

    if comment_ratio < LOW_DOC_RATIO and loc > LOW_DOC_MIN_LOC:
        issues.append(FileIssue(
            severity="Low",
            title="Low in-code documentation",
            description="Complex sections appear under-documented, slowing onboarding and incident triage.",
            recommendation="Add concise comments around critical flows and assumptions.",
            category="documentation",
        ))
    return issues


def dedupe_issues(issues: list[FileIssue]) -> list[FileIssue]:
    """Keep the first issue per (severity, title)."""
    seen: set[tuple[str, str]] = set()
    result: list[FileIssue] = []
    for issue in issues:
        key = (issue.severity, issue.title)
        if key in seen:
            continue
        seen.add(key)
        result.append(issue)
    return result


def detect_issues(content: str, loc: int, comment_ratio: float) -> list[FileIssue]:
    """All issues for one file, de-duplicated."""
    return dedupe_issues(match_pattern_rules(content) + size_issues(loc, comment_ratio))

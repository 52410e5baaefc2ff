"""Untrusted external record - AI provider output before sanitization.

Nothing here assumes shape. Every accessor returns either a sanitized value
or None/empty, and callers decide the fallback.
"""

from collections.abc import Mapping
from typing import Any

from repo_health.domain.entities.report import (
    RISK_LEVELS,
    SEVERITY_RANK,
    PriorityFix,
    TopIssue,
)
from repo_health.domain.services.scoring import is_finite_number

DEFAULT_ISSUE_FILE = "Unknown file"
DEFAULT_ISSUE_TITLE = "Untitled issue"
DEFAULT_ISSUE_DESCRIPTION = "No description provided."
DEFAULT_ISSUE_RECOMMENDATION = "Review this issue and implement an explicit fix."
DEFAULT_FIX_SUGGESTION = "Implement targeted quality improvement."
DEFAULT_FIX_RATIONALE = "Improves quality, resilience, or security."


def sanitize_text(value: Any) -> str | None:
    """Trimmed non-empty string, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def sanitize_severity(value: Any) -> str:
    text = sanitize_text(value)
    return text if text in SEVERITY_RANK else "Medium"


def sanitize_impact(value: Any) -> str:
    return "High" if sanitize_text(value) == "High" else "Medium"


def sanitize_effort(value: Any) -> str:
    text = sanitize_text(value)
    return text if text in ("Low", "Medium", "High") else "Medium"


def sanitize_risk_level(value: Any) -> str | None:
    text = sanitize_text(value)
    return text if text in RISK_LEVELS else None


def sanitize_number(value: Any) -> float | None:
    """Finite value as float, else None (huge JSON ints that overflow a float included)."""
    return float(value) if is_finite_number(value) else None


def sanitize_issue(item: Mapping[str, Any]) -> TopIssue:
    return TopIssue(
        file=sanitize_text(item.get("file")) or DEFAULT_ISSUE_FILE,
        title=sanitize_text(item.get("title")) or DEFAULT_ISSUE_TITLE,
        description=sanitize_text(item.get("description")) or DEFAULT_ISSUE_DESCRIPTION,
        severity=sanitize_severity(item.get("severity")),
        recommendation=sanitize_text(item.get("recommendation")) or DEFAULT_ISSUE_RECOMMENDATION,
    )


def sanitize_fix(item: Mapping[str, Any]) -> PriorityFix:
    return PriorityFix(
        file=sanitize_text(item.get("file")) or DEFAULT_ISSUE_FILE,
        suggestion=sanitize_text(item.get("suggestion")) or DEFAULT_FIX_SUGGESTION,
        impact=sanitize_impact(item.get("impact")),
        effort=sanitize_effort(item.get("effort")),
        rationale=sanitize_text(item.get("rationale")) or DEFAULT_FIX_RATIONALE,
    )


class CandidateRecord:
    """AI payload wrapper. Distinct from Report: holds raw, unvalidated JSON."""

    __slots__ = ("_raw", "provider", "model")

    def __init__(self, raw: Any, provider: str = "", model: str = "") -> None:
        self._raw = raw if isinstance(raw, Mapping) else {}
        self.provider = provider
        self.model = model

    def _section(self, key: str) -> Mapping[str, Any]:
        value = self._raw.get(key)
        return value if isinstance(value, Mapping) else {}

    def _list(self, value: Any) -> list:
        return value if isinstance(value, list) else []

    @property
    def summary(self) -> str | None:
        return sanitize_text(self._raw.get("summary"))

    def category(self, key: str) -> float | None:
        return sanitize_number(self._section("categories").get(key))

    @property
    def risk_score(self) -> float | None:
        return sanitize_number(self._section("risk").get("score"))

    @property
    def risk_level(self) -> str | None:
        return sanitize_risk_level(self._section("risk").get("level"))

    def strings(self, key: str, limit: int) -> list[str]:
        """Sanitized string list for a top-level key ("dominantRisks" lives under risk)."""
        if key == "dominantRisks":
            raw = self._section("risk").get(key)
        else:
            raw = self._raw.get(key)
        cleaned = [text for text in (sanitize_text(item) for item in self._list(raw)) if text]
        return cleaned[:limit]

    def issues(self, limit: int) -> list[TopIssue]:
        items = [item for item in self._list(self._raw.get("topIssues")) if isinstance(item, Mapping)]
        return [sanitize_issue(item) for item in items[:limit]]

    def fixes(self, limit: int) -> list[PriorityFix]:
        items = [item for item in self._list(self._raw.get("priorityFixes")) if isinstance(item, Mapping)]
        return [sanitize_fix(item) for item in items[:limit]]

    def __repr__(self) -> str:
        return f"CandidateRecord(provider={self.provider!r}, model={self.model!r}, keys={sorted(self._raw)!r})"

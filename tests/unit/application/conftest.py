"""Shared fixtures for report application tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from repo_health.domain.entities.report import (
    AnalysisMeta,
    CategoryScores,
    PriorityFix,
    Report,
    RiskProfile,
    TopIssue,
)
from repo_health.domain.ports.llm import Completion, ProviderName
from repo_health.domain.services.scoring import compute_overall_score, derive_grade, derive_risk_level


def build_report(risk_score: int = 40, **category_overrides) -> Report:
    values = {"maintainability": 70, "reliability": 70, "security": 60, "documentation": 50, "architecture": 80}
    values.update(category_overrides)
    categories = CategoryScores(**values)
    overall = compute_overall_score(categories)
    return Report(
        overall_score=overall,
        grade=derive_grade(overall),
        confidence=60,
        summary="Baseline summary.",
        categories=categories,
        risk=RiskProfile(score=risk_score, level=derive_risk_level(risk_score), dominant_risks=["Base risk"]),
        top_issues=[
            TopIssue(file="src/b.js", title="Debug residue found", description="d", severity="Low", recommendation="r"),
        ],
        priority_fixes=[
            PriorityFix(file="src/b.js", suggestion="Remove logs", impact="Medium", effort="Low", rationale="noise"),
        ],
        quick_wins=["Base win"],
        strengths=["Base strength"],
        next_milestones=["Base milestone"],
        analysis_meta=AnalysisMeta(provider="local-heuristics", model="rule-engine-v2", files_analyzed=2),
    )


@pytest.fixture
def baseline() -> Report:
    return build_report()


def _make_provider(name: ProviderName, text: str | None = None, error: Exception | None = None, model: str = ""):
    """CompletionProvider double: returns `text` or raises `error`."""
    provider = MagicMock()
    provider.name = name
    provider.model = model or f"{name.value}-model"
    if error is not None:
        provider.attempt_completion = AsyncMock(side_effect=error)
    else:
        provider.attempt_completion = AsyncMock(
            return_value=Completion(provider=name, text=text or "", model=provider.model)
        )
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def make_provider():
    return _make_provider

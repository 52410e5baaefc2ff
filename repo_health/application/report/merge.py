"""Report merge and normalization.

Combines the deterministic baseline with untrusted AI candidates. Both
strategies re-derive overallScore and grade from the category formula and
anchor every AI number against the baseline with ScoreWeights. Candidate
data is only read through CandidateRecord accessors.
"""

from collections import Counter
from collections.abc import Callable, Hashable, Iterable
from typing import Any, TypeVar

from repo_health.domain.entities.candidate import CandidateRecord, sanitize_text
from repo_health.domain.entities.report import (
    CATEGORY_KEYS,
    EFFORT_RANK,
    IMPACT_RANK,
    MAX_DOMINANT_RISKS,
    MAX_MILESTONES,
    MAX_PRIORITY_FIXES,
    MAX_QUICK_WINS,
    MAX_STRENGTHS,
    MAX_TOP_ISSUES,
    SEVERITY_RANK,
    AnalysisMeta,
    CategoryScores,
    PriorityFix,
    Report,
    RiskProfile,
    ScoreWeights,
    TopIssue,
)
from repo_health.domain.services.scoring import (
    RISK_MAX,
    RISK_MIN,
    blend_score,
    clamp,
    compute_overall_score,
    derive_grade,
    derive_risk_level,
    round_half_up,
)

T = TypeVar("T")

STABILITY_MODE = "anchored"
# Per-candidate cap when pooling string lists for consensus.
POOLED_LIST_LIMIT = 6
CONSENSUS_PREFIX = "Consensus view:"


def dedupe_by(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """First occurrence wins, order preserved."""
    seen: set[Hashable] = set()
    result: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


def unique_strings(items: Iterable[Any]) -> list[str]:
    """Sanitized, case-insensitively de-duplicated strings."""
    cleaned = [text for text in (sanitize_text(item) for item in items) if text]
    return dedupe_by(cleaned, str.lower)


def most_frequent(values: list[str]) -> str | None:
    """Most common value; first-seen wins ties."""
    if not values:
        return None
    counts = Counter(values)
    best = max(counts.values())
    return next(value for value in values if counts[value] == best)


def _risk_score(value: float) -> int:
    return int(clamp(value, RISK_MIN, RISK_MAX))


def _rebuild(base: Report, **updates: Any) -> Report:
    """Validated copy of `base` with `updates`; scores re-derived from categories."""
    fields = {name: getattr(base, name) for name in Report.model_fields}
    fields.update(updates)
    overall = compute_overall_score(fields["categories"])
    fields["overall_score"] = overall
    fields["grade"] = derive_grade(overall)
    return Report.model_validate(fields)


def merge_single(base: Report, candidate: CandidateRecord, weights: ScoreWeights) -> Report:
    """Blend one candidate into the baseline.

    Numbers blend field by field; lists are replaced wholesale by the
    candidate's sanitized list, or kept from the baseline when the candidate
    has nothing usable.
    """
    categories = {}
    for key in CATEGORY_KEYS:
        value = candidate.category(key)
        current = base.categories.get(key)
        categories[key] = current if value is None else blend_score(current, value, weights)

    ai_risk = candidate.risk_score
    risk_score = base.risk.score if ai_risk is None else _risk_score(blend_score(base.risk.score, ai_risk, weights))

    return _rebuild(
        base,
        summary=candidate.summary or base.summary,
        categories=CategoryScores(**categories),
        risk=RiskProfile(
            score=risk_score,
            level=candidate.risk_level or derive_risk_level(risk_score),
            dominant_risks=candidate.strings("dominantRisks", MAX_DOMINANT_RISKS) or base.risk.dominant_risks,
        ),
        top_issues=candidate.issues(MAX_TOP_ISSUES) or base.top_issues,
        priority_fixes=candidate.fixes(MAX_PRIORITY_FIXES) or base.priority_fixes,
        quick_wins=candidate.strings("quickWins", MAX_QUICK_WINS) or base.quick_wins,
        strengths=candidate.strings("strengths", MAX_STRENGTHS) or base.strengths,
        next_milestones=candidate.strings("nextMilestones", MAX_MILESTONES) or base.next_milestones,
    )


def _consensus_value(values: list[float]) -> int | None:
    """Average of clamped, rounded AI values, or None when no candidate voted."""
    if not values:
        return None
    normalized = [int(clamp(round_half_up(v), 0, 100)) for v in values]
    return round_half_up(sum(normalized) / len(normalized))


def build_consensus_summary(summaries: list[str], fallback: str) -> str:
    unique = unique_strings(summaries)
    if not unique:
        return fallback
    if len(unique) == 1:
        return unique[0]
    return f"{unique[0]} {CONSENSUS_PREFIX} {unique[1]}"


def _pooled_strings(base_items: list[str], candidates: list[CandidateRecord], key: str, limit: int) -> list[str]:
    pooled = list(base_items)
    for candidate in candidates:
        pooled.extend(candidate.strings(key, POOLED_LIST_LIMIT))
    return unique_strings(pooled)[:limit]


def merge_issue_sets(base: Report, candidates: list[CandidateRecord]) -> list[TopIssue]:
    combined = list(base.top_issues)
    for candidate in candidates:
        combined.extend(candidate.issues(MAX_TOP_ISSUES))
    deduped = dedupe_by(combined, lambda issue: f"{issue.file}::{issue.title}")
    deduped.sort(key=lambda issue: (-SEVERITY_RANK[issue.severity], issue.file))
    return deduped[:MAX_TOP_ISSUES] or base.top_issues


def merge_fix_sets(base: Report, candidates: list[CandidateRecord]) -> list[PriorityFix]:
    combined = list(base.priority_fixes)
    for candidate in candidates:
        combined.extend(candidate.fixes(MAX_PRIORITY_FIXES))
    deduped = dedupe_by(combined, lambda fix: f"{fix.file}::{fix.suggestion}")
    deduped.sort(key=lambda fix: (-IMPACT_RANK[fix.impact], -EFFORT_RANK[fix.effort], fix.file))
    return deduped[:MAX_PRIORITY_FIXES] or base.priority_fixes


def merge_consensus(base: Report, candidates: list[CandidateRecord], weights: ScoreWeights) -> Report:
    """Consensus across two or more candidates, anchored to the baseline.

    AI values are averaged first, then blended with the baseline once, so
    adding providers never increases how far AI can move a score.
    """
    categories = {}
    for key in CATEGORY_KEYS:
        ai_value = _consensus_value([v for v in (c.category(key) for c in candidates) if v is not None])
        current = base.categories.get(key)
        categories[key] = current if ai_value is None else blend_score(current, ai_value, weights)

    ai_risk = _consensus_value([v for v in (c.risk_score for c in candidates) if v is not None])
    risk_score = base.risk.score if ai_risk is None else _risk_score(blend_score(base.risk.score, ai_risk, weights))
    votes = [level for level in (c.risk_level for c in candidates) if level]

    return _rebuild(
        base,
        summary=build_consensus_summary([c.summary for c in candidates if c.summary], base.summary),
        categories=CategoryScores(**categories),
        risk=RiskProfile(
            score=risk_score,
            level=most_frequent(votes) or derive_risk_level(risk_score),
            dominant_risks=_pooled_strings(base.risk.dominant_risks, candidates, "dominantRisks", MAX_DOMINANT_RISKS),
        ),
        top_issues=merge_issue_sets(base, candidates),
        priority_fixes=merge_fix_sets(base, candidates),
        quick_wins=_pooled_strings(base.quick_wins, candidates, "quickWins", MAX_QUICK_WINS),
        strengths=_pooled_strings(base.strengths, candidates, "strengths", MAX_STRENGTHS),
        next_milestones=_pooled_strings(base.next_milestones, candidates, "nextMilestones", MAX_MILESTONES),
    )


def with_meta(
    report: Report,
    *,
    provider: str,
    model: str,
    fallback_used: bool,
    fallback_reason: str | None,
    weights: ScoreWeights,
) -> Report:
    """Stamp provenance onto a report (orchestrator output)."""
    meta: AnalysisMeta = report.analysis_meta.model_copy(update={
        "provider": provider,
        "model": model,
        "fallback_used": fallback_used,
        "fallback_reason": fallback_reason,
        "stability_mode": STABILITY_MODE,
        "score_weights": weights,
    })
    return report.model_copy(update={"analysis_meta": meta})

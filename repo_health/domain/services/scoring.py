"""Scoring rules shared by the local analyzer and every merge path.

The overall score is always re-derived from category scores with
CATEGORY_WEIGHTS; nothing else is allowed to set it.
"""

import math

from repo_health.domain.entities.report import CategoryScores, ScoreWeights

CATEGORY_WEIGHTS: dict[str, float] = {
    "maintainability": 0.30,
    "reliability": 0.25,
    "security": 0.25,
    "documentation": 0.10,
    "architecture": 0.10,
}

OVERALL_MIN, OVERALL_MAX = 10, 99
RISK_MIN, RISK_MAX = 5, 100

# (threshold, grade), checked top-down
GRADE_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (90, "A+"),
    (82, "A"),
    (74, "B"),
    (65, "C"),
    (55, "D"),
)

# (upper bound inclusive, level), checked top-down
RISK_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (28, "Low"),
    (52, "Moderate"),
    (75, "Elevated"),
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float):
    return max(low, min(high, value))


def is_finite_number(value: object) -> bool:
    """True for real ints/floats that fit a float and are finite. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def derive_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def derive_risk_level(score: float) -> str:
    for upper, level in RISK_THRESHOLDS:
        if score <= upper:
            return level
    return "Critical"


def compute_overall_score(categories: CategoryScores) -> int:
    """Weighted category sum, rounded half-up and clamped to [10, 99]."""
    total = sum(categories.get(key) * weight for key, weight in CATEGORY_WEIGHTS.items())
    return int(clamp(round_half_up(total), OVERALL_MIN, OVERALL_MAX))


def blend_score(base: float, ai: float, weights: ScoreWeights) -> int:
    """Anchor an AI value against the local baseline, clamped to [0, 100]."""
    return int(clamp(round_half_up(base * weights.local + ai * weights.ai), 0, 100))

"""Report - the bounded health-assessment contract.

Produced by the local analyzer and by every merge path, consumed by the
presentation layer. Field bounds are enforced by pydantic on construction;
list caps are enforced by the producers (merge truncates, the model rejects).
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_health.domain.entities.snapshot import ProjectInfo, SamplingStats
from repo_health.domain.ports.config import MAX_LOCAL_WEIGHT, MIN_LOCAL_WEIGHT

Severity = Literal["Critical", "High", "Medium", "Low"]
RiskLevel = Literal["Low", "Moderate", "Elevated", "Critical"]
Impact = Literal["High", "Medium"]
Effort = Literal["Low", "Medium", "High"]

SEVERITY_RANK: dict[str, int] = {"Critical": 4, "High": 3, "Medium": 2, "Low": 1}
IMPACT_RANK: dict[str, int] = {"High": 2, "Medium": 1}
# Cheaper fixes rank higher.
EFFORT_RANK: dict[str, int] = {"Low": 3, "Medium": 2, "High": 1}
RISK_LEVELS: tuple[str, ...] = ("Low", "Moderate", "Elevated", "Critical")

CATEGORY_KEYS: tuple[str, ...] = (
    "maintainability",
    "reliability",
    "security",
    "documentation",
    "architecture",
)

MAX_HEATMAP = 20
MAX_TOP_ISSUES = 12
MAX_PRIORITY_FIXES = 6
MAX_DOMINANT_RISKS = 4
MAX_QUICK_WINS = 6
MAX_STRENGTHS = 5
MAX_MILESTONES = 5

REPORT_VERSION = "2.0"
LOCAL_PROVIDER = "local-heuristics"
LOCAL_MODEL = "rule-engine-v2"

_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

Score = Annotated[int, Field(ge=0, le=100)]


class CategoryScores(BaseModel):
    """The five fixed category scores, 0-100 each."""

    model_config = _WIRE

    maintainability: Score
    reliability: Score
    security: Score
    documentation: Score
    architecture: Score

    def get(self, key: str) -> int:
        return getattr(self, key)


class RiskProfile(BaseModel):
    model_config = _WIRE

    score: int = Field(ge=5, le=100)
    level: RiskLevel
    dominant_risks: list[str] = Field(default_factory=list, max_length=MAX_DOMINANT_RISKS)


class HeatmapEntry(BaseModel):
    model_config = _WIRE

    file: str
    complexity_score: int = Field(ge=1, le=10)
    issues: int = Field(ge=0)
    loc: int = Field(ge=0)
    risk: RiskLevel


class TopIssue(BaseModel):
    model_config = _WIRE

    file: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    severity: Severity
    recommendation: str = Field(min_length=1)


class PriorityFix(BaseModel):
    model_config = _WIRE

    file: str = Field(min_length=1)
    suggestion: str = Field(min_length=1)
    impact: Impact
    effort: Effort
    rationale: str = Field(min_length=1)


class ScoreWeights(BaseModel):
    """Anchoring weights. `ai` is always `1 - local`."""

    model_config = _WIRE

    local: float
    ai: float

    @classmethod
    def from_local(cls, local: float) -> "ScoreWeights":
        clamped = max(MIN_LOCAL_WEIGHT, min(MAX_LOCAL_WEIGHT, float(local)))
        return cls(local=clamped, ai=round(1 - clamped, 10))


class AnalysisMeta(BaseModel):
    """Provenance of the report: who scored it and whether a fallback happened."""

    model_config = _WIRE

    provider: str
    model: str
    fallback_used: bool = False
    fallback_reason: str | None = None
    files_analyzed: int = 0
    estimated_loc: int = 0
    sampling: SamplingStats = Field(default_factory=SamplingStats)
    stability_mode: str | None = None
    score_weights: ScoreWeights | None = None


class Report(BaseModel):
    """Repository health report."""

    model_config = _WIRE

    report_version: str | None = None
    generated_at: str | None = None
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    overall_score: int = Field(ge=10, le=99)
    grade: str
    confidence: int = Field(ge=45, le=96)
    summary: str = Field(min_length=1)
    categories: CategoryScores
    risk: RiskProfile
    heatmap: list[HeatmapEntry] = Field(default_factory=list, max_length=MAX_HEATMAP)
    top_issues: list[TopIssue] = Field(default_factory=list, max_length=MAX_TOP_ISSUES)
    priority_fixes: list[PriorityFix] = Field(default_factory=list, max_length=MAX_PRIORITY_FIXES)
    quick_wins: list[str] = Field(default_factory=list, max_length=MAX_QUICK_WINS)
    strengths: list[str] = Field(default_factory=list, max_length=MAX_STRENGTHS)
    next_milestones: list[str] = Field(default_factory=list, max_length=MAX_MILESTONES)
    analysis_meta: AnalysisMeta

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys (output boundary)."""
        return self.model_dump(mode="json", by_alias=True)

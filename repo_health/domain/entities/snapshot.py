"""Snapshot - bounded, read-only sample of a repository (analysis input)."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


class EmptySnapshotError(ValueError):
    """Snapshot has no files. Upstream precondition, surfaced to the caller as-is."""


class ProjectInfo(BaseModel):
    """Repository metadata as reported by the fetch collaborator."""

    model_config = _WIRE

    owner: str = ""
    repo: str = ""
    full_name: str = ""
    description: str | None = None
    default_branch: str | None = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    primary_language: str | None = None
    license: str | None = None
    visibility: str | None = None
    url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None


class SourceFile(BaseModel):
    """One fetched file."""

    model_config = _WIRE

    path: str
    content: str


class SamplingStats(BaseModel):
    """How much of the repository made it into the snapshot. Informational only."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True)

    files_seen: int = 0
    files_loaded: int = 0
    truncated: bool = False


class Snapshot(BaseModel):
    """Analysis input: project metadata, ordered files, sampling stats."""

    model_config = _WIRE

    project: ProjectInfo = Field(default_factory=ProjectInfo)
    files: list[SourceFile] = Field(default_factory=list)
    stats: SamplingStats = Field(default_factory=SamplingStats)

    def ensure_not_empty(self) -> "Snapshot":
        """Raise EmptySnapshotError when there is nothing to analyze."""
        if not self.files:
            raise EmptySnapshotError("Snapshot contains no files to analyze")
        return self

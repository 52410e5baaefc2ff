"""Report DTOs."""

from pydantic import Field

from repo_health.domain.entities.snapshot import Snapshot
from repo_health.domain.ports.config import MAX_LOCAL_WEIGHT, MIN_LOCAL_WEIGHT


class ReportRequest(Snapshot):
    """Snapshot body with an optional per-request anchoring weight."""

    local_weight: float | None = Field(None, ge=MIN_LOCAL_WEIGHT, le=MAX_LOCAL_WEIGHT)

    def to_snapshot(self) -> Snapshot:
        return Snapshot(project=self.project, files=self.files, stats=self.stats)

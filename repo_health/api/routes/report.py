"""Report API - build a repository health report from a fetched snapshot."""

from fastapi import APIRouter, Depends, HTTPException, Request

from repo_health.api.dependencies import get_config, get_report_builder, limiter
from repo_health.application.report.dto import ReportRequest
from repo_health.application.report.use_case import ReportBuilder
from repo_health.domain.entities.report import ScoreWeights
from repo_health.domain.entities.snapshot import EmptySnapshotError

router = APIRouter(prefix="/report", tags=["report"])


def _rate_limit() -> str:
    return f"{get_config().security.rate_limit_requests_per_minute}/minute"


@router.post("")
@limiter.limit(_rate_limit)
async def build_report(
    request: Request,
    body: ReportRequest,
    builder: ReportBuilder = Depends(get_report_builder),
) -> dict:
    """Score a snapshot (local heuristics + configured AI providers).

    Returns the Report as camelCase JSON. An empty file list is rejected
    with 422; provider failures never surface as HTTP errors.
    """
    weights = ScoreWeights.from_local(body.local_weight) if body.local_weight is not None else None
    try:
        report = await builder.build(body.to_snapshot(), weights=weights)
    except EmptySnapshotError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return report.to_wire()

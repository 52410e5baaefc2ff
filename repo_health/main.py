"""Application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from repo_health.api.container import get_container
from repo_health.api.dependencies import limiter
from repo_health.api.routes.report import router as report_router
from repo_health.shared.logging import setup_logging

log = structlog.get_logger()


def _apply_logging_config(container):
    """Apply logging from container config (stdout + optional file)."""
    c = container.config
    setup_logging(
        level=c.log_level,
        file_path=c.log_file or "",
        rotation_max_mb=c.log_rotation_max_mb,
        rotation_backups=c.log_rotation_backups,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: setup logging, report the resolved AI plan. Shutdown: close provider clients."""
    container = get_container()
    _apply_logging_config(container)
    plan = container.orchestrator.plan()
    log.info(
        "startup_complete",
        ai_mode=container.config.ai.mode,
        topology=plan.topology.value,
        providers=[p.value for p in plan.providers],
        local_weight=container.score_weights.local,
    )
    yield
    log.info("shutdown_begin")
    try:
        await container.orchestrator.close()
    except Exception:  # noqa: BLE001
        log.debug("provider_close_error", exc_info=True)
    log.info("shutdown_complete")


# Create app
app = FastAPI(
    title="Repo Health",
    version="0.1.0",
    description="Repository health reports: rule-based analysis with anchored AI enrichment",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
container = get_container()
app.add_middleware(
    CORSMiddleware,
    allow_origins=container.config.security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(report_router)


@app.get("/health")
@limiter.limit("100/minute")
async def health(request: Request) -> dict:
    """Health check with the resolved AI execution plan (no provider calls)."""
    container = get_container()
    plan = container.orchestrator.plan()
    return {
        "status": "ok",
        "service": "repo-health",
        "ai_mode": container.config.ai.mode,
        "topology": plan.topology.value,
        "providers": [p.value for p in plan.providers],
    }

"""Pytest configuration and shared fixtures."""

import pytest

from repo_health.api.container import reset_container
from repo_health.domain.entities.snapshot import ProjectInfo, SamplingStats, Snapshot, SourceFile

_CONFIG_ENV = (
    "AI_PROVIDER",
    "SCORE_BASE_WEIGHT",
    "AI_PROVIDER_TIMEOUT",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
    "CORS_ORIGINS",
    "RATE_LIMIT_PER_MINUTE",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """No real credentials or mode overrides leak into tests; fresh container per test."""
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_container()
    yield
    reset_container()


@pytest.fixture
def project() -> ProjectInfo:
    return ProjectInfo(owner="acme", repo="widgets", full_name="acme/widgets", stars=12)


@pytest.fixture
def clean_snapshot(project) -> Snapshot:
    """Small, tidy snapshot: no rule hits."""
    return Snapshot(
        project=project,
        files=[
            SourceFile(path="src/app.ts", content="// entry point\nexport const answer = 42;\n"),
            SourceFile(path="README.md", content="# Widgets\n\nSmall library.\n"),
        ],
        stats=SamplingStats(files_seen=2, files_loaded=2),
    )


@pytest.fixture
def risky_snapshot(project) -> Snapshot:
    """One 700-line file, one eval, one hardcoded credential."""
    big = "\n".join(f"const v{i} = {i};" for i in range(700))
    return Snapshot(
        project=project,
        files=[
            SourceFile(path="src/big.js", content=big),
            SourceFile(path="src/run.js", content="function run(x) {\n  return eval(x);\n}\n"),
            SourceFile(path="config/keys.js", content='const password = "hunter2secret";\n'),
        ],
        stats=SamplingStats(files_seen=3, files_loaded=3),
    )

"""Config Port - interface for configuration access."""

import math

from pydantic import BaseModel, ConfigDict, field_validator

# Local-vs-AI anchoring bounds. AI can never outweigh the rule engine.
MIN_LOCAL_WEIGHT = 0.5
MAX_LOCAL_WEIGHT = 0.95
DEFAULT_LOCAL_WEIGHT = 0.7


class AIConfig(BaseModel):
    """AI enhancement policy."""

    mode: str = "auto"  # "auto" | "hybrid" | "both" | "ensemble" | "gemini" | "groq"
    local_weight: float = DEFAULT_LOCAL_WEIGHT
    # Upper bound for a single provider round trip. A timeout counts as a provider failure.
    provider_timeout_seconds: float = 90.0

    model_config = ConfigDict(extra="ignore")

    @field_validator("mode")
    @classmethod
    def _normalize_mode(cls, value: str) -> str:
        return (value or "auto").strip().lower() or "auto"

    @field_validator("local_weight")
    @classmethod
    def _clamp_weight(cls, value: float) -> float:
        value = float(value)
        if not math.isfinite(value):
            return DEFAULT_LOCAL_WEIGHT
        return max(MIN_LOCAL_WEIGHT, min(MAX_LOCAL_WEIGHT, value))


class GeminiConfig(BaseModel):
    """Google Gemini generateContent API."""

    api_key: str = ""
    model: str = "gemini-3-flash-preview"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: int = 120


class GroqConfig(BaseModel):
    """Groq - OpenAI-compatible chat completions API."""

    api_key: str = ""
    model: str = "llama-3.3-70b-versatile"
    base_url: str = "https://api.groq.com/openai/v1"
    timeout: int = 120
    # Optional: max tokens to generate. None = server/model default.
    max_tokens: int | None = None


class SecurityConfig(BaseModel):
    """Security settings."""

    rate_limit_requests_per_minute: int = 30
    cors_origins: list[str] = ["http://localhost:3000"]


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class AppConfig(BaseModel):
    """Full application configuration."""

    server: ServerConfig = ServerConfig()
    ai: AIConfig = AIConfig()
    gemini: GeminiConfig = GeminiConfig()
    groq: GroqConfig = GroqConfig()
    security: SecurityConfig = SecurityConfig()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout. Rotation when file exceeds max_mb.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3

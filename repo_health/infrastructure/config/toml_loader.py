"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from repo_health.domain.ports.config import (
    AIConfig,
    AppConfig,
    GeminiConfig,
    GroqConfig,
    SecurityConfig,
    ServerConfig,
)

logger = logging.getLogger(__name__)


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _merge_sections(base: dict, override: dict) -> dict:
    """Overlay `override` on `base` one table deep (development.toml over default.toml)."""
    merged = dict(base)
    for section, values in override.items():
        current = merged.get(section)
        if isinstance(values, dict) and isinstance(current, dict):
            merged[section] = {**current, **values}
        else:
            merged[section] = values
    return merged


def _env_number(config: dict, section: str, key: str, env_name: str, cast: type) -> None:
    """Set config[section][key] from a numeric env var; invalid values are logged and ignored."""
    raw = os.getenv(env_name)
    if not raw:
        return
    try:
        config.setdefault(section, {})[key] = cast(raw)
    except ValueError:
        logger.warning("Invalid %s env value: %r, ignoring", env_name, raw)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if mode := os.getenv("AI_PROVIDER"):
        config.setdefault("ai", {})["mode"] = mode.strip().lower()
    _env_number(config, "ai", "local_weight", "SCORE_BASE_WEIGHT", float)
    _env_number(config, "ai", "provider_timeout_seconds", "AI_PROVIDER_TIMEOUT", float)
    if key := os.getenv("GEMINI_API_KEY"):
        config.setdefault("gemini", {})["api_key"] = key.strip()
    if model := os.getenv("GEMINI_MODEL"):
        config.setdefault("gemini", {})["model"] = model.strip()
    if key := os.getenv("GROQ_API_KEY"):
        config.setdefault("groq", {})["api_key"] = key.strip()
    if model := os.getenv("GROQ_MODEL"):
        config.setdefault("groq", {})["model"] = model.strip()
    _env_number(config, "server", "port", "PORT", int)
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if origins := os.getenv("CORS_ORIGINS"):
        config.setdefault("security", {})["cors_origins"] = [o.strip() for o in origins.split(",")]
    _env_number(config, "security", "rate_limit_requests_per_minute", "RATE_LIMIT_PER_MINUTE", int)
    return config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        config = _merge_sections(config, _load_toml(dev_path))
        logger.debug("Applied development overrides from %s", dev_path)

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    return AppConfig(
        server=ServerConfig(**(config.get("server") or {})),
        ai=AIConfig(**(config.get("ai") or {})),
        gemini=GeminiConfig(**(config.get("gemini") or {})),
        groq=GroqConfig(**(config.get("groq") or {})),
        security=SecurityConfig(**(config.get("security") or {})),
        log_level=logging_raw.get("level", "INFO"),
        log_file=(logging_raw.get("file") or "").strip(),
        log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
        log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
    )

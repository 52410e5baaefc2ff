"""Tests for TOML config loader."""

import tempfile
from pathlib import Path

from repo_health.infrastructure.config.toml_loader import _apply_env_overrides, load_config


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_config(self):
        """Shipped default.toml: auto mode, 0.7 weight, no keys."""
        config = load_config()

        assert config.ai.mode == "auto"
        assert config.ai.local_weight == 0.7
        assert config.ai.provider_timeout_seconds == 90
        assert config.gemini.api_key == ""
        assert config.groq.api_key == ""
        assert config.security.rate_limit_requests_per_minute == 30

    def test_merges_development_config(self):
        """development.toml overrides keys per section, keeps the rest."""
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "default.toml").write_text('[ai]\nmode = "auto"\nlocal_weight = 0.8\n')
            (Path(tmpdir) / "development.toml").write_text('[ai]\nmode = "Hybrid"\n')
            config = load_config(Path(tmpdir))

            assert config.ai.mode == "hybrid"
            assert config.ai.local_weight == 0.8

    def test_handles_missing_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_config(Path(tmpdir))
            assert config.ai.mode == "auto"
            assert config.server.port == 8000

    def test_weight_is_clamped(self, monkeypatch):
        monkeypatch.setenv("SCORE_BASE_WEIGHT", "0.99")
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_config(Path(tmpdir)).ai.local_weight == 0.95


class TestApplyEnvOverrides:
    """Tests for _apply_env_overrides function."""

    def test_provider_settings(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", " GROQ ")
        monkeypatch.setenv("GROQ_API_KEY", " gsk-1 ")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-x")
        config = _apply_env_overrides({})
        assert config["ai"]["mode"] == "groq"
        assert config["groq"]["api_key"] == "gsk-1"
        assert config["gemini"]["model"] == "gemini-x"

    def test_invalid_number_ignored(self, monkeypatch):
        monkeypatch.setenv("SCORE_BASE_WEIGHT", "heavy")
        monkeypatch.setenv("PORT", "9001")
        config = _apply_env_overrides({"ai": {"local_weight": 0.75}})
        assert config["ai"]["local_weight"] == 0.75
        assert config["server"]["port"] == 9001

    def test_cors_origins_split(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        config = _apply_env_overrides({})
        assert config["security"]["cors_origins"] == ["http://a.test", "http://b.test"]

    def test_non_finite_weight_keeps_default(self, monkeypatch):
        for raw in ("nan", "inf", "-inf"):
            monkeypatch.setenv("SCORE_BASE_WEIGHT", raw)
            with tempfile.TemporaryDirectory() as tmpdir:
                assert load_config(Path(tmpdir)).ai.local_weight == 0.7

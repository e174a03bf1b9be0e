"""Unit tests for settings and logging setup."""

import logging

from recipesuggest.shared.config.settings import Settings, get_settings
from recipesuggest.shared.logging.logger import setup_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SUGGESTION_MODEL", "AI_GATEWAY_BASE_URL", "TEMPERATURE", "LLM_REQUEST_TIMEOUT", "CORS_ALLOW_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        cfg = Settings(_env_file=None)

        assert cfg.SUGGESTION_MODEL == "google/gemini-3-flash-preview"
        assert cfg.AI_GATEWAY_BASE_URL == "https://ai.gateway.lovable.dev/v1"
        assert cfg.TEMPERATURE == 0.7
        assert cfg.LLM_REQUEST_TIMEOUT == 30.0
        assert cfg.CORS_ALLOW_ORIGINS == "*"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SUGGESTION_MODEL", "provider/other-model")
        monkeypatch.setenv("TEMPERATURE", "0.2")
        monkeypatch.setenv("LLM_REQUEST_TIMEOUT", "12")

        cfg = Settings(_env_file=None)

        assert cfg.SUGGESTION_MODEL == "provider/other-model"
        assert cfg.TEMPERATURE == 0.2
        assert cfg.LLM_REQUEST_TIMEOUT == 12.0

    def test_store_accepts_supabase_variable_names(self, monkeypatch):
        monkeypatch.delenv("STORE_URL", raising=False)
        monkeypatch.delenv("STORE_ANON_KEY", raising=False)
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "publishable-key")

        cfg = Settings(_env_file=None)

        assert cfg.STORE_URL == "https://project.supabase.co"
        assert cfg.STORE_ANON_KEY == "publishable-key"

    def test_get_settings_reads_current_environment(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "first")
        assert get_settings().AI_GATEWAY_API_KEY == "first"
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "second")
        assert get_settings().AI_GATEWAY_API_KEY == "second"


class TestLogging:
    def test_noisy_loggers_are_quieted(self):
        setup_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import AppConfig, load_config


def test_defaults_when_env_empty():
    with patch.dict(os.environ, {}, clear=True):
        cfg = load_config()

    assert cfg.server_root is None
    assert cfg.frontend_root == "http://localhost:5173"
    assert cfg.composio_api_base == "https://api.composio.ai"
    assert cfg.openai_api_key is None
    assert cfg.session_secret == "please-change-me"
    assert cfg.session_max_age == 86400
    assert cfg.session_cookie_secure is False
    assert cfg.port == 4000


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SERVER_ROOT", "https://api.example.com")
    monkeypatch.setenv("FRONTEND_ROOT", "https://app.example.com")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("SESSION_MAX_AGE", "600")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
    monkeypatch.setenv("SUMMARY_TIMEZONE", "Europe/Berlin")

    cfg = load_config()

    assert cfg.server_root == "https://api.example.com"
    assert cfg.extra_allowed_origins == ["https://a.example.com", "https://b.example.com"]
    assert cfg.openai_api_key == "sk-test"
    assert cfg.session_max_age == 600
    assert cfg.session_cookie_secure is True
    assert cfg.summary_timezone == "Europe/Berlin"


def test_composio_key_accepts_vite_name(monkeypatch):
    monkeypatch.delenv("COMPOSIO_API_KEY", raising=False)
    monkeypatch.setenv("VITE_COMPOSIO_API_KEY", "vite-key")
    assert load_config().composio_api_key == "vite-key"


def test_invalid_int_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("SESSION_MAX_AGE", "forever")
    assert load_config().session_max_age == 86400


def test_unknown_summary_timezone_rejected():
    with pytest.raises(ValidationError):
        AppConfig(summary_timezone="Mars/Olympus")


def test_unknown_summary_timezone_fails_load(monkeypatch):
    monkeypatch.setenv("SUMMARY_TIMEZONE", "Mars/Olympus")
    with pytest.raises(ValidationError):
        load_config()


def test_allowed_origins_deduplicated():
    cfg = AppConfig(frontend_root="http://localhost:5173", extra_allowed_origins=["https://x.test", "https://x.test"])
    assert cfg.allowed_origins == ["http://localhost:5173", "http://127.0.0.1:5173", "https://x.test"]


class TestCors:
    """Test the CORS allow-list on the app."""

    def test_allowed_origin_gets_credentials_headers(self, client):
        r = client.get("/healthz", headers={"Origin": "http://frontend.test"})
        assert r.headers["access-control-allow-origin"] == "http://frontend.test"
        assert r.headers["access-control-allow-credentials"] == "true"

    def test_unknown_origin_gets_no_cors_headers(self, client):
        r = client.get("/healthz", headers={"Origin": "https://evil.test"})
        assert "access-control-allow-origin" not in r.headers

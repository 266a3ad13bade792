"""
Tests for configuration loading
"""
from retro_meeting.config import Config, config


def test_test_environment_is_valid():
    assert config.ENV == "test"
    assert config.errors == []
    assert config.uses_sqlite is True
    assert config.MAX_MONTHLY_PAUSES == 2


def test_extra_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://retro.example.com, http://localhost:3000,")

    origins = Config().CORS_ORIGINS

    assert origins == ["http://localhost:3000", "http://127.0.0.1:3000", "https://retro.example.com"]


def test_invalid_storage_provider_is_reported(monkeypatch):
    monkeypatch.setattr(Config, "STORAGE_PROVIDER", "ftp")

    assert any("STORAGE_PROVIDER" in error for error in Config().errors)

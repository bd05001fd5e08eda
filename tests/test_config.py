"""
Tests for settings loading.
"""
import pytest

from slidecreator.app.dependencies import get_settings
from slidecreator.config import AppSettings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for AppSettings and get_settings."""

    def test_defaults(self, monkeypatch):
        for var in (
            "SLIDECREATOR_STORAGE_BACKEND",
            "SLIDECREATOR_OPENAI_API_KEY",
            "SLIDECREATOR_GENERATION_MODEL",
            "SLIDECREATOR_FORMAT_CACHE_TTL",
        ):
            monkeypatch.delenv(var, raising=False)

        settings = get_settings()

        assert settings.storage_backend == "mongo"
        assert settings.openai_api_key is None
        assert settings.generation_model == "gpt-4o"
        assert settings.format_cache_ttl == 30.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SLIDECREATOR_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("SLIDECREATOR_OPENAI_API_KEY", "sk-secret")
        monkeypatch.setenv("SLIDECREATOR_FORMAT_CACHE_TTL", "5")
        monkeypatch.setenv("SLIDECREATOR_DEBUG", "TRUE")

        settings = get_settings()

        assert settings.storage_backend == "memory"
        assert settings.openai_api_key.get_secret_value() == "sk-secret"
        assert "sk-secret" not in repr(settings)
        assert settings.format_cache_ttl == 5.0
        assert settings.debug is True

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValueError):
            AppSettings(storage_backend="sqlite")

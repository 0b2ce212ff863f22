"""Tests for settings loading."""

import pytest

from finance_tracker.api.main import check_settings
from finance_tracker.config import AppSettings, AuthSettings, get_settings


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_app_defaults(self, monkeypatch):
        monkeypatch.delenv("STORAGE_BACKEND", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.api_prefix == "/api"
        assert settings.storage_backend == "memory"

    def test_storage_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "MongoDB")
        assert AppSettings(_env_file=None).storage_backend == "mongodb"

    def test_unknown_storage_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            AppSettings(_env_file=None, storage_backend="postgres")

    def test_cors_origins_list(self):
        settings = AppSettings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_auth_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_SECRET_KEY", "from-the-environment")
        monkeypatch.setenv("AUTH_BCRYPT_ROUNDS", "5")
        settings = AuthSettings()
        assert settings.secret_key == "from-the-environment"
        assert settings.bcrypt_rounds == 5
        assert settings.algorithm == "HS256"

    def test_auth_secret_required(self, monkeypatch):
        monkeypatch.delenv("AUTH_SECRET_KEY", raising=False)
        with pytest.raises(ValueError):
            AuthSettings(_env_file=None)


class TestStartupCheck:
    """Tests for the settings check run before serving."""

    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_memory_needs_only_auth(self, monkeypatch):
        monkeypatch.setenv("AUTH_SECRET_KEY", "from-the-environment")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        assert check_settings("memory") == []

    def test_missing_secret_reported(self, monkeypatch):
        monkeypatch.delenv("AUTH_SECRET_KEY", raising=False)
        errors = check_settings("memory")
        assert len(errors) == 1
        assert errors[0].startswith("auth:")

    def test_sheets_backend_needs_sheet_settings(self, monkeypatch):
        monkeypatch.setenv("AUTH_SECRET_KEY", "from-the-environment")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        errors = check_settings("google_sheets")
        assert [e.split(":")[0] for e in errors] == ["google_sheets"]

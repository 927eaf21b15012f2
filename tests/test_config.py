"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from github_org_mirror.config import Settings, SyncConfig, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self):
        """Test default values are correct."""
        settings = Settings(
            _env_file=None,  # Don't load .env
        )

        assert settings.database_url == "sqlite+aiosqlite:///./github_mirror.db"
        assert settings.database_echo is False
        assert settings.github_api_url == "https://api.github.com"
        assert settings.github_api_version == "2022-11-28"
        assert settings.environment == "development"
        assert settings.log_level == "INFO"

    def test_settings_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert settings.github_api_url == "https://github.example.com/api/v3"
        assert settings.environment == "production"
        assert settings.log_level == "DEBUG"

    def test_nested_sync_settings_from_env(self, monkeypatch):
        """Sync settings are read with the __ nested delimiter."""
        monkeypatch.setenv("SYNC__MEMBER_CAP", "5")
        monkeypatch.setenv("SYNC__PAGE_DELAY_MS", "0")
        monkeypatch.setenv("SYNC__EXTRA_REPOS", '["python/cpython"]')

        settings = Settings(_env_file=None)

        assert settings.sync.member_cap == 5
        assert settings.sync.page_delay_ms == 0
        assert settings.sync.extra_repos == ["python/cpython"]

    def test_settings_environment_validation(self, monkeypatch):
        """Test that invalid environment value is rejected."""
        monkeypatch.setenv("ENVIRONMENT", "invalid")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_log_level_validation(self, monkeypatch):
        """Test that invalid log level is rejected."""
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestSyncConfig:
    """Tests for the sync pipeline defaults and bounds."""

    def test_defaults(self):
        """Defaults match GitHub-friendly pacing and the documented caps."""
        config = SyncConfig()

        assert config.per_page == 100
        assert config.page_delay_ms == 1000
        assert config.history_page_delay_ms == 500
        assert config.rate_limit_backoff_seconds == 60.0
        assert config.member_cap == 20
        assert config.extra_pr_cap == 2000
        assert config.extra_issue_cap == 600
        assert config.extra_repos == ["facebook/react", "vercel/next.js", "microsoft/vscode"]

    def test_per_page_above_github_maximum_rejected(self):
        """GitHub never returns more than 100 items per page."""
        with pytest.raises(ValidationError):
            SyncConfig(per_page=101)

    def test_negative_delay_rejected(self):
        """Delays cannot be negative."""
        with pytest.raises(ValidationError):
            SyncConfig(page_delay_ms=-1)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self):
        """Test that get_settings returns a Settings instance."""
        # Clear cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        # Should be the same object (cached)
        assert settings1 is settings2

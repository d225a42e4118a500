"""
Unit Tests - Configuration
"""
import pytest
from pydantic import ValidationError

from binflow.config.settings import BusinessSettings, DatabaseSettings, PollingSettings


class TestSettings:

    def test_defaults(self, test_settings):
        assert test_settings.app_env == "testing"
        assert test_settings.business.shift_minutes == 480
        assert test_settings.business.dashboard_window_days == 7
        assert test_settings.polling.work_hours_interval_seconds == 180
        assert test_settings.polling.off_hours_interval_seconds == 3600

    def test_timezone_from_env(self, monkeypatch):
        monkeypatch.setenv("BUSINESS_TIMEZONE", "Europe/London")

        assert BusinessSettings().timezone == "Europe/London"

    def test_unknown_timezone_rejected(self, monkeypatch):
        monkeypatch.setenv("BUSINESS_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ValidationError):
            BusinessSettings()

    def test_database_url_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

        settings = DatabaseSettings()
        assert settings.async_url == "sqlite+aiosqlite:///./test.db"
        assert settings.is_sqlite

    def test_postgres_url_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_DB", "lines")

        url = DatabaseSettings().async_url
        assert url.startswith("postgresql+asyncpg://")
        assert url.endswith("@db:5432/lines")

    def test_poll_prefix(self, monkeypatch):
        monkeypatch.setenv("POLL_WORK_HOURS_INTERVAL_SECONDS", "60")

        assert PollingSettings().work_hours_interval_seconds == 60

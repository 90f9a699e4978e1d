"""Tests for configuration settings."""

from __future__ import annotations

from phpunit_events.config import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, settings):
        """Defaults are lenient and audit open keys."""
        assert settings.log_level == "WARNING"
        assert settings.log_json_format is False
        assert settings.strict_finish is False
        assert settings.audit_open_keys is True

    def test_env_prefix(self, monkeypatch):
        """Values are read from PHPUNIT_EVENTS_* variables."""
        monkeypatch.setenv("PHPUNIT_EVENTS_STRICT_FINISH", "true")
        monkeypatch.setenv("PHPUNIT_EVENTS_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.strict_finish is True
        assert settings.log_level == "DEBUG"

    def test_unprefixed_variables_ignored(self, monkeypatch):
        """A bare STRICT_FINISH variable has no effect."""
        monkeypatch.setenv("STRICT_FINISH", "true")

        assert Settings(_env_file=None).strict_finish is False

    def test_get_settings_is_cached(self):
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()

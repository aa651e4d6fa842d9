"""Unit tests for configuration and settings."""
from hotel.config import Settings, get_settings, reset_settings_cache


class TestSettings:
    """Test configuration management."""

    def test_get_settings_returns_same_instance(self):
        """Test that get_settings returns cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_reset_settings_cache(self):
        """Test that cache can be reset."""
        settings1 = get_settings()
        reset_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_test_environment_is_applied(self):
        """The test run points at its own SQLite file with rate limiting off."""
        settings = get_settings()

        assert settings.database_url == "sqlite:///./test_hotel.db"
        assert settings.rate_limiting_enabled is False

    def test_environment_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("ROOM_CACHE_TTL", "5")
        monkeypatch.setenv("FRONT_DESK_PORT", "9100")

        settings = Settings()

        assert settings.room_cache_ttl == 5
        assert settings.front_desk_port == 9100

    def test_defaults(self, monkeypatch):
        """Test default values when nothing is configured."""
        for name in ("DATABASE_URL", "RATE_LIMITING_ENABLED", "LOG_DIR"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///./hotel_booking.db"
        assert settings.run_db_migrations is True
        assert settings.log_dir == "logs"
        assert settings.default_rate_limit == "60/minute"
        assert isinstance(settings.cors_origins, list)
        assert len(settings.cors_origins) > 0

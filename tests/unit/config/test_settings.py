"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from mindwell_config import Settings, get_settings


def _settings(**overrides) -> Settings:
    return Settings(jwt_secret_key="test-secret", **overrides)


class TestSettings:
    def test_database_url_from_postgres_parts(self):
        settings = _settings(
            postgres_user="mw",
            postgres_password="pw",
            postgres_host="db",
            postgres_port=5433,
            postgres_db="mindwell_test",
        )

        assert settings.database_url == "postgresql+asyncpg://mw:pw@db:5433/mindwell_test"

    def test_database_url_override_wins(self):
        settings = _settings(database_url_override="sqlite+aiosqlite:///:memory:")

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"

    def test_cors_origins_accept_list_or_csv(self):
        assert _settings(api_cors_origins="http://a, http://b,").cors_origins == [
            "http://a",
            "http://b",
        ]
        assert _settings(api_cors_origins=["http://a"]).cors_origins == ["http://a"]
        assert _settings(api_cors_origins="").cors_origins == []

    def test_log_level_is_normalized(self):
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValidationError):
            _settings(log_level="chatty")

    def test_frontend_url_loses_trailing_slash(self):
        assert _settings(frontend_base_url="https://app.example/").frontend_base_url == (
            "https://app.example"
        )

    def test_bcrypt_rounds_are_bounded(self):
        with pytest.raises(ValidationError):
            _settings(password_hash_rounds=3)

    def test_secret_store_backend_is_closed(self):
        with pytest.raises(ValidationError):
            _settings(secret_store_backend="memcached")


class TestGetSettings:
    def test_reads_environment_and_caches(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")
        monkeypatch.setenv("VERIFICATION_MAX_PER_HOUR", "7")

        first = get_settings()

        assert first.jwt_secret_key.get_secret_value() == "from-env"
        assert first.verification_max_per_hour == 7
        assert get_settings() is first

"""Application settings loaded from environment variables.

The first existing env file wins:
1. ``MINDWELL_ENV_FILE`` (absolute, or relative to the project root)
2. ``config/.env.dev`` for local development
3. ``config/.env`` for production/Docker

OS environment variables always override values from the file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_MARKERS = ("config", "pyproject.toml")
_DOCKER_ROOT = Path("/app")


def _find_project_root() -> Path:
    """Walk up from this file to the directory holding config/ or pyproject.toml."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if candidate == _DOCKER_ROOT or any(
            (candidate / marker).exists() for marker in _PROJECT_MARKERS
        ):
            return candidate
    return here.parents[1]


def get_config_dir() -> Path:
    return _find_project_root() / "config"


def _env_file_candidates() -> Iterator[Path]:
    explicit = os.environ.get("MINDWELL_ENV_FILE")
    if explicit:
        path = Path(explicit)
        yield path if path.is_absolute() else _find_project_root() / path

    config_dir = get_config_dir()
    yield config_dir / ".env.dev"
    yield config_dir / ".env"


def _resolve_env_file_path() -> Path | None:
    return next((path for path in _env_file_candidates() if path.is_file()), None)


class Settings(BaseSettings):
    """MindWell configuration.

    Only ``jwt_secret_key`` has no default. Durations are whole units as
    named by the field; rate limits count issuances per user.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (required)
    jwt_secret_key: SecretStr

    # Application
    app_name: str = "MindWell"
    debug: bool = False
    log_level: str = "INFO"

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: str = ""  # comma-separated; empty disables CORS

    # Tokens and sessions
    jwt_token_expire_days: int = Field(default=7, ge=1)
    session_ttl_days: int = Field(default=7, ge=1)
    guest_session_ttl_hours: int = Field(default=24, ge=1)
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # Short-lived secrets and their issuance limits
    verification_code_ttl_minutes: int = Field(default=10, ge=1)
    verification_max_per_hour: int = Field(default=5, ge=1)
    password_reset_ttl_minutes: int = Field(default=60, ge=1)
    password_reset_max_per_day: int = Field(default=3, ge=1)

    # Database (POSTGRES_ prefix)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr = SecretStr("")
    postgres_db: str = "mindwell"
    database_url_override: str | None = None

    # Secret store
    secret_store_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379/0"

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = "noreply@mindwell.app"
    smtp_from_name: str = "MindWell"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Reset links point here
    frontend_base_url: str = "http://localhost:3000"

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _join_cors_origins(cls, v: Any) -> str:
        if isinstance(v, (list, tuple)):
            return ",".join(v)
        return str(v) if v else ""

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level

    @field_validator("frontend_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL; ``database_url_override`` wins when set."""
        if self.database_url_override:
            return self.database_url_override
        password = self.postgres_password.get_secret_value()
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, read once from env and env file."""
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    get_settings.cache_clear()

"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_ENV = os.getenv("APP_ENV", "development")

PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

_env_file = str(_env_path) if _env_path.is_file() and not os.getenv("TESTING") else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    contact_rate_limit_enabled: bool = Field(
        True,
        description="Throttle contact form submissions per client address",
    )
    contact_rate_limit_attempts: int = Field(
        3,
        description="Maximum admitted submissions per client within one window",
        ge=1,
    )
    contact_rate_limit_window_seconds: int = Field(
        60,
        description="Window length in seconds; idle entries are swept after twice this",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Use the first X-Forwarded-For hop as client address (behind a proxy)",
    )

    admin_api_key_required: bool = Field(
        True,
        description="Whether administrative endpoints require an X-API-Key header",
    )
    admin_api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid admin API keys",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """Relational storage configuration.

    When ``DATABASE_URL`` is unset the service falls back to in-memory storage.
    """

    url: str | None = Field(
        None,
        description="SQLAlchemy connection URL (postgres://, postgresql://, sqlite://)",
    )
    pool_pre_ping: bool = Field(
        True,
        description="Verify pooled connections before use",
    )
    pool_recycle_seconds: int = Field(
        3600,
        description="Recycle pooled connections after this many seconds",
    )
    echo: bool = Field(
        False,
        description="Echo emitted SQL (debugging only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10 * 1024 * 1024, description="Rotate file after N bytes (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class GitHubSettings(BaseSettings):
    """Settings for the one-off repository bootstrap endpoint."""

    token: str | None = Field(
        None,
        description="Personal access token used to call the GitHub REST API",
    )
    api_url: str = Field(
        "https://api.github.com",
        description="GitHub REST API base URL",
    )
    repo_name: str = Field(
        "roya-systems-website",
        description="Repository to create or reuse",
    )
    repo_description: str = Field(
        "Professional marketing website for Roya Systems Ltd - a technology "
        "consultancy specializing in custom software development, package "
        "customization, and infrastructure & DevOps solutions.",
        description="Description applied when the repository is created",
    )
    repo_private: bool = Field(False, description="Create the repository as private")
    timeout_seconds: float = Field(15.0, description="HTTP timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Environments:
    - development: Local development
    - testing: Automated tests (.env files are ignored when TESTING is set)
    - staging / production: injected env vars or .env.{APP_ENV}
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Build a fresh settings object from the current environment."""

    return Settings()


settings = get_settings()

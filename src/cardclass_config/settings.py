"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. CARDCLASS_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. CARDCLASS_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("CARDCLASS_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values

    Nothing here is required: missing credentials only surface as a
    ConfigurationError when a model that needs them is selected.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Anthropic (native SDK transport)
    anthropic_api_key: SecretStr | None = None

    # OpenAI-compatible transport (EXAONE_ prefix)
    exaone_api_url: str | None = None
    exaone_api_key: SecretStr | None = None

    # Classification defaults (AI_ prefix)
    default_model_id: str = "claude-sonnet"
    ai_temperature: float = 0.0
    ai_max_tokens: int = 1024
    ai_timeout: float = 60.0

    # Batch classification
    batch_chunk_size: int = 5
    recent_examples_limit: int = 10

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("ai_temperature")
    @classmethod
    def _validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            msg = f"ai_temperature must be between 0.0 and 1.0, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("batch_chunk_size")
    @classmethod
    def _validate_chunk_size(cls, v: int) -> int:
        if v < 1:
            msg = "batch_chunk_size must be at least 1"
            raise ValueError(msg)
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()

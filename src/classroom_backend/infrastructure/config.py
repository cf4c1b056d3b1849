"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from classroom_backend.domain.exceptions import ConfigurationError

DatabaseProvider = Literal["pg", "mysql", "sqlite"]


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Auth
    better_auth_secret: SecretStr
    frontend_url: str
    better_auth_url: str
    session_lifetime_seconds: int = 7 * 24 * 3600

    # Database
    database_url: str
    database_provider: DatabaseProvider = "pg"
    auth_create_tables: bool = False

    # Completion provider
    deepseek_api_key: SecretStr
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("frontend_url", "better_auth_url", "database_url")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "must not be empty"
            raise ValueError(msg)
        return stripped.rstrip("/")

    @field_validator("better_auth_secret", "deepseek_api_key")
    @classmethod
    def _secret_not_blank(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            msg = "must not be empty"
            raise ValueError(msg)
        return v

    @property
    def trusted_origins(self) -> list[str]:
        return [self.frontend_url, self.better_auth_url]


class ClientSettings(BaseSettings):
    """Settings read by the client-side AI request hook."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vite_backend_base_url: str

    @field_validator("vite_backend_base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "must not be empty"
            raise ValueError(msg)
        return stripped.rstrip("/")


def _configuration_error(exc: ValidationError) -> ConfigurationError:
    fields = [
        ".".join(str(p) for p in err.get("loc", ())).upper()
        for err in exc.errors()
    ]
    return ConfigurationError(
        "Invalid or missing configuration: " + ", ".join(fields),
        fields=fields,
    )


def load_settings(**overrides: Any) -> Settings:
    """Build and validate ``Settings`` eagerly.

    Raises ``ConfigurationError`` naming every missing or invalid variable
    instead of letting the service start half-configured.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise _configuration_error(exc) from exc


def load_client_settings(**overrides: Any) -> ClientSettings:
    """Build and validate ``ClientSettings`` eagerly."""
    try:
        return ClientSettings(**overrides)
    except ValidationError as exc:
        raise _configuration_error(exc) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide application settings (cached after first call)."""
    return load_settings()

"""
Configuration Management for Memoir

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so it is easy to see which external
services exist and which variables switch them on or off.

The remote tier is optional: KV_REST_API_URL and KV_REST_API_TOKEN must both be
present, otherwise the journal runs against local storage only.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RemoteStoreSettings(BaseSettings):
    """Hosted Redis (Upstash REST) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KV_REST_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: Optional[str] = Field(
        default=None,
        description="REST endpoint of the hosted Redis database"
    )
    token: Optional[str] = Field(
        default=None,
        description="Bearer token for the REST endpoint"
    )
    redis_url: Optional[str] = Field(
        default=None,
        validation_alias="REDIS_URL",
        description="Native Redis URL; reported by diagnostics only"
    )

    @field_validator("url", "token", "redis_url")
    @classmethod
    def blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty strings the same as unset variables."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_configured(self) -> bool:
        """Both URL and token are required together."""
        return bool(self.url and self.token)

    @property
    def missing_variables(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("KV_REST_API_URL")
        if not self.token:
            missing.append("KV_REST_API_TOKEN")
        return missing


class StorageSettings(BaseSettings):
    """Client and server storage behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="MEMOIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage_mode: Literal["redis", "mock"] = Field(
        default="redis",
        description="'mock' substitutes an in-process store when Redis is not configured"
    )
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the storage API used by the sync gateway"
    )
    local_cache_path: Optional[str] = Field(
        default=None,
        description="JSON file backing the local cache (in-memory when unset)"
    )
    local_quota_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        description="Maximum size of the local cache"
    )
    probe_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How often the availability probe re-checks the remote tier"
    )
    health_check_ttl_seconds: int = Field(
        default=10,
        ge=1,
        le=3600,
        description="Expiry of the health-check sentinel key"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Transport timeout for outbound HTTP calls"
    )
    remote_retry_attempts: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Attempts per Redis REST call on transport errors"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console renderer otherwise)"
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def remote(self) -> RemoteStoreSettings:
        return RemoteStoreSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    A missing remote configuration is reported but is not an error:
    the journal falls back to local-only storage.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    try:
        remote = settings.remote
        results["remote"] = remote.is_configured
        if not remote.is_configured:
            results["remote_missing"] = remote.missing_variables
    except Exception as e:
        results["remote"] = False
        results["remote_error"] = str(e)

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ERROR_BOUNDARY_",
        case_sensitive=False,
    )

    app_title: str = "Error Boundary"

    # Status for identifiers without an explicit mapping.
    default_status: int = 500
    media_type: str = "application/json"

    # JSON object of identifier -> status, e.g. {"ERR-004": 409}.
    status_overrides_json: str | None = None

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

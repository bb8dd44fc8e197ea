from functools import lru_cache
from typing import List, Literal

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="QueueTrack Service")
    cors_origins: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
        ]
    )
    log_level: str = Field(default="INFO")
    store_backend: Literal["memory", "file", "remote"] = Field(
        default="memory"
    )
    store_path: str = Field(
        default="data/appointments.json"
    )
    backend_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    backend_timeout: float = Field(
        default=10.0
    )
    backend_token: str | None = Field(
        default=None
    )
    slot_days: int = Field(default=7, ge=1, le=60)
    slot_day_start_hour: int = Field(default=9, ge=0, le=23)
    slot_day_end_hour: int = Field(default=17, ge=1, le=24)
    slot_interval_minutes: int = Field(default=30, ge=5, le=240)
    slot_unavailable_ratio: float = Field(default=0.3, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_prefix="QUEUETRACK_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()

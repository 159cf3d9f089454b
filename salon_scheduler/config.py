from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from salon_scheduler.engine.time_utils import normalize_time, to_minutes


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Salon Scheduler")
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    slot_granularity_minutes: int = Field(
        default=30, gt=0, le=240
    )
    day_start: str = Field(
        default="08:00"
    )
    day_end: str = Field(
        default="20:00"
    )
    booking_horizon_days: int = Field(
        default=14, ge=1
    )
    waitlist_note: str = Field(
        default="auto-booked from waitlist"
    )
    seed_demo_data: bool = Field(
        default=True
    )
    log_level: str = Field(
        default="INFO"
    )

    model_config = SettingsConfigDict(env_prefix="SALON_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("day_start", "day_end")
    def _normalize_hours(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def _check_opening_hours(self) -> "Settings":
        if to_minutes(self.day_start) >= to_minutes(self.day_end):
            raise ValueError("day_start must be before day_end")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()

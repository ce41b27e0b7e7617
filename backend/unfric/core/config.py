"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATE_BUCKET_POLICIES = {"yesterday", "today", "tomorrow", "week", "exclude"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Unfric Task Engine"
    debug: bool = False
    log_level: str = "INFO"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "unfric"
    timezone: str = "UTC"
    clock_tick_seconds: int = 60
    default_duration_minutes: int = 120
    min_duration_minutes: int = 30
    hour_height: float = 60.0
    compact_hour_height: float = 16.0
    no_due_date_bucket: str = "today"
    morning_start_hour: int = 5
    afternoon_start_hour: int = 12
    evening_start_hour: int = 17
    night_start_hour: int = 21

    @field_validator("clock_tick_seconds")
    @classmethod
    def _tick_in_range(cls, value: int) -> int:
        if not (1 <= value <= 60):
            raise ValueError("CLOCK_TICK_SECONDS must be between 1 and 60")
        return value

    @field_validator("default_duration_minutes", "min_duration_minutes")
    @classmethod
    def _positive_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("durations must be positive")
        return value

    @field_validator("no_due_date_bucket")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in DATE_BUCKET_POLICIES:
            raise ValueError(f"NO_DUE_DATE_BUCKET must be one of {sorted(DATE_BUCKET_POLICIES)}")
        return normalized

    @model_validator(mode="after")
    def _check_layout_and_hours(self) -> "Settings":
        if self.hour_height <= 0 or self.compact_hour_height <= 0:
            raise ValueError("row heights must be positive")
        if self.compact_hour_height >= self.hour_height:
            raise ValueError("COMPACT_HOUR_HEIGHT must be smaller than HOUR_HEIGHT")
        boundaries = [
            self.morning_start_hour,
            self.afternoon_start_hour,
            self.evening_start_hour,
            self.night_start_hour,
        ]
        if boundaries != sorted(set(boundaries)) or not all(0 <= hour <= 23 for hour in boundaries):
            raise ValueError("time-of-day boundaries must be strictly increasing hours in 0-23")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()

"""Application configuration and settings management."""

from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CLOCK_PATTERN = r"^\d{1,2}:\d{2}$"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="VISIT_PLANNER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Visit Planner API"
    api_prefix: str = "/api"
    default_work_start: str = Field(default="08:00", pattern=CLOCK_PATTERN)
    default_work_end: str = Field(default="17:00", pattern=CLOCK_PATTERN)
    default_lunch_start: str = Field(default="13:00", pattern=CLOCK_PATTERN)
    default_lunch_duration_minutes: int = Field(default=60, ge=0)
    default_visit_duration_minutes: int = Field(default=20, ge=1)
    default_start_latitude: float = Field(
        default=-3.99313,
        ge=-90.0,
        le=90.0,
        description="Where the field agent starts the day when the request gives no start position.",
    )
    default_start_longitude: float = Field(default=-79.20422, ge=-180.0, le=180.0)
    travel_minutes_per_km: float = Field(default=3.0, ge=0.0)
    travel_overhead_minutes: int = Field(
        default=5,
        ge=0,
        description="Fixed minutes added to every trip for parking and access.",
    )
    priority_penalty_high_km: float = Field(default=0.0, ge=0.0)
    priority_penalty_medium_km: float = Field(default=5.0, ge=0.0)
    priority_penalty_low_km: float = Field(default=10.0, ge=0.0)
    max_candidates_per_run: int = Field(
        default=200,
        ge=1,
        description="Upper bound on candidates per scheduling run (selection is quadratic per gap).",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8081",
            "http://127.0.0.1:8081",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()

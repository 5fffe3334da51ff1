"""Application configuration and settings management."""

from typing import Annotated, Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WEATHERLINE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Weatherline API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level applied by create_app().")
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "cycling", "walking"] = Field(
        default="driving",
        description="OSRM profile used when the link and the request carry no travel mode.",
    )
    osrm_max_retries: int = Field(default=3, ge=0)
    osrm_backoff_seconds: float = Field(default=1.0, ge=0.0)
    http_timeout_seconds: float = Field(default=20.0, gt=0.0)
    geocoding_url: str = Field(default="https://geocoding-api.open-meteo.com/v1/search")
    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org")
    forecast_url: str = Field(default="https://api.open-meteo.com/v1/forecast")
    language: str = Field(default="it", description="Language requested from geocoding providers.")
    user_agent: str = Field(
        default="weatherline/0.1 (route weather timeline)",
        description="User-Agent header sent upstream; Nominatim rejects anonymous clients.",
    )
    short_link_hosts: Annotated[tuple[str, ...], NoDecode] = Field(default=("maps.app.goo.gl", "goo.gl"))
    max_redirects: int = Field(default=5, ge=1)
    forecast_padding_hours: float = Field(
        default=12.0,
        ge=0.0,
        description="Hours added before the first and after the last arrival when querying forecasts.",
    )
    max_parallel_requests: int = Field(default=4, ge=1)
    max_parallel_reverse_lookups: int = Field(default=1, ge=1)
    abort_on_weather_failure: bool = Field(
        default=False,
        description="If True a failed forecast fetch aborts the run instead of leaving the point without weather.",
    )
    max_checkpoints: int = Field(
        default=300,
        ge=1,
        description="Upper bound on sampled checkpoints per run; denser requests are rejected.",
    )
    run_timeout_seconds: float = Field(default=90.0, gt=0.0)
    default_timezone: str = Field(
        default="Europe/Rome",
        description="Timezone applied to departures submitted without an UTC offset.",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", "short_link_hosts", mode="before")
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

    @field_validator("osrm_base_url", "nominatim_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()

"""Timeline request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# spacings below this are rejected; 0 still means "stops only"
MIN_SAMPLE_KM = 1.0


class TimelineRequest(BaseModel):
    url: str = Field(..., min_length=1, description="Google Maps directions or place link, short links included.")
    departure: datetime = Field(
        ...,
        description="Departure instant. Values without an UTC offset use the configured default timezone.",
    )
    sample_km: float = Field(
        default=0.0,
        ge=0.0,
        le=1000.0,
        description="Checkpoint spacing in kilometers; 0 keeps only the explicit stops.",
    )
    mode: Optional[str] = Field(
        default=None,
        description="Travel mode (driving, cycling, walking). Overrides the link's travelmode.",
    )

    @field_validator("sample_km")
    @classmethod
    def _check_sample_km(cls, value: float) -> float:
        if 0 < value < MIN_SAMPLE_KM:
            raise ValueError(f"sample_km must be 0 or at least {MIN_SAMPLE_KM:g} km.")
        return value


class LegModel(BaseModel):
    distance_m: float
    duration_s: float
    duration_text: str


class WeatherModel(BaseModel):
    time: datetime
    temperature_c: Optional[float] = None
    precipitation_mm: Optional[float] = None
    weather_code: Optional[int] = None
    description: Optional[str] = None
    wind_speed_kmh: Optional[float] = None


class TimelinePointModel(BaseModel):
    kind: str
    label: str
    name: str
    region_code: Optional[str] = None
    lat: float
    lon: float
    arrival: datetime
    cumulative_km: float
    leg: Optional[LegModel] = None
    weather: Optional[WeatherModel] = None


class TimelineSummaryModel(BaseModel):
    distance_m: float
    distance_km: float
    duration_s: float
    duration_text: str
    legs: int


class TimelineResponse(BaseModel):
    kind: str
    resolved_url: str
    profile: Optional[str] = None
    summary: TimelineSummaryModel
    points: List[TimelinePointModel]


class LinkPreviewResponse(BaseModel):
    kind: str
    places: List[str]
    mode: Optional[str] = None


class ExpandResponse(BaseModel):
    ok: bool = True
    url: str

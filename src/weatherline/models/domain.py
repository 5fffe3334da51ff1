"""Domain models for places, routes, forecasts and timeline points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Place:
    """A stop parsed from a link, resolved to coordinates by geocoding."""

    raw_token: str
    resolved_name: Optional[str] = None
    admin_region_code: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    placeholder: bool = False

    @property
    def is_resolved(self) -> bool:
        if self.lat is None or self.lon is None:
            return False
        return abs(self.lat) <= 90 and abs(self.lon) <= 180

    @property
    def needs_name(self) -> bool:
        return self.resolved_name is None or self.placeholder

    @property
    def display_name(self) -> str:
        if self.resolved_name:
            return self.resolved_name
        if self.lat is not None and self.lon is not None:
            return f"{self.lat:.4f}, {self.lon:.4f}"
        return self.raw_token


@dataclass(frozen=True, slots=True)
class RouteLeg:
    distance_meters: float
    duration_seconds: float


@dataclass(frozen=True, slots=True)
class RoutePath:
    """Routed geometry; coordinates are (lon, lat) pairs as returned by OSRM."""

    coordinates: tuple[tuple[float, float], ...]
    total_distance_meters: float
    total_duration_seconds: float
    legs: tuple[RouteLeg, ...]


class PointKind(str, Enum):
    START = "start"
    LEG_END = "leg_end"
    CHECKPOINT = "checkpoint"
    SINGLE_PLACE = "single_place"


@dataclass(frozen=True, slots=True)
class WeatherSample:
    time: datetime
    temperature_c: Optional[float]
    precipitation_mm: Optional[float]
    weather_code: Optional[int]
    wind_speed_kmh: Optional[float]


@dataclass(frozen=True, slots=True)
class WeatherSeries:
    """Hourly forecast for one location, stored as index-aligned sequences."""

    times: tuple[datetime, ...]
    temperature_c: tuple[Optional[float], ...]
    precipitation_mm: tuple[Optional[float], ...]
    weather_code: tuple[Optional[int], ...]
    wind_speed_kmh: tuple[Optional[float], ...]

    def __post_init__(self) -> None:
        lengths = {
            len(self.times),
            len(self.temperature_c),
            len(self.precipitation_mm),
            len(self.weather_code),
            len(self.wind_speed_kmh),
        }
        if len(lengths) != 1:
            raise ValueError(f"Forecast sequences have mismatched lengths: {sorted(lengths)}")
        for previous, current in zip(self.times, self.times[1:]):
            if current <= previous:
                raise ValueError(f"Forecast timestamps are not strictly increasing at {current.isoformat()}")

    def __len__(self) -> int:
        return len(self.times)

    def sample(self, index: int) -> WeatherSample:
        return WeatherSample(
            time=self.times[index],
            temperature_c=self.temperature_c[index],
            precipitation_mm=self.precipitation_mm[index],
            weather_code=self.weather_code[index],
            wind_speed_kmh=self.wind_speed_kmh[index],
        )


@dataclass(frozen=True, slots=True)
class TimelinePoint:
    kind: PointKind
    place: Place
    arrival: datetime
    cumulative_km: float
    leg: Optional[RouteLeg] = None
    weather: Optional[WeatherSample] = None


@dataclass(frozen=True, slots=True)
class ParsedDirections:
    places: tuple[Place, ...]
    mode: Optional[str]


@dataclass(frozen=True, slots=True)
class ParsedPlace:
    place: Place


@dataclass(frozen=True, slots=True)
class Timeline:
    """Final product of one pipeline run, ordered by arrival."""

    kind: str
    resolved_url: str
    profile: Optional[str]
    total_distance_meters: float
    total_duration_seconds: float
    leg_count: int
    points: tuple[TimelinePoint, ...]

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from weatherline.models.domain import RouteLeg, RoutePath, WeatherSeries
from weatherline.services.geocoding.client import GeocodeHit, ReverseHit
from weatherline.services.timeline.cache import spatial_key

MILANO = (45.4642, 9.1900)
TORINO = (45.0703, 7.6869)
COLOSSEO = (41.8902, 12.4922)

DEPARTURE = datetime(2025, 6, 1, 8, 0, tzinfo=timezone(timedelta(hours=2)))


class DummyExpander:
    def __init__(self, expanded: str | None = None) -> None:
        self.expanded = expanded
        self.calls: list[str] = []

    def expand(self, url):
        self.calls.append(url)
        return self.expanded


class DummyGeocoder:
    def __init__(self, places: dict | None = None, reverse_names: dict | None = None) -> None:
        self.places = places if places is not None else {
            "Milano": (*MILANO, "MI"),
            "Torino": (*TORINO, "TO"),
            "Colosseo": (*COLOSSEO, "RM"),
        }
        self.reverse_names = reverse_names or {}
        self.geocode_calls: list[str] = []
        self.reverse_calls: list[tuple[float, float]] = []

    def geocode(self, name):
        self.geocode_calls.append(name)
        entry = self.places.get(name)
        if entry is None:
            return None
        lat, lon, region = entry
        return GeocodeHit(name=name, lat=lat, lon=lon, admin_region_code=region)

    def reverse(self, lat, lon):
        self.reverse_calls.append((lat, lon))
        name = self.reverse_names.get(spatial_key(lat, lon))
        if name is None:
            return None
        return ReverseHit(name=name, admin_region_code="XX")


class DummyRouter:
    """Routes in a straight line through the given stops, splitting totals evenly across legs."""

    def __init__(self, total_distance_m: float = 140000.0, total_duration_s: float = 5400.0, found: bool = True) -> None:
        self.total_distance_m = total_distance_m
        self.total_duration_s = total_duration_s
        self.found = found
        self.calls: list[tuple[list, str]] = []

    def route(self, coordinates, profile=None):
        self.calls.append((list(coordinates), profile))
        if not self.found:
            return None
        leg_count = len(coordinates) - 1
        legs = tuple(
            RouteLeg(
                distance_meters=self.total_distance_m / leg_count,
                duration_seconds=self.total_duration_s / leg_count,
            )
            for _ in range(leg_count)
        )
        return RoutePath(
            coordinates=tuple((lon, lat) for lat, lon in coordinates),
            total_distance_meters=self.total_distance_m,
            total_duration_seconds=self.total_duration_s,
            legs=legs,
        )


def hourly_series(start: datetime, hours: int, base_temperature: float = 20.0) -> WeatherSeries:
    first = start.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)
    times = tuple(first + timedelta(hours=index) for index in range(hours))
    return WeatherSeries(
        times=times,
        temperature_c=tuple(base_temperature + index for index in range(hours)),
        precipitation_mm=tuple(0.1 * index for index in range(hours)),
        weather_code=tuple(index % 4 for index in range(hours)),
        wind_speed_kmh=tuple(10.0 + index for index in range(hours)),
    )


class DummyForecaster:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[float, float, datetime, datetime]] = []

    def fetch(self, lat, lon, start, end):
        self.calls.append((lat, lon, start, end))
        if self.error is not None:
            raise self.error
        hours = int((end - start).total_seconds() // 3600) + 2
        return hourly_series(start, hours, base_temperature=round(lat))


@pytest.fixture
def geocoder() -> DummyGeocoder:
    return DummyGeocoder()


@pytest.fixture
def router() -> DummyRouter:
    return DummyRouter()


@pytest.fixture
def forecaster() -> DummyForecaster:
    return DummyForecaster()


@pytest.fixture
def expander() -> DummyExpander:
    return DummyExpander("https://www.google.com/maps/dir/?api=1&origin=Milano&destination=Torino&travelmode=driving")

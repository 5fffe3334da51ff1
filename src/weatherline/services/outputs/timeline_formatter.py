"""Serializers for timeline outputs."""

from __future__ import annotations

import csv
import io
from typing import Optional

from ...models.domain import PointKind, Timeline, TimelinePoint, WeatherSample
from ...schemas.timeline import (
    LegModel,
    TimelinePointModel,
    TimelineResponse,
    TimelineSummaryModel,
    WeatherModel,
)
from ..weather.codes import describe_weather_code


def format_duration(seconds: float) -> str:
    seconds = round(seconds or 0)
    hours = seconds // 3600
    minutes = round((seconds % 3600) / 60)
    if hours <= 0:
        return f"{minutes} min"
    return f"{hours} h {minutes:02d} min"


def point_label(point: TimelinePoint, index: int, total: int) -> str:
    if point.kind is PointKind.SINGLE_PLACE:
        return "Luogo"
    if point.kind is PointKind.START:
        return "Partenza"
    if index == total - 1:
        return "Arrivo"
    if point.kind is PointKind.CHECKPOINT:
        return f"Checkpoint ~{round(point.cumulative_km)} km"
    return f"Arrivo tappa {index}"


def _weather_model(sample: Optional[WeatherSample], point: TimelinePoint) -> Optional[WeatherModel]:
    if sample is None:
        return None
    return WeatherModel(
        time=sample.time.astimezone(point.arrival.tzinfo),
        temperature_c=sample.temperature_c,
        precipitation_mm=sample.precipitation_mm,
        weather_code=sample.weather_code,
        description=describe_weather_code(sample.weather_code),
        wind_speed_kmh=sample.wind_speed_kmh,
    )


def point_to_model(point: TimelinePoint, index: int, total: int) -> TimelinePointModel:
    leg = None
    if point.leg is not None:
        leg = LegModel(
            distance_m=point.leg.distance_meters,
            duration_s=point.leg.duration_seconds,
            duration_text=format_duration(point.leg.duration_seconds),
        )
    return TimelinePointModel(
        kind=point.kind.value,
        label=point_label(point, index, total),
        name=point.place.display_name,
        region_code=point.place.admin_region_code,
        lat=point.place.lat,
        lon=point.place.lon,
        arrival=point.arrival,
        cumulative_km=point.cumulative_km,
        leg=leg,
        weather=_weather_model(point.weather, point),
    )


def timeline_to_response(timeline: Timeline) -> TimelineResponse:
    total = len(timeline.points)
    return TimelineResponse(
        kind=timeline.kind,
        resolved_url=timeline.resolved_url,
        profile=timeline.profile,
        summary=TimelineSummaryModel(
            distance_m=timeline.total_distance_meters,
            distance_km=round(timeline.total_distance_meters / 1000, 1),
            duration_s=timeline.total_duration_seconds,
            duration_text=format_duration(timeline.total_duration_seconds),
            legs=timeline.leg_count,
        ),
        points=[point_to_model(point, index, total) for index, point in enumerate(timeline.points)],
    )


def timeline_to_csv(timeline: Timeline) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "kind",
        "label",
        "name",
        "region_code",
        "lat",
        "lon",
        "arrival",
        "cumulative_km",
        "leg_distance_km",
        "leg_duration",
        "weather_time",
        "weather",
        "temperature_c",
        "precipitation_mm",
        "wind_speed_kmh",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    total = len(timeline.points)
    for index, point in enumerate(timeline.points):
        model = point_to_model(point, index, total)
        weather = model.weather
        writer.writerow(
            {
                "sequence": index,
                "kind": model.kind,
                "label": model.label,
                "name": model.name,
                "region_code": model.region_code or "",
                "lat": f"{model.lat:.5f}",
                "lon": f"{model.lon:.5f}",
                "arrival": model.arrival.isoformat(),
                "cumulative_km": f"{model.cumulative_km:.1f}",
                "leg_distance_km": f"{model.leg.distance_m / 1000:.1f}" if model.leg else "",
                "leg_duration": model.leg.duration_text if model.leg else "",
                "weather_time": weather.time.isoformat() if weather else "",
                "weather": weather.description or "" if weather else "",
                "temperature_c": "" if weather is None or weather.temperature_c is None else weather.temperature_c,
                "precipitation_mm": "" if weather is None or weather.precipitation_mm is None else weather.precipitation_mm,
                "wind_speed_kmh": "" if weather is None or weather.wind_speed_kmh is None else weather.wind_speed_kmh,
            }
        )
    return buffer.getvalue()

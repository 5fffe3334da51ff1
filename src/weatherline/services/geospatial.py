"""Geospatial helper functions."""

from __future__ import annotations

import bisect
import math
from typing import Sequence

EARTH_RADIUS_M = 6371000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def cumulative_distances(coordinates: Sequence[tuple[float, float]]) -> list[float]:
    """Prefix distances in meters along a (lon, lat) polyline, one entry per vertex."""

    if not coordinates:
        return []
    cumulative = [0.0]
    for (lon1, lat1), (lon2, lat2) in zip(coordinates, coordinates[1:]):
        cumulative.append(cumulative[-1] + haversine_m(lat1, lon1, lat2, lon2))
    return cumulative


def interpolate(p1: tuple[float, float], p2: tuple[float, float], fraction: float) -> tuple[float, float]:
    lon1, lat1 = p1
    lon2, lat2 = p2
    return lon1 + (lon2 - lon1) * fraction, lat1 + (lat2 - lat1) * fraction


def point_at_distance(
    coordinates: Sequence[tuple[float, float]],
    cumulative: Sequence[float],
    target: float,
) -> tuple[float, float]:
    """Return the (lon, lat) position found ``target`` meters along the polyline.

    The first vertex whose prefix distance reaches the target closes the
    segment to interpolate on. Targets beyond the geometry snap to the last
    vertex.
    """
    index = bisect.bisect_left(cumulative, target, lo=1)
    if index >= len(cumulative):
        return coordinates[-1]
    previous = index - 1
    segment = cumulative[index] - cumulative[previous]
    fraction = (target - cumulative[previous]) / segment if segment > 0 else 0.0
    return interpolate(coordinates[previous], coordinates[index], max(0.0, min(1.0, fraction)))


def parse_lat_lon(token: str) -> tuple[float, float] | None:
    """Read a ``"lat,lon"`` token, or None when it is not a coordinate pair in range."""

    parts = token.split(",")
    if len(parts) != 2:
        return None
    try:
        lat = float(parts[0].strip())
        lon = float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if abs(lat) > 90 or abs(lon) > 180:
        return None
    return lat, lon

"""Checkpoints at fixed distance intervals along a routed polyline."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Sequence

from ...models.domain import Place, PointKind, TimelinePoint
from ..geospatial import cumulative_distances, point_at_distance


def checkpoint_label(distance_m: float) -> str:
    return f"~km {math.floor(distance_m / 1000 + 0.5)}"


def sample_route(
    coordinates: Sequence[tuple[float, float]],
    total_distance_meters: float,
    total_duration_seconds: float,
    departure: datetime,
    step_km: float,
) -> tuple[TimelinePoint, ...]:
    """Place a checkpoint every ``step_km`` kilometers, strictly before the route's end.

    Arrival times assume a uniform speed over the whole route, so a checkpoint
    at distance d is reached at ``departure + d / total * duration``.
    """
    step = (step_km or 0) * 1000
    if step <= 0 or not coordinates or len(coordinates) < 2:
        return ()

    cumulative = cumulative_distances(coordinates)
    checkpoints: list[TimelinePoint] = []
    multiple = 1
    distance = step
    while distance < total_distance_meters:
        lon, lat = point_at_distance(coordinates, cumulative, distance)
        fraction = distance / total_distance_meters
        label = checkpoint_label(distance)
        checkpoints.append(
            TimelinePoint(
                kind=PointKind.CHECKPOINT,
                place=Place(raw_token=label, resolved_name=label, lat=lat, lon=lon, placeholder=True),
                arrival=departure + timedelta(seconds=fraction * total_duration_seconds),
                cumulative_km=distance / 1000,
            )
        )
        multiple += 1
        distance = step * multiple
    return tuple(checkpoints)

"""Arrival times for the explicit stops of a route."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from ...errors import RoutingFailure
from ...models.domain import Place, PointKind, RouteLeg, TimelinePoint


def schedule_stops(
    places: Sequence[Place],
    legs: Sequence[RouteLeg],
    departure: datetime,
) -> tuple[TimelinePoint, ...]:
    if not places:
        raise RoutingFailure("Cannot schedule a route without places.")
    if len(legs) != len(places) - 1:
        raise RoutingFailure(
            f"Route returned {len(legs)} legs for {len(places)} places; expected {len(places) - 1}."
        )

    clock = departure
    cumulative_km = 0.0
    points = [TimelinePoint(kind=PointKind.START, place=places[0], arrival=clock, cumulative_km=0.0)]
    for leg, destination in zip(legs, places[1:]):
        clock = clock + timedelta(seconds=leg.duration_seconds)
        cumulative_km += leg.distance_meters / 1000
        points.append(
            TimelinePoint(
                kind=PointKind.LEG_END,
                place=destination,
                arrival=clock,
                cumulative_km=cumulative_km,
                leg=leg,
            )
        )
    return tuple(points)

"""Timeline orchestration service.

One run takes a Google Maps link and a departure instant through
resolve -> parse -> geocode -> [route -> schedule + sample] -> name backfill ->
forecast fetch -> align + sort. Every stage returns new values; the two
spatial caches live only for the run that created them.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

import httpx

from ...config import settings
from ...errors import (
    ExpansionFailure,
    GeocodeFailure,
    InvalidRequestError,
    RoutingFailure,
    WeatherFetchFailure,
)
from ...models.domain import (
    ParsedPlace,
    Place,
    PointKind,
    Timeline,
    TimelinePoint,
    WeatherSeries,
)
from ...schemas.timeline import TimelineRequest, TimelineResponse
from ..geocoding.client import GeocodingClient, ReverseHit
from ..geospatial import parse_lat_lon
from ..links.expander import ShortLinkExpander
from ..links.parser import LinkParser, is_short_link, parse_link
from ..outputs.timeline_formatter import timeline_to_csv, timeline_to_response
from ..routing.osrm_client import OSRMClient, resolve_profile
from ..weather.aligner import pick_nearest
from ..weather.client import ForecastClient
from .cache import SpatialCache
from .sampler import sample_route
from .scheduler import schedule_stops

logger = logging.getLogger(__name__)


def ensure_aware(departure: datetime, tz_name: str | None = None) -> datetime:
    """Attach the configured default timezone to naive departures."""
    if departure.tzinfo is not None and departure.utcoffset() is not None:
        return departure
    return departure.replace(tzinfo=ZoneInfo(tz_name or settings.default_timezone))


def enrich_and_sort(
    points: Iterable[TimelinePoint],
    weather: SpatialCache[WeatherSeries],
) -> tuple[TimelinePoint, ...]:
    """Attach the forecast hour nearest to each arrival and order by arrival.

    The sort is stable: points with equal arrivals keep their merge order
    (scheduled stops before checkpoints).
    """
    enriched = [
        replace(point, weather=pick_nearest(weather.get(point.place.lat, point.place.lon), point.arrival))
        for point in points
    ]
    return tuple(sorted(enriched, key=lambda point: point.arrival))


class TimelinePipeline:
    """Runs the timeline stages against injectable collaborators."""

    def __init__(
        self,
        *,
        expander: ShortLinkExpander | None = None,
        geocoder: GeocodingClient | None = None,
        router: OSRMClient | None = None,
        forecaster: ForecastClient | None = None,
        parsers: Sequence[LinkParser] | None = None,
        padding_hours: float | None = None,
        max_parallel_requests: int | None = None,
        max_parallel_reverse_lookups: int | None = None,
        abort_on_weather_failure: bool | None = None,
        max_checkpoints: int | None = None,
    ) -> None:
        self.expander = expander or ShortLinkExpander()
        self.geocoder = geocoder or GeocodingClient()
        self.router = router or OSRMClient()
        self.forecaster = forecaster or ForecastClient()
        self.parsers = parsers
        self.padding = timedelta(
            hours=padding_hours if padding_hours is not None else settings.forecast_padding_hours
        )
        self.max_parallel_requests = max_parallel_requests or settings.max_parallel_requests
        self.max_parallel_reverse_lookups = max_parallel_reverse_lookups or settings.max_parallel_reverse_lookups
        self.abort_on_weather_failure = (
            abort_on_weather_failure if abort_on_weather_failure is not None else settings.abort_on_weather_failure
        )
        self.max_checkpoints = max_checkpoints or settings.max_checkpoints

    def run(
        self,
        url: str,
        departure: datetime,
        step_km: float = 0.0,
        mode: Optional[str] = None,
    ) -> Timeline:
        departure = ensure_aware(departure)
        resolved_url = self.resolve_url(url)
        parsed = parse_link(resolved_url, self.parsers)

        if isinstance(parsed, ParsedPlace):
            (place,) = self.geocode_places((parsed.place,))
            points: tuple[TimelinePoint, ...] = (
                TimelinePoint(kind=PointKind.SINGLE_PLACE, place=place, arrival=departure, cumulative_km=0.0),
            )
            kind, profile = "place", None
            total_distance = total_duration = 0.0
            leg_count = 0
        else:
            places = self.geocode_places(parsed.places)
            profile = resolve_profile(mode, parsed.mode)
            route = self.router.route([(place.lat, place.lon) for place in places], profile)
            if route is None:
                raise RoutingFailure("Route not found.")
            logger.info(
                f"Routed {len(places)} places with profile '{profile}': "
                f"{route.total_distance_meters / 1000:.1f} km, {route.total_duration_seconds / 60:.0f} min"
            )
            self.check_checkpoint_count(route.total_distance_meters, step_km)
            stops = schedule_stops(places, route.legs, departure)
            checkpoints = sample_route(
                route.coordinates,
                route.total_distance_meters,
                route.total_duration_seconds,
                departure,
                step_km,
            )
            points = stops + checkpoints
            kind = "directions"
            total_distance = route.total_distance_meters
            total_duration = route.total_duration_seconds
            leg_count = len(route.legs)

        names: SpatialCache[ReverseHit] = SpatialCache()
        weather: SpatialCache[WeatherSeries] = SpatialCache()
        points = self.backfill_names(points, names)
        self.fetch_weather(points, weather)
        points = enrich_and_sort(points, weather)

        return Timeline(
            kind=kind,
            resolved_url=resolved_url,
            profile=profile,
            total_distance_meters=total_distance,
            total_duration_seconds=total_duration,
            leg_count=leg_count,
            points=points,
        )

    def check_checkpoint_count(self, total_distance_meters: float, step_km: float) -> None:
        if not step_km or step_km <= 0:
            return
        expected = math.ceil(total_distance_meters / (step_km * 1000)) - 1
        if expected > self.max_checkpoints:
            raise InvalidRequestError(
                f"A {step_km:g} km spacing gives {expected} checkpoints on this route; "
                f"the limit is {self.max_checkpoints}. Choose a larger spacing."
            )

    def resolve_url(self, url: str) -> str:
        candidate = url.strip()
        if not is_short_link(candidate):
            return candidate
        expanded = self.expander.expand(candidate)
        if not expanded:
            raise ExpansionFailure(
                "This is a Google Maps short link that could not be expanded automatically. "
                "Open the link, choose \"Open in Google Maps\" and copy the full directions URL."
            )
        return expanded

    def resolve_place(self, place: Place) -> Place:
        coordinates = parse_lat_lon(place.raw_token)
        if coordinates is not None:
            lat, lon = coordinates
            return replace(place, lat=lat, lon=lon)
        hit = self.geocoder.geocode(place.raw_token)
        if hit is None:
            raise GeocodeFailure(place.raw_token)
        return replace(
            place,
            resolved_name=hit.name,
            admin_region_code=hit.admin_region_code,
            lat=hit.lat,
            lon=hit.lon,
        )

    def geocode_places(self, places: Sequence[Place]) -> tuple[Place, ...]:
        """Resolve every place, concurrently, keeping input order."""
        workers = min(self.max_parallel_requests, len(places))
        if workers <= 1:
            resolved = [self.resolve_place(place) for place in places]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                resolved = list(executor.map(self.resolve_place, places))
        for place in resolved:
            if not place.is_resolved:
                raise GeocodeFailure(place.raw_token)
        return tuple(resolved)

    def _reverse_lookup(self, lat: float, lon: float) -> Optional[ReverseHit]:
        try:
            return self.geocoder.reverse(lat, lon)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Reverse lookup failed for {lat:.3f},{lon:.3f}: {exc}")
            return None

    def backfill_names(
        self,
        points: Sequence[TimelinePoint],
        cache: SpatialCache[ReverseHit],
    ) -> tuple[TimelinePoint, ...]:
        """Replace missing or placeholder names with reverse-geocoded localities."""
        eligible = [point for point in points if point.place.needs_name]
        if not eligible:
            return tuple(points)
        fetched = cache.populate(
            ((point.place.lat, point.place.lon) for point in eligible),
            self._reverse_lookup,
            max_workers=self.max_parallel_reverse_lookups,
        )
        logger.info(f"Reverse lookups: {fetched} requests for {len(eligible)} unnamed points")

        backfilled = []
        for point in points:
            hit = cache.get(point.place.lat, point.place.lon) if point.place.needs_name else None
            if hit is None:
                backfilled.append(point)
                continue
            place = point.place
            if hit.name:
                place = replace(place, resolved_name=hit.name, placeholder=False)
            if hit.admin_region_code and not place.admin_region_code:
                place = replace(place, admin_region_code=hit.admin_region_code)
            backfilled.append(replace(point, place=place))
        return tuple(backfilled)

    def forecast_window(self, points: Sequence[TimelinePoint]) -> tuple[datetime, datetime]:
        arrivals = [point.arrival for point in points]
        return min(arrivals) - self.padding, max(arrivals) + self.padding

    def fetch_weather(
        self,
        points: Sequence[TimelinePoint],
        cache: SpatialCache[WeatherSeries],
    ) -> int:
        """Fetch one forecast per spatial key over the padded schedule window."""
        if not points:
            return 0
        start, end = self.forecast_window(points)

        def fetch(lat: float, lon: float) -> Optional[WeatherSeries]:
            try:
                return self.forecaster.fetch(lat, lon, start, end)
            except WeatherFetchFailure as exc:
                if self.abort_on_weather_failure:
                    raise
                logger.warning(f"Forecast unavailable for {lat:.3f},{lon:.3f}: {exc.message}")
                return None

        fetched = cache.populate(
            ((point.place.lat, point.place.lon) for point in points),
            fetch,
            max_workers=self.max_parallel_requests,
        )
        logger.info(f"Forecast requests: {fetched} for {len(points)} points")
        return fetched


def _pipeline() -> TimelinePipeline:
    return TimelinePipeline(
        expander=ShortLinkExpander(),
        geocoder=GeocodingClient(),
        router=OSRMClient(),
        forecaster=ForecastClient(),
    )


def compute_timeline(payload: TimelineRequest) -> Timeline:
    return _pipeline().run(
        payload.url,
        payload.departure,
        step_km=payload.sample_km,
        mode=payload.mode,
    )


def build_timeline(payload: TimelineRequest) -> TimelineResponse:
    return timeline_to_response(compute_timeline(payload))


def export_timeline_csv(payload: TimelineRequest) -> str:
    return timeline_to_csv(compute_timeline(payload))

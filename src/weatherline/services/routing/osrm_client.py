"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

import httpx

from ...config import settings
from ...errors import RoutingFailure
from ...models.domain import RouteLeg, RoutePath

logger = logging.getLogger(__name__)

# Google Maps travelmode values mapped to OSRM profiles
TRAVEL_MODE_PROFILES = {
    "driving": "driving",
    "car": "driving",
    "bicycling": "cycling",
    "cycling": "cycling",
    "bike": "cycling",
    "walking": "walking",
    "foot": "walking",
}


def resolve_profile(*modes: Optional[str]) -> str:
    """Return the OSRM profile for the first recognised travel mode, else the configured default."""
    for mode in modes:
        if not mode:
            continue
        profile = TRAVEL_MODE_PROFILES.get(mode.strip().lower())
        if profile:
            return profile
    return settings.osrm_profile


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    def _request(self, url: str, params: dict) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    if response.status_code == 400:
                        # OSRM reports NoRoute/InvalidQuery as 400 with a JSON body
                        try:
                            return response.json()
                        except ValueError:
                            response.raise_for_status()
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingFailure(
                            f"Routing service answered {exc.response.status_code}."
                        ) from exc
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request timed out after {self.max_retries} attempts: {exc}")
                        raise RoutingFailure("Routing service timed out.") from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.NetworkError, httpx.ProtocolError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise RoutingFailure(
                            f"Failed to connect to OSRM service at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                    time.sleep(wait_time)
                except ValueError as exc:
                    raise RoutingFailure("Routing service returned an unreadable response.") from exc
        finally:
            client.close()

    def route(self, coordinates: Sequence[tuple[float, float]], profile: str | None = None) -> Optional[RoutePath]:
        """Route through ``coordinates`` given as (lat, lon) tuples, in order.

        Returns None when OSRM finds no path; transport failures and other
        OSRM error codes raise :class:`RoutingFailure`.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{profile or self.profile}/{coordinate_str}"
        data = self._request(url, params)

        code = data.get("code")
        if code == "NoRoute" or (code == "Ok" and not data.get("routes")):
            logger.info(f"OSRM found no route through {len(coordinates)} coordinates")
            return None
        if code != "Ok":
            raise RoutingFailure(f"OSRM route request failed: {data.get('message') or code or 'unknown error'}")

        return parse_route(data["routes"][0])


def parse_route(route: dict) -> RoutePath:
    try:
        coordinates = tuple((float(lon), float(lat)) for lon, lat, *_ in route["geometry"]["coordinates"])
        legs = tuple(
            RouteLeg(distance_meters=float(leg["distance"]), duration_seconds=float(leg["duration"]))
            for leg in route.get("legs", [])
        )
        return RoutePath(
            coordinates=coordinates,
            total_distance_meters=float(route["distance"]),
            total_duration_seconds=float(route["duration"]),
            legs=legs,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RoutingFailure("Routing service returned a malformed route.") from exc


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check OSRM service health by routing between two nearby coordinates (Milan centre)."""
    base = (base_url or settings.osrm_base_url).rstrip("/")
    if not base:
        return False
    try:
        with httpx.Client(timeout=5.0, transport=transport) as client:
            url = f"{base}/route/v1/{settings.osrm_profile}/9.1900,45.4642;9.1859,45.4654"
            response = client.get(url, params={"overview": "false"})
            response.raise_for_status()
            return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False

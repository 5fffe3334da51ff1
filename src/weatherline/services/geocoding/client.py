"""Forward and reverse geocoding against Open-Meteo and Nominatim."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import settings
from .regions import code_from_iso3166, province_code

logger = logging.getLogger(__name__)

# address keys tried in order when naming a reverse-geocoded point
LOCALITY_KEYS = ("village", "town", "city", "hamlet", "suburb", "municipality")


@dataclass(frozen=True, slots=True)
class GeocodeHit:
    name: str
    lat: float
    lon: float
    admin_region_code: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReverseHit:
    name: Optional[str]
    admin_region_code: Optional[str] = None


class GeocodingClient:
    """Open-Meteo geocoding with a Nominatim fallback, plus Nominatim reverse lookups.

    Provider errors are logged and treated as misses; callers decide whether a
    miss is fatal.
    """

    def __init__(
        self,
        geocoding_url: str | None = None,
        nominatim_url: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.geocoding_url = geocoding_url or settings.geocoding_url
        self.nominatim_url = (nominatim_url or settings.nominatim_url).rstrip("/")
        self.language = language or settings.language
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": settings.user_agent, "Accept-Language": self.language},
            transport=self._transport,
        )

    def _get_json(self, client: httpx.Client, url: str, params: dict):
        response = client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    def _search_open_meteo(self, client: httpx.Client, name: str) -> Optional[GeocodeHit]:
        params = {"name": name, "count": "1", "language": self.language, "format": "json"}
        data = self._get_json(client, self.geocoding_url, params)
        results = data.get("results") or []
        if not results:
            return None
        hit = results[0]
        return GeocodeHit(
            name=hit["name"],
            lat=float(hit["latitude"]),
            lon=float(hit["longitude"]),
            admin_region_code=province_code(hit.get("admin2")),
        )

    def _search_nominatim(self, client: httpx.Client, name: str) -> Optional[GeocodeHit]:
        params = {"format": "jsonv2", "limit": "1", "q": name, "addressdetails": "1"}
        data = self._get_json(client, f"{self.nominatim_url}/search", params)
        if not data:
            return None
        hit = data[0]
        address = hit.get("address") or {}
        return GeocodeHit(
            name=hit.get("display_name") or name,
            lat=float(hit["lat"]),
            lon=float(hit["lon"]),
            admin_region_code=_region_from_address(address),
        )

    def geocode(self, name: str) -> Optional[GeocodeHit]:
        with self._get_client() as client:
            for provider in (self._search_open_meteo, self._search_nominatim):
                try:
                    hit = provider(client, name)
                except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
                    logger.warning(f"Geocoding provider {provider.__name__} failed for '{name}': {exc}")
                    continue
                if hit is not None:
                    logger.debug(f"Geocoded '{name}' to {hit.lat}, {hit.lon} via {provider.__name__}")
                    return hit
        logger.info(f"No geocoding result for '{name}'")
        return None

    def reverse(self, lat: float, lon: float) -> Optional[ReverseHit]:
        params = {
            "format": "jsonv2",
            "lat": str(lat),
            "lon": str(lon),
            "zoom": "10",
            "addressdetails": "1",
        }
        with self._get_client() as client:
            try:
                data = self._get_json(client, f"{self.nominatim_url}/reverse", params)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(f"Reverse geocoding failed for {lat:.3f},{lon:.3f}: {exc}")
                return None
        if not isinstance(data, dict) or "error" in data:
            return None
        address = data.get("address") or {}
        name = next((address[key] for key in LOCALITY_KEYS if address.get(key)), None)
        region = _region_from_address(address)
        if name is None and region is None:
            return None
        return ReverseHit(name=name, admin_region_code=region)


def _region_from_address(address: dict) -> Optional[str]:
    return code_from_iso3166(address.get("ISO3166-2-lvl6")) or province_code(
        address.get("county") or address.get("province")
    )

"""Open-Meteo hourly forecast client."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from ...config import settings
from ...errors import WeatherFetchFailure
from ...models.domain import WeatherSeries

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = ("temperature_2m", "precipitation", "weathercode", "wind_speed_10m")


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def parse_forecast(payload: dict) -> WeatherSeries:
    """Build a series from an Open-Meteo response.

    Hourly times come back as wall-clock strings in the requested timezone;
    ``utc_offset_seconds`` turns them into aware datetimes.
    """
    hourly = payload.get("hourly")
    if not isinstance(hourly, dict):
        raise WeatherFetchFailure("Forecast response has no hourly data.")
    offset = timezone(timedelta(seconds=int(payload.get("utc_offset_seconds") or 0)))
    try:
        times = tuple(datetime.fromisoformat(value).replace(tzinfo=offset) for value in hourly.get("time", []))
        return WeatherSeries(
            times=times,
            temperature_c=tuple(_optional_float(v) for v in hourly.get("temperature_2m", [])),
            precipitation_mm=tuple(_optional_float(v) for v in hourly.get("precipitation", [])),
            weather_code=tuple(_optional_int(v) for v in hourly.get("weathercode", [])),
            wind_speed_kmh=tuple(_optional_float(v) for v in hourly.get("wind_speed_10m", [])),
        )
    except (TypeError, ValueError) as exc:
        raise WeatherFetchFailure(f"Malformed forecast response: {exc}") from exc


class ForecastClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.forecast_url
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    def fetch(self, lat: float, lon: float, start: datetime, end: datetime) -> WeatherSeries:
        """Hourly forecast covering the calendar days from ``start`` to ``end``.

        Callers pass the already padded window. Times are requested in GMT so a
        daylight-saving change inside the window cannot repeat an hour.
        """
        params = {
            "latitude": str(lat),
            "longitude": str(lon),
            "hourly": ",".join(HOURLY_VARIABLES),
            "start_date": start.astimezone(timezone.utc).date().isoformat(),
            "end_date": end.astimezone(timezone.utc).date().isoformat(),
            "timezone": "GMT",
        }
        with self._get_client() as client:
            try:
                response = client.get(self.base_url, params=params)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as exc:
                logger.warning(f"Forecast request failed for {lat:.3f},{lon:.3f}: {exc}")
                raise WeatherFetchFailure("Weather request failed.") from exc
            except ValueError as exc:
                raise WeatherFetchFailure("Weather service returned an unreadable response.") from exc
        return parse_forecast(payload)


def check_health(transport: httpx.BaseTransport | None = None) -> bool:
    """Fetch one day of forecast for Milan and report whether it parsed."""
    now = datetime.now(timezone.utc)
    try:
        series = ForecastClient(timeout=5.0, transport=transport).fetch(45.4642, 9.19, now, now)
    except WeatherFetchFailure:
        return False
    return len(series) > 0

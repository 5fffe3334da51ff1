from datetime import datetime, timedelta, timezone

import httpx
import pytest

from weatherline.errors import WeatherFetchFailure
from weatherline.services.weather.client import ForecastClient, parse_forecast
from weatherline.services.weather.codes import describe_weather_code

ROME_SUMMER = timezone(timedelta(hours=2))

PAYLOAD = {
    "utc_offset_seconds": 0,
    "hourly": {
        "time": ["2025-06-01T06:00", "2025-06-01T07:00", "2025-06-01T08:00"],
        "temperature_2m": [18.5, None, 21.0],
        "precipitation": [0.0, 0.4, 1.2],
        "weathercode": [1, 61, 63],
        "wind_speed_10m": [5.0, 7.5, 9.0],
    },
}


def _client(handler) -> ForecastClient:
    return ForecastClient(base_url="http://forecast.test/v1/forecast", transport=httpx.MockTransport(handler))


def test_fetch_requests_utc_dates_for_window():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.params)
        return httpx.Response(200, json=PAYLOAD)

    start = datetime(2025, 6, 1, 0, 30, tzinfo=ROME_SUMMER)
    end = datetime(2025, 6, 2, 1, 0, tzinfo=ROME_SUMMER)
    _client(handler).fetch(45.4642, 9.19, start, end)

    params = seen[0]
    assert params["latitude"] == "45.4642"
    assert params["start_date"] == "2025-05-31"
    assert params["end_date"] == "2025-06-01"
    assert params["timezone"] == "GMT"
    assert params["hourly"].split(",") == ["temperature_2m", "precipitation", "weathercode", "wind_speed_10m"]


def test_fetch_parses_series():
    series = _client(lambda request: httpx.Response(200, json=PAYLOAD)).fetch(
        45.0, 9.0, datetime(2025, 6, 1, tzinfo=timezone.utc), datetime(2025, 6, 1, tzinfo=timezone.utc)
    )

    assert len(series) == 3
    assert series.times[0] == datetime(2025, 6, 1, 6, 0, tzinfo=timezone.utc)
    assert series.temperature_c[1] is None
    assert series.sample(2).weather_code == 63


def test_parse_forecast_applies_utc_offset():
    payload = {**PAYLOAD, "utc_offset_seconds": 7200}

    series = parse_forecast(payload)

    assert series.times[0] == datetime(2025, 6, 1, 4, 0, tzinfo=timezone.utc)


def test_parse_forecast_rejects_mismatched_lengths():
    payload = {"hourly": {**PAYLOAD["hourly"], "precipitation": [0.0]}}

    with pytest.raises(WeatherFetchFailure):
        parse_forecast(payload)


def test_parse_forecast_requires_hourly_block():
    with pytest.raises(WeatherFetchFailure):
        parse_forecast({"error": True, "reason": "Latitude must be in range"})


def test_http_errors_raise_weather_failure():
    client = _client(lambda request: httpx.Response(500, text="oops"))

    with pytest.raises(WeatherFetchFailure):
        client.fetch(45.0, 9.0, datetime(2025, 6, 1, tzinfo=timezone.utc), datetime(2025, 6, 1, tzinfo=timezone.utc))


def test_unreadable_body_raises_weather_failure():
    client = _client(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(WeatherFetchFailure):
        client.fetch(45.0, 9.0, datetime(2025, 6, 1, tzinfo=timezone.utc), datetime(2025, 6, 1, tzinfo=timezone.utc))


def test_describe_weather_code():
    assert describe_weather_code(0) == "Sereno"
    assert describe_weather_code(63) == "Pioggia"
    assert describe_weather_code(42) == "Codice meteo 42"
    assert describe_weather_code(None) is None

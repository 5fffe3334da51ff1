from datetime import datetime, timedelta, timezone

import pytest

from weatherline.models.domain import WeatherSeries
from weatherline.services.weather.aligner import pick_nearest

T0 = datetime(2025, 6, 1, 6, 0, tzinfo=timezone.utc)
T1 = T0 + timedelta(hours=1)
T2 = T0 + timedelta(hours=2)


def _series(times) -> WeatherSeries:
    count = len(times)
    return WeatherSeries(
        times=tuple(times),
        temperature_c=tuple(float(i) for i in range(count)),
        precipitation_mm=tuple(0.0 for _ in range(count)),
        weather_code=tuple(i for i in range(count)),
        wind_speed_kmh=tuple(5.0 for _ in range(count)),
    )


def test_exact_match_returns_that_sample():
    sample = pick_nearest(_series([T0, T1, T2]), T1)

    assert sample.time == T1
    assert sample.temperature_c == 1.0


def test_nearest_sample_is_selected():
    assert pick_nearest(_series([T0, T1, T2]), T1 + timedelta(minutes=40)).time == T2
    assert pick_nearest(_series([T0, T1, T2]), T1 + timedelta(minutes=10)).time == T1


def test_tie_resolves_to_earliest_sample():
    assert pick_nearest(_series([T0, T1, T2]), T0 + timedelta(minutes=30)).time == T0


def test_targets_outside_range_get_boundary_samples():
    series = _series([T0, T1, T2])

    assert pick_nearest(series, T0 - timedelta(days=2)).time == T0
    assert pick_nearest(series, T2 + timedelta(days=2)).time == T2


def test_target_in_other_timezone_is_compared_as_instant():
    rome = timezone(timedelta(hours=2))

    assert pick_nearest(_series([T0, T1, T2]), T1.astimezone(rome)).time == T1


def test_empty_or_missing_series_returns_none():
    assert pick_nearest(_series([]), T0) is None
    assert pick_nearest(None, T0) is None


def test_series_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        WeatherSeries(
            times=(T0, T1),
            temperature_c=(1.0,),
            precipitation_mm=(0.0, 0.0),
            weather_code=(0, 0),
            wind_speed_kmh=(1.0, 1.0),
        )


def test_series_rejects_non_increasing_times():
    with pytest.raises(ValueError):
        _series([T0, T1, T1])

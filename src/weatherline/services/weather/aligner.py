"""Pick the forecast hour matching an arrival time."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...models.domain import WeatherSample, WeatherSeries


def pick_nearest(series: Optional[WeatherSeries], target: datetime) -> Optional[WeatherSample]:
    """Return the sample whose timestamp is closest to ``target``.

    Ties keep the earliest sample. Targets outside the series get the nearest
    boundary hour; forecasts are fetched with a padded window so this is rare.
    """
    if series is None or len(series) == 0:
        return None
    best = 0
    best_diff = None
    for index, timestamp in enumerate(series.times):
        diff = abs((timestamp - target).total_seconds())
        if best_diff is None or diff < best_diff:
            best = index
            best_diff = diff
    return series.sample(best)

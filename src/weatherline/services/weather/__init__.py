"""Forecast fetching and alignment."""

from .aligner import pick_nearest
from .client import ForecastClient
from .codes import describe_weather_code

__all__ = ["ForecastClient", "pick_nearest", "describe_weather_code"]

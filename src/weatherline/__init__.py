"""Weather forecast timeline along a Google Maps route."""

__version__ = "0.1.0"

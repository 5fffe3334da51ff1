"""Failures that abort a timeline run.

Each error carries a stable ``code`` so the API layer can report the failing
stage distinctly, and a message that is shown to the user as-is.
"""

from __future__ import annotations


class TimelineError(Exception):
    code = "timeline_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class ParseError(TimelineError):
    """The link is not a recognised Google Maps directions or place link."""

    code = "parse_error"


class MalformedLinkError(ParseError):
    """The link has a recognised shape but lacks the parts needed to use it."""

    code = "malformed_link"


class ExpansionFailure(TimelineError):
    """A short link could not be resolved to its canonical URL."""

    code = "expansion_failure"


class GeocodeFailure(TimelineError):
    code = "geocode_failure"

    def __init__(self, token: str) -> None:
        super().__init__(f"Geocoding failed for: {token}")
        self.token = token


class RoutingFailure(TimelineError):
    code = "routing_failure"


class WeatherFetchFailure(TimelineError):
    code = "weather_fetch_failure"


class InvalidRequestError(TimelineError):
    """The request is well formed but asks for more work than a run allows."""

    code = "invalid_request"

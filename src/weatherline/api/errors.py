"""Translate pipeline failures into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import (
    ExpansionFailure,
    GeocodeFailure,
    InvalidRequestError,
    ParseError,
    RoutingFailure,
    TimelineError,
    WeatherFetchFailure,
)

STATUS_BY_ERROR: tuple[tuple[type[TimelineError], int], ...] = (
    (ParseError, status.HTTP_400_BAD_REQUEST),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (ExpansionFailure, 422),
    (GeocodeFailure, status.HTTP_404_NOT_FOUND),
    (RoutingFailure, status.HTTP_502_BAD_GATEWAY),
    (WeatherFetchFailure, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: TimelineError) -> HTTPException:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.to_detail())
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.to_detail())

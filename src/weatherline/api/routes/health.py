"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


def _get_forecast_health_check():
    from ...services.weather.client import check_health as forecast_health_check
    return forecast_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        status_flag = _get_osrm_health_check()()
        return {"service": "osrm", "healthy": status_flag}
    except Exception as e:
        return {"service": "osrm", "healthy": False, "error": str(e)}


@router.get("/health/forecast", status_code=status.HTTP_200_OK)
def health_forecast() -> dict:
    """Check that the forecast provider answers with hourly data."""
    try:
        status_flag = _get_forecast_health_check()()
        return {"service": "forecast", "healthy": status_flag}
    except Exception as e:
        return {"service": "forecast", "healthy": False, "error": str(e)}

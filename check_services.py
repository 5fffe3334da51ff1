#!/usr/bin/env python3
"""Script to verify connectivity to the routing, geocoding and forecast services."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from weatherline.config import settings
from weatherline.errors import RoutingFailure, WeatherFetchFailure
from weatherline.services.geocoding.client import GeocodingClient
from weatherline.services.routing.osrm_client import OSRMClient, check_health
from weatherline.services.weather.client import ForecastClient


def main():
    print("=" * 60)
    print("Upstream Services Check")
    print("=" * 60)
    print()

    print("1. Checking OSRM...")
    print(f"   OSRM Base URL: {settings.osrm_base_url} (profile: {settings.osrm_profile})")
    if not check_health():
        print("   [ERROR] OSRM service is not responding")
        return 1
    print("   [OK] OSRM service is healthy and accessible!")
    print()

    print("2. Geocoding 'Milano' and 'Torino'...")
    geocoder = GeocodingClient()
    milano = geocoder.geocode("Milano")
    torino = geocoder.geocode("Torino")
    if milano is None or torino is None:
        print("   [ERROR] Geocoding returned no result")
        return 1
    print(f"   [OK] Milano -> {milano.lat:.4f}, {milano.lon:.4f} ({milano.admin_region_code})")
    print(f"   [OK] Torino -> {torino.lat:.4f}, {torino.lon:.4f} ({torino.admin_region_code})")
    print()

    print("3. Routing Milano -> Torino...")
    try:
        route = OSRMClient().route([(milano.lat, milano.lon), (torino.lat, torino.lon)])
    except RoutingFailure as e:
        print(f"   [ERROR] {e.message}")
        return 1
    if route is None:
        print("   [ERROR] No route found")
        return 1
    print(f"   [OK] {route.total_distance_meters / 1000:.1f} km, {route.total_duration_seconds / 60:.0f} min, "
          f"{len(route.coordinates)} geometry points")
    print()

    print("4. Fetching forecast for Milano...")
    now = datetime.now(timezone.utc)
    try:
        series = ForecastClient().fetch(milano.lat, milano.lon, now - timedelta(hours=12), now + timedelta(hours=12))
    except WeatherFetchFailure as e:
        print(f"   [ERROR] {e.message}")
        return 1
    print(f"   [OK] {len(series)} hourly samples from {series.times[0].isoformat()}")
    print()

    print("=" * 60)
    print("[SUCCESS] All upstream services are reachable!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())

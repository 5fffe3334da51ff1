"""Per-run lookup cache keyed by rounded coordinates."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")

# 3 decimals is roughly 110 m of latitude
KEY_PRECISION = 3

logger = logging.getLogger(__name__)


def spatial_key(lat: float, lon: float) -> str:
    return f"{lat:.{KEY_PRECISION}f},{lon:.{KEY_PRECISION}f}"


class SpatialCache(Generic[T]):
    """Maps spatial keys to lookup results for the lifetime of one pipeline run.

    ``None`` results are stored like any other, so a lookup that failed for a
    key is not repeated for nearby points.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Optional[T]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, lat: float, lon: float) -> Optional[T]:
        return self._entries.get(spatial_key(lat, lon))

    def populate(
        self,
        coordinates: Iterable[tuple[float, float]],
        fetch: Callable[[float, float], Optional[T]],
        *,
        max_workers: int = 1,
    ) -> int:
        """Fetch every key not cached yet, once, and return how many fetches ran.

        Keys are deduplicated before any request is issued; the first
        coordinates seen for a key are the ones sent upstream.
        """
        pending: dict[str, tuple[float, float]] = {}
        for lat, lon in coordinates:
            key = spatial_key(lat, lon)
            if key in self._entries or key in pending:
                continue
            pending[key] = (lat, lon)
        if not pending:
            return 0

        if max_workers <= 1 or len(pending) == 1:
            results = [fetch(lat, lon) for lat, lon in pending.values()]
        else:
            with ThreadPoolExecutor(max_workers=min(max_workers, len(pending))) as executor:
                results = list(executor.map(lambda coords: fetch(*coords), pending.values()))

        for key, result in zip(pending, results):
            self._entries[key] = result
        logger.debug(f"Spatial cache populated {len(pending)} keys ({len(self._entries)} total)")
        return len(pending)

"""
Cached Google opening hours, served to the map keyed by restaurant id.

An offline job writes the hours cache file keyed by Google place id:

    {"ChIJ...": {"weekdayText": ["Monday: 7:00 AM – 2:00 PM", ...],
                 "periods": [...], "cachedAt": "2025-01-01T00:00:00Z"}}

At request time the entries are re-keyed by our restaurant ids. Any failure
along the way yields an empty map rather than an error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from viraleats.services.stores import RestaurantStore

logger = logging.getLogger(__name__)


class HoursCache:
    """In-memory view of the hours cache file. Missing or unreadable file → empty."""

    def __init__(self, entries: Optional[dict[str, Any]] = None) -> None:
        self._entries = entries or {}

    @classmethod
    def from_file(cls, path: str | Path) -> "HoursCache":
        path = Path(path)
        if not path.exists():
            logger.debug("Hours cache %s not found", path)
            return cls()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read hours cache %s: %s", path, exc)
            return cls()
        if not isinstance(raw, dict):
            logger.warning("Hours cache %s is not a JSON object", path)
            return cls()
        return cls(raw)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, google_place_id: str) -> Any:
        return self._entries.get(google_place_id)


async def hours_by_restaurant(store: RestaurantStore, hours: HoursCache) -> dict[str, Any]:
    """Map restaurant id → cached hours entry for every restaurant with a place id."""
    if not len(hours):
        return {}
    try:
        rows = await store.fetch_all(columns=["id", "google_place_id"])
    except Exception as exc:
        logger.error("Could not load place ids for hours mapping: %s", exc)
        return {}

    mapped: dict[str, Any] = {}
    for row in rows:
        place_id = row.get("google_place_id")
        entry = hours.get(place_id) if place_id else None
        if entry:
            mapped[str(row["id"])] = entry
    logger.info("Mapped %d cached hours entries by restaurant id", len(mapped))
    return mapped

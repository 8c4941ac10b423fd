"""
Google Places client used by the seeding job.

Legacy Places Web Service (Text Search + Details). requests is blocking, so
every call runs in a worker thread via asyncio.to_thread. Upstream failures
(transport errors, non-OK statuses) are logged and degrade to [] / None so
one bad query never stops a seeding run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

import requests

from viraleats.config import settings

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"

# Only what the mapper reads; reviews are expensive and never requested
DETAILS_FIELDS = ",".join([
    "name",
    "formatted_address",
    "geometry",
    "rating",
    "user_ratings_total",
    "price_level",
    "business_status",
    "photos",
    "opening_hours",
])

MIN_RATING = 4.0
MIN_REVIEWS = 500

# Statuses that mean "stop asking for this query", not "no results"
_FAILURE_STATUSES = ("REQUEST_DENIED", "OVER_QUERY_LIMIT", "INVALID_REQUEST")


class PlacesProvider(Protocol):
    async def text_search(self, query: str) -> list[dict[str, Any]]: ...

    async def place_details(self, place_id: str) -> Optional[dict[str, Any]]: ...

    def photo_url(self, photo_reference: str) -> str: ...


def is_popular(place: dict[str, Any]) -> bool:
    """Seeding threshold: rating above 4.0 and more than 500 reviews."""
    return (
        (place.get("rating") or 0) > MIN_RATING
        and (place.get("user_ratings_total") or 0) > MIN_REVIEWS
    )


class GooglePlacesClient:
    """Thin wrapper around the Places endpoints; never raises."""

    def __init__(
        self,
        api_key: str,
        timeout: float = settings.places_request_timeout_seconds,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._session = session or requests.Session()

    def _get(self, url: str, params: dict[str, Any]) -> Optional[dict[str, Any]]:
        try:
            response = self._session.get(
                url, params={**params, "key": self._api_key}, timeout=self._timeout
            )
        except requests.RequestException as exc:
            logger.error("Google Places request failed (%s): %s", url, exc)
            return None
        if response.status_code != 200:
            logger.error("Google Places HTTP %d from %s", response.status_code, url)
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Google Places returned invalid JSON (%s): %s", url, exc)
            return None

    async def text_search(self, query: str) -> list[dict[str, Any]]:
        """Popular places for a free-text query."""
        data = await asyncio.to_thread(self._get, TEXT_SEARCH_URL, {"query": query})
        if data is None:
            return []

        status = data.get("status")
        if status in _FAILURE_STATUSES:
            logger.error(
                "Google Places %s for %r: %s",
                status, query, data.get("error_message") or "no error message",
            )
            return []
        if status == "ZERO_RESULTS":
            logger.info("Google Places: no results for %r", query)
            return []
        if status != "OK":
            logger.error("Google Places unexpected status %r for %r", status, query)
            return []

        results = data.get("results") or []
        popular = [p for p in results if is_popular(p)]
        logger.info(
            "Google Places %r: %d/%d pass (rating > %.1f, reviews > %d)",
            query, len(popular), len(results), MIN_RATING, MIN_REVIEWS,
        )
        return popular

    async def place_details(self, place_id: str) -> Optional[dict[str, Any]]:
        data = await asyncio.to_thread(
            self._get, DETAILS_URL, {"place_id": place_id, "fields": DETAILS_FIELDS}
        )
        if data is None:
            return None
        if data.get("status") == "OK" and data.get("result"):
            return data["result"]
        logger.warning(
            "Place details %s: status %s (%s)",
            place_id, data.get("status"), data.get("error_message") or "unknown error",
        )
        return None

    def photo_url(self, photo_reference: str) -> str:
        return (
            f"{PHOTO_URL}?maxwidth=800&photoreference={photo_reference}"
            f"&key={self._api_key}"
        )

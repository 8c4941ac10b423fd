"""
Restaurant list pipeline — candidate fetch, filtering, ordering, projection.

Pipeline:
  1. Fetch candidates ordered by trending_score (limit × multiplier when halal)
  2. Trending-only: flagged rows by score; none flagged → top N by score
     Otherwise with a location: annotate distance, apply radius, sort by distance
  3. Filters in fixed order: halal → category → price → open-now → search
  4. Project to RestaurantOut and cut to the requested limit

filter_restaurants is pure so the same inputs always give the same ordered
output; list_restaurants only adds the fetch.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from viraleats.config import settings
from viraleats.schemas.restaurant import RestaurantFilters, RestaurantOut
from viraleats.services.halal_classifier import HalalClassifier, HalalPolicy
from viraleats.services.projection import DEFAULT_MUST_TRY_DISH, to_public
from viraleats.services.stores import RestaurantStore
from viraleats.utils.geo import haversine_km
from viraleats.utils.hours import is_open_at

logger = logging.getLogger(__name__)

_SEARCH_FIELDS = ("name", "category", "must_try_dish")

_default_classifier = HalalClassifier()


def candidate_limit(filters: RestaurantFilters, multiplier: int = settings.halal_limit_multiplier) -> int:
    """
    Halal filtering happens after the fetch and discards a lot, so halal-only
    requests pull a larger pool to still fill the page.
    """
    if filters.halal:
        return filters.limit * max(1, multiplier)
    return filters.limit


def _score(row: dict[str, Any]) -> float:
    return float(row.get("trending_score") or 0.0)


def _select_trending(rows: list[dict[str, Any]], fallback_size: int) -> list[dict[str, Any]]:
    flagged = [r for r in rows if r.get("is_trending")]
    if flagged:
        return sorted(flagged, key=_score, reverse=True)
    return sorted(rows, key=_score, reverse=True)[:fallback_size]


def _matches_search(row: dict[str, Any], query: str) -> bool:
    needle = query.lower()
    for field in _SEARCH_FIELDS:
        value = row.get(field)
        if field == "must_try_dish" and not value:
            value = DEFAULT_MUST_TRY_DISH
        if value and needle in str(value).lower():
            return True
    return False


def filter_restaurants(
    rows: list[dict[str, Any]],
    filters: RestaurantFilters,
    now: datetime,
    classifier: HalalClassifier = _default_classifier,
    halal_policy: HalalPolicy = "exclusion",
    unlimited_radius_km: float = settings.unlimited_radius_km,
    trending_fallback_size: int = settings.trending_fallback_size,
) -> list[RestaurantOut]:
    """Apply the list pipeline (steps 2–4) to already fetched rows."""
    distances: dict[int, float] = {}

    if filters.trending:
        candidates = _select_trending(rows, trending_fallback_size)
    elif filters.has_location:
        candidates = []
        for row in rows:
            if row.get("lat") is None or row.get("lng") is None:
                continue
            distance = haversine_km(filters.lat, filters.lng, float(row["lat"]), float(row["lng"]))
            if (
                filters.radius is not None
                and filters.radius < unlimited_radius_km
                and distance > filters.radius
            ):
                continue
            distances[id(row)] = distance
            candidates.append(row)
        candidates.sort(key=lambda r: distances[id(r)])
    else:
        candidates = list(rows)

    if filters.halal:
        candidates = [r for r in candidates if classifier.matches(r, halal_policy)]
    if filters.category:
        candidates = [r for r in candidates if r.get("category") == filters.category]
    if filters.price_range:
        candidates = [
            r for r in candidates
            if (r.get("price_range") or "$$") == filters.price_range
        ]
    if filters.open_now:
        candidates = [r for r in candidates if is_open_at(r.get("operating_hours"), now)]
    if filters.search_query and filters.search_query.strip():
        query = filters.search_query.strip()
        candidates = [r for r in candidates if _matches_search(r, query)]

    return [
        to_public(row, distance=distances.get(id(row)))
        for row in candidates[: filters.limit]
    ]


async def list_restaurants(
    store: RestaurantStore,
    filters: RestaurantFilters,
    now: datetime,
    classifier: Optional[HalalClassifier] = None,
) -> list[RestaurantOut]:
    """
    Fetch candidates and run the pipeline. Store errors propagate — the
    caller turns them into a single 500, never a partial list.
    """
    rows = await store.fetch_all(order_by="trending_score", limit=candidate_limit(filters))
    results = filter_restaurants(
        rows,
        filters,
        now,
        classifier=classifier or _default_classifier,
        halal_policy=settings.halal_filter_policy,
    )
    logger.debug(
        "Restaurant list: %d candidates → %d results (filters=%s)",
        len(rows), len(results), filters.model_dump(exclude_defaults=True),
    )
    return results

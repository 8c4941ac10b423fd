"""
Review feed for the restaurant detail page.

Top reviews per restaurant (rating DESC, then newest first) are kept in a
process-local TTLCache for 24 hours under `reviews:<restaurant id>`.
No reviews is a normal answer and is cached like any other.
"""

from __future__ import annotations

import logging

from cachetools import TTLCache

from viraleats.config import settings
from viraleats.schemas.review import ReviewOut
from viraleats.services.stores import ReviewStore

logger = logging.getLogger(__name__)

_cache_reviews: TTLCache = TTLCache(
    maxsize=settings.reviews_cache_max_entries, ttl=settings.reviews_cache_ttl_seconds
)


def _reviews_key(restaurant_id: str) -> str:
    return f"reviews:{restaurant_id}"


async def list_reviews(
    reviews: ReviewStore,
    restaurant_id: str,
    limit: int = settings.reviews_per_restaurant,
) -> tuple[list[ReviewOut], str]:
    """Returns (reviews, source) where source is 'cache' or 'database'. Store errors propagate."""
    key = _reviews_key(restaurant_id)
    cached = _cache_reviews.get(key)
    if cached is not None:
        logger.debug("Reviews cache HIT (%s)", key)
        return cached, "cache"

    rows = await reviews.fetch_for_restaurant(restaurant_id, limit)
    result = [ReviewOut.model_validate(row) for row in rows]
    _cache_reviews[key] = result
    return result, "database"


def clear_reviews_cache() -> None:
    _cache_reviews.clear()

"""
Trending service — the viral-score batch job and the trending-dish feed.

Batch pipeline (triggered by an external scheduler via /cron/update-viral-score):
  1. Fetch id, rating, mention count, halal flag for every restaurant
  2. Score each one (viral_score.calculate_viral_score)
  3. Stable sort by score DESC — ties keep fetch order
  4. Mark the top max(1, ceil(N × P)) as trending
  5. Persist score + flag per record; one failure never stops the rest
  6. For the top K records, create a trending dish if none exists yet

No overlap protection: two concurrent runs both write, last write wins.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from cachetools import TTLCache

from viraleats.config import settings
from viraleats.schemas.trending import TrendingDishOut, TrendingUpdateStats
from viraleats.services.stores import RestaurantStore, TrendingDishStore
from viraleats.services.viral_score import calculate_viral_score
from viraleats.utils.dishes import generate_dish_name

logger = logging.getLogger(__name__)

_SCORE_COLUMNS = ["id", "name", "google_rating", "viral_mentions", "is_halal", "photos"]

# Feed cache, one entry per requested feed size
_cache_trending_dishes: TTLCache = TTLCache(
    maxsize=16, ttl=settings.trending_dishes_cache_ttl_seconds
)


def _feed_key(limit: int) -> str:
    return f"trending-dishes:{limit}"


def trending_count(total: int, percentage: float) -> int:
    """How many records get the trending flag; at least one when any exist."""
    if total <= 0:
        return 0
    # round() first so 0.15 × 20 does not ceil to 4 on float noise
    return min(total, max(1, math.ceil(round(total * percentage, 9))))


def recommend_percentage(rating: float | None) -> int:
    """Rating-derived recommend %, clamped to 75–95 (80 when unrated)."""
    base = round(rating * 20) if rating else 80
    return min(95, max(75, base))


def build_trending_dish(row: dict[str, Any], viral_score: float) -> dict[str, Any]:
    """Synthetic dish record for a top-ranked restaurant."""
    name = row.get("name") or "This restaurant"
    photos = row.get("photos") or []
    return {
        "restaurant_id": row["id"],
        "dish_name": generate_dish_name(name),
        "description": (
            f"A signature dish from {name}. "
            "Highly recommended by locals and visitors alike."
        ),
        "price": 0,
        "mention_count": int(row.get("viral_mentions") or 0),
        "recommend_percentage": recommend_percentage(row.get("google_rating")),
        "viral_score": viral_score,
        "photo_url": photos[0] if photos else "",
    }


async def update_viral_scores(
    restaurants: RestaurantStore,
    dishes: TrendingDishStore,
    now: datetime,
    percentage: float = settings.trending_percentage,
    dish_candidates: int = settings.trending_dish_candidates,
) -> TrendingUpdateStats:
    """
    Recompute viral scores for the whole catalogue.
    A failing fetch raises; per-record write failures are only counted.
    """
    rows = await restaurants.fetch_all(columns=_SCORE_COLUMNS)
    stats = TrendingUpdateStats(processed=len(rows))
    if not rows:
        logger.info("Viral score update: no restaurants found")
        return stats

    # ── Steps 2–3: score and stable sort ──────────────────────────────────────
    scored: list[tuple[dict[str, Any], float]] = [
        (
            row,
            calculate_viral_score(
                rating=row.get("google_rating"),
                review_count=row.get("viral_mentions"),
                is_halal=bool(row.get("is_halal")),
                restaurant_id=str(row["id"]),
                day_of_month=now.day,
            ),
        )
        for row in rows
    ]
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)

    # ── Step 4: top P% ────────────────────────────────────────────────────────
    stats.trending = trending_count(len(ranked), percentage)

    # ── Step 5: persist every record independently ────────────────────────────
    for position, (row, score) in enumerate(ranked):
        try:
            await restaurants.update_fields(
                str(row["id"]),
                {"trending_score": score, "is_trending": position < stats.trending},
            )
            stats.updated += 1
        except Exception as exc:
            stats.failed += 1
            logger.error("Failed to update viral score for %s: %s", row["id"], exc)
    await restaurants.commit()

    # ── Step 6: trending dishes for the top K ─────────────────────────────────
    for row, score in ranked[:dish_candidates]:
        restaurant_id = str(row["id"])
        try:
            if await dishes.exists_for_restaurant(restaurant_id):
                continue
            await dishes.insert(build_trending_dish(row, score))
            stats.dishes_created += 1
        except Exception as exc:
            stats.dish_errors += 1
            logger.error("Failed to create trending dish for %s: %s", restaurant_id, exc)
    await dishes.commit()

    if stats.dishes_created:
        clear_trending_dishes_cache()

    logger.info(
        "Viral scores updated: processed=%d updated=%d failed=%d trending=%d "
        "dishes_created=%d dish_errors=%d",
        stats.processed, stats.updated, stats.failed, stats.trending,
        stats.dishes_created, stats.dish_errors,
    )
    return stats


# ── Trending-dish feed ─────────────────────────────────────────────────────────


async def list_trending_dishes(
    dishes: TrendingDishStore,
    limit: int = 10,
) -> tuple[list[TrendingDishOut], str]:
    """Top dishes by viral score, served from a 1-hour process cache when warm."""
    key = _feed_key(limit)
    cached = _cache_trending_dishes.get(key)
    if cached is not None:
        logger.debug("Trending dishes cache HIT")
        return cached, "cache"

    rows = await dishes.fetch_top(limit)
    feed = [TrendingDishOut.model_validate(row) for row in rows]
    _cache_trending_dishes[key] = feed
    return feed, "database"


def clear_trending_dishes_cache() -> None:
    _cache_trending_dishes.clear()

"""
Row → public shape projection.

Every path that hands a restaurant to a client (detail cache, list pipeline,
enrichment) goes through to_public, so the field-level defaults live here.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from viraleats.schemas.restaurant import CATEGORIES, PRICE_TIERS, RestaurantOut

DEFAULT_MUST_TRY_DISH = "Signature Dish"
DEFAULT_PRICE_TIER = "$$"
DEFAULT_CATEGORY = "hawker"


def aggregate_rating(row: Mapping[str, Any]) -> float:
    """Explicit aggregate → Google → TripAdvisor → 0, clamped to 0–5."""
    for key in ("aggregate_rating", "google_rating", "tripadvisor_rating"):
        value = row.get(key)
        if value is not None:
            return max(0.0, min(5.0, float(value)))
    return 0.0


def normalise_category(value: Optional[str]) -> str:
    return value if value in CATEGORIES else DEFAULT_CATEGORY


def normalise_price(value: Optional[str]) -> str:
    return value if value in PRICE_TIERS else DEFAULT_PRICE_TIER


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def to_public(row: Mapping[str, Any], distance: Optional[float] = None) -> RestaurantOut:
    """Shape a database row into RestaurantOut, filling defaults."""
    hours = row.get("operating_hours") or {}
    return RestaurantOut(
        id=str(row["id"]),
        name=row.get("name") or "",
        address=row.get("address") or "",
        lat=float(row.get("lat") or 0.0),
        lng=float(row.get("lng") or 0.0),
        category=normalise_category(row.get("category")),
        cuisine=row.get("cuisine"),
        google_rating=_optional_float(row.get("google_rating")),
        tripadvisor_rating=_optional_float(row.get("tripadvisor_rating")),
        aggregate_rating=aggregate_rating(row),
        must_try_dish=row.get("must_try_dish") or DEFAULT_MUST_TRY_DISH,
        must_try_confidence=row.get("must_try_confidence"),
        price_range=normalise_price(row.get("price_range")),
        operating_hours={str(k): str(v) for k, v in hours.items()},
        viral_mentions=int(row.get("viral_mentions") or 0),
        trending_score=float(row.get("trending_score") or 0.0),
        is_trending=bool(row.get("is_trending")),
        photos=list(row.get("photos") or []),
        is_halal=bool(row.get("is_halal")),
        halal_cert_number=row.get("halal_cert_number"),
        tripadvisor_rank=row.get("tripadvisor_rank"),
        tripadvisor_price_text=row.get("tripadvisor_price_text"),
        tripadvisor_tags=row.get("tripadvisor_tags"),
        tripadvisor_top_review_snippet=row.get("tripadvisor_top_review_snippet"),
        tripadvisor_enriched=bool(row.get("tripadvisor_enriched")),
        tripadvisor_enriched_at=row.get("tripadvisor_enriched_at"),
        distance=distance,
    )

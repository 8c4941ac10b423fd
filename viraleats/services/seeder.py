"""
Seeder — populates the restaurants table from Google Places.

For every area × keyword:
  1. Text-search "<keyword> in <area>, Malaysia" (popular places only)
  2. Known place (by google_place_id) → refresh rating, mentions, score, photos
  3. New place → fetch details, map to a restaurant row, insert
Per-place and per-query failures are counted, never fatal.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, NamedTuple, Optional

from viraleats.config import settings
from viraleats.schemas.restaurant import Category, PriceTier
from viraleats.schemas.trending import SeedStats
from viraleats.services.google_places import PlacesProvider
from viraleats.services.halal_classifier import HalalClassifier
from viraleats.services.stores import RestaurantStore
from viraleats.services.viral_score import seed_trending_score
from viraleats.utils.hours import parse_google_periods

logger = logging.getLogger(__name__)


class Area(NamedTuple):
    name: str
    lat: float
    lng: float


DEFAULT_AREAS: tuple[Area, ...] = (
    Area("Cyberjaya", 2.9213, 101.6559),
    Area("Putrajaya", 2.9264, 101.6964),
    Area("Bangi", 2.9474, 101.7820),
    Area("Kuala Lumpur", 3.1390, 101.6869),
    Area("Kuala Terengganu", 5.3117, 103.1324),
    Area("Johor Bahru", 1.4927, 103.7414),
    Area("Alor Setar", 6.1254, 100.3673),
    Area("Dungun", 4.7574, 103.4216),
    Area("Melaka", 2.1896, 102.2501),
    Area("Georgetown", 5.4164, 100.3327),
    Area("Kota Kinabalu", 5.9804, 116.0735),
    Area("Kuching", 1.5535, 110.3593),
    Area("Ipoh", 4.5975, 101.0901),
    Area("Kota Bharu", 6.1254, 102.2386),
    Area("Genting Highlands", 3.4236, 101.7932),
    Area("Janda Baik", 3.3361, 101.8572),
)

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "nasi lemak",
    "viral cafe",
    "roti canai",
    "mee goreng",
    "char kuey teow",
    "laksa",
    "satay",
    "durian",
    "cendol",
    "teh tarik spot",
)

DEFAULT_MUST_TRY_CONFIDENCE = 75

# Columns refreshed when a known place shows up again
_REFRESH_FIELDS = ("google_rating", "aggregate_rating", "viral_mentions", "trending_score", "photos")

_classifier = HalalClassifier()


def map_category(types: Optional[Iterable[str]]) -> Category:
    type_set = {t.lower() for t in types or []}
    if type_set & {"cafe", "coffee_shop"}:
        return "cafe"
    if type_set & {"food_court", "shopping_mall"}:
        return "foodcourt"
    if type_set & {"restaurant", "food", "meal_takeaway"}:
        return "restaurant"
    return "hawker"


def map_price_range(price_level: Optional[int]) -> PriceTier:
    if not price_level:
        return "$$"
    if price_level <= 1:
        return "$"
    if price_level == 2:
        return "$$"
    if price_level == 3:
        return "$$$"
    return "$$$$"


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _location(place: dict[str, Any], details: dict[str, Any]) -> tuple[float, float]:
    loc = details.get("location")
    if isinstance(loc, dict) and "latitude" in loc:
        return float(loc["latitude"]), float(loc["longitude"])
    geometry = details.get("geometry") or place.get("geometry") or {}
    point = geometry.get("location") or {}
    return float(point["lat"]), float(point["lng"])


def _photo_reference(place: dict[str, Any], details: dict[str, Any]) -> Optional[str]:
    for source in (details, place):
        photos = source.get("photos") or []
        if photos and photos[0].get("photo_reference"):
            return photos[0]["photo_reference"]
    return None


def map_place_to_restaurant(
    place: dict[str, Any],
    keyword: str,
    details: Optional[dict[str, Any]] = None,
    photo_url: Optional[str] = None,
    classifier: HalalClassifier = _classifier,
) -> dict[str, Any]:
    """
    Build a restaurants row from a Text Search hit, preferring Details data.
    Accepts both the legacy (snake_case) and new (camelCase) response shapes.
    """
    details = details or {}

    rating = float(_first(details.get("rating"), place.get("rating"), 0) or 0)
    review_count = int(_first(
        details.get("userRatingCount"),
        details.get("user_ratings_total"),
        place.get("user_ratings_total"),
        0,
    ) or 0)

    display_name = details.get("displayName")
    if isinstance(display_name, dict):
        display_name = display_name.get("text")
    name = _first(display_name, details.get("name"), place.get("name"))
    address = _first(
        details.get("formattedAddress"),
        details.get("formatted_address"),
        place.get("formatted_address"),
    ) or ""
    lat, lng = _location(place, details)
    types = place.get("types") or []

    return {
        "google_place_id": place["place_id"],
        "name": name,
        "address": address,
        "lat": lat,
        "lng": lng,
        "category": map_category(types),
        "google_rating": rating,
        "aggregate_rating": rating,
        "must_try_dish": keyword or "Signature Dish",
        "must_try_confidence": DEFAULT_MUST_TRY_CONFIDENCE,
        "price_range": map_price_range(_first(
            details.get("priceLevel"), details.get("price_level"), place.get("price_level")
        )),
        "operating_hours": parse_google_periods(
            _first(details.get("openingHours"), details.get("opening_hours"))
        ),
        "viral_mentions": review_count,
        "trending_score": seed_trending_score(rating, review_count),
        "photos": [photo_url] if photo_url else [],
        "is_halal": classifier.classify_place(name, types, address),
        "halal_certified": False,
        "halal_cert_number": None,
        "business_status": _first(details.get("businessStatus"), details.get("business_status")),
    }


async def _seed_place(
    place: dict[str, Any],
    keyword: str,
    places: PlacesProvider,
    store: RestaurantStore,
    delay: float,
) -> str:
    """Insert or refresh one place. Returns "added" or "updated"."""
    existing_id = await store.find_id_by_place_id(place["place_id"])

    details = None
    if existing_id is None:
        # Details only for new places; they are billed per call
        await asyncio.sleep(delay)
        details = await places.place_details(place["place_id"])

    reference = _photo_reference(place, details or {})
    photo_url = places.photo_url(reference) if reference else None
    row = map_place_to_restaurant(place, keyword, details, photo_url)

    if existing_id is not None:
        await store.update_fields(existing_id, {k: row[k] for k in _REFRESH_FIELDS})
        return "updated"

    await store.insert(row)
    return "added"


async def seed_restaurants(
    places: PlacesProvider,
    store: RestaurantStore,
    areas: Iterable[Area] = DEFAULT_AREAS,
    keywords: Iterable[str] = DEFAULT_KEYWORDS,
    delay: float = settings.places_request_delay_seconds,
) -> SeedStats:
    """Run one seeding pass over every area × keyword pair."""
    areas = list(areas)
    keywords = list(keywords)
    stats = SeedStats()
    logger.info("Seeding: %d areas × %d keywords", len(areas), len(keywords))

    for area in areas:
        for keyword in keywords:
            await asyncio.sleep(delay)
            query = f"{keyword} in {area.name}, Malaysia"
            try:
                results = await places.text_search(query)
            except Exception as exc:
                stats.errors += 1
                logger.error("Search failed for %r: %s", query, exc)
                continue

            for place in results:
                if not place.get("place_id"):
                    stats.skipped += 1
                    continue
                try:
                    outcome = await _seed_place(place, keyword, places, store, delay)
                except Exception as exc:
                    stats.errors += 1
                    logger.error(
                        "Failed to seed %s (%s): %s",
                        place.get("name"), place.get("place_id"), exc,
                    )
                    continue
                if outcome == "added":
                    stats.added += 1
                else:
                    stats.updated += 1

        await store.commit()
        logger.info("Seeded area %s (%s)", area.name, stats.model_dump())

    logger.info(
        "Seeding complete: added=%d updated=%d skipped=%d errors=%d",
        stats.added, stats.updated, stats.skipped, stats.errors,
    )
    return stats

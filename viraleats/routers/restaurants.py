"""
Restaurants router — the map feed and the detail page.

Endpoints:
  GET  /restaurants                 — filtered, ordered list
  GET  /restaurants/{id}            — one restaurant through the tiered cache
  POST /restaurants/{id}/enrich     — attach cached TripAdvisor data
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from viraleats.config import settings
from viraleats.dependencies import (
    get_classifier,
    get_clock,
    get_restaurant_cache,
    get_restaurant_store,
    get_tripadvisor_lookup,
)
from viraleats.schemas.common import ApiResponse
from viraleats.schemas.restaurant import CATEGORIES, PRICE_TIERS, RestaurantFilters, RestaurantOut
from viraleats.services.enrichment import TripAdvisorLookup, enrich_restaurant
from viraleats.services.halal_classifier import HalalClassifier
from viraleats.services.restaurant_cache import RestaurantCache
from viraleats.services.restaurant_query import list_restaurants
from viraleats.services.stores import RestaurantNotFound, RestaurantStore
from viraleats.utils.clock import Clock, local_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")


def _optional_choice(value: Optional[str], choices: tuple[str, ...], name: str) -> Optional[str]:
    """Blank means "no filter"; anything else must be one of `choices`."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if value not in choices:
        raise _bad_request(f"Invalid {name} '{value}' — expected one of {', '.join(choices)}")
    return value


@router.get(
    "",
    response_model=ApiResponse[list[RestaurantOut]],
    response_model_exclude_none=True,
)
async def get_restaurants(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    radius: Optional[float] = Query(default=None, gt=0),
    halal: bool = Query(default=False),
    category: Optional[str] = Query(default=None),
    price_range: Optional[str] = Query(default=None, alias="priceRange"),
    open_now: bool = Query(default=False, alias="openNow"),
    search_query: Optional[str] = Query(default=None, alias="searchQuery"),
    trending: bool = Query(default=False),
    limit: int = Query(default=settings.list_default_limit, ge=1),
    store: RestaurantStore = Depends(get_restaurant_store),
    classifier: HalalClassifier = Depends(get_classifier),
    clock: Clock = Depends(get_clock),
) -> ApiResponse[list[RestaurantOut]]:
    """
    Restaurant list for the map and card views.

    - With lat+lng: distance annotated, radius applied (100 km+ means unlimited)
    - trending=true: only trending-flagged restaurants, top 10 by score if none are
    - Filters apply in order halal → category → price → open now → search
    """
    if (lat is None) != (lng is None):
        raise _bad_request("lat and lng must be provided together")

    filters = RestaurantFilters(
        lat=lat,
        lng=lng,
        radius=radius,
        halal=halal,
        category=_optional_choice(category, CATEGORIES, "category"),
        price_range=_optional_choice(price_range, PRICE_TIERS, "priceRange"),
        open_now=open_now,
        search_query=search_query,
        trending=trending,
        limit=min(limit, settings.list_max_limit),
    )

    restaurants = await list_restaurants(
        store, filters, local_now(clock, settings.timezone), classifier=classifier
    )
    return ApiResponse(data=restaurants, source="database", count=len(restaurants))


@router.get(
    "/{restaurant_id}",
    response_model=ApiResponse[RestaurantOut],
    response_model_exclude_none=True,
)
async def get_restaurant(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
    cache: RestaurantCache = Depends(get_restaurant_cache),
) -> ApiResponse[RestaurantOut]:
    """Detail lookup: memory cache → persisted cache → database."""
    try:
        restaurant, source = await cache.get(restaurant_id, store)
    except RestaurantNotFound:
        raise _not_found()
    return ApiResponse(data=restaurant, source=source)


@router.post(
    "/{restaurant_id}/enrich",
    response_model=ApiResponse[RestaurantOut],
    response_model_exclude_none=True,
)
async def enrich(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
    lookup: TripAdvisorLookup = Depends(get_tripadvisor_lookup),
    cache: RestaurantCache = Depends(get_restaurant_cache),
    clock: Clock = Depends(get_clock),
) -> ApiResponse[RestaurantOut]:
    """
    Merge cached TripAdvisor rank, price text, tags and review snippet, then
    drop the cached detail payload so the next detail read sees them.
    """
    try:
        restaurant = await enrich_restaurant(restaurant_id, store, lookup, clock)
    except RestaurantNotFound:
        raise _not_found()
    await cache.invalidate(restaurant_id)
    return ApiResponse(data=restaurant, source="database")

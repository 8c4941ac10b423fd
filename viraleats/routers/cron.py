"""
Batch-job endpoints for the external scheduler.

Every route needs the shared cron secret (`?secret=` or `Authorization: Bearer`).
GET and POST are equivalent so the jobs can also be kicked off from a browser.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from viraleats.config import settings
from viraleats.dependencies import (
    get_clock,
    get_dish_store,
    get_places_provider,
    get_restaurant_store,
    verify_cron_secret,
)
from viraleats.schemas.common import ApiResponse
from viraleats.schemas.trending import SeedStats, TrendingUpdateStats
from viraleats.services.google_places import PlacesProvider
from viraleats.services.seeder import seed_restaurants
from viraleats.services.stores import RestaurantStore, TrendingDishStore
from viraleats.services.trending import update_viral_scores
from viraleats.utils.clock import Clock, local_now

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron",
    tags=["cron"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.api_route(
    "/update-viral-score",
    methods=["GET", "POST"],
    response_model=ApiResponse[TrendingUpdateStats],
    response_model_exclude_none=True,
)
async def update_viral_score(
    restaurants: RestaurantStore = Depends(get_restaurant_store),
    dishes: TrendingDishStore = Depends(get_dish_store),
    clock: Clock = Depends(get_clock),
) -> ApiResponse[TrendingUpdateStats]:
    """Recompute viral scores, flag the top slice as trending, create dish cards."""
    logger.info("Viral score update triggered")
    stats = await update_viral_scores(
        restaurants, dishes, now=local_now(clock, settings.timezone)
    )
    return ApiResponse(data=stats, source="database")


@router.api_route(
    "/seed-restaurants",
    methods=["GET", "POST"],
    response_model=ApiResponse[SeedStats],
    response_model_exclude_none=True,
)
async def seed(
    places: PlacesProvider = Depends(get_places_provider),
    restaurants: RestaurantStore = Depends(get_restaurant_store),
) -> ApiResponse[SeedStats]:
    """Search Google Places across the default areas and keywords."""
    logger.info("Restaurant seeding triggered")
    stats = await seed_restaurants(
        places, restaurants, delay=settings.places_request_delay_seconds
    )
    return ApiResponse(data=stats, source="google-places")
